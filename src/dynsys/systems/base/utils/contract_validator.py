# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Contract Validator for Discrete Maps

Checks, before a map and its Jacobian are trusted, that they satisfy the
shape contract the rest of the package relies on.

Checks (in order, stopping at the first failure):
1. The initial condition is a one-dimensional numeric vector
2. The map returns a vector of the same length as its input
3. The map returns an array vector and the Jacobian function a (D, D)
   array, both on the raw initial condition and on its canonical
   read-only container

When no Jacobian function is given, one is synthesised by automatic
differentiation and the same checks are run against it.

Validation is opt-in: systems are not validated on construction unless
requested with ``validate=True``.
"""

import warnings
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Type

import numpy as np

from dynsys.systems.base.utils.differentiation import differentiate, jacobian_of
from dynsys.systems.base.utils.state_container import as_scalar_state, as_state_vector
from dynsys.types.backends import DiffBackend
from dynsys.types.core import (
    DerivativeFunction,
    JacobianFunction,
    MapFunction,
    ScalarMapFunction,
)
from dynsys.types.utilities import (
    ValidationResult,
    ensure_numpy,
    get_array_shape,
    is_numeric_vector,
    is_real_scalar,
    is_square_matrix,
    is_vector,
)

if TYPE_CHECKING:
    from dynsys.systems.base.discrete_system_base import DiscreteSystemBase


# ============================================================================
# Exceptions
# ============================================================================


class ValidationError(ValueError):
    """Raised when a map or Jacobian violates the system contract"""

    pass


class InvalidArgumentError(ValidationError):
    """Initial condition, map output or Jacobian output has the wrong kind"""

    pass


class DimensionMismatchError(ValidationError):
    """Map output length differs from its input length"""

    pass


# ============================================================================
# Validators
# ============================================================================


class _ContractValidatorBase(ABC):
    """Shared bookkeeping for contract validators."""

    def __init__(self, backend: Optional[DiffBackend] = None):
        self.backend = backend
        self._errors: List[Tuple[Type[ValidationError], str]] = []
        self._warnings: List[str] = []
        self._info: Dict[str, Any] = {}

    def validate(self, raise_on_error: bool = True) -> ValidationResult:
        """
        Validate the map (and Jacobian) contract.

        Parameters
        ----------
        raise_on_error : bool
            If True, raise the error kind of the first failed check
            If False, return ValidationResult with errors

        Returns
        -------
        ValidationResult
            Validation results with errors, warnings, and info

        Raises
        ------
        InvalidArgumentError
            Initial condition, map output or Jacobian output of wrong kind
        DimensionMismatchError
            Map output length differs from input length
        """
        self._errors = []
        self._warnings = []
        self._info = {}

        self._run_checks()

        is_valid = len(self._errors) == 0
        result = ValidationResult(
            is_valid=is_valid,
            errors=[message for _, message in self._errors],
            warnings=self._warnings.copy(),
            info=dict(self._info),
        )

        if result.warnings:
            self._issue_warnings(result.warnings)

        if not is_valid and raise_on_error:
            error_type, message = self._errors[0]
            raise error_type(message)

        return result

    @abstractmethod
    def _run_checks(self):
        """Run the checks, recording failures with _fail()."""
        pass

    def _fail(self, error_type: Type[ValidationError], message: str) -> bool:
        self._errors.append((error_type, message))
        return False

    def _issue_warnings(self, warnings_list: List[str]):
        """Issue Python warnings for validation warnings"""
        for warning in warnings_list:
            warnings.warn(f"Contract validation warning: {warning}", UserWarning)


class ContractValidator(_ContractValidatorBase):
    """
    Validates the contract of a D-dimensional map and its Jacobian.

    Examples
    --------
    >>> def f(x):
    ...     return jnp.stack([2.0 * x[0], 0.5 * x[1]])
    >>> result = ContractValidator([1.0, 1.0], f).validate()
    >>> result.is_valid
    True
    >>>
    >>> # Map that drops a component
    >>> ContractValidator([1.0, 1.0], lambda x: x[:1]).validate()
    Traceback (most recent call last):
        ...
    DimensionMismatchError: equations of motion return a vector of length 1 ...
    """

    def __init__(
        self,
        u0,
        f: MapFunction,
        jacobian: Optional[JacobianFunction] = None,
        backend: Optional[DiffBackend] = None,
    ):
        """
        Initialize validator.

        Parameters
        ----------
        u0 : StateVector or sequence of numbers
            Initial condition
        f : MapFunction
            Equations of motion
        jacobian : Optional[JacobianFunction]
            Jacobian function (None synthesises one with ``backend``)
        backend : Optional[DiffBackend]
            Differentiation backend used when jacobian is None
        """
        super().__init__(backend)
        self.u0 = u0
        self.f = f
        self.jacobian = jacobian
        # Set to the synthesised function once validation has built one
        self.jacobian_function = jacobian

    def _run_checks(self):
        if not self._validate_initial_condition():
            return
        if not self._validate_map_dimension():
            return
        if not self._validate_map_container():
            return
        self._validate_jacobian_container()

    def _validate_initial_condition(self) -> bool:
        """Initial condition must be a one-dimensional numeric vector"""
        if not is_numeric_vector(self.u0):
            return self._fail(InvalidArgumentError, "initial condition must be a vector")

        self._raw = np.array(ensure_numpy(self.u0))
        self._canonical = as_state_vector(self.u0)
        self._dimension = self._raw.shape[0]
        self._info["dimension"] = self._dimension

        if not np.all(np.isfinite(self._raw)):
            self._warnings.append(f"initial condition has non-finite entries: {self._raw}")
        return True

    def _validate_map_dimension(self) -> bool:
        """Map output must have the same length as its input"""
        self._output = self.f(self._raw)
        shape = get_array_shape(self._output)
        length = shape[0] if len(shape) == 1 else None
        if length is None:
            try:
                length = len(self._output)
            except TypeError:
                return self._fail(
                    InvalidArgumentError,
                    "equations of motion must return a vector, "
                    f"got {type(self._output).__name__}",
                )

        if length != self._dimension:
            return self._fail(
                DimensionMismatchError,
                f"equations of motion return a vector of length {length} "
                f"but the initial condition has length {self._dimension}",
            )
        return True

    def _validate_map_container(self) -> bool:
        """Map output must be an array vector on raw and canonical states"""
        outputs = {"raw": self._output, "canonical": self.f(self._canonical)}
        for label, out in outputs.items():
            if not is_vector(out, length=self._dimension):
                return self._fail(
                    InvalidArgumentError,
                    "equations of motion should return an array vector "
                    f"(NumPy, JAX or PyTorch) of length {self._dimension}; "
                    f"got {type(out).__name__} for the {label} state",
                )
        self._info["map_output_type"] = type(self._output).__name__

        if not np.all(np.isfinite(ensure_numpy(self._output))):
            self._warnings.append(
                "equations of motion return non-finite values at the initial condition"
            )
        return True

    def _validate_jacobian_container(self) -> bool:
        """Jacobian output must be a (D, D) array on raw and canonical states"""
        if self.jacobian is None:
            jac = jacobian_of(self.f, backend=self.backend, dimension=self._dimension)
            self.jacobian_function = jac
            self._info["jacobian_source"] = jac.__name__
        else:
            jac = self.jacobian
            self._info["jacobian_source"] = "user"

        outputs = {"raw": jac(self._raw), "canonical": jac(self._canonical)}
        for label, J in outputs.items():
            if not is_square_matrix(J, size=self._dimension):
                return self._fail(
                    InvalidArgumentError,
                    "Jacobian function should return a square array matrix "
                    f"of size ({self._dimension}, {self._dimension}); "
                    f"got {type(J).__name__} of shape {get_array_shape(J)} "
                    f"for the {label} state",
                )
        self._info["jacobian_output_type"] = type(outputs["raw"]).__name__
        return True

    def __repr__(self) -> str:
        """String representation"""
        return f"ContractValidator(f={getattr(self.f, '__name__', repr(self.f))})"


class ScalarContractValidator(_ContractValidatorBase):
    """
    Validates the contract of a one-dimensional map and its derivative.

    Checks that the initial condition, the map output and the derivative
    output are real scalars, both on the raw initial condition and on its
    float-canonical form.

    Examples
    --------
    >>> ScalarContractValidator(0.4, lambda x: 4.0 * x * (1.0 - x)).validate().is_valid
    True
    """

    def __init__(
        self,
        x0,
        f: ScalarMapFunction,
        derivative: Optional[DerivativeFunction] = None,
        backend: Optional[DiffBackend] = None,
    ):
        super().__init__(backend)
        self.x0 = x0
        self.f = f
        self.derivative = derivative
        self.derivative_function = derivative

    def _run_checks(self):
        if not is_real_scalar(self.x0):
            self._fail(InvalidArgumentError, "initial condition must be a real number")
            return
        self._info["dimension"] = 1
        canonical = as_scalar_state(self.x0)

        for label, x in (("raw", self.x0), ("canonical", canonical)):
            out = self.f(x)
            if get_array_shape(out) not in ((), (1,)):
                self._fail(
                    DimensionMismatchError,
                    f"equations of motion return shape {get_array_shape(out)} "
                    "for a one-dimensional state",
                )
                return
            if not is_real_scalar(out):
                self._fail(
                    InvalidArgumentError,
                    "equations of motion should return a real number; "
                    f"got {type(out).__name__} for the {label} state",
                )
                return

        if self.derivative is None:
            deriv = differentiate(self.f, backend=self.backend)
            self.derivative_function = deriv
            self._info["jacobian_source"] = deriv.__name__
        else:
            deriv = self.derivative
            self._info["jacobian_source"] = "user"

        for label, x in (("raw", self.x0), ("canonical", canonical)):
            d = deriv(x)
            if not is_real_scalar(d):
                self._fail(
                    InvalidArgumentError,
                    "derivative function should return a real number; "
                    f"got {type(d).__name__} for the {label} state",
                )
                return


# ============================================================================
# Convenience Functions
# ============================================================================


def test_functions(
    u0,
    f: MapFunction,
    jacobian: Optional[JacobianFunction] = None,
    backend: Optional[DiffBackend] = None,
) -> bool:
    """
    Check that a map (and Jacobian) satisfy the system contract.

    Returns True, or raises the error kind of the first failed check.

    Examples
    --------
    >>> test_functions([0.0, 0.0], henon_eom, henon_jacobian)
    True
    """
    ContractValidator(u0, f, jacobian, backend=backend).validate(raise_on_error=True)
    return True


# Not a pytest test function despite the name.
test_functions.__test__ = False


def test_functions_1d(
    x0,
    f: ScalarMapFunction,
    derivative: Optional[DerivativeFunction] = None,
    backend: Optional[DiffBackend] = None,
) -> bool:
    """One-dimensional counterpart of test_functions()."""
    ScalarContractValidator(x0, f, derivative, backend=backend).validate(raise_on_error=True)
    return True


test_functions_1d.__test__ = False


def validate_system(
    system: "DiscreteSystemBase",
    raise_on_error: bool = True,
) -> ValidationResult:
    """
    Validate the map and Jacobian of an existing system at its current state.

    Examples
    --------
    >>> result = validate_system(ds, raise_on_error=False)
    >>> result.is_valid
    True
    """
    if system.is_1d:
        validator = ScalarContractValidator(system.state, system.map, system.jacobian_function)
    else:
        validator = ContractValidator(system.state, system.map, system.jacobian_function)
    return validator.validate(raise_on_error=raise_on_error)


__all__ = [
    "ValidationError",
    "InvalidArgumentError",
    "DimensionMismatchError",
    "ContractValidator",
    "ScalarContractValidator",
    "test_functions",
    "test_functions_1d",
    "validate_system",
]
