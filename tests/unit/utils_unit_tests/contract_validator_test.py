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
Unit tests for ContractValidator

Tests cover:
1. Valid maps with and without user Jacobians
2. Initial condition checks
3. Dimension mismatch detection
4. Map and Jacobian output container checks
5. Warnings for non-finite values
6. One-dimensional validator
7. Convenience functions
"""

import warnings

import jax.numpy as jnp
import numpy as np
import pytest

from dynsys.systems.base.discrete_ds import DiscreteDS, DiscreteDS1D
from dynsys.systems.base.utils.contract_validator import (
    ContractValidator,
    DimensionMismatchError,
    InvalidArgumentError,
    ScalarContractValidator,
    ValidationError,
    _ContractValidatorBase,
    test_functions,
    test_functions_1d,
    validate_system,
)


def linear(u):
    return jnp.stack([2.0 * u[0], 0.5 * u[1]])


def linear_jacobian(u):
    return np.diag([2.0, 0.5])


def logistic(x):
    return 4.0 * x * (1.0 - x)


def logistic_derivative(x):
    return 4.0 - 8.0 * x


# ============================================================================
# Exceptions
# ============================================================================


class TestExceptionHierarchy:
    """Test error kinds."""

    def test_subclasses(self):
        assert issubclass(InvalidArgumentError, ValidationError)
        assert issubclass(DimensionMismatchError, ValidationError)
        assert issubclass(ValidationError, ValueError)

    def test_base_validator_is_abstract(self):
        with pytest.raises(TypeError):
            _ContractValidatorBase()


# ============================================================================
# D-dimensional validator
# ============================================================================


class TestValidMaps:
    """Test maps that satisfy the contract."""

    def test_synthesised_jacobian(self):
        result = ContractValidator([1.0, 1.0], linear).validate()
        assert result.is_valid
        assert result.errors == []
        assert result.info["dimension"] == 2
        assert result.info["jacobian_source"] == "jax_jacobian"

    def test_user_jacobian(self):
        result = ContractValidator(np.array([1.0, 1.0]), linear, linear_jacobian).validate()
        assert result.is_valid
        assert result.info["jacobian_source"] == "user"

    def test_synthesised_jacobian_is_kept(self):
        validator = ContractValidator([1.0, 1.0], linear)
        assert validator.jacobian_function is None
        validator.validate()
        assert validator.jacobian_function.__name__ == "jax_jacobian"
        np.testing.assert_array_equal(
            validator.jacobian_function(np.array([3.0, 4.0])), np.diag([2.0, 0.5])
        )

    def test_user_jacobian_is_kept(self):
        validator = ContractValidator([1.0, 1.0], linear, linear_jacobian)
        validator.validate()
        assert validator.jacobian_function is linear_jacobian

    def test_numpy_map(self):
        def f(u):
            return np.array([u[1], u[0]])

        def J(u):
            return np.array([[0.0, 1.0], [1.0, 0.0]])

        assert test_functions([1.0, 2.0], f, J) is True

    def test_identity_map(self):
        assert test_functions([0.5, 0.5, 0.5], lambda u: u, lambda u: np.eye(3))

    def test_integer_initial_condition(self):
        assert test_functions([1, 2], lambda u: u * 2, lambda u: 2 * np.eye(2))

    def test_sympy_backend(self):
        def f(u):
            return np.array([u[0] * u[1], u[0]])

        result = ContractValidator([1.0, 2.0], f, backend="sympy").validate()
        assert result.is_valid
        assert result.info["jacobian_source"] == "sympy_jacobian"


class TestInitialCondition:
    """Test initial condition checks."""

    @pytest.mark.parametrize("u0", [0.5, [[1.0, 2.0]], ["a", "b"], None, [], np.array([])])
    def test_not_a_vector(self, u0):
        with pytest.raises(InvalidArgumentError, match="initial condition must be a vector"):
            ContractValidator(u0, linear).validate()

    def test_no_map_calls_on_bad_initial_condition(self):
        calls = []

        def f(u):
            calls.append(u)
            return u

        with pytest.raises(InvalidArgumentError):
            ContractValidator(0.5, f).validate()
        assert calls == []


class TestDimensionMismatch:
    """Test map output length checks."""

    def test_drops_component(self):
        with pytest.raises(DimensionMismatchError, match="length 1"):
            ContractValidator([1.0, 1.0], lambda u: u[:1]).validate()

    def test_adds_component(self):
        def f(u):
            return np.array([u[0], u[1], 0.0])

        with pytest.raises(DimensionMismatchError):
            test_functions([1.0, 1.0], f)

    def test_scalar_output(self):
        with pytest.raises(InvalidArgumentError, match="must return a vector"):
            ContractValidator([1.0, 1.0], lambda u: 1.0).validate()

    def test_no_raise(self):
        result = ContractValidator([1.0, 1.0], lambda u: u[:1]).validate(raise_on_error=False)
        assert not result.is_valid
        assert len(result.errors) == 1
        assert "length 1" in result.errors[0]


class TestOutputContainers:
    """Test map and Jacobian output container checks."""

    def test_map_returns_list(self):
        with pytest.raises(InvalidArgumentError, match="equations of motion"):
            ContractValidator([1.0, 1.0], lambda u: [u[0], u[1]], linear_jacobian).validate()

    def test_map_returns_tuple(self):
        with pytest.raises(InvalidArgumentError, match="array vector"):
            test_functions([1.0, 1.0], lambda u: (u[0], u[1]), linear_jacobian)

    def test_jacobian_wrong_shape(self):
        with pytest.raises(InvalidArgumentError, match="Jacobian function"):
            test_functions([1.0, 1.0], linear, lambda u: np.ones((2, 3)))

    def test_jacobian_returns_list(self):
        with pytest.raises(InvalidArgumentError, match="square array matrix"):
            test_functions([1.0, 1.0], linear, lambda u: [[2.0, 0.0], [0.0, 0.5]])

    def test_map_fails_only_on_canonical_state(self):
        def f(u):
            if not u.flags.writeable:
                return list(u)
            return u.copy()

        with pytest.raises(InvalidArgumentError, match="canonical"):
            test_functions([1.0, 1.0], f, linear_jacobian)

    def test_jacobian_not_called_after_map_failure(self):
        calls = []

        def J(u):
            calls.append(u)
            return np.eye(2)

        with pytest.raises(InvalidArgumentError):
            test_functions([1.0, 1.0], lambda u: [u[0], u[1]], J)
        assert calls == []

    def test_map_errors_propagate(self):
        def f(u):
            raise ZeroDivisionError("boom")

        with pytest.raises(ZeroDivisionError):
            test_functions([1.0, 1.0], f, linear_jacobian)


class TestWarnings:
    """Test warnings for non-finite values."""

    def test_non_finite_initial_condition(self):
        with pytest.warns(UserWarning, match="non-finite"):
            result = ContractValidator([np.nan, 1.0], lambda u: u, lambda u: np.eye(2)).validate()
        assert result.is_valid
        assert len(result.warnings) >= 1

    def test_non_finite_output(self):
        def f(u):
            return np.array([np.inf, u[1]])

        with pytest.warns(UserWarning, match="Contract validation warning"):
            ContractValidator([1.0, 1.0], f, lambda u: np.eye(2)).validate()

    def test_finite_no_warnings(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            ContractValidator([1.0, 1.0], lambda u: 2.0 * u, lambda u: 2.0 * np.eye(2)).validate()


# ============================================================================
# One-dimensional validator
# ============================================================================


class TestScalarValidator:
    """Test ScalarContractValidator."""

    def test_valid(self):
        assert test_functions_1d(0.4, logistic, logistic_derivative)

    def test_synthesised_derivative(self):
        result = ScalarContractValidator(0.4, logistic).validate()
        assert result.is_valid
        assert result.info["jacobian_source"] == "jax_derivative"

    def test_numpy_scalar(self):
        assert test_functions_1d(np.float64(0.4), logistic, logistic_derivative)

    @pytest.mark.parametrize("x0", [[0.4], "0.4", None, 1.0 + 2.0j, True])
    def test_not_a_real_number(self, x0):
        with pytest.raises(InvalidArgumentError, match="real number"):
            test_functions_1d(x0, logistic, logistic_derivative)

    def test_vector_output(self):
        with pytest.raises(DimensionMismatchError):
            test_functions_1d(0.4, lambda x: np.array([x, x]), logistic_derivative)

    def test_complex_output(self):
        with pytest.raises(InvalidArgumentError, match="equations of motion"):
            test_functions_1d(0.4, lambda x: complex(x, 1.0), logistic_derivative)

    def test_bad_derivative(self):
        with pytest.raises(InvalidArgumentError, match="derivative function"):
            test_functions_1d(0.4, logistic, lambda x: np.array([1.0, 2.0]))


# ============================================================================
# Existing systems
# ============================================================================


class TestValidateSystem:
    """Test validate_system on constructed systems."""

    def test_vector_system(self):
        ds = DiscreteDS([1.0, 1.0], linear, linear_jacobian)
        assert validate_system(ds).is_valid

    def test_scalar_system(self):
        ds = DiscreteDS1D(0.4, logistic, logistic_derivative)
        assert validate_system(ds).is_valid

    def test_invalid_system_no_raise(self):
        ds = DiscreteDS([1.0, 1.0], linear, lambda u: np.ones((3, 3)))
        result = validate_system(ds, raise_on_error=False)
        assert not result.is_valid
        assert "Jacobian function" in result.errors[0]

    def test_constructor_validation(self):
        with pytest.raises(DimensionMismatchError):
            DiscreteDS([1.0, 1.0], lambda u: u[:1], validate=True)

    def test_constructor_validation_1d(self):
        with pytest.raises(InvalidArgumentError):
            DiscreteDS1D("0.4", logistic, logistic_derivative, validate=True)
