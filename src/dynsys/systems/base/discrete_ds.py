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
Discrete Dynamical Systems
==========================

Concrete immutable systems:
- DiscreteDS: D-dimensional system with a vector state
- DiscreteDS1D: one-dimensional system with a scalar state

plus the functional API consumed by analysis code:
dimension(), jacobian(), evolve(), timeseries(), setu().
"""

from typing import Optional

import numpy as np

from dynsys.systems.base.discrete_system_base import DiscreteSystemBase
from dynsys.systems.base.evolution import evolve_state
from dynsys.systems.base.utils.contract_validator import (
    ContractValidator,
    ScalarContractValidator,
)
from dynsys.systems.base.utils.differentiation import differentiate, jacobian_of
from dynsys.systems.base.utils.state_container import as_scalar_state, as_state_vector
from dynsys.types.backends import DiffBackend
from dynsys.types.core import (
    DerivativeFunction,
    JacobianFunction,
    JacobianMatrix,
    MapFunction,
    ScalarMapFunction,
    ScalarState,
)
from dynsys.types.trajectories import Timeseries


class DiscreteDS(DiscreteSystemBase):
    """
    Immutable D-dimensional discrete dynamical system.

    Attributes
    ----------
    state : np.ndarray
        Current state, a read-only float64 vector of length D
    map : MapFunction
        Equations of motion ``f(u) -> vector`` giving the next state
    jacobian_function : JacobianFunction
        ``J(u) -> (D, D) matrix`` giving the Jacobian of f at u

    Parameters
    ----------
    u0 : StateVector or sequence of numbers
        Initial state
    f : MapFunction
        Equations of motion
    jacobian : Optional[JacobianFunction]
        Jacobian function. If None, it is synthesised by automatic
        differentiation of f with ``backend``.
    backend : Optional[DiffBackend]
        Differentiation backend ('jax', 'torch', 'sympy'); None uses the
        process default (see get_backend_manager())
    validate : bool
        Run the contract validator before construction (default: False)

    Examples
    --------
    >>> import jax.numpy as jnp
    >>> def henon(u):
    ...     return jnp.stack([1.0 - 1.4 * u[0] ** 2 + u[1], 0.3 * u[0]])
    >>> ds = DiscreteDS([0.0, 0.0], henon)
    >>> ds.jacobian()
    array([[-0. ,  1. ],
           [ 0.3,  0. ]])
    >>> ds.evolve(2).state
    array([-0.4,  0.3])
    """

    __slots__ = ("_state", "_map", "_jacobian")

    def __init__(
        self,
        u0,
        f: MapFunction,
        jacobian: Optional[JacobianFunction] = None,
        backend: Optional[DiffBackend] = None,
        validate: bool = False,
    ):
        if validate:
            validator = ContractValidator(u0, f, jacobian, backend=backend)
            validator.validate(raise_on_error=True)
            jacobian = validator.jacobian_function

        self._state = as_state_vector(u0)
        if jacobian is None:
            jacobian = jacobian_of(f, backend=backend, dimension=self._state.shape[0])
        self._map = f
        self._jacobian = jacobian

    @classmethod
    def _from_parts(cls, state: np.ndarray, f: MapFunction, jacobian: JacobianFunction):
        obj = object.__new__(cls)
        obj._state = state
        obj._map = f
        obj._jacobian = jacobian
        return obj

    @property
    def state(self) -> np.ndarray:
        """Current state (read-only float64 vector)."""
        return self._state

    @property
    def map(self) -> MapFunction:
        """Equations of motion."""
        return self._map

    @property
    def jacobian_function(self) -> JacobianFunction:
        """Jacobian function."""
        return self._jacobian

    @property
    def dimension(self) -> int:
        return self._state.shape[0]

    def with_state(self, state) -> "DiscreteDS":
        """New system with ``state``, same map and Jacobian function."""
        return self._from_parts(as_state_vector(state), self._map, self._jacobian)

    def __copy__(self) -> "DiscreteDS":
        return self

    def __deepcopy__(self, memo) -> "DiscreteDS":
        return self


class DiscreteDS1D(DiscreteSystemBase):
    """
    Immutable one-dimensional discrete dynamical system.

    Attributes
    ----------
    state : float
        Current state
    map : ScalarMapFunction
        Equations of motion ``f(x) -> float``
    jacobian_function : DerivativeFunction
        ``f'(x) -> float``, also available as ``derivative_function``

    Parameters
    ----------
    x0 : float
        Initial state
    f : ScalarMapFunction
        Equations of motion
    derivative : Optional[DerivativeFunction]
        Derivative of f. If None, synthesised by automatic differentiation.
    backend : Optional[DiffBackend]
        Differentiation backend; None uses the process default
    validate : bool
        Run the contract validator before construction (default: False)

    Examples
    --------
    >>> ds = DiscreteDS1D(0.4, lambda x: 4.0 * x * (1.0 - x))
    >>> ds.derivative()
    0.8
    >>> ds.timeseries(3)
    array([0.4   , 0.96  , 0.1536])
    """

    __slots__ = ("_state", "_map", "_derivative")

    def __init__(
        self,
        x0,
        f: ScalarMapFunction,
        derivative: Optional[DerivativeFunction] = None,
        backend: Optional[DiffBackend] = None,
        validate: bool = False,
    ):
        if validate:
            validator = ScalarContractValidator(x0, f, derivative, backend=backend)
            validator.validate(raise_on_error=True)
            derivative = validator.derivative_function

        self._state = as_scalar_state(x0)
        if derivative is None:
            derivative = differentiate(f, backend=backend)
        self._map = f
        self._derivative = derivative

    @classmethod
    def _from_parts(cls, state: float, f: ScalarMapFunction, derivative: DerivativeFunction):
        obj = object.__new__(cls)
        obj._state = state
        obj._map = f
        obj._derivative = derivative
        return obj

    @property
    def state(self) -> ScalarState:
        """Current state."""
        return self._state

    @property
    def map(self) -> ScalarMapFunction:
        """Equations of motion."""
        return self._map

    @property
    def jacobian_function(self) -> DerivativeFunction:
        """Derivative function."""
        return self._derivative

    @property
    def derivative_function(self) -> DerivativeFunction:
        """Alias of jacobian_function."""
        return self._derivative

    @property
    def dimension(self) -> int:
        return 1

    @property
    def is_1d(self) -> bool:
        return True

    def derivative(self) -> float:
        """Derivative of the map at the current state."""
        return self.jacobian()

    def with_state(self, state) -> "DiscreteDS1D":
        """New system with ``state``, same map and derivative function."""
        return self._from_parts(as_scalar_state(state), self._map, self._derivative)

    def __copy__(self) -> "DiscreteDS1D":
        return self

    def __deepcopy__(self, memo) -> "DiscreteDS1D":
        return self


# ============================================================================
# Functional API
# ============================================================================


def setu(u, ds: DiscreteSystemBase) -> DiscreteSystemBase:
    """
    Create a new system, identical to ``ds`` but with state ``u``.

    Neither the map nor the Jacobian function is called.
    """
    return ds.with_state(u)


def dimension(ds: DiscreteSystemBase) -> int:
    """Static dimension D of ``ds`` (1 for DiscreteDS1D)."""
    return ds.dimension


def jacobian(ds: DiscreteSystemBase) -> JacobianMatrix:
    """Jacobian (or derivative) of ``ds`` at its current state."""
    return ds.jacobian()


def evolve(target, *args):
    """
    Evolve a system or a state.

    Call forms::

        evolve(ds, steps=1)            -> new system
        evolve(state, f, steps=1)      -> new state
        evolve(state, ds, steps=1)     -> new state under ds.map

    This function does not store intermediate steps. Use timeseries()
    to obtain the orbit.

    Examples
    --------
    >>> logistic = lambda x: 4.0 * x * (1.0 - x)
    >>> evolve(0.4, logistic, 1)
    0.96
    >>> ds = DiscreteDS1D(0.4, logistic)
    >>> evolve(ds, 2).state
    0.1536...
    """
    if isinstance(target, DiscreteSystemBase):
        if len(args) > 1:
            raise TypeError(f"evolve(ds, steps) takes at most 2 arguments, got {len(args) + 1}")
        return target.evolve(*args)

    if not args:
        raise TypeError("evolve(state, f, steps) requires a map or a system")
    f, *rest = args
    if len(rest) > 1:
        raise TypeError(f"evolve(state, f, steps) takes at most 3 arguments, got {len(args) + 1}")
    if isinstance(f, DiscreteSystemBase):
        f = f.map
    return evolve_state(target, f, *rest)


def timeseries(ds: DiscreteSystemBase, n: int) -> Timeseries:
    """
    Orbit of ``ds`` of length ``n`` as an (n, D) table, or (n,) for 1-D systems.

    Each column corresponds to one dynamic variable.
    """
    return ds.timeseries(n)


__all__ = [
    "DiscreteDS",
    "DiscreteDS1D",
    "setu",
    "dimension",
    "jacobian",
    "evolve",
    "timeseries",
]
