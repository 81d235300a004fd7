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
Core Types

Basic array, state, and function types for discrete-time dynamical systems:
- Multi-backend arrays (NumPy, PyTorch, JAX)
- State vectors and scalar states
- Jacobian matrices and derivatives
- Map (equations of motion) and Jacobian function signatures

Usage
-----
>>> from dynsys.types.core import StateVector, MapFunction
>>>
>>> def henon(x: StateVector) -> StateVector:
...     return np.array([1.0 - 1.4 * x[0] ** 2 + x[1], 0.3 * x[0]])
>>>
>>> f: MapFunction = henon
"""

from typing import TYPE_CHECKING, Callable, Union

import numpy as np

if TYPE_CHECKING:
    import jax.numpy as jnp
    import torch


# ============================================================================
# Basic Array Types - Multi-Backend Support
# ============================================================================

ArrayLike = Union[np.ndarray, "torch.Tensor", "jnp.ndarray"]
"""
Array-like type supporting multiple backends.

Can be NumPy array, PyTorch tensor, or JAX array. Maps written with
``jax.numpy`` or ``torch`` operations return their backend's array type;
systems convert states back to NumPy when re-seeding.
"""

NumpyArray = np.ndarray
"""Pure NumPy array."""

ScalarLike = Union[float, int, np.number, "torch.Tensor", "jnp.ndarray"]
"""
Scalar value in any backend.

Can be Python float/int, NumPy scalar, or 0-d tensor.
"""

IntegerLike = Union[int, np.integer]
"""Integer value (dimensions, step counts, indices)."""


# ============================================================================
# State Types
# ============================================================================

StateVector = ArrayLike
"""
State vector of a D-dimensional system.

Shape: (D,)

Inside a system the state is always a read-only float64 NumPy array
whose length never changes over the system's lifetime.

Examples
--------
>>> x: StateVector = np.array([0.1, 0.2])
>>> x.shape
(2,)
"""

ScalarState = float
"""
State of a one-dimensional system.

Stored as a plain Python float.

Examples
--------
>>> x: ScalarState = 0.4
"""

JacobianMatrix = ArrayLike
"""
Jacobian of a map evaluated at a state.

Shape: (D, D), with J[i, j] = ∂f_i/∂x_j.

Examples
--------
>>> J: JacobianMatrix = np.array([[2.0, 0.0], [0.0, 0.5]])
"""


# ============================================================================
# Function Types
# ============================================================================

MapFunction = Callable[[StateVector], StateVector]
"""
Equations of motion of a D-dimensional discrete system: x[n+1] = f(x[n]).

Must be pure and return a vector of the same length as its input.

Examples
--------
>>> def f(x: StateVector) -> StateVector:
...     return jnp.stack([2.0 * x[0], 0.5 * x[1]])
"""

ScalarMapFunction = Callable[[float], float]
"""
Equations of motion of a one-dimensional discrete system.

Examples
--------
>>> logistic: ScalarMapFunction = lambda x: 4.0 * x * (1.0 - x)
"""

JacobianFunction = Callable[[StateVector], JacobianMatrix]
"""
Function returning the (D, D) Jacobian of a map at a given state.

Either user-supplied or synthesised by automatic differentiation.
"""

DerivativeFunction = Callable[[float], float]
"""Function returning the derivative of a one-dimensional map at a state."""

SystemMap = Union[MapFunction, ScalarMapFunction]
"""Map of either variant."""

SystemJacobian = Union[JacobianFunction, DerivativeFunction]
"""Jacobian or derivative function of either variant."""


__all__ = [
    "ArrayLike",
    "NumpyArray",
    "ScalarLike",
    "IntegerLike",
    "StateVector",
    "ScalarState",
    "JacobianMatrix",
    "MapFunction",
    "ScalarMapFunction",
    "JacobianFunction",
    "DerivativeFunction",
    "SystemMap",
    "SystemJacobian",
]
