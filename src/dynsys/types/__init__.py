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
Types Module - Type Definitions for dynsys

Central import point for all type definitions.
Organized into domain-specific modules but re-exported here for convenience.

Usage
-----
>>> from dynsys.types import StateVector, MapFunction, DiffBackend

Module Organization
------------------
- core: Arrays, states, maps and Jacobian functions
- backends: Differentiation backends and configuration
- trajectories: Timeseries and simulation results
- utilities: Type guards, converters, shape predicates
"""

from .backends import (
    DEFAULT_DIFF_BACKEND,
    DEFAULT_DIFF_CONFIG,
    DEFAULT_DTYPE,
    VALID_DIFF_BACKENDS,
    DiffBackend,
    DifferentiationConfig,
    validate_diff_backend,
)
from .core import (
    ArrayLike,
    DerivativeFunction,
    IntegerLike,
    JacobianFunction,
    JacobianMatrix,
    MapFunction,
    NumpyArray,
    ScalarLike,
    ScalarMapFunction,
    ScalarState,
    StateVector,
    SystemJacobian,
    SystemMap,
)
from .trajectories import Timeseries, TimeseriesResult
from .utilities import (
    ValidationResult,
    ensure_numpy,
    get_array_shape,
    get_backend,
    is_array,
    is_jax,
    is_numeric_vector,
    is_numpy,
    is_real_scalar,
    is_square_matrix,
    is_torch,
    is_vector,
)

__all__ = [
    # Core
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
    # Backends
    "DiffBackend",
    "DifferentiationConfig",
    "VALID_DIFF_BACKENDS",
    "DEFAULT_DIFF_BACKEND",
    "DEFAULT_DIFF_CONFIG",
    "DEFAULT_DTYPE",
    "validate_diff_backend",
    # Trajectories
    "Timeseries",
    "TimeseriesResult",
    # Utilities
    "ValidationResult",
    "ensure_numpy",
    "get_array_shape",
    "get_backend",
    "is_array",
    "is_jax",
    "is_numeric_vector",
    "is_numpy",
    "is_real_scalar",
    "is_square_matrix",
    "is_torch",
    "is_vector",
]
