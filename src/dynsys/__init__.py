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
dynsys - Discrete-Time Dynamical Systems
========================================

Immutable representations of maps x[n+1] = f(x[n]) on finite-dimensional
real state spaces, with Jacobians supplied by the user or synthesised by
automatic differentiation (JAX, PyTorch or SymPy).

Quick start
-----------
>>> import jax.numpy as jnp
>>> from dynsys import DiscreteDS, evolve, jacobian, timeseries
>>>
>>> def f(u):
...     return jnp.stack([2.0 * u[0], 0.5 * u[1]])
>>> ds = DiscreteDS([1.0, 1.0], f)
>>> evolve(ds, 3).state
array([8.   , 0.125])
>>> jacobian(ds)
array([[2. , 0. ],
       [0. , 0.5]])
>>> timeseries(ds, 3)
array([[1.  , 1.  ],
       [2.  , 0.5 ],
       [4.  , 0.25]])
"""

__version__ = "0.1.0"

from .systems import builtin
from .systems.base import (
    DiscreteDS,
    DiscreteDS1D,
    DiscreteSystemBase,
    dimension,
    evolve,
    evolve_state,
    jacobian,
    setu,
    timeseries,
)
from .systems.base.utils import (
    ContractValidator,
    DimensionMismatchError,
    InvalidArgumentError,
    ScalarContractValidator,
    ValidationError,
    differentiate,
    get_backend_manager,
    jacobian_of,
    set_default_backend,
    test_functions,
    test_functions_1d,
    validate_system,
)

__all__ = [
    "__version__",
    "builtin",
    "DiscreteSystemBase",
    "DiscreteDS",
    "DiscreteDS1D",
    "dimension",
    "evolve",
    "evolve_state",
    "jacobian",
    "setu",
    "timeseries",
    "ContractValidator",
    "ScalarContractValidator",
    "ValidationError",
    "InvalidArgumentError",
    "DimensionMismatchError",
    "test_functions",
    "test_functions_1d",
    "validate_system",
    "differentiate",
    "jacobian_of",
    "get_backend_manager",
    "set_default_backend",
]
