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
Backend and Configuration Types

Defines types related to:
- Automatic differentiation backends (JAX, PyTorch, SymPy)
- Differentiation configuration dictionaries
- Default numerical precision

These types standardize how a system obtains its Jacobian when none is
supplied by the user.

Usage
-----
>>> from dynsys.types.backends import DiffBackend, DifferentiationConfig
>>>
>>> config: DifferentiationConfig = {'backend': 'jax', 'jit': True}
>>> ds = DiscreteDS(u0, f, backend=config['backend'])
"""

from typing import Literal

import numpy as np
from typing_extensions import TypedDict


# ============================================================================
# Backend Types
# ============================================================================

DiffBackend = Literal["jax", "torch", "sympy"]
"""
Backend used to synthesise Jacobians and derivatives from a map.

Valid values:
- 'jax': Forward-mode automatic differentiation (jax.jacfwd / jax.grad).
  Maps must be written with jax.numpy-compatible operations.
- 'torch': Reverse-mode automatic differentiation
  (torch.autograd.functional.jacobian). Maps must use torch operations.
- 'sympy': Trace the map over symbols, differentiate symbolically and
  compile to NumPy with lambdify. Maps must use plain arithmetic.

Examples
--------
>>> backend: DiffBackend = 'sympy'
>>> ds = DiscreteDS([0.0, 0.0], henon_eom, backend=backend)
"""


class DifferentiationConfig(TypedDict, total=False):
    """
    Differentiation configuration dictionary.

    Attributes
    ----------
    backend : DiffBackend
        Differentiation backend
    jit : bool
        Compile the synthesised Jacobian with jax.jit (JAX only)
    enable_x64 : bool
        Run JAX in double precision (JAX only)

    Examples
    --------
    >>> config: DifferentiationConfig = {
    ...     'backend': 'jax',
    ...     'jit': False,
    ...     'enable_x64': True,
    ... }
    """

    backend: DiffBackend
    jit: bool
    enable_x64: bool


# ============================================================================
# Constants - Valid Values
# ============================================================================

VALID_DIFF_BACKENDS = ("jax", "torch", "sympy")
"""
Tuple of valid differentiation backend names.

Use for validation:
>>> if backend not in VALID_DIFF_BACKENDS:
...     raise ValueError(f"Invalid backend: {backend}")
"""

DEFAULT_DIFF_BACKEND: DiffBackend = "jax"
"""
Default differentiation backend if not specified.

JAX is default because its forward-mode jacobian is exact for any map
written with jax.numpy and is cheap for the low dimensions typical of
discrete maps.
"""

DEFAULT_DIFF_CONFIG: DifferentiationConfig = {
    "backend": DEFAULT_DIFF_BACKEND,
    "jit": False,
    "enable_x64": True,
}
"""Default differentiation configuration."""

DEFAULT_DTYPE = np.float64
"""
Default numerical precision of stored states.

Examples
--------
>>> ds.state.dtype
dtype('float64')
"""


def validate_diff_backend(backend: str) -> DiffBackend:
    """
    Validate and normalize differentiation backend string.

    Parameters
    ----------
    backend : str
        Backend name to validate

    Returns
    -------
    DiffBackend
        Validated backend (typed)

    Raises
    ------
    ValueError
        If backend is not valid

    Examples
    --------
    >>> validate_diff_backend('jax')
    'jax'
    >>> validate_diff_backend('numpy')  # ValueError - no autodiff
    """
    if backend not in VALID_DIFF_BACKENDS:
        raise ValueError(
            f"Invalid differentiation backend '{backend}'. " f"Choose from: {VALID_DIFF_BACKENDS}"
        )
    return backend


__all__ = [
    "DiffBackend",
    "DifferentiationConfig",
    "VALID_DIFF_BACKENDS",
    "DEFAULT_DIFF_BACKEND",
    "DEFAULT_DIFF_CONFIG",
    "DEFAULT_DTYPE",
    "validate_diff_backend",
]
