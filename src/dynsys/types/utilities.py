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
Utility Types and Functions

Defines helper functions for:
- Type guards (checking array backends)
- Type converters (to NumPy)
- Shape predicates used by contract validation
- Validation result containers

These utilities enable backend-agnostic handling of map outputs, which
may be NumPy arrays, PyTorch tensors, or JAX arrays depending on how the
user wrote the map.

Usage
-----
>>> from dynsys.types.utilities import ensure_numpy, is_vector, get_backend
>>>
>>> y = f(x)
>>> if is_vector(y, length=2):
...     y_np = ensure_numpy(y)
"""

import numbers
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from dynsys.types.core import ArrayLike

# ============================================================================
# Type Guards
# ============================================================================


def is_numpy(x: Any) -> bool:
    """
    Check if array is NumPy ndarray.

    Examples
    --------
    >>> is_numpy(np.array([1, 2, 3]))
    True
    >>> is_numpy([1, 2, 3])
    False
    """
    return isinstance(x, np.ndarray)


def is_torch(x: Any) -> bool:
    """
    Check if array is PyTorch tensor.

    Returns False when PyTorch is not installed.
    """
    try:
        import torch

        return isinstance(x, torch.Tensor)
    except ImportError:
        return False


def is_jax(x: Any) -> bool:
    """
    Check if array is JAX array (including tracers inside transformations).

    Returns False when JAX is not installed.
    """
    try:
        import jax

        return isinstance(x, jax.Array)
    except ImportError:
        return False


def is_array(x: Any) -> bool:
    """Check if x is an array of any supported backend."""
    return is_numpy(x) or is_torch(x) or is_jax(x)


def get_backend(x: ArrayLike) -> str:
    """
    Detect array backend from its type.

    Parameters
    ----------
    x : ArrayLike
        Array to check

    Returns
    -------
    str
        'numpy', 'torch', or 'jax'

    Raises
    ------
    TypeError
        If backend cannot be determined

    Examples
    --------
    >>> get_backend(np.zeros(2))
    'numpy'
    >>> get_backend(jnp.zeros(2))
    'jax'
    """
    if is_numpy(x):
        return "numpy"
    elif is_torch(x):
        return "torch"
    elif is_jax(x):
        return "jax"
    else:
        raise TypeError(f"Unknown backend for type {type(x)}")


# ============================================================================
# Type Conversion Functions
# ============================================================================


def ensure_numpy(x: Any) -> np.ndarray:
    """
    Convert to NumPy array regardless of backend.

    Handles conversion from PyTorch tensors and JAX arrays.

    Parameters
    ----------
    x : ArrayLike
        Array in any backend, or a nested sequence of numbers

    Returns
    -------
    np.ndarray
        NumPy array

    Examples
    --------
    >>> import torch
    >>> x_np = ensure_numpy(torch.tensor([1.0, 2.0]))
    >>> type(x_np)
    <class 'numpy.ndarray'>
    """
    if isinstance(x, np.ndarray):
        return x

    if is_torch(x):
        return x.detach().cpu().numpy()

    if is_jax(x):
        return np.asarray(x)

    # Fallback to generic conversion
    return np.asarray(x)


def get_array_shape(x: Any) -> Tuple[int, ...]:
    """
    Get shape of array regardless of backend.

    Returns () for objects without a shape (Python scalars, lists).
    """
    if hasattr(x, "shape"):
        return tuple(x.shape)
    else:
        return ()


# ============================================================================
# Shape Predicates
# ============================================================================


def is_vector(x: Any, length: Optional[int] = None) -> bool:
    """
    Check if x is a one-dimensional array of any backend.

    Parameters
    ----------
    x : Any
        Object to check
    length : Optional[int]
        Required length (None accepts any length)

    Examples
    --------
    >>> is_vector(np.zeros(3))
    True
    >>> is_vector(np.zeros(3), length=2)
    False
    >>> is_vector([0.0, 0.0, 0.0])  # lists are not containers
    False
    """
    if not is_array(x):
        return False
    shape = get_array_shape(x)
    if len(shape) != 1:
        return False
    return length is None or shape[0] == length


def is_square_matrix(x: Any, size: Optional[int] = None) -> bool:
    """
    Check if x is a square two-dimensional array of any backend.

    Examples
    --------
    >>> is_square_matrix(np.eye(2))
    True
    >>> is_square_matrix(np.eye(2), size=3)
    False
    >>> is_square_matrix(np.zeros((2, 3)))
    False
    """
    if not is_array(x):
        return False
    shape = get_array_shape(x)
    if len(shape) != 2 or shape[0] != shape[1]:
        return False
    return size is None or shape[0] == size


def is_real_scalar(x: Any) -> bool:
    """
    Check if x is a real scalar (Python/NumPy number or 0-d real array).

    Booleans and complex numbers are rejected.

    Examples
    --------
    >>> is_real_scalar(0.4)
    True
    >>> is_real_scalar(np.float64(0.4))
    True
    >>> is_real_scalar(np.array([0.4]))
    False
    """
    if isinstance(x, (bool, np.bool_)):
        return False
    if isinstance(x, numbers.Real):
        return True
    if is_array(x) and get_array_shape(x) == ():
        return ensure_numpy(x).dtype.kind in "iuf"
    return False


def is_numeric_vector(x: Any) -> bool:
    """
    Check if x can be read as a one-dimensional vector of real numbers.

    Accepts arrays of any backend as well as lists and tuples of numbers.
    Empty vectors are rejected.

    Examples
    --------
    >>> is_numeric_vector([0.1, 0.2])
    True
    >>> is_numeric_vector([[0.1], [0.2]])
    False
    >>> is_numeric_vector(0.1)
    False
    >>> is_numeric_vector(["a", "b"])
    False
    """
    try:
        arr = ensure_numpy(x)
    except (TypeError, ValueError):
        return False
    return arr.ndim == 1 and arr.shape[0] > 0 and arr.dtype.kind in "iuf"


# ============================================================================
# Validation Result Container
# ============================================================================


@dataclass
class ValidationResult:
    """
    Container for contract validation results.

    Attributes
    ----------
    is_valid : bool
        True if the map (and Jacobian) passed all checks
    errors : List[str]
        Validation errors (empty if valid)
    warnings : List[str]
        Non-fatal findings
    info : Dict
        Additional information (dimension, backend, output types)
    """

    is_valid: bool
    errors: List[str]
    warnings: List[str]
    info: Dict


__all__ = [
    "is_numpy",
    "is_torch",
    "is_jax",
    "is_array",
    "get_backend",
    "ensure_numpy",
    "get_array_shape",
    "is_vector",
    "is_square_matrix",
    "is_real_scalar",
    "is_numeric_vector",
    "ValidationResult",
]
