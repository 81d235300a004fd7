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
State Containers

Canonical storage of system states:
- D-dimensional states: read-only float64 NumPy vectors of fixed length
- One-dimensional states: Python floats

Map outputs in any backend (NumPy, PyTorch, JAX) are converted back to
these containers whenever a system is re-seeded.
"""

import numpy as np

from dynsys.types.backends import DEFAULT_DTYPE
from dynsys.types.core import ScalarState
from dynsys.types.utilities import ensure_numpy


def as_state_vector(u) -> np.ndarray:
    """
    Wrap a state into a read-only float64 vector.

    Parameters
    ----------
    u : StateVector or sequence of numbers
        State values

    Returns
    -------
    np.ndarray
        New (D,) array with the write flag cleared

    Raises
    ------
    ValueError
        If u is not one-dimensional or is empty

    Examples
    --------
    >>> s = as_state_vector([1, 2])
    >>> s.dtype, s.flags.writeable
    (dtype('float64'), False)
    """
    arr = np.array(ensure_numpy(u), dtype=DEFAULT_DTYPE)
    if arr.ndim != 1:
        raise ValueError(f"State must be a vector, got array of shape {arr.shape}")
    if arr.shape[0] == 0:
        raise ValueError("State must have at least one component")
    arr.setflags(write=False)
    return arr


def as_scalar_state(x) -> ScalarState:
    """
    Convert a one-dimensional state to a Python float.

    Accepts Python/NumPy numbers and 0-d arrays of any backend.

    Raises
    ------
    ValueError
        If x has a non-scalar shape
    """
    shape = ensure_numpy(x).shape
    if shape != ():
        raise ValueError(f"State must be a scalar, got shape {shape}")
    return float(x)

