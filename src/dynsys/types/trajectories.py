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
Trajectory Types

Defines types for orbits of discrete-time systems:
- Timeseries tables (one row per iterate)
- Timeseries results with metadata

Mathematical Context
-------------------
An orbit of x[n+1] = f(x[n]) started at x[0] is the sequence
x[0], f(x[0]), f(f(x[0])), ...

Shape Conventions:
- D-dimensional system: (N, D), row i is the state after i map applications
- One-dimensional system: (N,)
"""

from typing import Any, Dict

from typing_extensions import TypedDict

from .core import ArrayLike

# ============================================================================
# Trajectory Types
# ============================================================================

Timeseries = ArrayLike
"""
Finite orbit of a discrete system.

Shapes:
- D-dimensional system: (N, D)
  Each row is x[i]; each column one dynamic variable
- One-dimensional system: (N,)

Indexing:
- ts[i] -> state after i map applications
- ts[:, j] -> j-th state component over the orbit (D-dimensional only)

Examples
--------
>>> ts: Timeseries = timeseries(ds, 1000)
>>> ts.shape
(1000, 2)
>>> x_values = ts[:, 0]
"""


class TimeseriesResult(TypedDict, total=False):
    """
    Result from discrete-system simulation.

    Attributes
    ----------
    states : Timeseries
        Orbit, (N, D) or (N,) - TIME-MAJOR
    steps : ArrayLike
        Step indices [0, 1, ..., N-1]
    dimension : int
        System dimension D
    metadata : Dict[str, Any]
        Additional information ('method', user keyword arguments)

    Examples
    --------
    >>> result: TimeseriesResult = simulate(ds, 100)
    >>> result['states'].shape
    (100, 2)
    >>> result['steps'][-1]
    99
    """

    states: Timeseries
    steps: ArrayLike
    dimension: int
    metadata: Dict[str, Any]


__all__ = [
    "Timeseries",
    "TimeseriesResult",
]
