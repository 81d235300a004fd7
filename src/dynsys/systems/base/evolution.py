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
Evolution Engine
================

Advances states of discrete maps by repeated application:
    x[n+1] = f(x[n])

Functions here operate on a state and a map only; systems build on them
(see DiscreteSystemBase.evolve and DiscreteSystemBase.timeseries).

Composition law:
    evolve_state(evolve_state(x, f, a), f, b) == evolve_state(x, f, a + b)
"""

from typing import Iterator, Optional

import numpy as np

from dynsys.systems.base.utils.contract_validator import InvalidArgumentError
from dynsys.types.backends import DEFAULT_DTYPE
from dynsys.types.core import SystemMap
from dynsys.types.trajectories import Timeseries
from dynsys.types.utilities import ensure_numpy


def check_steps(steps, name: str = "steps") -> int:
    """
    Check a step count at the public boundary.

    Parameters
    ----------
    steps : int
        Step count
    name : str
        Argument name for error messages

    Returns
    -------
    int
        The step count as a Python int

    Raises
    ------
    TypeError
        If steps is not an integer (booleans included)
    InvalidArgumentError
        If steps is negative
    """
    if isinstance(steps, (bool, np.bool_)) or not isinstance(steps, (int, np.integer)):
        raise TypeError(f"{name} must be an integer, got {type(steps).__name__}")
    if steps < 0:
        raise InvalidArgumentError(f"{name} must be non-negative, got {steps}")
    return int(steps)


def evolve_state(
    state,
    f: SystemMap,
    steps: int = 1,
    dimension: Optional[int] = None,
):
    """
    Apply a map to a state ``steps`` times.

    Parameters
    ----------
    state : StateVector or float
        Starting state
    f : SystemMap
        Map x -> f(x)
    steps : int
        Number of applications (0 returns state unchanged)
    dimension : Optional[int]
        Expected state length. When given, every map output is checked
        with an assertion (skipped under ``python -O``).

    Returns
    -------
    StateVector or float
        f applied steps times, in whatever type f returns

    Examples
    --------
    >>> evolve_state(0.4, lambda x: 4.0 * x * (1.0 - x), 2)
    0.1536...
    >>> evolve_state(0.4, lambda x: 4.0 * x * (1.0 - x), 0)
    0.4
    """
    steps = check_steps(steps)

    for _ in range(steps):
        state = f(state)
        if dimension is not None:
            assert len(state) == dimension, (
                f"map changed state dimension from {dimension} to {len(state)}"
            )

    return state


def iterate_orbit(state, f: SystemMap, n: int) -> Iterator:
    """
    Lazily yield the first ``n`` points of the orbit of ``state``.

    Element 0 is ``state`` itself and element i is
    ``evolve_state(state, f, i)``. The map is applied n - 1 times in total.

    Examples
    --------
    >>> list(iterate_orbit(0.4, lambda x: 4.0 * x * (1.0 - x), 3))
    [0.4, 0.96, 0.1536...]
    """
    n = check_steps(n, "n")
    return _orbit(state, f, n)


def _orbit(x, f: SystemMap, n: int) -> Iterator:
    for i in range(n):
        yield x
        if i < n - 1:
            x = f(x)


def orbit_table(
    state,
    f: SystemMap,
    n: int,
    dimension: Optional[int] = None,
) -> Timeseries:
    """
    Materialise the first ``n`` orbit points into a float64 table.

    Parameters
    ----------
    state : StateVector or float
        Starting state
    f : SystemMap
        Map x -> f(x)
    n : int
        Number of points (0 gives an empty table)
    dimension : Optional[int]
        D for vector states, None for scalar states

    Returns
    -------
    Timeseries
        (n, D) array for vector states, (n,) array for scalar states
    """
    n = check_steps(n, "n")

    if dimension is None:
        ts = np.empty(n, dtype=DEFAULT_DTYPE)
    else:
        ts = np.empty((n, dimension), dtype=DEFAULT_DTYPE)

    for i, x in enumerate(iterate_orbit(state, f, n)):
        ts[i] = ensure_numpy(x)

    return ts


__all__ = [
    "check_steps",
    "evolve_state",
    "iterate_orbit",
    "orbit_table",
]
