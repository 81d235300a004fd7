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
Discrete System Base Class
==========================

Abstract base class for all discrete-time dynamical systems
x[n+1] = f(x[n]).

A system is an immutable value bundling a state, a map and a
Jacobian-producing function. "Changing" the state always produces a new
system that shares the same map and Jacobian function.
"""

from abc import ABC, abstractmethod
from typing import Iterator

import numpy as np

from dynsys.systems.base.evolution import (
    check_steps,
    evolve_state,
    iterate_orbit,
    orbit_table,
)
from dynsys.types.core import SystemJacobian, SystemMap
from dynsys.types.trajectories import Timeseries, TimeseriesResult


class DiscreteSystemBase(ABC):
    """
    Abstract base class for all discrete-time dynamical systems.

    All discrete-time systems satisfy:
        x[n+1] = f(x[n])

    Subclasses must implement:
    1. state (property): Current state
    2. map (property): Equations of motion f
    3. jacobian_function (property): Function returning the Jacobian of f
    4. dimension (property): Static state dimension D
    5. with_state(u): New system with state u, same map and Jacobian

    Concrete methods provided:
    - jacobian(): Jacobian at the current state
    - evolve(steps): Evolved system
    - evolve_state(state, steps): Evolved state under this system's map
    - timeseries(n): Eager orbit table
    - orbit(n): Lazy orbit
    - simulate(n): Orbit with metadata

    Examples
    --------
    >>> ds = DiscreteDS([0.0, 0.0], henon_eom, henon_jacobian)
    >>> ds.dimension
    2
    >>> ds = ds.evolve(100)  # rebinding, ds itself is never modified
    >>> ts = ds.timeseries(1000)
    >>> ts.shape
    (1000, 2)
    """

    __slots__ = ()

    # =========================================================================
    # Abstract Properties (MUST be implemented by subclasses)
    # =========================================================================

    @property
    @abstractmethod
    def state(self):
        """Current state of the system."""
        pass

    @property
    @abstractmethod
    def map(self) -> SystemMap:
        """Equations of motion f, with x[n+1] = f(x[n])."""
        pass

    @property
    @abstractmethod
    def jacobian_function(self) -> SystemJacobian:
        """Function returning the Jacobian (or derivative) of the map at a state."""
        pass

    @property
    @abstractmethod
    def dimension(self) -> int:
        """
        Static dimension D of the state space.

        Fixed at construction and independent of the numeric values of
        the state.
        """
        pass

    # =========================================================================
    # Abstract Methods (MUST be implemented by subclasses)
    # =========================================================================

    @abstractmethod
    def with_state(self, state) -> "DiscreteSystemBase":
        """
        Create a new system identical to this one but with a different state.

        The map and Jacobian function are shared by reference and neither
        is called.

        Parameters
        ----------
        state : StateVector or float
            New state

        Returns
        -------
        DiscreteSystemBase
            New system of the same kind
        """
        pass

    # =========================================================================
    # Concrete Methods (Provided by base class)
    # =========================================================================

    @property
    def is_1d(self) -> bool:
        """Return True for the scalar specialization."""
        return False

    def jacobian(self):
        """
        Evaluate the Jacobian at the current state.

        Recomputed on every call.

        Returns
        -------
        JacobianMatrix or float
            (D, D) matrix, or the scalar derivative for 1-D systems
        """
        return self.jacobian_function(self.state)

    def evolve_state(self, state, steps: int = 1):
        """
        Evolve an arbitrary state under this system's map.

        Does not store intermediate states. Use timeseries() for the orbit.

        Parameters
        ----------
        state : StateVector or float
            Starting state
        steps : int
            Number of map applications (default: 1)

        Returns
        -------
        StateVector or float
            Evolved state, in whatever type the map returns
        """
        return evolve_state(state, self.map, steps)

    def evolve(self, steps: int = 1) -> "DiscreteSystemBase":
        """
        Evolve the system for ``steps`` map applications.

        Because systems are immutable, call as ``ds = ds.evolve(N)``.

        Parameters
        ----------
        steps : int
            Number of map applications (default: 1)

        Returns
        -------
        DiscreteSystemBase
            New system at the evolved state; self is left untouched
        """
        dimension = None if self.is_1d else self.dimension
        new_state = evolve_state(self.state, self.map, steps, dimension=dimension)
        return self.with_state(new_state)

    def orbit(self, n: int) -> Iterator:
        """
        Lazily yield the first ``n`` states of the orbit.

        Each call restarts from the current state.

        Examples
        --------
        >>> for x in ds.orbit(3):
        ...     print(x)
        """
        return iterate_orbit(self.state, self.map, n)

    def timeseries(self, n: int) -> Timeseries:
        """
        Orbit of length ``n`` starting at the current state.

        Row i is the state after i map applications, so row 0 is the
        current state.

        Parameters
        ----------
        n : int
            Number of states (0 gives an empty table)

        Returns
        -------
        Timeseries
            (n, D) array; (n,) array for 1-D systems.
            Each column corresponds to one dynamic variable.

        Raises
        ------
        InvalidArgumentError
            If n is negative
        """
        dimension = None if self.is_1d else self.dimension
        return orbit_table(self.state, self.map, n, dimension=dimension)

    def simulate(self, n: int, **kwargs) -> TimeseriesResult:
        """
        Orbit of length ``n`` together with step indices and metadata.

        Parameters
        ----------
        n : int
            Number of states
        **kwargs
            Stored in metadata

        Returns
        -------
        TimeseriesResult
            TypedDict with 'states' (TIME-MAJOR), 'steps', 'dimension'
            and 'metadata'
        """
        n = check_steps(n, "n")
        return {
            "states": self.timeseries(n),
            "steps": np.arange(n),
            "dimension": self.dimension,
            "metadata": {**kwargs, "method": "iterate"},
        }

    def shares_dynamics(self, other: "DiscreteSystemBase") -> bool:
        """
        Return True if other has the same map and Jacobian function.

        Such systems are structurally equivalent and may differ only in
        state.
        """
        return (
            isinstance(other, DiscreteSystemBase)
            and self.map is other.map
            and self.jacobian_function is other.jacobian_function
        )

    # =========================================================================
    # Display
    # =========================================================================

    def __str__(self) -> str:
        return (
            f"{self.dimension}-dimensional discrete dynamical system:\n"
            f"state: {self.state}\n"
            f"e.o.m.: {_function_name(self.map)}\n"
            f"jacobian: {_function_name(self.jacobian_function)}"
        )

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        return (
            f"{class_name}(dimension={self.dimension}, state={self.state}, "
            f"map={_function_name(self.map)})"
        )


def _function_name(fn) -> str:
    return getattr(fn, "__name__", type(fn).__name__)
