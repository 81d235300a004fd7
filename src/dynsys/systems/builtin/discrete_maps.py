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
Famous Discrete Maps
====================

Ready-made systems with closed-form Jacobians:
- logistic: x[n+1] = r·x[n]·(1 - x[n])
- henon: Hénon map, the canonical 2-D strange attractor
- standard_map: Chirikov standard map (area-preserving kicked rotor)

Each factory returns an immutable DiscreteDS / DiscreteDS1D.

Examples
--------
>>> from dynsys.systems.builtin import henon
>>> ds = henon()
>>> ts = ds.timeseries(10000)
>>> ts.shape
(10000, 2)
"""

import warnings

import numpy as np

from dynsys.systems.base.discrete_ds import DiscreteDS, DiscreteDS1D


def logistic(x0: float = 0.4, r: float = 4.0) -> DiscreteDS1D:
    """
    Logistic map x[n+1] = r·x[n]·(1 - x[n]).

    Parameters
    ----------
    x0 : float
        Initial population, normally in [0, 1]
    r : float
        Growth rate. r = 4 is fully chaotic on [0, 1].

    Returns
    -------
    DiscreteDS1D
        System with derivative f'(x) = r·(1 - 2x)

    Examples
    --------
    >>> logistic(0.4).timeseries(3)
    array([0.4   , 0.96  , 0.1536])
    """
    if not 0.0 <= r <= 4.0:
        warnings.warn(
            f"Growth rate r = {r} outside [0, 4]: orbits leave [0, 1] and diverge.",
            UserWarning,
        )

    def logistic_eom(x):
        return r * x * (1.0 - x)

    def logistic_derivative(x):
        return r * (1.0 - 2.0 * x)

    return DiscreteDS1D(x0, logistic_eom, logistic_derivative)


def henon(u0=(0.0, 0.0), a: float = 1.4, b: float = 0.3) -> DiscreteDS:
    """
    Hénon map.

        x[n+1] = 1 - a·x[n]² + y[n]
        y[n+1] = b·x[n]

    Parameters
    ----------
    u0 : sequence of 2 floats
        Initial state [x, y]
    a : float
        Nonlinearity parameter
    b : float
        Dissipation parameter, |det J| = |b|

    Returns
    -------
    DiscreteDS
        System with Jacobian
            J = | -2ax    1 |
                |   b     0 |
    """

    def henon_eom(u):
        return np.array([1.0 - a * u[0] ** 2 + u[1], b * u[0]])

    def henon_jacobian(u):
        return np.array([[-2.0 * a * u[0], 1.0], [b, 0.0]])

    return DiscreteDS(u0, henon_eom, henon_jacobian)


def standard_map(u0=(0.1, 0.1), k: float = 0.971635, wrap: bool = True) -> DiscreteDS:
    """
    Chirikov standard map.

        p[n+1] = p[n] + k·sin(θ[n])
        θ[n+1] = θ[n] + p[n+1]

    Both variables are reduced modulo 2π when ``wrap`` is set.

    Parameters
    ----------
    u0 : sequence of 2 floats
        Initial state [θ, p]
    k : float
        Kick strength. The default is the critical value where the last
        KAM torus breaks.
    wrap : bool
        Reduce θ and p to [0, 2π)

    Returns
    -------
    DiscreteDS
        System with Jacobian
            J = | 1 + k·cos(θ)    1 |
                | k·cos(θ)        1 |
        which has det J = 1 (area-preserving).
    """
    if k < 0:
        warnings.warn(
            f"Kick strength k = {k} < 0 gives 'web map' with different dynamics.",
            UserWarning,
        )

    def standard_map_eom(u):
        p = u[1] + k * np.sin(u[0])
        theta = u[0] + p
        if wrap:
            return np.array([np.mod(theta, 2 * np.pi), np.mod(p, 2 * np.pi)])
        return np.array([theta, p])

    def standard_map_jacobian(u):
        c = k * np.cos(u[0])
        return np.array([[1.0 + c, 1.0], [c, 1.0]])

    return DiscreteDS(u0, standard_map_eom, standard_map_jacobian)


__all__ = ["logistic", "henon", "standard_map"]
