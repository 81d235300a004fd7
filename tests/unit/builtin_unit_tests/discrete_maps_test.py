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
Unit tests for the built-in discrete maps

Tests cover:
1. Logistic map values, derivative and parameter warnings
2. Hénon map values and Jacobian
3. Standard map wrapping, Jacobian and area preservation
4. Agreement of closed-form Jacobians with automatic differentiation
"""

import jax.numpy as jnp
import numpy as np
import pytest

from dynsys import DiscreteDS, DiscreteDS1D, jacobian, setu, test_functions, test_functions_1d
from dynsys.systems.builtin import henon, logistic, standard_map


class TestLogistic:
    """Test the logistic map."""

    def test_type(self):
        assert isinstance(logistic(), DiscreteDS1D)

    def test_timeseries(self):
        np.testing.assert_allclose(logistic(0.4).timeseries(3), [0.4, 0.96, 0.1536], atol=1e-12)

    def test_growth_rate(self):
        ds = logistic(0.5, r=2.0)
        assert ds.evolve().state == 0.5

    def test_derivative(self):
        ds = logistic(0.25, r=3.0)
        assert ds.derivative() == pytest.approx(1.5)

    def test_contract(self):
        ds = logistic()
        assert test_functions_1d(ds.state, ds.map, ds.derivative_function)

    @pytest.mark.parametrize("r", [-0.5, 4.5])
    def test_growth_rate_warning(self, r):
        with pytest.warns(UserWarning, match="outside"):
            logistic(r=r)

    def test_bounded_orbit(self):
        ts = logistic(0.123).timeseries(1000)
        assert np.all((ts >= 0.0) & (ts <= 1.0))


class TestHenon:
    """Test the Hénon map."""

    def test_type(self):
        ds = henon()
        assert isinstance(ds, DiscreteDS)
        assert ds.dimension == 2

    def test_first_steps(self):
        ds = henon([0.0, 0.0])
        np.testing.assert_allclose(ds.evolve(1).state, [1.0, 0.0])
        np.testing.assert_allclose(ds.evolve(2).state, [-0.4, 0.3])

    def test_jacobian(self):
        ds = henon([0.5, 0.0], a=1.2, b=0.4)
        np.testing.assert_allclose(jacobian(ds), [[-1.2, 1.0], [0.4, 0.0]])

    def test_determinant(self):
        ds = henon([0.7, -0.2])
        assert np.linalg.det(jacobian(ds)) == pytest.approx(-0.3)

    def test_contract(self):
        ds = henon()
        assert test_functions(ds.state, ds.map, ds.jacobian_function)

    def test_closed_form_matches_ad(self):
        ds = henon()

        def henon_jax(u):
            return jnp.stack([1.0 - 1.4 * u[0] ** 2 + u[1], 0.3 * u[0]])

        ad = DiscreteDS(ds.state, henon_jax)
        for u in ([0.0, 0.0], [0.3, -0.2], [-1.1, 0.4]):
            np.testing.assert_allclose(jacobian(setu(u, ad)), jacobian(setu(u, ds)), atol=1e-8)

    def test_attractor_bounded(self):
        ts = henon([0.1, 0.1]).timeseries(5000)
        assert np.all(np.isfinite(ts))
        assert np.all(np.abs(ts[100:, 0]) < 1.5)


class TestStandardMap:
    """Test the Chirikov standard map."""

    def test_type(self):
        assert isinstance(standard_map(), DiscreteDS)

    def test_wrapping(self):
        ts = standard_map([3.0, 6.0], k=1.5).timeseries(500)
        assert np.all((ts >= 0.0) & (ts < 2 * np.pi))

    def test_no_wrapping(self):
        ds = standard_map([0.0, 7.0], k=0.0, wrap=False)
        np.testing.assert_allclose(ds.evolve(1).state, [7.0, 7.0])

    def test_free_rotation(self):
        ds = standard_map([0.0, 1.0], k=0.0)
        np.testing.assert_allclose(ds.evolve(3).state, [3.0, 1.0])

    def test_area_preserving(self):
        ds = standard_map([0.4, 2.1], k=2.3)
        for _ in range(10):
            assert np.linalg.det(jacobian(ds)) == pytest.approx(1.0)
            ds = ds.evolve()

    def test_jacobian(self):
        ds = standard_map([0.0, 0.0], k=0.5)
        np.testing.assert_allclose(jacobian(ds), [[1.5, 1.0], [0.5, 1.0]])

    def test_contract(self):
        ds = standard_map()
        assert test_functions(ds.state, ds.map, ds.jacobian_function)

    def test_negative_kick_warning(self):
        with pytest.warns(UserWarning, match="k = -1"):
            standard_map(k=-1.0)
