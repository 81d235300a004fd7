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
Unit tests for type utilities

Tests cover:
1. Backend type guards
2. Conversion to NumPy
3. Shape predicates used by contract validation
4. Backend configuration validation
"""

import numpy as np
import pytest

from dynsys.types.backends import (
    DEFAULT_DIFF_BACKEND,
    VALID_DIFF_BACKENDS,
    validate_diff_backend,
)
from dynsys.types.utilities import (
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

torch_available = True
try:
    import torch
except ImportError:
    torch_available = False

jax_available = True
try:
    import jax.numpy as jnp
except ImportError:
    jax_available = False


# ============================================================================
# Type Guards
# ============================================================================


class TestTypeGuards:
    """Test backend detection helpers."""

    def test_numpy_detection(self):
        x = np.array([1.0, 2.0])
        assert is_numpy(x)
        assert not is_torch(x)
        assert not is_jax(x)
        assert get_backend(x) == "numpy"

    @pytest.mark.skipif(not jax_available, reason="JAX not installed")
    def test_jax_detection(self):
        x = jnp.array([1.0, 2.0])
        assert is_jax(x)
        assert not is_numpy(x)
        assert get_backend(x) == "jax"

    @pytest.mark.skipif(not torch_available, reason="PyTorch not installed")
    def test_torch_detection(self):
        x = torch.tensor([1.0, 2.0])
        assert is_torch(x)
        assert get_backend(x) == "torch"

    def test_list_is_not_array(self):
        assert not is_array([1.0, 2.0])

    def test_get_backend_unknown_type(self):
        with pytest.raises(TypeError, match="Unknown backend"):
            get_backend([1.0, 2.0])


# ============================================================================
# Conversion
# ============================================================================


class TestEnsureNumpy:
    """Test conversion to NumPy."""

    def test_numpy_passthrough(self):
        x = np.array([1.0, 2.0])
        assert ensure_numpy(x) is x

    def test_list_conversion(self):
        x = ensure_numpy([1.0, 2.0])
        assert isinstance(x, np.ndarray)
        np.testing.assert_array_equal(x, [1.0, 2.0])

    @pytest.mark.skipif(not torch_available, reason="PyTorch not installed")
    def test_torch_conversion(self):
        x = ensure_numpy(torch.tensor([1.0, 2.0], requires_grad=True))
        assert isinstance(x, np.ndarray)
        np.testing.assert_allclose(x, [1.0, 2.0])

    @pytest.mark.skipif(not jax_available, reason="JAX not installed")
    def test_jax_conversion(self):
        x = ensure_numpy(jnp.array([1.0, 2.0]))
        assert isinstance(x, np.ndarray)
        np.testing.assert_allclose(x, [1.0, 2.0])

    def test_array_shape(self):
        assert get_array_shape(np.zeros((3, 2))) == (3, 2)
        assert get_array_shape(0.5) == ()
        assert get_array_shape([1.0, 2.0]) == ()


# ============================================================================
# Shape Predicates
# ============================================================================


class TestShapePredicates:
    """Test vector/matrix/scalar predicates."""

    def test_is_vector(self):
        assert is_vector(np.zeros(3))
        assert is_vector(np.zeros(3), length=3)
        assert not is_vector(np.zeros(3), length=2)
        assert not is_vector(np.zeros((3, 1)))
        assert not is_vector([0.0, 0.0, 0.0])

    @pytest.mark.skipif(not jax_available, reason="JAX not installed")
    def test_is_vector_jax(self):
        assert is_vector(jnp.zeros(2), length=2)

    def test_is_square_matrix(self):
        assert is_square_matrix(np.eye(2))
        assert is_square_matrix(np.eye(2), size=2)
        assert not is_square_matrix(np.eye(2), size=3)
        assert not is_square_matrix(np.zeros((2, 3)))
        assert not is_square_matrix(np.zeros(4))
        assert not is_square_matrix([[1.0, 0.0], [0.0, 1.0]])

    def test_is_real_scalar(self):
        assert is_real_scalar(0.4)
        assert is_real_scalar(3)
        assert is_real_scalar(np.float64(0.4))
        assert is_real_scalar(np.array(0.4))

    def test_is_real_scalar_rejects(self):
        assert not is_real_scalar(True)
        assert not is_real_scalar(1 + 2j)
        assert not is_real_scalar(np.array([0.4]))
        assert not is_real_scalar("0.4")
        assert not is_real_scalar(None)

    @pytest.mark.skipif(not torch_available, reason="PyTorch not installed")
    def test_is_real_scalar_torch(self):
        assert is_real_scalar(torch.tensor(0.4))
        assert not is_real_scalar(torch.tensor([0.4]))

    def test_is_numeric_vector(self):
        assert is_numeric_vector([0.1, 0.2])
        assert is_numeric_vector((1, 2, 3))
        assert is_numeric_vector(np.array([0.1]))
        assert not is_numeric_vector([[0.1], [0.2]])
        assert not is_numeric_vector(0.1)
        assert not is_numeric_vector(["a", "b"])
        assert not is_numeric_vector([1 + 1j, 2.0])
        assert not is_numeric_vector([])
        assert not is_numeric_vector(np.zeros(0))


# ============================================================================
# Backend Configuration
# ============================================================================


class TestBackendValidation:
    """Test differentiation backend names."""

    def test_default_is_valid(self):
        assert DEFAULT_DIFF_BACKEND in VALID_DIFF_BACKENDS

    @pytest.mark.parametrize("backend", ["jax", "torch", "sympy"])
    def test_valid_names(self, backend):
        assert validate_diff_backend(backend) == backend

    @pytest.mark.parametrize("backend", ["numpy", "pytorch", ""])
    def test_invalid_names(self, backend):
        with pytest.raises(ValueError, match="Invalid differentiation backend"):
            validate_diff_backend(backend)
