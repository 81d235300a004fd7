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
Backend Manager for Differentiation Backends

Handles:
- Differentiation backend availability checking
- Default backend configuration (backend, JIT, precision)
- Temporary backend switching

This class is completely standalone and can be reused by any class
that needs to pick a differentiation backend.
"""

from contextlib import contextmanager
from typing import List, Optional

import numpy as np

from dynsys.types.backends import (
    DEFAULT_DIFF_CONFIG,
    DiffBackend,
    DifferentiationConfig,
    validate_diff_backend,
)


class BackendManager:
    """
    Manages differentiation backend selection and configuration.

    Supports JAX, PyTorch, and SymPy backends with availability checks
    performed once at construction.

    Example:
        >>> mgr = BackendManager()
        >>> mgr.set_default('torch')
        >>>
        >>> # Temporary backend switching
        >>> with mgr.use_backend('sympy'):
        ...     ds = DiscreteDS(u0, f)  # Jacobian from SymPy
        >>> mgr.default_backend
        'torch'
    """

    def __init__(
        self,
        default_backend: DiffBackend = DEFAULT_DIFF_CONFIG["backend"],
        jit: bool = DEFAULT_DIFF_CONFIG["jit"],
        enable_x64: bool = DEFAULT_DIFF_CONFIG["enable_x64"],
    ):
        """
        Initialize backend manager.

        Args:
            default_backend: Default differentiation backend
            jit: Compile JAX Jacobians with jax.jit
            enable_x64: Run JAX in double precision

        Raises:
            ValueError: If default_backend is not a valid name
            RuntimeError: If default_backend is not installed
        """
        self._default_backend: DiffBackend = validate_diff_backend(default_backend)
        self._jit = jit
        self._enable_x64 = enable_x64

        # Detect available backends at initialization
        self._available_backends = self._detect_available_backends()

        if default_backend not in self._available_backends:
            raise RuntimeError(
                f"Default backend '{default_backend}' is not available. "
                f"Available backends: {self._available_backends}"
            )

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def default_backend(self) -> DiffBackend:
        """Get current default backend"""
        return self._default_backend

    @property
    def jit(self) -> bool:
        """Whether JAX Jacobians are JIT-compiled"""
        return self._jit

    @property
    def enable_x64(self) -> bool:
        """Whether JAX runs in double precision"""
        return self._enable_x64

    @property
    def available_backends(self) -> List[DiffBackend]:
        """Get list of available backends"""
        return self._available_backends.copy()

    # ========================================================================
    # Backend Detection
    # ========================================================================

    def _detect_available_backends(self) -> List[DiffBackend]:
        """
        Detect which backends are available in the current environment.

        Returns:
            List of available backend names
        """
        available: List[DiffBackend] = []

        try:
            import jax  # noqa: F401

            available.append("jax")
        except ImportError:
            pass

        try:
            import torch  # noqa: F401

            available.append("torch")
        except ImportError:
            pass

        try:
            import sympy  # noqa: F401

            available.append("sympy")
        except ImportError:
            pass

        return available

    def check_available(self, backend: DiffBackend) -> bool:
        """
        Check if a backend is available.

        Args:
            backend: Backend name to check

        Returns:
            True if backend is available, False otherwise
        """
        return backend in self._available_backends

    def require_backend(self, backend: DiffBackend):
        """
        Raise error if backend is not available.

        Args:
            backend: Backend name to check

        Raises:
            RuntimeError: If backend is not available

        Example:
            >>> mgr = BackendManager()
            >>> mgr.require_backend('torch')  # Raises if PyTorch not installed
        """
        if not self.check_available(backend):
            if backend == "torch":
                msg = "PyTorch backend not available. Install with: pip install torch"
            elif backend == "jax":
                msg = "JAX backend not available. Install with: pip install jax jaxlib"
            elif backend == "sympy":
                msg = "SymPy backend not available. Install with: pip install sympy"
            else:
                msg = f"Backend '{backend}' not available"

            raise RuntimeError(msg)

    def resolve(self, backend: Optional[DiffBackend] = None) -> DiffBackend:
        """
        Resolve an optional backend argument to a validated, available backend.

        Args:
            backend: Backend name, or None for the current default

        Returns:
            Backend to use

        Raises:
            ValueError: If backend name is invalid
            RuntimeError: If backend is not available
        """
        if backend is None:
            return self._default_backend
        backend = validate_diff_backend(backend)
        self.require_backend(backend)
        return backend

    # ========================================================================
    # Configuration
    # ========================================================================

    def set_default(
        self,
        backend: DiffBackend,
        jit: Optional[bool] = None,
        enable_x64: Optional[bool] = None,
    ) -> "BackendManager":
        """
        Set default backend and optionally JAX options.

        Args:
            backend: Backend name
            jit: JIT-compile JAX Jacobians (if None, not changed)
            enable_x64: JAX double precision (if None, not changed)

        Returns:
            Self for method chaining

        Raises:
            ValueError: If backend name is invalid
            RuntimeError: If backend is not available
        """
        backend = validate_diff_backend(backend)
        self.require_backend(backend)
        self._default_backend = backend

        if jit is not None:
            self._jit = jit
        if enable_x64 is not None:
            self._enable_x64 = enable_x64

        return self

    def configure(self, config: DifferentiationConfig) -> "BackendManager":
        """
        Apply a DifferentiationConfig dictionary.

        Missing keys leave the current setting unchanged.

        Example:
            >>> mgr.configure({'backend': 'jax', 'jit': True})
        """
        return self.set_default(
            config.get("backend", self._default_backend),
            jit=config.get("jit"),
            enable_x64=config.get("enable_x64"),
        )

    def reset(self):
        """
        Reset to default configuration (JAX backend, no JIT, float64).

        Example:
            >>> mgr.set_default('torch')
            >>> mgr.reset()
            >>> mgr.default_backend
            'jax'
        """
        self._default_backend = DEFAULT_DIFF_CONFIG["backend"]
        self._jit = DEFAULT_DIFF_CONFIG["jit"]
        self._enable_x64 = DEFAULT_DIFF_CONFIG["enable_x64"]

    # ========================================================================
    # Context Managers
    # ========================================================================

    @contextmanager
    def use_backend(
        self,
        backend: DiffBackend,
        jit: Optional[bool] = None,
    ):
        """
        Temporarily switch to a different backend.

        Args:
            backend: Temporary backend to use
            jit: Optional temporary JIT setting

        Yields:
            Self with temporary configuration

        Example:
            >>> mgr = BackendManager(default_backend='jax')
            >>> with mgr.use_backend('sympy'):
            ...     J = jacobian_of(f, dimension=2)
            >>> mgr.default_backend
            'jax'
        """
        old_backend = self._default_backend
        old_jit = self._jit

        try:
            self.set_default(backend, jit=jit)
            yield self
        finally:
            self._default_backend = old_backend
            self._jit = old_jit

    # ========================================================================
    # Information & Debugging
    # ========================================================================

    def get_info(self) -> DifferentiationConfig:
        """
        Get backend configuration.

        Example:
            >>> mgr = BackendManager()
            >>> mgr.get_info()['backend']
            'jax'
        """
        config: DifferentiationConfig = {
            "backend": self._default_backend,
            "jit": self._jit,
            "enable_x64": self._enable_x64,
        }
        return config

    def get_extended_info(self) -> dict:
        """
        Get extended backend information including versions.

        Example:
            >>> info = BackendManager().get_extended_info()
            >>> info['available_backends']
            ['jax', 'torch', 'sympy']
        """
        info = {
            **self.get_info(),
            "available_backends": self.available_backends,
            "numpy_version": np.__version__,
        }

        if self.check_available("jax"):
            import jax

            info["jax_version"] = jax.__version__
        else:
            info["jax_version"] = None

        if self.check_available("torch"):
            import torch

            info["torch_version"] = torch.__version__
        else:
            info["torch_version"] = None

        if self.check_available("sympy"):
            import sympy

            info["sympy_version"] = sympy.__version__
        else:
            info["sympy_version"] = None

        return info

    def __repr__(self) -> str:
        """String representation for debugging"""
        return (
            f"BackendManager("
            f"default='{self._default_backend}', "
            f"jit={self._jit}, "
            f"available={self.available_backends})"
        )

    def __str__(self) -> str:
        """Human-readable string"""
        return f"BackendManager(backend={self._default_backend})"
