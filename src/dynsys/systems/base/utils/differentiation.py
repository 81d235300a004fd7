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
Automatic Differentiation for Discrete Maps

Synthesises Jacobian and derivative functions from a user-supplied map
when the user does not provide one.

Interface:
- jacobian_of(f) -> J     for vector maps, J(x) is a (D, D) NumPy array
- differentiate(f) -> f'  for scalar maps, f'(x) is a Python float

Backends:
- 'jax': jax.jacfwd / jax.grad, optionally JIT-compiled
- 'torch': torch.autograd.functional.jacobian / torch.autograd.grad
- 'sympy': trace the map over symbols, differentiate symbolically,
  compile to NumPy with lambdify

The backend used when none is given is held by a process-wide
BackendManager (see get_backend_manager()).
"""

from typing import Callable, Dict, Optional

import numpy as np

from dynsys.systems.base.utils.backend_manager import BackendManager
from dynsys.types.backends import DEFAULT_DTYPE, DiffBackend
from dynsys.types.core import (
    DerivativeFunction,
    JacobianFunction,
    JacobianMatrix,
    MapFunction,
    ScalarMapFunction,
    StateVector,
)
from dynsys.types.utilities import ensure_numpy

_backend_manager: Optional[BackendManager] = None


def get_backend_manager() -> BackendManager:
    """
    Get the process-wide backend manager used when no backend is given.

    Example:
        >>> get_backend_manager().set_default('sympy')
        >>> ds = DiscreteDS([0.0, 0.0], f)  # Jacobian via SymPy
    """
    global _backend_manager
    if _backend_manager is None:
        _backend_manager = BackendManager()
    return _backend_manager


def set_default_backend(backend: DiffBackend, jit: Optional[bool] = None) -> BackendManager:
    """Set the default differentiation backend. Returns the manager."""
    return get_backend_manager().set_default(backend, jit=jit)


# ============================================================================
# Public API
# ============================================================================


def jacobian_of(
    f: MapFunction,
    backend: Optional[DiffBackend] = None,
    dimension: Optional[int] = None,
) -> JacobianFunction:
    """
    Build a function computing the Jacobian of a vector map.

    Parameters
    ----------
    f : MapFunction
        Map x -> f(x) on vectors of length D
    backend : Optional[DiffBackend]
        Differentiation backend (None uses the manager default)
    dimension : Optional[int]
        State dimension D. Only used by the 'sympy' backend, which traces
        the map eagerly when D is known and lazily on first call otherwise.

    Returns
    -------
    JacobianFunction
        J(x) -> (D, D) NumPy array with J[i, j] = ∂f_i/∂x_j

    Examples
    --------
    >>> def f(x):
    ...     return jnp.stack([2.0 * x[0], 0.5 * x[1]])
    >>> J = jacobian_of(f)
    >>> J(np.array([1.0, 1.0]))
    array([[2. , 0. ],
           [0. , 0.5]])
    """
    mgr = get_backend_manager()
    backend = mgr.resolve(backend)

    if backend == "jax":
        jac = _jax_jacobian(f, jit=mgr.jit, enable_x64=mgr.enable_x64)
    elif backend == "torch":
        jac = _torch_jacobian(f)
    elif backend == "sympy":
        jac = _sympy_jacobian(f, dimension)
    else:
        raise ValueError(f"Unknown backend: {backend}")

    jac.__name__ = f"{backend}_jacobian"
    jac.__qualname__ = jac.__name__
    return jac


def differentiate(
    f: ScalarMapFunction,
    backend: Optional[DiffBackend] = None,
) -> DerivativeFunction:
    """
    Build a function computing the derivative of a scalar map.

    Parameters
    ----------
    f : ScalarMapFunction
        Map x -> f(x) on real scalars
    backend : Optional[DiffBackend]
        Differentiation backend (None uses the manager default)

    Returns
    -------
    DerivativeFunction
        f'(x) -> float

    Examples
    --------
    >>> df = differentiate(lambda x: 4.0 * x * (1.0 - x))
    >>> df(0.25)
    2.0
    """
    mgr = get_backend_manager()
    backend = mgr.resolve(backend)

    if backend == "jax":
        deriv = _jax_derivative(f, jit=mgr.jit, enable_x64=mgr.enable_x64)
    elif backend == "torch":
        deriv = _torch_derivative(f)
    elif backend == "sympy":
        deriv = _sympy_derivative(f)
    else:
        raise ValueError(f"Unknown backend: {backend}")

    deriv.__name__ = f"{backend}_derivative"
    deriv.__qualname__ = deriv.__name__
    return deriv


# ============================================================================
# JAX
# ============================================================================


def _configure_jax(enable_x64: bool):
    import jax

    if enable_x64:
        jax.config.update("jax_enable_x64", True)


def _jax_jacobian(f: MapFunction, jit: bool, enable_x64: bool) -> JacobianFunction:
    import jax
    import jax.numpy as jnp

    _configure_jax(enable_x64)

    jac_fn = jax.jacfwd(lambda x: jnp.asarray(f(x)))
    if jit:
        jac_fn = jax.jit(jac_fn)

    def jac(x: StateVector) -> JacobianMatrix:
        x_jax = jnp.asarray(ensure_numpy(x), dtype=jnp.result_type(float))
        return np.asarray(jac_fn(x_jax))

    return jac


def _jax_derivative(f: ScalarMapFunction, jit: bool, enable_x64: bool) -> DerivativeFunction:
    import jax
    import jax.numpy as jnp

    _configure_jax(enable_x64)

    grad_fn = jax.grad(lambda x: jnp.asarray(f(x)))
    if jit:
        grad_fn = jax.jit(grad_fn)

    def deriv(x: float) -> float:
        return float(grad_fn(jnp.asarray(float(x), dtype=jnp.result_type(float))))

    return deriv


# ============================================================================
# PyTorch
# ============================================================================


def _as_tensor_output(y):
    import torch

    if isinstance(y, torch.Tensor):
        return y
    # Sequence of 0-d tensors
    return torch.stack([torch.as_tensor(v, dtype=torch.float64) for v in y])


def _torch_jacobian(f: MapFunction) -> JacobianFunction:
    import torch
    from torch.autograd.functional import jacobian

    def jac(x: StateVector) -> JacobianMatrix:
        x_t = torch.tensor(np.array(ensure_numpy(x), dtype=DEFAULT_DTYPE))
        J = jacobian(lambda v: _as_tensor_output(f(v)), x_t)
        return J.detach().cpu().numpy()

    return jac


def _torch_derivative(f: ScalarMapFunction) -> DerivativeFunction:
    import torch

    def deriv(x: float) -> float:
        x_t = torch.tensor(float(x), dtype=torch.float64, requires_grad=True)
        y = f(x_t)
        if not isinstance(y, torch.Tensor) or not y.requires_grad:
            # Output does not depend on x
            return 0.0
        (dy,) = torch.autograd.grad(y, x_t)
        return float(dy)

    return deriv


# ============================================================================
# SymPy
# ============================================================================


def _sympy_jacobian(f: MapFunction, dimension: Optional[int]) -> JacobianFunction:
    import sympy as sp

    compiled: Dict[int, Callable] = {}

    def compile_for(n: int) -> Callable:
        symbols = sp.symbols(f"x0:{n}", real=True)
        traced = f(np.array(symbols, dtype=object))
        exprs = sp.Matrix([sp.sympify(e) for e in np.ravel(np.asarray(traced, dtype=object))])
        return sp.lambdify(symbols, exprs.jacobian(symbols), modules="numpy")

    if dimension is not None:
        compiled[dimension] = compile_for(dimension)

    def jac(x: StateVector) -> JacobianMatrix:
        x_np = ensure_numpy(x)
        n = x_np.shape[0]
        if n not in compiled:
            compiled[n] = compile_for(n)
        return np.array(compiled[n](*x_np), dtype=DEFAULT_DTYPE)

    return jac


def _sympy_derivative(f: ScalarMapFunction) -> DerivativeFunction:
    import sympy as sp

    x_sym = sp.Symbol("x", real=True)
    d_expr = sp.diff(sp.sympify(f(x_sym)), x_sym)
    d_func = sp.lambdify(x_sym, d_expr, modules="numpy")

    def deriv(x: float) -> float:
        return float(d_func(float(x)))

    return deriv


__all__ = [
    "get_backend_manager",
    "set_default_backend",
    "jacobian_of",
    "differentiate",
]
