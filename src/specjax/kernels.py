from __future__ import annotations

from typing import Callable

import jax
from jax import lax
import jax.numpy as jnp
import numpy as np

from . import checks
from .errors import DomainError

jax.config.update("jax_enable_x64", True)

NEAR_INTEGER_TOL = 1e-9
CHEBYSHEV_MAX_TERMS = 1000
_TINY = jnp.float64(1e-30)


def _f64(x) -> jax.Array:
    return jnp.asarray(x, dtype=jnp.float64)


def is_near_integer(x, tol: float = NEAR_INTEGER_TOL) -> jax.Array:
    x = _f64(x)
    return jnp.isfinite(x) & (jnp.abs(x - jnp.round(x)) < tol)


def is_integer(x) -> jax.Array:
    x = _f64(x)
    return jnp.isfinite(x) & (x == jnp.floor(x))


def is_odd(n) -> jax.Array:
    n = _f64(n)
    return jnp.abs(jnp.mod(n, 2.0)) == 1.0


def sin_pi(x) -> jax.Array:
    x = _f64(x)
    r = x - 2.0 * jnp.round(0.5 * x)
    return jnp.where(is_integer(x), 0.0, jnp.sin(jnp.pi * r))


def cos_pi(x) -> jax.Array:
    x = _f64(x)
    r = x - 2.0 * jnp.round(0.5 * x)
    half = is_integer(x - 0.5)
    return jnp.where(half, 0.0, jnp.cos(jnp.pi * r))


@jax.jit
def safe_pow(x: jax.Array, y: jax.Array) -> jax.Array:
    x = _f64(x)
    y = _f64(y)
    at_zero = jnp.where(y > 0.0, 0.0, jnp.where(y == 0.0, 1.0, jnp.inf))
    bad_base = (x < 0.0) & ~is_integer(y)
    out = jnp.where(x == 0.0, at_zero, jnp.power(jnp.where(x == 0.0, 1.0, x), y))
    return jnp.where(bad_base, jnp.nan, out)


@jax.jit
def clenshaw(x: jax.Array, coeffs: jax.Array) -> jax.Array:
    """Chebyshev sum with the constant term halved."""
    x = _f64(x)
    coeffs = _f64(coeffs)
    n = coeffs.shape[0]
    twox = 2.0 * x

    def body(i, state):
        b0, b1, _ = state
        return twox * b0 - b1 + coeffs[n - 1 - i], b0, b1

    zero = _f64(0.0)
    b0, _, b2 = lax.fori_loop(0, n, body, (zero, zero, zero))
    return 0.5 * (b0 - b2)


def chebyshev_eval(x: float, coefficients, n: int) -> float:
    label = "kernels.chebyshev_eval"
    coeffs = np.asarray(coefficients, dtype=np.float64).ravel()
    if not 1 <= n <= CHEBYSHEV_MAX_TERMS or n > coeffs.shape[0]:
        checks.fail(DomainError(label, f"number of terms must be in [1, {min(coeffs.shape[0], CHEBYSHEV_MAX_TERMS)}], got {n}"))
    x = checks.as_scalar(x, label)
    checks.check_in_interval(x, "[-1.1, 1.1]", label)
    return float(clenshaw(x, jnp.asarray(coeffs[:n])))


@jax.jit
def polevl(x: jax.Array, coeffs: jax.Array) -> jax.Array:
    """Horner evaluation, coefficients highest order first."""
    x = _f64(x)
    coeffs = _f64(coeffs)

    def body(i, acc):
        return acc * x + coeffs[i]

    return lax.fori_loop(1, coeffs.shape[0], body, coeffs[0])


@jax.jit
def p1evl(x: jax.Array, coeffs: jax.Array) -> jax.Array:
    """Like polevl with an implied leading coefficient of one."""
    x = _f64(x)
    coeffs = _f64(coeffs)

    def body(i, acc):
        return acc * x + coeffs[i]

    return lax.fori_loop(1, coeffs.shape[0], body, x + coeffs[0])


def lentz(b0, coeff_fn: Callable, tol: float, max_iter: int):
    """Modified Lentz evaluation of b0 + a1/(b1 + a2/(b2 + ...)).

    ``coeff_fn(i)`` returns ``(a_i, b_i)`` for ``i >= 1``. Returns the value and a
    flag telling whether ``tol`` was met within ``max_iter`` terms.
    """
    b0 = _f64(b0)
    f0 = jnp.where(b0 == 0.0, _TINY, b0)

    def cond(state):
        i, _, _, _, done = state
        return (~done) & (i <= max_iter)

    def body(state):
        i, f, c, d, _ = state
        a, b = coeff_fn(i)
        d = b + a * d
        d = jnp.where(jnp.abs(d) < _TINY, _TINY, d)
        c = b + a / c
        c = jnp.where(jnp.abs(c) < _TINY, _TINY, c)
        d = 1.0 / d
        delta = c * d
        return i + 1.0, f * delta, c, d, jnp.abs(delta - 1.0) < tol

    init = (_f64(1.0), f0, f0, _f64(0.0), jnp.asarray(False))
    _, f, _, _, done = lax.while_loop(cond, body, init)
    return f, done


def sum_series(term0, ratio_fn: Callable, tol: float, max_iter: int):
    """Sum term0 * (1 + r1 + r1 r2 + ...) with ``ratio_fn(k)`` giving term_k / term_{k-1}."""
    term0 = _f64(term0)

    def cond(state):
        k, _, _, done = state
        return (~done) & (k <= max_iter)

    def body(state):
        k, term, s, _ = state
        term = term * ratio_fn(k)
        s = s + term
        return k + 1.0, term, s, jnp.abs(term) <= tol * jnp.abs(s)

    init = (_f64(1.0), term0, term0, term0 == 0.0)
    _, _, s, done = lax.while_loop(cond, body, init)
    return s, done


__all__ = [
    "NEAR_INTEGER_TOL",
    "is_near_integer",
    "is_integer",
    "is_odd",
    "sin_pi",
    "cos_pi",
    "safe_pow",
    "clenshaw",
    "chebyshev_eval",
    "polevl",
    "p1evl",
    "lentz",
    "sum_series",
]
