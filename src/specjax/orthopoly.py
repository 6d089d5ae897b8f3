from __future__ import annotations

import logging
from functools import partial

import jax
from jax import lax
import jax.numpy as jnp
import numpy as np

from . import checks

jax.config.update("jax_enable_x64", True)

_logger = logging.getLogger(__name__)


def _recurrence(n: int, p0: jax.Array, p1: jax.Array, step) -> jax.Array:
    """Run p_{k+1} = step(k, p_k, p_{k-1}) from k = 1 up to degree n."""
    if n == 0:
        return p0
    if n == 1:
        return p1

    def body(k, state):
        p_prev, p_curr = state
        return p_curr, step(jnp.float64(k), p_curr, p_prev)

    _, pn = lax.fori_loop(1, n, body, (p0, p1))
    return pn


@partial(jax.jit, static_argnames=("n",))
def legendre_p_value(n: int, x: jax.Array) -> jax.Array:
    x = jnp.asarray(x, dtype=jnp.float64)
    return _recurrence(
        n,
        jnp.float64(1.0),
        x,
        lambda k, p, pm: ((2.0 * k + 1.0) * x * p - k * pm) / (k + 1.0),
    )


@partial(jax.jit, static_argnames=("n",))
def chebyshev_t_value(n: int, x: jax.Array) -> jax.Array:
    x = jnp.asarray(x, dtype=jnp.float64)
    return _recurrence(n, jnp.float64(1.0), x, lambda k, t, tm: 2.0 * x * t - tm)


@partial(jax.jit, static_argnames=("n",))
def chebyshev_u_value(n: int, x: jax.Array) -> jax.Array:
    x = jnp.asarray(x, dtype=jnp.float64)
    return _recurrence(n, jnp.float64(1.0), 2.0 * x, lambda k, u, um: 2.0 * x * u - um)


@partial(jax.jit, static_argnames=("n",))
def hermite_h_value(n: int, x: jax.Array) -> jax.Array:
    x = jnp.asarray(x, dtype=jnp.float64)
    return _recurrence(n, jnp.float64(1.0), 2.0 * x, lambda k, h, hm: 2.0 * x * h - 2.0 * k * hm)


@partial(jax.jit, static_argnames=("n",))
def hermite_he_value(n: int, x: jax.Array) -> jax.Array:
    x = jnp.asarray(x, dtype=jnp.float64)
    return _recurrence(n, jnp.float64(1.0), x, lambda k, h, hm: x * h - k * hm)


@partial(jax.jit, static_argnames=("n",))
def laguerre_l_value(n: int, x: jax.Array) -> jax.Array:
    x = jnp.asarray(x, dtype=jnp.float64)
    return _recurrence(
        n,
        jnp.float64(1.0),
        1.0 - x,
        lambda k, lk, lm: ((2.0 * k + 1.0 - x) * lk - k * lm) / (k + 1.0),
    )


def _evaluate(label: str, kernel, n, x) -> float:
    n = checks.check_nonnegative_order(n, label)
    x = checks.as_scalar(x, label)
    if np.isnan(x):
        return float("nan")
    _logger.debug("%s(%d, %r)", label, n, x)
    return float(kernel(n, x))


def legendre_p(n, x) -> float:
    """Legendre polynomial P_n(x)."""
    return _evaluate("orthopoly.legendre_p", legendre_p_value, n, x)


def chebyshev_t(n, x) -> float:
    """Chebyshev polynomial of the first kind T_n(x)."""
    return _evaluate("orthopoly.chebyshev_t", chebyshev_t_value, n, x)


def chebyshev_u(n, x) -> float:
    """Chebyshev polynomial of the second kind U_n(x)."""
    return _evaluate("orthopoly.chebyshev_u", chebyshev_u_value, n, x)


def hermite_h(n, x) -> float:
    """Physicists' Hermite polynomial H_n(x)."""
    return _evaluate("orthopoly.hermite_h", hermite_h_value, n, x)


def hermite_he(n, x) -> float:
    """Probabilists' Hermite polynomial He_n(x)."""
    return _evaluate("orthopoly.hermite_he", hermite_he_value, n, x)


def laguerre_l(n, x) -> float:
    """Laguerre polynomial L_n(x)."""
    return _evaluate("orthopoly.laguerre_l", laguerre_l_value, n, x)


__all__ = [
    "legendre_p",
    "chebyshev_t",
    "chebyshev_u",
    "hermite_h",
    "hermite_he",
    "laguerre_l",
]
