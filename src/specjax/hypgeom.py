from __future__ import annotations

import logging
from functools import partial

import jax
from jax import lax
import jax.numpy as jnp
import numpy as np

from . import checks
from . import precision
from .errors import DomainError

jax.config.update("jax_enable_x64", True)

_logger = logging.getLogger(__name__)


@partial(jax.jit, static_argnames=("tol", "max_iter"))
def hypergeometric_series(a: jax.Array, b: jax.Array, z: jax.Array, tol: float, max_iter: int):
    """Sum of prod (a_i)_k / prod (b_j)_k * z^k / k!.

    Returns (sum, converged). A series that terminates because some a_i is a
    non-positive integer counts as converged.
    """
    a = jnp.asarray(a, dtype=jnp.float64)
    b = jnp.asarray(b, dtype=jnp.float64)
    z = jnp.asarray(z, dtype=jnp.float64)

    def cond(state):
        k, _, _, done = state
        return (~done) & (k < max_iter)

    def body(state):
        k, term, s, _ = state
        term = term * (jnp.prod(a + k) / jnp.prod(b + k)) * (z / (k + 1.0))
        s = s + term
        return k + 1.0, term, s, jnp.abs(term) <= tol * jnp.abs(s)

    one = jnp.float64(1.0)
    _, _, s, done = lax.while_loop(cond, body, (jnp.float64(0.0), one, one, z == 0.0))
    return s, done


def generalized_hypergeometric(p, q, *params) -> float:
    """pFq(a_1..a_p; b_1..b_q; z); the last of ``params`` is z."""
    label = "hypgeom.generalized_hypergeometric"
    p = checks.check_nonnegative_order(p, label, "p")
    q = checks.check_nonnegative_order(q, label, "q")
    if len(params) != p + q + 1:
        checks.fail(DomainError(label, f"expected {p + q + 1} parameters for p={p}, q={q}, got {len(params)}"))
    values = [checks.as_scalar(v, label, "param") for v in params]
    if any(np.isnan(v) for v in values):
        return float("nan")
    a, b, z = values[:p], values[p : p + q], values[-1]
    for bj in b:
        if bj <= 0.0 and bj == np.floor(bj):
            checks.fail(DomainError(label, f"lower parameter {bj!r} is a non-positive integer"))
    _logger.debug("%s: %dF%d at z=%r", label, p, q, z)
    budget = precision.budget()
    result = hypergeometric_series(np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64), z, **budget)
    return checks.finish(result, label, budget["max_iter"])


def confluent_hypergeometric(a, b, z) -> float:
    """Kummer's function 1F1(a; b; z)."""
    return generalized_hypergeometric(1, 1, a, b, z)


def hypergeometric(a, b, c, z) -> float:
    """Gauss hypergeometric function 2F1(a, b; c; z) for |z| < 1."""
    label = "hypgeom.hypergeometric"
    zval = checks.as_scalar(z, label, "z")
    if not np.isnan(zval) and abs(zval) >= 1.0:
        checks.fail(DomainError(label, f"|z| must be < 1, got {abs(zval)!r}"))
    return generalized_hypergeometric(2, 1, a, b, c, zval)


__all__ = [
    "generalized_hypergeometric",
    "confluent_hypergeometric",
    "hypergeometric",
]
