from __future__ import annotations

from typing import Sequence

import jax
import jax.numpy as jnp
import numpy as np

from . import checks
from .errors import DomainError

jax.config.update("jax_enable_x64", True)


@jax.jit
def logistic_value(x0: jax.Array, L: jax.Array, k: jax.Array, x: jax.Array) -> jax.Array:
    return L / (1.0 + jnp.exp(-k * (x - x0)))


@jax.jit
def sigmoid_value(t: jax.Array) -> jax.Array:
    t = jnp.asarray(t, dtype=jnp.float64)
    # exp is only ever taken of a non-positive number
    e = jnp.exp(-jnp.abs(t))
    return jnp.where(t >= 0.0, 1.0 / (1.0 + e), e / (1.0 + e))


@jax.jit
def softmax_value(z: jax.Array) -> jax.Array:
    z = jnp.asarray(z, dtype=jnp.float64)
    e = jnp.exp(z - jnp.max(z))
    return e / jnp.sum(e)


def signum(x):
    """-1, 0 or 1 according to the sign of x; NaN stays NaN."""
    x = checks.as_scalar(x, "elementary.signum")
    if np.isnan(x):
        return x
    return int(x > 0.0) - int(x < 0.0)


def logistic(x0, L, k, x) -> float:
    """L / (1 + exp(-k (x - x0)))."""
    label = "elementary.logistic"
    args = [checks.as_scalar(v, label, name) for v, name in ((x0, "x0"), (L, "L"), (k, "k"), (x, "x"))]
    return float(logistic_value(*args))


def sigmoid(t) -> float:
    return float(sigmoid_value(checks.as_scalar(t, "elementary.sigmoid", "t")))


def softmax(values: Sequence[float]) -> list[float]:
    """Normalized exponential, shifted by the maximum so nothing overflows."""
    label = "elementary.softmax"
    z = np.asarray(values, dtype=np.float64)
    if z.ndim != 1 or z.size == 0:
        checks.fail(DomainError(label, f"expected a non-empty 1-d sequence, got shape {z.shape}"))
    return [float(v) for v in np.asarray(softmax_value(z))]


__all__ = ["signum", "logistic", "sigmoid", "softmax"]
