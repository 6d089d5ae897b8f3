from __future__ import annotations

import logging
from functools import partial

import jax
import jax.numpy as jnp
import numpy as np

from . import checks
from . import precision
from . import regions
from .erf import erf_value
from .gamma import gamma_value, log_gamma_value
from .kernels import lentz, sum_series

jax.config.update("jax_enable_x64", True)

_logger = logging.getLogger(__name__)

_SQRT_PI = 1.7724538509055160273

IGAMMA_SERIES = 0
IGAMMA_CONTINUED_FRACTION = 1
IGAMMA_REGIONS = ("series", "continued_fraction")


@jax.jit
def incomplete_gamma_region(s: jax.Array, x: jax.Array) -> jax.Array:
    s = jnp.asarray(s, dtype=jnp.float64)
    x = jnp.asarray(x, dtype=jnp.float64)
    return regions.classify([x < s + 1.0], [IGAMMA_SERIES], IGAMMA_CONTINUED_FRACTION)


def _complement(s, part, ratio):
    # Gamma(s) - part; past the gamma overflow both terms are inf, so go through logs
    g = gamma_value(s)
    return jnp.where(jnp.isfinite(g), g - part, jnp.exp(log_gamma_value(s) + jnp.log(ratio)))


@partial(jax.jit, static_argnames=("tol", "max_iter"))
def incomplete_gamma_kernel(tag: jax.Array, s: jax.Array, x: jax.Array, tol: float, max_iter: int):
    """Returns (P, Q, lower, upper, converged) for x > 0, s > 0."""
    s = jnp.asarray(s, dtype=jnp.float64)
    x = jnp.asarray(x, dtype=jnp.float64)
    log_xs = s * jnp.log(x) - x

    def series(s, x):
        # sum of x^k / ((s+1)(s+2)...(s+k))
        total, ok = sum_series(1.0, lambda k: x / (s + k), tol, max_iter)
        p = jnp.exp(log_xs - log_gamma_value(s + 1.0)) * total
        lower = jnp.exp(log_xs - jnp.log(s)) * total
        return p, 1.0 - p, lower, _complement(s, lower, 1.0 - p), ok

    def continued_fraction(s, x):
        b0 = x + 1.0 - s
        f, ok = lentz(b0, lambda i: (-i * (i - s), b0 + 2.0 * i), tol, max_iter)
        q = jnp.exp(log_xs - log_gamma_value(s)) / f
        upper = jnp.exp(log_xs) / f
        return 1.0 - q, q, _complement(s, upper, 1.0 - q), upper, ok

    return regions.dispatch(tag, (series, continued_fraction), s, x)


def _evaluate(label: str, s, x):
    s = checks.as_scalar(s, label, "s")
    x = checks.as_scalar(x, label)
    if np.isnan(s) or np.isnan(x):
        return None
    checks.check_in_interval(s, "(0,∞)", label, "s")
    if x < 0.0:
        _logger.debug("%s(%r, %r): negative x gives NaN", label, s, x)
        return None
    if x == 0.0:
        return (0.0, 1.0, 0.0, float(gamma_value(s)))
    if np.isinf(x):
        return (1.0, 0.0, float(gamma_value(s)), 0.0)
    tag = incomplete_gamma_region(s, x)
    _logger.debug("%s(%r, %r): %s region", label, s, x, regions.describe(IGAMMA_REGIONS, tag))
    budget = precision.budget()
    p, q, lower, upper, ok = incomplete_gamma_kernel(tag, s, x, **budget)
    checks.finish((p, ok), label, budget["max_iter"])
    return float(p), float(q), float(lower), float(upper)


def regularized_lower_incomplete_gamma(s, x) -> float:
    """P(s, x) = gamma(s, x) / Gamma(s). NaN for x < 0; s must be positive."""
    values = _evaluate("incomplete_gamma.regularized_lower_incomplete_gamma", s, x)
    return float("nan") if values is None else values[0]


def regularized_upper_incomplete_gamma(s, x) -> float:
    values = _evaluate("incomplete_gamma.regularized_upper_incomplete_gamma", s, x)
    return float("nan") if values is None else values[1]


def lower_incomplete_gamma(s, x) -> float:
    """Lower incomplete gamma integral of t^(s-1) e^-t over [0, x]."""
    label = "incomplete_gamma.lower_incomplete_gamma"
    s_val = checks.as_scalar(s, label, "s")
    x_val = checks.as_scalar(x, label)
    if s_val == 1.0 and x_val >= 0.0:
        return float(-jnp.expm1(-jnp.float64(x_val)))
    if s_val == 0.5 and x_val >= 0.0:
        return float(_SQRT_PI * erf_value(jnp.sqrt(jnp.float64(x_val))))
    values = _evaluate(label, s_val, x_val)
    return float("nan") if values is None else values[2]


def upper_incomplete_gamma(s, x) -> float:
    """Gamma(s) * (1 - P(s, x))."""
    values = _evaluate("incomplete_gamma.upper_incomplete_gamma", s, x)
    return float("nan") if values is None else values[3]


__all__ = [
    "regularized_lower_incomplete_gamma",
    "regularized_upper_incomplete_gamma",
    "lower_incomplete_gamma",
    "upper_incomplete_gamma",
]
