from __future__ import annotations

import logging
from functools import partial
from typing import Sequence

import jax
import jax.numpy as jnp
import numpy as np

from . import checks
from . import precision
from . import regions
from .gamma import GAMMA_XMAX, gamma_value, log_gamma_corr_value, log_gamma_value
from .errors import DomainError
from .kernels import is_odd, lentz

jax.config.update("jax_enable_x64", True)

_logger = logging.getLogger(__name__)

_LOG_SQRT_2PI = jnp.float64(0.91893853320467274178)

LBETA_BOTH_LARGE = 0
LBETA_ONE_LARGE = 1
LBETA_SMALL = 2
LBETA_REGIONS = ("both_large", "one_large", "small")

BETA_DIRECT = 0
BETA_LOG = 1
BETA_REGIONS = ("direct", "log")

IBETA_ENDPOINT = 0
IBETA_A_ONE = 1
IBETA_B_ONE = 2
IBETA_CONTINUED_FRACTION = 3
IBETA_SYMMETRIC = 4
IBETA_REGIONS = ("endpoint", "a_one", "b_one", "continued_fraction", "symmetric")
IBETA_MAX_TERMS = 500


def _f64(x) -> jax.Array:
    return jnp.asarray(x, dtype=jnp.float64)


def _lbeta_both_large(p, q):
    corr = log_gamma_corr_value(p) + log_gamma_corr_value(q) - log_gamma_corr_value(p + q)
    ratio = p / (p + q)
    return -0.5 * jnp.log(q) + _LOG_SQRT_2PI + corr + (p - 0.5) * jnp.log(ratio) + q * jnp.log1p(-ratio)


def _lbeta_one_large(p, q):
    corr = log_gamma_corr_value(q) - log_gamma_corr_value(p + q)
    return log_gamma_value(p) + corr + p - p * jnp.log(p + q) + (q - 0.5) * jnp.log1p(-p / (p + q))


def _lbeta_small(p, q):
    return jnp.log(gamma_value(p) * (gamma_value(q) / gamma_value(p + q)))


@jax.jit
def log_beta_region(a: jax.Array, b: jax.Array) -> jax.Array:
    p = jnp.minimum(_f64(a), _f64(b))
    q = jnp.maximum(_f64(a), _f64(b))
    return regions.classify([p >= 10.0, q >= 10.0], [LBETA_BOTH_LARGE, LBETA_ONE_LARGE], LBETA_SMALL)


@jax.jit
def log_beta_value(a: jax.Array, b: jax.Array) -> jax.Array:
    p = jnp.minimum(_f64(a), _f64(b))
    q = jnp.maximum(_f64(a), _f64(b))
    return regions.dispatch(log_beta_region(p, q), (_lbeta_both_large, _lbeta_one_large, _lbeta_small), p, q)


@jax.jit
def beta_region(a: jax.Array, b: jax.Array) -> jax.Array:
    return regions.classify([_f64(a) + _f64(b) < GAMMA_XMAX], [BETA_DIRECT], BETA_LOG)


def _beta_direct(a, b):
    return gamma_value(a) * (gamma_value(b) / gamma_value(a + b))


def _beta_log(a, b):
    return jnp.exp(log_beta_value(a, b))


@jax.jit
def beta_value(a: jax.Array, b: jax.Array) -> jax.Array:
    a = _f64(a)
    b = _f64(b)
    return regions.dispatch(beta_region(a, b), (_beta_direct, _beta_log), a, b)


@jax.jit
def incomplete_beta_region(x: jax.Array, a: jax.Array, b: jax.Array) -> jax.Array:
    x, a, b = _f64(x), _f64(a), _f64(b)
    return regions.classify(
        [(x == 0.0) | (x == 1.0), a == 1.0, b == 1.0, x <= (a + 1.0) / (a + b + 2.0)],
        [IBETA_ENDPOINT, IBETA_A_ONE, IBETA_B_ONE, IBETA_CONTINUED_FRACTION],
        IBETA_SYMMETRIC,
    )


def _continued_fraction(x, a, b, tol, max_iter):
    front = jnp.exp(a * jnp.log(x) + b * jnp.log1p(-x) - log_beta_value(a, b)) / a

    def coeff(i):
        m = jnp.floor(0.5 * i)
        odd = -(a + m) * (a + b + m) * x / ((a + 2.0 * m) * (a + 2.0 * m + 1.0))
        even = m * (b - m) * x / ((a + 2.0 * m - 1.0) * (a + 2.0 * m))
        return jnp.where(is_odd(i), odd, even), _f64(1.0)

    f, ok = lentz(1.0, coeff, tol, max_iter)
    return front / f, ok


@partial(jax.jit, static_argnames=("tol", "max_iter"))
def regularized_incomplete_beta_kernel(tag: jax.Array, x: jax.Array, a: jax.Array, b: jax.Array, tol: float, max_iter: int):
    x, a, b = _f64(x), _f64(a), _f64(b)
    done = jnp.asarray(True)

    def endpoint(x, a, b):
        return x, done

    def a_one(x, a, b):
        return -jnp.expm1(b * jnp.log1p(-x)), done

    def b_one(x, a, b):
        return jnp.power(x, a), done

    def direct(x, a, b):
        return _continued_fraction(x, a, b, tol, max_iter)

    def symmetric(x, a, b):
        val, ok = _continued_fraction(1.0 - x, b, a, tol, max_iter)
        return 1.0 - val, ok

    return regions.dispatch(tag, (endpoint, a_one, b_one, direct, symmetric), x, a, b)


def _check_shapes(label: str, a: float, b: float) -> None:
    checks.check_in_interval(a, "(0,∞]", label, "a")
    checks.check_in_interval(b, "(0,∞]", label, "b")


def beta(a, b) -> float:
    """Beta function Gamma(a) Gamma(b) / Gamma(a + b) for positive a, b."""
    label = "beta.beta"
    a = checks.as_scalar(a, label, "a")
    b = checks.as_scalar(b, label, "b")
    if np.isnan(a) or np.isnan(b):
        return float("nan")
    _check_shapes(label, a, b)
    if np.isinf(a) or np.isinf(b):
        return 0.0
    tag = beta_region(a, b)
    _logger.debug("beta(%r, %r): %s region", a, b, regions.describe(BETA_REGIONS, tag))
    return float(beta_value(a, b))


def log_beta(a, b) -> float:
    label = "beta.log_beta"
    a = checks.as_scalar(a, label, "a")
    b = checks.as_scalar(b, label, "b")
    if np.isnan(a) or np.isnan(b):
        return float("nan")
    _check_shapes(label, a, b)
    if np.isinf(a) or np.isinf(b):
        return float("-inf")
    tag = log_beta_region(a, b)
    _logger.debug("log_beta(%r, %r): %s region", a, b, regions.describe(LBETA_REGIONS, tag))
    return float(log_beta_value(a, b))


def _ibeta_budget() -> dict:
    budget = precision.budget()
    budget["max_iter"] = min(IBETA_MAX_TERMS, budget["max_iter"])
    return budget


def _regularized(label: str, x, a, b) -> float:
    x = checks.as_scalar(x, label)
    a = checks.as_scalar(a, label, "a")
    b = checks.as_scalar(b, label, "b")
    if np.isnan(x) or np.isnan(a) or np.isnan(b):
        return float("nan")
    checks.check_in_interval(x, "[0,1]", label)
    checks.check_in_interval(a, "(0,∞)", label, "a")
    checks.check_in_interval(b, "(0,∞)", label, "b")
    tag = incomplete_beta_region(x, a, b)
    _logger.debug("%s(%r, %r, %r): %s region", label, x, a, b, regions.describe(IBETA_REGIONS, tag))
    budget = _ibeta_budget()
    return checks.finish(regularized_incomplete_beta_kernel(tag, x, a, b, **budget), label, budget["max_iter"])


def regularized_incomplete_beta(x, a, b) -> float:
    """I_x(a, b); the continued fraction is always run on its fast side."""
    return _regularized("beta.regularized_incomplete_beta", x, a, b)


def incomplete_beta(x, a, b) -> float:
    label = "beta.incomplete_beta"
    ratio = _regularized(label, x, a, b)
    if np.isnan(ratio):
        return ratio
    return ratio * float(beta_value(float(a), float(b)))


def multivariate_beta(alphas: Sequence[float]) -> float:
    """Product of Gamma(alpha_i) over Gamma(sum of alpha_i)."""
    label = "beta.multivariate_beta"
    values = [checks.as_scalar(alpha, label, "alpha") for alpha in alphas]
    if not values:
        checks.fail(DomainError(label, "at least one parameter is required"))
    if any(np.isnan(v) for v in values):
        return float("nan")
    for v in values:
        checks.check_in_interval(v, "(0,∞]", label, "alpha")
    total = float(np.sum(values))
    if np.isinf(total):
        return 0.0
    if total < GAMMA_XMAX:
        prod = 1.0
        for v in values:
            prod *= float(gamma_value(v))
        return prod / float(gamma_value(total))
    _logger.debug("multivariate_beta: sum %r beyond the gamma overflow cutoff, using logs", total)
    log_sum = float(np.sum([float(log_gamma_value(v)) for v in values]))
    return float(np.exp(log_sum - float(log_gamma_value(total))))


__all__ = [
    "beta",
    "log_beta",
    "regularized_incomplete_beta",
    "incomplete_beta",
    "multivariate_beta",
]
