from __future__ import annotations

import logging

import jax
from jax import lax
import jax.numpy as jnp
import numpy as np

from . import checks
from . import regions
from .kernels import clenshaw, is_near_integer, sin_pi

jax.config.update("jax_enable_x64", True)

_logger = logging.getLogger(__name__)

_LOG_SQRT_2PI = jnp.float64(0.91893853320467274178)
_LOG_SQRT_PI_OVER_2 = jnp.float64(0.225791352644727432363097614947)
_SQRT_2PI = jnp.float64(2.5066282746310005024)
_LANCZOS_G = 7.0
_LANCZOS = jnp.asarray(
    [
        0.99999999999980993227684700473478,
        676.520368121885098567009190444019,
        -1259.13921672240287047156078755283,
        771.3234287776530788486528258894,
        -176.61502916214059906584551354,
        12.507343278686904814458936853,
        -0.13857109526572011689554707,
        9.984369578019570859563e-6,
        1.50563273514931155834e-7,
    ],
    dtype=jnp.float64,
)

GAMMA_XMAX = 171.61447887182298
FACTORIAL_MAX = 170
_STIRLING_SWITCH = 140.0

_LGAMMA_XMAX = 2.5327372760800758e305
_LGAMMA_TINY = 1e-306
_LGAMMA_NO_CORR = 4934720.0
_LGAMMA_HUGE = 1e17

# first five terms of the Chebyshev series for the Stirling remainder, argument 2(10/x)^2 - 1
_ALGMCS = jnp.asarray(
    [
        0.1666389480451863247205729650822e0,
        -0.1384948176067563840732986059135e-4,
        0.9810825646924729426157171547487e-8,
        -0.1809129475572494194263306266719e-10,
        0.6221098041892605227126015543416e-13,
    ],
    dtype=jnp.float64,
)
_CORR_XMIN = 10.0
_CORR_XBIG = 94906265.62425156
_CORR_XMAX = 3.745194030963158e306

# stirling_error at n = k/2, k = 0..30
_SFERR_HALVES = jnp.asarray(
    [
        jnp.inf,
        0.1534264097200273452913848,
        0.0810614667953272582196702,
        0.0548141210519176538961390,
        0.0413406959554092940938221,
        0.03316287351993628748511048,
        0.02767792568499833914878929,
        0.02374616365629749597132920,
        0.02079067210376509311152277,
        0.01848845053267318523077934,
        0.01664469118982119216319487,
        0.01513497322191737887351255,
        0.01387612882307074799874573,
        0.01281046524292022692424986,
        0.01189670994589177009505572,
        0.01110455975820691732662991,
        0.010411265261972096497478567,
        0.009799416126158803298389475,
        0.009255462182712732917728637,
        0.008768700134139385462952823,
        0.008330563433362871256469318,
        0.007934114564314020547248100,
        0.007573675487951840794972024,
        0.007244554301320383179543912,
        0.006942840107209529865664152,
        0.006665247032707682442354394,
        0.006408994188004207068439631,
        0.006171712263039457647532867,
        0.005951370112758847735624416,
        0.005746216513010115682023589,
        0.005554733551962801371038690,
    ],
    dtype=jnp.float64,
)
_S0 = 1.0 / 12.0
_S1 = 1.0 / 360.0
_S2 = 1.0 / 1260.0
_S3 = 1.0 / 1680.0
_S4 = 1.0 / 1188.0

GAMMA_FACTORIAL = 0
GAMMA_LANCZOS = 1
GAMMA_STIRLING = 2
GAMMA_OVERFLOW = 3
GAMMA_REFLECTION = 4
GAMMA_REGIONS = ("factorial", "lanczos", "stirling", "overflow", "reflection")

LGAMMA_TINY = 0
LGAMMA_DIRECT = 1
LGAMMA_STIRLING = 2
LGAMMA_HUGE = 3
LGAMMA_NEGATIVE = 4
LGAMMA_OVERFLOW = 5
LGAMMA_REGIONS = ("tiny", "direct", "stirling", "huge", "negative", "overflow")

SFERR_TABLE = 0
SFERR_DIRECT = 1
SFERR_SERIES = 2
SFERR_REGIONS = ("table", "direct", "series")


def _f64(x) -> jax.Array:
    return jnp.asarray(x, dtype=jnp.float64)


def _factorial(x: jax.Array) -> jax.Array:
    # Gamma(n) = (n - 1)!
    n = jnp.round(x).astype(jnp.int32)
    return lax.fori_loop(2, n, lambda k, acc: acc * k, _f64(1.0))


def _lanczos_sum(x: jax.Array) -> jax.Array:
    z = x - 1.0

    def body(i, acc):
        return acc + _LANCZOS[i] / (z + jnp.float64(i))

    return lax.fori_loop(1, _LANCZOS.shape[0], body, _LANCZOS[0])


def _lanczos(x: jax.Array) -> jax.Array:
    z = x - 1.0
    t = z + _LANCZOS_G + 0.5
    # split the power so t**(z+1/2) * exp(-t) stays finite up to the overflow cutoff
    pw = jnp.power(t, 0.5 * (z + 0.5))
    return _SQRT_2PI * pw * (pw * jnp.exp(-t)) * _lanczos_sum(x)


def _stirling(x: jax.Array) -> jax.Array:
    pw = jnp.power(x, 0.5 * (x - 0.5))
    return _SQRT_2PI * pw * (pw * jnp.exp(-x)) * jnp.exp(log_gamma_corr_value(x))


def _overflow(x: jax.Array) -> jax.Array:
    return jnp.where(jnp.isnan(x), jnp.nan, jnp.inf)


def _positive_region(x: jax.Array) -> jax.Array:
    return regions.classify(
        [is_near_integer(x) & (x <= FACTORIAL_MAX + 0.5), x <= _STIRLING_SWITCH, x <= GAMMA_XMAX],
        [GAMMA_FACTORIAL, GAMMA_LANCZOS, GAMMA_STIRLING],
        GAMMA_OVERFLOW,
    )


def _gamma_positive(x: jax.Array) -> jax.Array:
    return regions.dispatch(_positive_region(x), (_factorial, _lanczos, _stirling, _overflow), x)


def _reflection(x: jax.Array) -> jax.Array:
    return jnp.pi / (sin_pi(x) * _gamma_positive(1.0 - x))


@jax.jit
def gamma_region(x: jax.Array) -> jax.Array:
    x = _f64(x)
    return jnp.where(x < 0.5, jnp.int32(GAMMA_REFLECTION), _positive_region(x))


@jax.jit
def gamma_dispatch(tag: jax.Array, x: jax.Array) -> jax.Array:
    x = _f64(x)
    branches = (_factorial, _lanczos, _stirling, _overflow, _reflection)
    return jnp.where(jnp.isnan(x), jnp.nan, regions.dispatch(tag, branches, x))


@jax.jit
def gamma_value(x: jax.Array) -> jax.Array:
    return gamma_dispatch(gamma_region(x), x)


@jax.jit
def log_gamma_corr_value(x: jax.Array) -> jax.Array:
    x = _f64(x)
    t = 10.0 / x
    cheb = clenshaw(2.0 * t * t - 1.0, _ALGMCS) / x
    return jnp.where(x < _CORR_XBIG, cheb, jnp.where(x < _CORR_XMAX, 1.0 / (12.0 * x), 0.0))


def _lgamma_tiny(x):
    return -jnp.log(jnp.abs(x))


def _lgamma_direct(x):
    return jnp.log(jnp.abs(gamma_value(x)))


def _lgamma_stirling(x):
    corr = jnp.where(x < _LGAMMA_NO_CORR, log_gamma_corr_value(x), 0.0)
    return _LOG_SQRT_2PI + (x - 0.5) * jnp.log(x) - x + corr


def _lgamma_huge(x):
    return x * (jnp.log(x) - 1.0)


def _lgamma_negative(x):
    y = -x
    sinpiy = jnp.abs(sin_pi(y))
    return _LOG_SQRT_PI_OVER_2 + (x - 0.5) * jnp.log(y) - x - jnp.log(sinpiy) - log_gamma_corr_value(y)


def _lgamma_overflow(x):
    return jnp.full_like(x, jnp.inf)


@jax.jit
def log_gamma_region(x: jax.Array) -> jax.Array:
    x = _f64(x)
    ax = jnp.abs(x)
    return regions.classify(
        [ax < _LGAMMA_TINY, ax <= 10.0, x > _LGAMMA_XMAX, x > _LGAMMA_HUGE, x > 10.0],
        [LGAMMA_TINY, LGAMMA_DIRECT, LGAMMA_OVERFLOW, LGAMMA_HUGE, LGAMMA_STIRLING],
        LGAMMA_NEGATIVE,
    )


@jax.jit
def log_gamma_dispatch(tag: jax.Array, x: jax.Array) -> jax.Array:
    x = _f64(x)
    branches = (_lgamma_tiny, _lgamma_direct, _lgamma_stirling, _lgamma_huge, _lgamma_negative, _lgamma_overflow)
    return jnp.where(jnp.isnan(x), jnp.nan, regions.dispatch(tag, branches, x))


@jax.jit
def log_gamma_value(x: jax.Array) -> jax.Array:
    return log_gamma_dispatch(log_gamma_region(x), x)


@jax.jit
def _gamma_lanczos_value(x: jax.Array) -> jax.Array:
    x = _f64(x)
    direct = jnp.where(x > GAMMA_XMAX, jnp.inf, _lanczos(jnp.where(x < 0.5, 1.0, jnp.minimum(x, GAMMA_XMAX))))
    one_minus = 1.0 - x
    reflected_base = jnp.where(one_minus > GAMMA_XMAX, jnp.inf, _lanczos(jnp.clip(one_minus, 0.5, GAMMA_XMAX)))
    reflected = jnp.pi / (sin_pi(x) * reflected_base)
    return jnp.where(x < 0.5, reflected, direct)


@jax.jit
def _gamma_stirling_value(x: jax.Array) -> jax.Array:
    x = _f64(x)
    base = (x + 1.0 / (12.0 * x - 1.0 / (10.0 * x))) / jnp.e
    pw = jnp.power(base, 0.5 * x)
    windschitl = _SQRT_2PI * jnp.sqrt(1.0 / x) * pw * pw
    exact = is_near_integer(x) & (x <= FACTORIAL_MAX + 0.5)
    return jnp.where(exact, _factorial(jnp.where(exact, x, 1.0)), windschitl)


def _sferr_table(n):
    idx = jnp.clip(jnp.round(2.0 * n), 0, _SFERR_HALVES.shape[0] - 1).astype(jnp.int32)
    return _SFERR_HALVES[idx]


def _sferr_direct(n):
    return log_gamma_value(n + 1.0) - (n + 0.5) * jnp.log(n) + n - _LOG_SQRT_2PI


def _sferr_series(n):
    nn = n * n
    return jnp.select(
        [n > 500.0, n > 80.0, n > 35.0],
        [
            (_S0 - _S1 / nn) / n,
            (_S0 - (_S1 - _S2 / nn) / nn) / n,
            (_S0 - (_S1 - (_S2 - _S3 / nn) / nn) / nn) / n,
        ],
        (_S0 - (_S1 - (_S2 - (_S3 - _S4 / nn) / nn) / nn) / nn) / n,
    )


@jax.jit
def stirling_error_region(n: jax.Array) -> jax.Array:
    n = _f64(n)
    twice = 2.0 * n
    return regions.classify(
        [(n <= 15.0) & (twice == jnp.floor(twice)), n <= 15.0],
        [SFERR_TABLE, SFERR_DIRECT],
        SFERR_SERIES,
    )


@jax.jit
def _stirling_error_value(n: jax.Array) -> jax.Array:
    n = _f64(n)
    return regions.dispatch(stirling_error_region(n), (_sferr_table, _sferr_direct, _sferr_series), n)


def gamma(x) -> float:
    """Gamma function. Raises PoleError at zero and the negative integers."""
    label = "gamma.gamma"
    x = checks.as_scalar(x, label)
    if np.isnan(x):
        return float("nan")
    checks.check_not_pole(x, label)
    tag = gamma_region(x)
    _logger.debug("gamma(%r): %s region", x, regions.describe(GAMMA_REGIONS, tag))
    return float(gamma_dispatch(tag, x))


def log_gamma(x) -> float:
    """Logarithm of |Gamma(x)|."""
    label = "gamma.log_gamma"
    x = checks.as_scalar(x, label)
    if np.isnan(x):
        return float("nan")
    checks.check_not_pole(x, label)
    tag = log_gamma_region(x)
    _logger.debug("log_gamma(%r): %s region", x, regions.describe(LGAMMA_REGIONS, tag))
    return float(log_gamma_dispatch(tag, x))


def gamma_lanczos(x) -> float:
    label = "gamma.gamma_lanczos"
    x = checks.as_scalar(x, label)
    if np.isnan(x):
        return float("nan")
    checks.check_not_pole(x, label)
    return float(_gamma_lanczos_value(x))


def gamma_stirling(x) -> float:
    """Windschitl's form of Stirling's approximation; exact factorials at the positive integers."""
    label = "gamma.gamma_stirling"
    x = checks.as_scalar(x, label)
    if np.isnan(x):
        return float("nan")
    checks.check_in_interval(x, "(0,∞]", label)
    return float(_gamma_stirling_value(x))


def stirling_error(n) -> float:
    """log Gamma(n+1) minus Stirling's formula; +inf at n = 0."""
    label = "gamma.stirling_error"
    n = checks.as_scalar(n, label, "n")
    if np.isnan(n):
        return float("nan")
    checks.check_nonnegative(n, label, "n")
    tag = stirling_error_region(n)
    _logger.debug("stirling_error(%r): %s region", n, regions.describe(SFERR_REGIONS, tag))
    return float(_stirling_error_value(n))


def log_gamma_corr(x) -> float:
    label = "gamma.log_gamma_corr"
    x = checks.as_scalar(x, label)
    if np.isnan(x):
        return float("nan")
    checks.check_in_interval(x, "[10,∞]", label)
    return float(log_gamma_corr_value(x))


__all__ = [
    "gamma",
    "log_gamma",
    "gamma_lanczos",
    "gamma_stirling",
    "stirling_error",
    "log_gamma_corr",
]
