from __future__ import annotations

import logging
from functools import partial

import jax
import jax.numpy as jnp
import numpy as np

from . import checks
from . import precision
from . import regions
from .bessel_kernels import (
    bessel_ik,
    bessel_jy,
    bessel_k,
    hankel_i,
    hankel_j,
    hankel_k,
    hankel_y,
    miller_i_scaled,
    miller_j,
    miller_j_sequence,
    power_series,
    upward_k,
    upward_y,
)
from .errors import DomainError, PoleError
from .kernels import cos_pi, is_near_integer, sin_pi

jax.config.update("jax_enable_x64", True)

_logger = logging.getLogger(__name__)

_TWO_OVER_PI = 0.63661977236758134308
_SERIES_MAX = 2.0
_TEMME_MAX = 2.0
_HANKEL_JY = 25.0
_HANKEL_IK = 30.0

JN_ZERO = 0
JN_SERIES = 1
JN_MILLER = 2
JN_HANKEL = 3
JN_REGIONS = ("zero", "series", "miller", "hankel")

JV_ZERO = 0
JV_SERIES = 1
JV_STEED = 2
JV_HANKEL = 3
JV_REGIONS = ("zero", "series", "steed", "hankel")

Y_TEMME = 0
Y_STEED = 1
Y_HANKEL = 2
Y_REGIONS = ("temme", "steed", "hankel")

IN_ZERO = 0
IN_SERIES = 1
IN_MILLER = 2
IN_HANKEL = 3
IN_REGIONS = ("zero", "series", "miller", "hankel")

IV_ZERO = 0
IV_SERIES = 1
IV_STEED = 2
IV_HANKEL = 3
IV_REGIONS = ("zero", "series", "steed", "hankel")

K_TEMME = 0
K_STEED = 1
K_HANKEL = 2
K_REGIONS = ("temme", "steed", "hankel")


def _f64(x) -> jax.Array:
    return jnp.asarray(x, dtype=jnp.float64)


def _parity(n: int) -> float:
    return -1.0 if n % 2 else 1.0


# Region classifiers. Orders and arguments are already reduced to the
# non-negative half-line unless a branch says otherwise.


@jax.jit
def jn_region(n: jax.Array, x: jax.Array) -> jax.Array:
    n, x = _f64(n), _f64(x)
    return regions.classify(
        [x == 0.0, x <= _SERIES_MAX, x < jnp.maximum(_HANKEL_JY, n * n)],
        [JN_ZERO, JN_SERIES, JN_MILLER],
        JN_HANKEL,
    )


@jax.jit
def jv_region(v: jax.Array, x: jax.Array) -> jax.Array:
    v, x = _f64(v), _f64(x)
    return regions.classify(
        [x == 0.0, x <= _SERIES_MAX, x < jnp.maximum(_HANKEL_JY, v * v)],
        [JV_ZERO, JV_SERIES, JV_STEED],
        JV_HANKEL,
    )


@jax.jit
def yn_region(n: jax.Array, x: jax.Array) -> jax.Array:
    x = _f64(x)
    return regions.classify([x < _TEMME_MAX, x < _HANKEL_JY], [Y_TEMME, Y_STEED], Y_HANKEL)


@jax.jit
def yv_region(v: jax.Array, x: jax.Array) -> jax.Array:
    v, x = _f64(v), _f64(x)
    return regions.classify([x < _TEMME_MAX, x < jnp.maximum(_HANKEL_JY, v * v)], [Y_TEMME, Y_STEED], Y_HANKEL)


@jax.jit
def in_region(n: jax.Array, x: jax.Array) -> jax.Array:
    n, x = _f64(n), _f64(x)
    return regions.classify(
        [x == 0.0, x <= _SERIES_MAX, x < jnp.maximum(_HANKEL_IK, n * n)],
        [IN_ZERO, IN_SERIES, IN_MILLER],
        IN_HANKEL,
    )


@jax.jit
def iv_region(v: jax.Array, x: jax.Array) -> jax.Array:
    v, x = _f64(v), _f64(x)
    return regions.classify(
        [x == 0.0, x <= _SERIES_MAX, x < jnp.maximum(_HANKEL_IK, v * v)],
        [IV_ZERO, IV_SERIES, IV_STEED],
        IV_HANKEL,
    )


@jax.jit
def kn_region(n: jax.Array, x: jax.Array) -> jax.Array:
    x = _f64(x)
    return regions.classify([x < _TEMME_MAX, x < _HANKEL_IK], [K_TEMME, K_STEED], K_HANKEL)


@jax.jit
def kv_region(v: jax.Array, x: jax.Array) -> jax.Array:
    v, x = _f64(v), _f64(x)
    return regions.classify([x < _TEMME_MAX, x < jnp.maximum(_HANKEL_IK, v * v)], [K_TEMME, K_STEED], K_HANKEL)


# Kernels return (value, converged).


@partial(jax.jit, static_argnames=("tol", "max_iter"))
def jn_kernel(tag: jax.Array, n: jax.Array, x: jax.Array, tol: float, max_iter: int):
    done = jnp.asarray(True)

    def zero(n, x):
        return _f64(jnp.where(n == 0.0, 1.0, 0.0)), done

    def series(n, x):
        return power_series(n, x, -1.0, tol, max_iter)

    def miller(n, x):
        return miller_j(n, x), done

    def hankel(n, x):
        return hankel_j(n, x, tol, max_iter)

    return regions.dispatch(tag, (zero, series, miller, hankel), _f64(n), _f64(x))


@partial(jax.jit, static_argnames=("tol", "max_iter"))
def jv_kernel(tag: jax.Array, v: jax.Array, x: jax.Array, tol: float, max_iter: int):
    def zero(v, x):
        return _f64(0.0), jnp.asarray(True)

    def series(v, x):
        return power_series(v, x, -1.0, tol, max_iter)

    def steed(v, x):
        a = jnp.abs(v)
        j, y, _, _, ok = bessel_jy(a, x, tol, max_iter)
        # J_{-a} = cos(a pi) J_a - sin(a pi) Y_a
        return jnp.where(v < 0.0, cos_pi(a) * j - sin_pi(a) * y, j), ok

    def hankel(v, x):
        return hankel_j(v, x, tol, max_iter)

    return regions.dispatch(tag, (zero, series, steed, hankel), _f64(v), _f64(x))


@partial(jax.jit, static_argnames=("tol", "max_iter"))
def yn_kernel(tag: jax.Array, n: jax.Array, x: jax.Array, tol: float, max_iter: int):
    def steed(n, x):
        _, y0, _, y0p, ok = bessel_jy(0.0, x, tol, max_iter)
        return upward_y(y0, -y0p, n, x), ok

    def hankel(n, x):
        y0, ok0 = hankel_y(0.0, x, tol, max_iter)
        y1, ok1 = hankel_y(1.0, x, tol, max_iter)
        return upward_y(y0, y1, n, x), ok0 & ok1

    return regions.dispatch(tag, (steed, steed, hankel), _f64(n), _f64(x))


@partial(jax.jit, static_argnames=("tol", "max_iter"))
def yv_kernel(tag: jax.Array, v: jax.Array, x: jax.Array, tol: float, max_iter: int):
    def steed(v, x):
        a = jnp.abs(v)
        j, y, _, _, ok = bessel_jy(a, x, tol, max_iter)
        # Y_{-a} = sin(a pi) J_a + cos(a pi) Y_a
        return jnp.where(v < 0.0, sin_pi(a) * j + cos_pi(a) * y, y), ok

    def hankel(v, x):
        return hankel_y(v, x, tol, max_iter)

    return regions.dispatch(tag, (steed, steed, hankel), _f64(v), _f64(x))


@partial(jax.jit, static_argnames=("tol", "max_iter"))
def in_kernel(tag: jax.Array, n: jax.Array, x: jax.Array, tol: float, max_iter: int):
    def zero(n, x):
        return _f64(jnp.where(n == 0.0, 1.0, 0.0)), jnp.asarray(True)

    def series(n, x):
        return power_series(n, x, 1.0, tol, max_iter)

    def miller(n, x):
        scaled, ok = miller_i_scaled(n, x, tol, max_iter)
        return jnp.exp(x + jnp.log(scaled)), ok

    def hankel(n, x):
        return hankel_i(n, x, tol, max_iter)

    return regions.dispatch(tag, (zero, series, miller, hankel), _f64(n), _f64(x))


@partial(jax.jit, static_argnames=("tol", "max_iter"))
def iv_kernel(tag: jax.Array, v: jax.Array, x: jax.Array, tol: float, max_iter: int):
    def zero(v, x):
        return _f64(0.0), jnp.asarray(True)

    def series(v, x):
        return power_series(v, x, 1.0, tol, max_iter)

    def steed(v, x):
        a = jnp.abs(v)
        i, k, _, _, ok = bessel_ik(a, x, tol, max_iter)
        return jnp.where(v < 0.0, i + _TWO_OVER_PI * sin_pi(a) * k, i), ok

    def hankel(v, x):
        return hankel_i(v, x, tol, max_iter)

    return regions.dispatch(tag, (zero, series, steed, hankel), _f64(v), _f64(x))


@partial(jax.jit, static_argnames=("tol", "max_iter"))
def kn_kernel(tag: jax.Array, n: jax.Array, x: jax.Array, tol: float, max_iter: int):
    def temme(n, x):
        k0, k1, ok = bessel_k(0.0, x, tol, max_iter)
        return upward_k(k0, k1, n, x), ok

    def hankel(n, x):
        k0, ok0 = hankel_k(0.0, x, tol, max_iter)
        k1, ok1 = hankel_k(1.0, x, tol, max_iter)
        return upward_k(k0, k1, n, x), ok0 & ok1

    return regions.dispatch(tag, (temme, temme, hankel), _f64(n), _f64(x))


@partial(jax.jit, static_argnames=("tol", "max_iter"))
def kv_kernel(tag: jax.Array, v: jax.Array, x: jax.Array, tol: float, max_iter: int):
    def temme(v, x):
        k, _, ok = bessel_k(v, x, tol, max_iter)
        return k, ok

    def hankel(v, x):
        return hankel_k(v, x, tol, max_iter)

    return regions.dispatch(tag, (temme, temme, hankel), _f64(v), _f64(x))


jn_sequence_kernel = partial(jax.jit, static_argnames=("n",))(miller_j_sequence)


def _run(label: str, kernel, region, names, order: float, x: float) -> float:
    tag = region(order, x)
    _logger.debug("%s(%r, %r): %s region", label, order, x, regions.describe(names, tag))
    budget = precision.budget()
    return checks.finish(kernel(tag, order, x, **budget), label, budget["max_iter"])


def _real_order(label: str, v, x) -> tuple[float, float]:
    v = checks.as_scalar(v, label, "v")
    x = checks.as_scalar(x, label)
    if not np.isnan(v):
        checks.check_in_interval(v, "(-∞,∞)", label, "v")
    return v, x


def _integer_route(v: float) -> bool:
    return bool(is_near_integer(v))


def _check_real_argument(label: str, v: float, x: float) -> None:
    if x < 0.0:
        checks.fail(DomainError(label, f"x = {x!r} < 0 with non-integer order {v!r} gives a complex result"))


def bessel_jn(n, x) -> float:
    """Bessel function of the first kind, integer order."""
    label = "bessel.bessel_jn"
    n = checks.as_order(n, label)
    x = checks.as_scalar(x, label)
    if np.isnan(x):
        return float("nan")
    sign = 1.0
    if n < 0:
        n = -n
        sign *= _parity(n)
    if x < 0.0:
        x = -x
        sign *= _parity(n)
    if np.isinf(x):
        return 0.0
    return sign * _run(label, jn_kernel, jn_region, JN_REGIONS, float(n), x)


def bessel_jv(v, x) -> float:
    """Bessel function of the first kind, real order.

    Orders within 1e-9 of an integer are evaluated as integer orders.
    """
    label = "bessel.bessel_jv"
    v, x = _real_order(label, v, x)
    if np.isnan(v) or np.isnan(x):
        return float("nan")
    if _integer_route(v):
        return bessel_jn(int(round(v)), x)
    _check_real_argument(label, v, x)
    if x == 0.0 and v < 0.0:
        checks.fail(PoleError(label, x, f"J_v(0) is infinite for negative order {v!r}"))
    if np.isinf(x):
        return 0.0
    return _run(label, jv_kernel, jv_region, JV_REGIONS, v, x)


def bessel_yn(n, x) -> float:
    """Bessel function of the second kind, integer order, x > 0."""
    label = "bessel.bessel_yn"
    n = checks.as_order(n, label)
    x = checks.as_scalar(x, label)
    if np.isnan(x):
        return float("nan")
    if x == 0.0:
        checks.fail(PoleError(label, x))
    checks.check_positive(x, label)
    sign = 1.0
    if n < 0:
        n = -n
        sign = _parity(n)
    if np.isinf(x):
        return 0.0
    return sign * _run(label, yn_kernel, yn_region, Y_REGIONS, float(n), x)


def bessel_yv(v, x) -> float:
    label = "bessel.bessel_yv"
    v, x = _real_order(label, v, x)
    if np.isnan(v) or np.isnan(x):
        return float("nan")
    if _integer_route(v):
        return bessel_yn(int(round(v)), x)
    if x == 0.0:
        checks.fail(PoleError(label, x))
    checks.check_positive(x, label)
    if np.isinf(x):
        return 0.0
    return _run(label, yv_kernel, yv_region, Y_REGIONS, v, x)


def bessel_in(n, x) -> float:
    """Modified Bessel function of the first kind, integer order. Overflow gives inf."""
    label = "bessel.bessel_in"
    n = abs(checks.as_order(n, label))
    x = checks.as_scalar(x, label)
    if np.isnan(x):
        return float("nan")
    sign = 1.0
    if x < 0.0:
        x = -x
        sign = _parity(n)
    if np.isinf(x):
        return sign * float("inf")
    return sign * _run(label, in_kernel, in_region, IN_REGIONS, float(n), x)


def bessel_iv(v, x) -> float:
    label = "bessel.bessel_iv"
    v, x = _real_order(label, v, x)
    if np.isnan(v) or np.isnan(x):
        return float("nan")
    if _integer_route(v):
        return bessel_in(int(round(v)), x)
    _check_real_argument(label, v, x)
    if x == 0.0 and v < 0.0:
        checks.fail(PoleError(label, x, f"I_v(0) is infinite for negative order {v!r}"))
    if np.isinf(x):
        return float("inf")
    return _run(label, iv_kernel, iv_region, IV_REGIONS, v, x)


def bessel_kn(n, x) -> float:
    """Modified Bessel function of the second kind, integer order, x > 0."""
    label = "bessel.bessel_kn"
    n = abs(checks.as_order(n, label))
    x = checks.as_scalar(x, label)
    if np.isnan(x):
        return float("nan")
    if x == 0.0:
        checks.fail(PoleError(label, x))
    checks.check_positive(x, label)
    if np.isinf(x):
        return 0.0
    return _run(label, kn_kernel, kn_region, K_REGIONS, float(n), x)


def bessel_kv(v, x) -> float:
    """K_v(x) = K_{-v}(x); Temme's series below x = 2, Steed's CF2 above, Hankel far out."""
    label = "bessel.bessel_kv"
    v, x = _real_order(label, v, x)
    if np.isnan(v) or np.isnan(x):
        return float("nan")
    v = abs(v)
    if _integer_route(v):
        return bessel_kn(int(round(v)), x)
    if x == 0.0:
        checks.fail(PoleError(label, x))
    checks.check_positive(x, label)
    if np.isinf(x):
        return 0.0
    return _run(label, kv_kernel, kv_region, K_REGIONS, v, x)


def bessel_j0(x) -> float:
    return bessel_jn(0, x)


def bessel_j1(x) -> float:
    return bessel_jn(1, x)


def bessel_y0(x) -> float:
    return bessel_yn(0, x)


def bessel_y1(x) -> float:
    return bessel_yn(1, x)


def bessel_i0(x) -> float:
    return bessel_in(0, x)


def bessel_i1(x) -> float:
    return bessel_in(1, x)


def bessel_k0(x) -> float:
    return bessel_kn(0, x)


def bessel_k1(x) -> float:
    return bessel_kn(1, x)


def bessel_jn_sequence(n, x) -> list[float]:
    """J_0(x) .. J_n(x) from a single backward recurrence."""
    label = "bessel.bessel_jn_sequence"
    n = checks.check_nonnegative_order(n, label)
    x = checks.as_scalar(x, label)
    if np.isnan(x):
        return [float("nan")] * (n + 1)
    checks.check_in_interval(x, "[0,∞)", label)
    if x == 0.0:
        return [1.0] + [0.0] * n
    _logger.debug("%s(%r, %r): miller buffer of length %d", label, n, x, n + 1)
    return [float(v) for v in np.asarray(jn_sequence_kernel(n, x))]


__all__ = [
    "bessel_jn",
    "bessel_jv",
    "bessel_yn",
    "bessel_yv",
    "bessel_in",
    "bessel_iv",
    "bessel_kn",
    "bessel_kv",
    "bessel_j0",
    "bessel_j1",
    "bessel_y0",
    "bessel_y1",
    "bessel_i0",
    "bessel_i1",
    "bessel_k0",
    "bessel_k1",
    "bessel_jn_sequence",
]
