from __future__ import annotations

import logging

import jax
import jax.numpy as jnp
import numpy as np

from . import checks
from . import regions
from .kernels import polevl

jax.config.update("jax_enable_x64", True)

_logger = logging.getLogger(__name__)

_MAXLOG = 7.09782712893383996843e2
_SATURATION = 6.0

# Rational minimax coefficients, highest order first.
_ERFC_P = jnp.asarray(
    [
        2.46196981473530512524e-10,
        5.64189564831068821977e-1,
        7.46321056442269912687e0,
        4.86371970985681366614e1,
        1.96520832956077098242e2,
        5.26445194995477358631e2,
        9.34528527171957607540e2,
        1.02755188689515710272e3,
        5.57535335369399327526e2,
    ],
    dtype=jnp.float64,
)
_ERFC_Q = jnp.asarray(
    [
        1.0,
        1.32281951154744992508e1,
        8.67072140885989742329e1,
        3.54937778887819891062e2,
        9.75708501743205489753e2,
        1.82390916687909736289e3,
        2.24633760818710981792e3,
        1.65666309194161350182e3,
        5.57535340817727675546e2,
    ],
    dtype=jnp.float64,
)
_ERFC_R = jnp.asarray(
    [
        5.64189583547755073984e-1,
        1.27536670759978104416e0,
        5.01905042251180477414e0,
        6.16021097993053585195e0,
        7.40974269950448939160e0,
        2.97886665372100240670e0,
    ],
    dtype=jnp.float64,
)
_ERFC_S = jnp.asarray(
    [
        1.0,
        2.26052863220117276590e0,
        9.39603524938001434673e0,
        1.20489539808096656605e1,
        1.70814450747565897222e1,
        9.60896809063285878198e0,
        3.36907645100081516050e0,
    ],
    dtype=jnp.float64,
)
_ERF_T = jnp.asarray(
    [
        9.60497373987051638749e0,
        9.00260197203842689217e1,
        2.23200534594684319226e3,
        7.00332514112805075473e3,
        5.55923013010394962768e4,
    ],
    dtype=jnp.float64,
)
_ERF_U = jnp.asarray(
    [
        1.0,
        3.35617141647503099647e1,
        5.21357949780152679795e2,
        4.59432382970980127987e3,
        2.26290000613890934246e4,
        4.92673942608635921086e4,
    ],
    dtype=jnp.float64,
)

ERF_CENTRAL = 0
ERF_TAIL_PQ = 1
ERF_TAIL_RS = 2
ERF_SATURATED = 3
ERF_REGIONS = ("central", "tail_pq", "tail_rs", "saturated")


def _central(x: jax.Array) -> jax.Array:
    z = x * x
    return x * polevl(z, _ERF_T) / polevl(z, _ERF_U)


def _tail_pq(ax: jax.Array) -> jax.Array:
    return jnp.exp(-ax * ax) * polevl(ax, _ERFC_P) / polevl(ax, _ERFC_Q)


def _tail_rs(ax: jax.Array) -> jax.Array:
    return jnp.exp(-ax * ax) * polevl(ax, _ERFC_R) / polevl(ax, _ERFC_S)


def _tail(ax: jax.Array) -> jax.Array:
    # erfc(|x|) for |x| >= 1
    ax = jnp.maximum(ax, 1.0)
    return jnp.where(ax * ax > _MAXLOG, 0.0, jnp.where(ax < 8.0, _tail_pq(ax), _tail_rs(ax)))


@jax.jit
def erf_region(x: jax.Array) -> jax.Array:
    ax = jnp.abs(jnp.asarray(x, dtype=jnp.float64))
    return regions.classify([ax < 1.0, ax < 8.0, ax * ax <= _MAXLOG], [ERF_CENTRAL, ERF_TAIL_PQ, ERF_TAIL_RS], ERF_SATURATED)


def _erf_central(x):
    return _central(jnp.clip(x, -1.0, 1.0))


def _erf_tail(x):
    return jnp.sign(x) * jnp.where(jnp.abs(x) >= _SATURATION, 1.0, 1.0 - _tail(jnp.abs(x)))


def _erf_saturated(x):
    return jnp.sign(x)


@jax.jit
def erf_value(x: jax.Array) -> jax.Array:
    x = jnp.asarray(x, dtype=jnp.float64)
    out = regions.dispatch(erf_region(x), (_erf_central, _erf_tail, _erf_tail, _erf_saturated), x)
    return jnp.where(jnp.isnan(x), jnp.nan, out)


def _erfc_central(x):
    return 1.0 - _central(jnp.clip(x, -1.0, 1.0))


def _erfc_tail(x):
    y = _tail(jnp.abs(x))
    low = jnp.where(x <= -_SATURATION, 2.0, 2.0 - y)
    return jnp.where(x < 0.0, low, y)


def _erfc_saturated(x):
    return jnp.where(x < 0.0, 2.0, 0.0)


@jax.jit
def erfc_value(x: jax.Array) -> jax.Array:
    x = jnp.asarray(x, dtype=jnp.float64)
    out = regions.dispatch(erf_region(x), (_erfc_central, _erfc_tail, _erfc_tail, _erfc_saturated), x)
    return jnp.where(jnp.isnan(x), jnp.nan, out)


def erf(x) -> float:
    """Error function, odd in x and saturating to +-1 beyond |x| = 6."""
    label = "erf.erf"
    x = checks.as_scalar(x, label)
    if np.isnan(x):
        return float("nan")
    _logger.debug("erf(%r): %s region", x, regions.describe(ERF_REGIONS, erf_region(x)))
    return float(erf_value(x))


def erfc(x) -> float:
    """Complementary error function 1 - erf(x), accurate in the right tail."""
    label = "erf.erfc"
    x = checks.as_scalar(x, label)
    if np.isnan(x):
        return float("nan")
    _logger.debug("erfc(%r): %s region", x, regions.describe(ERF_REGIONS, erf_region(x)))
    return float(erfc_value(x))


__all__ = ["erf", "erfc"]
