"""Airy functions through Bessel functions of order 1/3 and 2/3.

With zeta = (2/3)|x|^(3/2), the positive half-line uses K and I and the
negative half-line uses J (DLMF 9.6).
"""

from __future__ import annotations

import logging

import numpy as np

from . import checks
from .bessel import bessel_iv, bessel_jv, bessel_kv

_logger = logging.getLogger(__name__)

_AI_0 = 0.3550280538878172
_BI_0 = 0.6149266274460007
_AI_PRIME_0 = -0.2588194037928068
_BI_PRIME_0 = 0.4482883573538264

_THIRD = 1.0 / 3.0
_TWO_THIRDS = 2.0 / 3.0
_SQRT3 = float(np.sqrt(3.0))


def _prepare(label: str, x) -> tuple[float, float]:
    x = checks.as_scalar(x, label)
    ax = abs(x)
    zeta = _TWO_THIRDS * ax * float(np.sqrt(ax))
    if not np.isnan(x):
        _logger.debug("%s(%r): zeta=%r", label, x, zeta)
    return x, zeta


def airy_ai(x) -> float:
    label = "airy.airy_ai"
    x, zeta = _prepare(label, x)
    if np.isnan(x):
        return float("nan")
    if zeta == 0.0:
        return _AI_0
    if np.isinf(x):
        return 0.0
    if x > 0.0:
        return float(np.sqrt(x / 3.0)) * bessel_kv(_THIRD, zeta) / np.pi
    z = -x
    return float(np.sqrt(z)) / 3.0 * (bessel_jv(_THIRD, zeta) + bessel_jv(-_THIRD, zeta))


def airy_bi(x) -> float:
    label = "airy.airy_bi"
    x, zeta = _prepare(label, x)
    if np.isnan(x):
        return float("nan")
    if zeta == 0.0:
        return _BI_0
    if np.isinf(x):
        return float("inf") if x > 0.0 else 0.0
    if x > 0.0:
        return float(np.sqrt(x / 3.0)) * (bessel_iv(-_THIRD, zeta) + bessel_iv(_THIRD, zeta))
    z = -x
    return float(np.sqrt(z / 3.0)) * (bessel_jv(-_THIRD, zeta) - bessel_jv(_THIRD, zeta))


def airy_ai_prime(x) -> float:
    """Derivative of Ai."""
    label = "airy.airy_ai_prime"
    x, zeta = _prepare(label, x)
    if np.isnan(x):
        return float("nan")
    if zeta == 0.0:
        return _AI_PRIME_0
    if np.isinf(x):
        return 0.0 if x > 0.0 else float("nan")
    if x > 0.0:
        return -x / (np.pi * _SQRT3) * bessel_kv(_TWO_THIRDS, zeta)
    z = -x
    return z / 3.0 * (bessel_jv(_TWO_THIRDS, zeta) - bessel_jv(-_TWO_THIRDS, zeta))


def airy_bi_prime(x) -> float:
    """Derivative of Bi."""
    label = "airy.airy_bi_prime"
    x, zeta = _prepare(label, x)
    if np.isnan(x):
        return float("nan")
    if zeta == 0.0:
        return _BI_PRIME_0
    if np.isinf(x):
        return float("inf") if x > 0.0 else float("nan")
    if x > 0.0:
        return x / _SQRT3 * (bessel_iv(-_TWO_THIRDS, zeta) + bessel_iv(_TWO_THIRDS, zeta))
    z = -x
    return z / _SQRT3 * (bessel_jv(-_TWO_THIRDS, zeta) + bessel_jv(_TWO_THIRDS, zeta))


__all__ = ["airy_ai", "airy_bi", "airy_ai_prime", "airy_bi_prime"]
