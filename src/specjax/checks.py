from __future__ import annotations

import logging

import numpy as np

from .errors import ConvergenceError, DomainError, PoleError

_logger = logging.getLogger(__name__)

_INFINITIES = {"∞": np.inf, "+∞": np.inf, "-∞": -np.inf, "inf": np.inf, "+inf": np.inf, "-inf": -np.inf}


def fail(err: Exception) -> None:
    _logger.debug("%s: %s", type(err).__name__, err)
    raise err


def _domain_check(cond: bool, label: str, msg: str, *args) -> None:
    if not cond:
        fail(DomainError(label, msg.format(*args)))


def as_scalar(x, label: str, name: str = "x") -> float:
    arr = np.asarray(x, dtype=np.float64)
    _domain_check(arr.ndim == 0, label, "{} must be a scalar, got shape {}", name, arr.shape)
    return float(arr)


def as_order(n, label: str, name: str = "n") -> int:
    val = as_scalar(n, label, name)
    _domain_check(np.isfinite(val) and val == np.floor(val), label, "{} must be an integer, got {!r}", name, n)
    return int(val)


def check_nonnegative_order(n, label: str, name: str = "n") -> int:
    order = as_order(n, label, name)
    _domain_check(order >= 0, label, "{} must be non-negative, got {}", name, order)
    return order


def check_positive(x: float, label: str, name: str = "x") -> None:
    _domain_check(x > 0.0, label, "{} must be positive, got {!r}", name, x)


def check_nonnegative(x: float, label: str, name: str = "x") -> None:
    _domain_check(x >= 0.0, label, "{} must be non-negative, got {!r}", name, x)


def parse_interval(interval: str) -> tuple[float, float, bool, bool]:
    """Parse an ISO 31-11 interval such as ``"(0,∞)"`` or ``"[0, 1]"``."""
    text = interval.strip()
    if len(text) < 5 or text[0] not in "([" or text[-1] not in ")]" or "," not in text:
        raise ValueError(f"malformed interval {interval!r}")
    lo_txt, hi_txt = (part.strip() for part in text[1:-1].split(",", 1))
    lo = _INFINITIES.get(lo_txt)
    hi = _INFINITIES.get(hi_txt)
    lo = float(lo_txt) if lo is None else lo
    hi = float(hi_txt) if hi is None else hi
    return lo, hi, text[0] == "[", text[-1] == "]"


def check_in_interval(x: float, interval: str, label: str, name: str = "x") -> None:
    lo, hi, lo_closed, hi_closed = parse_interval(interval)
    above = x >= lo if lo_closed else x > lo
    below = x <= hi if hi_closed else x < hi
    _domain_check(above and below, label, "{} = {!r} is outside {}", name, x, interval)


def check_not_pole(x: float, label: str) -> None:
    if np.isfinite(x) and x <= 0.0 and x == np.floor(x):
        fail(PoleError(label, x))


def finish(result, label: str, max_iter: int) -> float:
    value, converged = result
    if not bool(converged):
        fail(ConvergenceError(label, max_iter))
    return float(value)


__all__ = [
    "fail",
    "as_scalar",
    "as_order",
    "check_nonnegative_order",
    "check_positive",
    "check_nonnegative",
    "parse_interval",
    "check_in_interval",
    "check_not_pole",
    "finish",
]
