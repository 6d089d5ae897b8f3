from __future__ import annotations

import math

import jax
import numpy as np


def _check(cond, msg: str | None = None) -> None:
    label = msg or "test_check"
    try:
        jax.debug.check(cond, "{}: {}", label, cond)
    except Exception:
        pass
    assert bool(cond), label


def _close(got, expected, rtol: float = 1e-12, atol: float = 0.0) -> None:
    if isinstance(expected, float) and math.isinf(expected):
        _check(got == expected, f"got {got!r}, expected {expected!r}")
        return
    ok = np.isclose(got, expected, rtol=rtol, atol=atol)
    _check(ok, f"got {got!r}, expected {expected!r} (rtol={rtol}, atol={atol})")


__all__ = ["_check", "_close"]
