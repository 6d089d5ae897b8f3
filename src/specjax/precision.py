from __future__ import annotations

import os
from contextlib import contextmanager

from .errors import DomainError

_TOLERANCE = float(os.getenv("SPECJAX_TOLERANCE", "1e-15"))
_MAX_ITER = int(os.getenv("SPECJAX_MAX_ITER", "10000"))


def set_tolerance(tol: float) -> None:
    global _TOLERANCE
    tol = float(tol)
    if not tol > 0.0:
        raise DomainError("precision.set_tolerance", f"tolerance must be positive, got {tol!r}")
    _TOLERANCE = tol


def set_max_iter(max_iter: int) -> None:
    global _MAX_ITER
    if int(max_iter) != max_iter or max_iter < 1:
        raise DomainError("precision.set_max_iter", f"iteration budget must be a positive integer, got {max_iter!r}")
    _MAX_ITER = int(max_iter)


def get_tolerance() -> float:
    return _TOLERANCE


def get_max_iter() -> int:
    return _MAX_ITER


@contextmanager
def worktol(tol: float):
    old = _TOLERANCE
    set_tolerance(tol)
    try:
        yield
    finally:
        set_tolerance(old)


@contextmanager
def workiter(max_iter: int):
    old = _MAX_ITER
    set_max_iter(max_iter)
    try:
        yield
    finally:
        set_max_iter(old)


def budget() -> dict:
    """Static keyword arguments for the iterative kernels."""
    return {"tol": _TOLERANCE, "max_iter": _MAX_ITER}


__all__ = [
    "set_tolerance",
    "set_max_iter",
    "get_tolerance",
    "get_max_iter",
    "worktol",
    "workiter",
    "budget",
]
