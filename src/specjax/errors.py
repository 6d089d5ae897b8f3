from __future__ import annotations


class SpecialFunctionError(ValueError):
    """Base class for every error raised by specjax."""

    def __init__(self, function: str, message: str):
        self.function = function
        super().__init__(f"{function}: {message}")


class DomainError(SpecialFunctionError):
    """An argument lies outside the range on which the function is defined."""


class PoleError(SpecialFunctionError):
    """The function has no finite value at the requested point."""

    def __init__(self, function: str, point: float, message: str | None = None):
        self.point = point
        super().__init__(function, message or f"pole at x = {point!r}")


class ConvergenceError(SpecialFunctionError):
    """A series or continued fraction exhausted its iteration budget."""

    def __init__(self, function: str, max_iter: int, message: str | None = None):
        self.max_iter = max_iter
        super().__init__(function, message or f"no convergence within {max_iter} iterations")


__all__ = ["SpecialFunctionError", "DomainError", "PoleError", "ConvergenceError"]
