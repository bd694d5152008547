from __future__ import annotations

from typing import Optional


class BanditError(Exception):
    """Base class for every error raised by tsbandit."""


class InvalidDomain(BanditError, ValueError):
    """Numeric argument outside the domain of the function it was passed to."""


class Nonconvergence(BanditError, ArithmeticError):
    """Iteration budget exhausted before the tolerance was met.

    ``estimate`` is the best value reached so far. It is always finite and
    inside ``[0, 1]``, so callers that only need a relative ordering may use
    it directly.
    """

    def __init__(self, message: str, estimate: float, iterations: int):
        super().__init__(message)
        self.estimate = estimate
        self.iterations = iterations


class ScriptExecutionError(BanditError, RuntimeError):
    """A script could not be launched or did not finish in time."""

    def __init__(self, message: str, command: Optional[str] = None):
        super().__init__(message)
        self.command = command


__all__ = ["BanditError", "InvalidDomain", "Nonconvergence", "ScriptExecutionError"]
