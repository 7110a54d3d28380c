"""
Exception types raised by the backtester.

All descriptor problems derive from StrategyError (a ValueError), so callers
that already handle ValueError keep working.
"""
from typing import Iterable


class StrategyError(ValueError):
    """Base class for strategy descriptor errors."""


class InvalidStrategyError(StrategyError):
    """Strategy input has the wrong shape or could not be parsed."""


class StrategyValidationError(StrategyError):
    """Strategy is missing required fields or carries invalid parameters."""

    def __init__(self, message: str, missing_fields: Iterable[str] = ()):
        super().__init__(message)
        self.missing_fields = list(missing_fields)


class ExpressionError(ValueError):
    """A textual condition could not be parsed or evaluated."""
