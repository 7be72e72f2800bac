"""
hypersim/errors.py - Error Kinds

Validation errors are fatal and raised before any work begins. Exhaustion is
recoverable by retry; RetriesExhaustedError is the terminal form.
"""

from typing import Optional

from receipts import StopRule


class HypergraphError(Exception):
    """Base class for every error raised by hypersim."""


class ValidationError(HypergraphError, ValueError):
    """Malformed model parameters."""


class ExhaustionError(HypergraphError):
    """All active vertices were deactivated before the target step count."""

    def __init__(self, step: int, message: str = "All vertices have been deactivated"):
        super().__init__(f"{message} (step {step})")
        self.step = step

    def __reduce__(self):
        return (self.__class__, (self.step,))


class RetriesExhaustedError(HypergraphError, StopRule):
    """Every attempt of a generation ended in exhaustion."""

    def __init__(self, attempts: int, last: Optional[ExhaustionError] = None):
        super().__init__(f"Failed after {attempts} attempts")
        self.attempts = attempts
        self.last = last

    def __reduce__(self):
        return (self.__class__, (self.attempts, self.last))


class ResultFormatError(HypergraphError, ValueError):
    """A saved result file is missing fields or holds the wrong types."""
