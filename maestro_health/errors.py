"""Error types raised by the health analysis core."""

from __future__ import annotations


class HealthAnalysisError(Exception):
    """Base class for all analysis failures."""


class EmptyInputError(HealthAnalysisError, ValueError):
    """Raised when a computation needs at least one input item and got none."""


class InvalidRecordError(HealthAnalysisError, ValueError):
    """Raised when an execution record fails validation."""

    def __init__(self, message: str, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


class RuleDefinitionError(HealthAnalysisError, ValueError):
    """Raised when a rule table entry cannot be evaluated."""
