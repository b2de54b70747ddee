"""
Exceptions raised while converting a Cucumber report to Allure results.
"""

from typing import Optional


class ConversionError(Exception):
    """Base exception for all conversion errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} ({self.path})"
        return self.message


class MissingInputError(ConversionError):
    """The Cucumber report does not exist. Expected when a run was skipped or aborted."""


class MalformedReportError(ConversionError):
    """The Cucumber report exists but is not a valid feature list."""


class EmptyReportError(ConversionError):
    """The Cucumber report parsed to an empty feature list."""


class WriteFailure(ConversionError):
    """A single output file could not be written."""
