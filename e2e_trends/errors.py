"""Exception hierarchy for the trend engine."""

from __future__ import annotations

from pydantic import ValidationError

__all__ = [
    "format_validation_error",
    "E2ETrendsError",
    "ReportError",
    "ReportShapeError",
    "ConfigError",
]


class E2ETrendsError(Exception):
    """Base class for errors raised by ``e2e_trends``."""


class ReportError(E2ETrendsError):
    """Raised when a report cannot be acquired."""


class ReportShapeError(ReportError):
    """Raised when a report violates the input contract (missing fields, wrong types)."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class ConfigError(E2ETrendsError):
    """Raised when the analysis configuration is invalid."""


def format_validation_error(headline: str, exc: ValidationError) -> str:
    """Flatten pydantic errors into ``loc: msg`` pairs after ``headline``."""
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part is not None)
        message = error.get("msg", "unknown error")
        if location:
            details.append(f"{location}: {message}")
        else:
            details.append(message)
    return f"{headline}: {'; '.join(details)}"
