"""Exception hierarchy for the benchmarking core.

Exception Hierarchy:
    BenchmarkError (base)
    ├── InvalidPeriod
    ├── StoreQueryFailed
    └── PeerResolutionFailed

Every error carries the operation context (company, year, operation, ...)
in `details` and, when it wraps another exception, the original in `cause`.
Nothing here is retried automatically.
"""

from __future__ import annotations

from typing import Any, Optional, Dict


class BenchmarkError(Exception):
    """Base exception for all benchmarking errors.

    Attributes:
        message: Human-readable error description.
        details: Additional context (company, year, operation, ...).
        cause: Original exception if this wraps another error.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.details = details or {}
        self.cause = cause
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with details."""
        msg = self.message
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            msg = f"{msg} [{detail_str}]"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {self.cause})"
        return msg


class InvalidPeriod(BenchmarkError):
    """Raised when a fiscal year cannot be turned into a calendar window.

    Examples:
        - Year outside the range supported by `datetime` (e.g. 10000)
        - Store holding reporting dates outside 1900..2100
    """

    def __init__(self, message: str, year: Optional[int] = None, **kwargs: Any):
        details = kwargs.pop("details", {})
        if year is not None:
            details["year"] = year
        super().__init__(message, details=details, **kwargs)


class StoreQueryFailed(BenchmarkError):
    """Raised when a query against the account store cannot execute."""

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs: Any):
        details = kwargs.pop("details", {})
        if operation:
            details["operation"] = operation
        super().__init__(message, details=details, **kwargs)


class PeerResolutionFailed(BenchmarkError):
    """Raised when the sector-membership source itself is unavailable."""

    def __init__(self, message: str, company: Optional[str] = None, **kwargs: Any):
        details = kwargs.pop("details", {})
        if company:
            details["company"] = company
        super().__init__(message, details=details, **kwargs)
