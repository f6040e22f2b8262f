"""Centralized error definitions for jobber.

This module provides the error hierarchy shared by the parser, the ledger,
the record store and the command line.

Usage:
    from jobber.errors import JobberError, NoOpenJobError, format_error_for_cli

    try:
        ledger.end(end_time)
    except JobberError as e:
        print(format_error_for_cli(e))

Note that invalid start/end assignments on a single job are not errors:
``Job.set_start`` and ``Job.set_end`` keep the previous value and return
``False`` instead.
"""

from __future__ import annotations

from jobber.errors.user_messages import (
    format_error_for_cli,
    get_recovery_suggestion,
    get_user_message,
)


# =============================================================================
# Base Error
# =============================================================================


class JobberError(Exception):
    """Base exception for all jobber errors.

    Attributes:
        code: Error code for categorization
        user_message: User-friendly message (optional override)
        recoverable: Whether the error is potentially recoverable
        details: Additional error details for debugging
    """

    code: str = "JOBBER_ERROR"
    default_message: str = "An unexpected error occurred"
    recoverable: bool = True

    def __init__(
        self,
        message: str | None = None,
        *,
        user_message: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.message = message or self.default_message
        self._user_message = user_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        """Get user-friendly message."""
        if self._user_message:
            return self._user_message
        return get_user_message(self)

    @property
    def recovery_suggestion(self) -> str:
        """Get recovery suggestion."""
        return get_recovery_suggestion(self)


# =============================================================================
# Parse Errors
# =============================================================================


class TimeParseError(JobberError):
    """Text matched none of the recognized time expressions."""

    code = "TIME_PARSE_ERROR"
    default_message = "Invalid time expression"

    def __init__(self, text: str | None, *, message: str | None = None) -> None:
        self.text = text
        super().__init__(
            message or f"Invalid time expression: {text!r}",
            details={"text": text},
        )


# =============================================================================
# Ledger Precondition Errors
# =============================================================================


class PreconditionError(JobberError):
    """Base error for ledger operations run against the wrong ledger state."""

    code = "PRECONDITION_ERROR"
    default_message = "Operation not possible in the current ledger state"


class NoOpenJobError(PreconditionError):
    """Operation needs a running job but none is open."""

    code = "NO_OPEN_JOB"
    default_message = "There is no open job!"


class OpenJobError(PreconditionError):
    """A new job was started while the last one is still running."""

    code = "OPEN_JOB"
    default_message = "There is still an open job!"

    def __init__(self, position: int, *, message: str | None = None) -> None:
        self.position = position
        super().__init__(message, details={"position": position})


class EndBeforeStartError(PreconditionError):
    """End time is not strictly after the start time."""

    code = "END_BEFORE_START"
    default_message = "End time is ahead of start time!"


class JoinUsageError(PreconditionError):
    """Join was requested with fewer than two positions."""

    code = "JOIN_USAGE"
    default_message = "Joining needs at least two positions"


class PositionError(PreconditionError):
    """Position does not address a job in the ledger."""

    code = "POSITION_OUT_OF_RANGE"
    default_message = "Position out of range"

    def __init__(self, position: int, size: int, *, message: str | None = None) -> None:
        self.position = position
        self.size = size
        super().__init__(
            message or f"Position {position} is out of range (1..{size})",
            details={"position": position, "size": size},
        )


class InvalidFilterError(PreconditionError):
    """List filter is neither a time expression nor a non-negative count."""

    code = "INVALID_FILTER"
    default_message = "Invalid list filter"


class InvalidColumnsError(PreconditionError):
    """CSV export was asked for unknown columns."""

    code = "INVALID_CSV_COLUMNS"
    default_message = "Invalid CSV columns"


# =============================================================================
# Persistence Errors
# =============================================================================


class PersistenceError(JobberError):
    """Base error for the record store."""

    code = "PERSISTENCE_ERROR"
    default_message = "Job file operation failed"
    recoverable = False


class StorageReadError(PersistenceError):
    """Job file could not be read."""

    code = "STORAGE_READ_ERROR"
    default_message = "Cannot read job file"


class StorageWriteError(PersistenceError):
    """Job file could not be written."""

    code = "STORAGE_WRITE_ERROR"
    default_message = "Cannot write job file"


class RecordFormatError(PersistenceError):
    """A stored record is malformed."""

    code = "RECORD_FORMAT_ERROR"
    default_message = "Malformed job record"

    def __init__(
        self,
        line: str,
        *,
        line_number: int | None = None,
        message: str | None = None,
    ) -> None:
        self.line = line
        self.line_number = line_number
        where = f" at line {line_number}" if line_number is not None else ""
        super().__init__(
            message or f"Malformed job record{where}",
            details={"line_number": line_number},
        )


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(JobberError):
    """Base error for configuration issues."""

    code = "CONFIGURATION_ERROR"
    default_message = "Configuration error"


class InvalidConfigError(ConfigurationError):
    """Configuration is invalid."""

    code = "INVALID_CONFIG"
    default_message = "Invalid configuration"


__all__ = [
    # Base
    "JobberError",
    # Parse
    "TimeParseError",
    # Ledger
    "PreconditionError",
    "NoOpenJobError",
    "OpenJobError",
    "EndBeforeStartError",
    "JoinUsageError",
    "PositionError",
    "InvalidFilterError",
    "InvalidColumnsError",
    # Persistence
    "PersistenceError",
    "StorageReadError",
    "StorageWriteError",
    "RecordFormatError",
    # Configuration
    "ConfigurationError",
    "InvalidConfigError",
    # Formatting
    "format_error_for_cli",
]
