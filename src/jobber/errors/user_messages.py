"""User-friendly error messages for jobber.

Human-readable messages and recovery suggestions for every error code.
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Error Message Catalog
# =============================================================================

ERROR_MESSAGES: dict[str, str] = {
    # Parse errors
    "TIME_PARSE_ERROR": "That time expression wasn't understood.",
    # Ledger errors
    "PRECONDITION_ERROR": "This operation isn't possible right now.",
    "NO_OPEN_JOB": "There is no open job.",
    "OPEN_JOB": "There is still an open job.",
    "END_BEFORE_START": "The end time is not after the start time.",
    "JOIN_USAGE": "Joining needs at least two job positions.",
    "POSITION_OUT_OF_RANGE": "There is no job at that position.",
    "INVALID_FILTER": "The list filter must be a time or a job count.",
    "INVALID_CSV_COLUMNS": "The CSV export names an unknown column.",
    # Persistence errors
    "PERSISTENCE_ERROR": "The job file couldn't be accessed.",
    "STORAGE_READ_ERROR": "The job file couldn't be read.",
    "STORAGE_WRITE_ERROR": "The job file couldn't be written. Nothing was changed.",
    "RECORD_FORMAT_ERROR": "The job file contains a malformed record.",
    # Configuration errors
    "CONFIGURATION_ERROR": "There's a configuration issue.",
    "INVALID_CONFIG": "The configuration is invalid. Check settings.",
    # Generic
    "JOBBER_ERROR": "An unexpected error occurred. Please try again.",
    "UNKNOWN_ERROR": "Something went wrong. Please try again.",
}


# =============================================================================
# Recovery Suggestions
# =============================================================================

RECOVERY_SUGGESTIONS: dict[str, str] = {
    "TIME_PARSE_ERROR": "Use now, 4:10-, 1h+, 14:10, 8/1/,14:10, mon,14:10 or yesterday,14:10.",
    "PRECONDITION_ERROR": "List the jobs with: jobber -l",
    "NO_OPEN_JOB": "Start a job first with: jobber -s now",
    "OPEN_JOB": "End the running job first with: jobber -e now",
    "END_BEFORE_START": "Enter an end time after the job's start time.",
    "JOIN_USAGE": "Pass two or more positions, e.g. jobber -j 2,3",
    "POSITION_OUT_OF_RANGE": "Check the positions with: jobber -l",
    "INVALID_FILTER": "Use a time like mon or 1.1. or a count like 10.",
    "INVALID_CSV_COLUMNS": "Choose from pos, start, end, hours, cost and message.",
    "PERSISTENCE_ERROR": "Check the file path and its permissions.",
    "STORAGE_READ_ERROR": "Check that the job file exists and is readable.",
    "STORAGE_WRITE_ERROR": "Check disk space and file permissions, then retry.",
    "RECORD_FORMAT_ERROR": "Fix or remove the reported line in the job file.",
    "CONFIGURATION_ERROR": "Check config: jobber config show",
    "INVALID_CONFIG": "Recreate the file: jobber config init --force",
    "JOBBER_ERROR": "If this persists, please report the issue.",
    "UNKNOWN_ERROR": "If this persists, please report the issue.",
}


# =============================================================================
# Helper Functions
# =============================================================================


def _error_code(error: Any) -> str:
    if hasattr(error, "code"):
        return error.code
    if isinstance(error, str):
        return error
    return type(error).__name__.upper()


def get_user_message(error: Any) -> str:
    """Get user-friendly message for an error.

    Args:
        error: The error (can be Exception or error code string)

    Returns:
        User-friendly error message
    """
    return ERROR_MESSAGES.get(_error_code(error), ERROR_MESSAGES["UNKNOWN_ERROR"])


def get_recovery_suggestion(error: Any) -> str:
    """Get recovery suggestion for an error."""
    return RECOVERY_SUGGESTIONS.get(
        _error_code(error), RECOVERY_SUGGESTIONS["UNKNOWN_ERROR"]
    )


def format_error_for_cli(error: Any) -> str:
    """Format error for CLI output.

    Args:
        error: The error to format

    Returns:
        CLI-formatted error message
    """
    code = getattr(error, "code", "ERROR")
    message = getattr(error, "message", None) or get_user_message(error)

    lines = [
        f"Error [{code}]: {message}",
        f"Suggestion: {get_recovery_suggestion(error)}",
    ]

    details = getattr(error, "details", None)
    if details:
        lines.append("Details:")
        for key, value in details.items():
            if value is not None:
                lines.append(f"  {key}: {value}")

    return "\n".join(lines)


__all__ = [
    "ERROR_MESSAGES",
    "RECOVERY_SUGGESTIONS",
    "get_user_message",
    "get_recovery_suggestion",
    "format_error_for_cli",
]
