"""
Error model for the job tracker tools.

Provides structured error codes and sanitized error messages.
"""

from enum import Enum
from typing import Optional
import os
import re


class ErrorCode(str, Enum):
    """Structured error codes for the tracker tools."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    DB_ERROR = "DB_ERROR"
    REMOTE_ERROR = "REMOTE_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ToolError(Exception):
    """Base exception for tool errors with structured error information."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        retryable: bool = False,
        original_error: Optional[Exception] = None
    ):
        """
        Initialize a tool error.

        Args:
            code: The error code
            message: Human-readable error message
            retryable: Whether the operation can be retried
            original_error: The original exception if this wraps another error
        """
        self.code = code
        self.message = message
        self.retryable = retryable
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary format for tool responses."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "retryable": self.retryable
            }
        }


def sanitize_path(path: str) -> str:
    """
    Sanitize file paths to avoid exposing sensitive system details.

    Returns only the basename for absolute paths, keeps relative paths.

    Args:
        path: The file path to sanitize

    Returns:
        Sanitized path string
    """
    if os.path.isabs(path):
        return os.path.basename(path)
    return path


def sanitize_sql_error(error_msg: str) -> str:
    """
    Sanitize SQL error messages to remove sensitive details.

    Removes SQL fragments and keeps only actionable information.

    Args:
        error_msg: The original error message

    Returns:
        Sanitized error message
    """
    sanitized = re.sub(r'SQL:.*', '', error_msg, flags=re.IGNORECASE)
    sanitized = re.sub(r'"[^"]*SELECT[^"]*"', '[SQL query]', sanitized, flags=re.IGNORECASE)
    sanitized = re.sub(r"'[^']*SELECT[^']*'", '[SQL query]', sanitized, flags=re.IGNORECASE)

    # Unquoted statements
    sanitized = re.sub(r'\b(SELECT|INSERT|UPDATE|DELETE)\b.*', '[SQL query]', sanitized, flags=re.IGNORECASE)

    sanitized = re.sub(r'/[^\s]+/', '[path]/', sanitized)

    return sanitized.strip()


def sanitize_stack_trace(error_msg: str) -> str:
    """
    Remove stack traces from error messages.

    Args:
        error_msg: The original error message

    Returns:
        Error message without stack trace
    """
    lines = error_msg.split('\n')
    if lines:
        return lines[0].strip()
    return error_msg


def sanitize_remote_error(error_msg: str) -> str:
    """
    Sanitize remote/network error messages.

    Strips query strings (which may carry deployment ids) from URLs and
    drops everything after the first line.

    Args:
        error_msg: The original error message

    Returns:
        Sanitized error message
    """
    sanitized = re.sub(r'(https?://[^\s?]+)\?[^\s)]*', r'\1', error_msg)
    sanitized = re.sub(r'/macros/s/[^/\s]+/', '/macros/s/[deployment]/', sanitized)
    return sanitize_stack_trace(sanitized)


def create_validation_error(message: str) -> ToolError:
    """
    Create a validation error.

    Args:
        message: Description of the validation failure

    Returns:
        ToolError with VALIDATION_ERROR code
    """
    return ToolError(
        code=ErrorCode.VALIDATION_ERROR,
        message=message,
        retryable=False
    )


def create_not_found_error(message: str) -> ToolError:
    """
    Create an error for a job record that does not exist.

    Args:
        message: Description of what was not found

    Returns:
        ToolError with NOT_FOUND code
    """
    return ToolError(
        code=ErrorCode.NOT_FOUND,
        message=message,
        retryable=False
    )


def create_file_not_found_error(file_path: str, file_type: str = "File") -> ToolError:
    """
    Create a file not found error.

    Args:
        file_path: The file path that was not found
        file_type: Type of file (e.g., "CSV file")

    Returns:
        ToolError with FILE_NOT_FOUND code
    """
    sanitized_path = sanitize_path(file_path)
    return ToolError(
        code=ErrorCode.FILE_NOT_FOUND,
        message=f"{file_type} not found: {sanitized_path}",
        retryable=False
    )


def create_db_error(message: str, retryable: bool = False, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create a database error.

    Args:
        message: Description of the database error
        retryable: Whether the operation can be retried
        original_error: The original exception

    Returns:
        ToolError with DB_ERROR code
    """
    sanitized_message = sanitize_sql_error(message)
    sanitized_message = sanitize_stack_trace(sanitized_message)

    return ToolError(
        code=ErrorCode.DB_ERROR,
        message=f"Database error: {sanitized_message}",
        retryable=retryable,
        original_error=original_error
    )


def create_remote_error(message: str, retryable: bool = True, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create a remote sheet error.

    Only used where a remote failure is fatal to the whole operation
    (a sync pass that cannot download the remote job set). Per-record
    remote failures are reported as messages instead.

    Args:
        message: Description of the remote failure
        retryable: Whether the operation can be retried
        original_error: The original exception

    Returns:
        ToolError with REMOTE_ERROR code
    """
    return ToolError(
        code=ErrorCode.REMOTE_ERROR,
        message=f"Remote error: {sanitize_remote_error(message)}",
        retryable=retryable,
        original_error=original_error
    )


def create_internal_error(message: str, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create an internal error for unexpected exceptions.

    Args:
        message: Description of the internal error
        original_error: The original exception

    Returns:
        ToolError with INTERNAL_ERROR code
    """
    sanitized_message = sanitize_stack_trace(message)

    return ToolError(
        code=ErrorCode.INTERNAL_ERROR,
        message=f"Internal error: {sanitized_message}",
        retryable=True,
        original_error=original_error
    )
