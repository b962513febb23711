"""
Error handling utilities for consistent error message extraction.
"""

from sendblue import errors


def get_error_message(error: BaseException | object) -> str:
    """
    Safely extract an error message from an unknown error type.

    Sendblue errors are expanded with the HTTP status and, when the
    server supplied one, its own message.
    """
    if isinstance(error, errors.SendblueError):
        detail = f"status {error.cause.code}"
        if error.cause.message:
            detail += f": {error.cause.message}"
        return f"{error.message} ({detail})"
    if isinstance(error, Exception):
        return str(error) or type(error).__name__
    return "Unknown error"
