"""
Unified error handling for gmail-order-status.
"""

import logging

logger = logging.getLogger(__name__)


class GmailOrderStatusError(Exception):
    """Base exception for gmail-order-status errors."""

    error_type: str = "error"

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}. {self.suggestion}"
        return self.message


class ConfigurationError(GmailOrderStatusError):
    """Missing or unusable configuration (statuses, masks, credentials)."""

    error_type = "configuration"


class NotFoundError(ConfigurationError):
    """Account or filter not found."""

    pass


class AuthError(GmailOrderStatusError):
    """Token is missing or expired without a refresh credential."""

    error_type = "auth"


class TransportError(GmailOrderStatusError):
    """Remote search, fetch, refresh or upsert call failed."""

    error_type = "transport"


class DataError(GmailOrderStatusError):
    """Malformed or missing message headers/body."""

    error_type = "data"


def error_type_of(error: Exception) -> str:
    """Map an exception to the label reported on fetch results.

    Anything outside the taxonomy came from a remote call, so it is a
    transport failure.
    """
    if isinstance(error, GmailOrderStatusError):
        return error.error_type
    return TransportError.error_type


def handle_error(error: Exception, operation: str = "operation") -> str:
    """
    Handle errors consistently across CLI commands and MCP tools.

    Args:
        error: The exception that occurred
        operation: Name of the operation that failed

    Returns:
        User-friendly error message with suggestions
    """
    logger.error(f"Error in {operation}: {error}")

    if isinstance(error, GmailOrderStatusError):
        return f"Error: {error}"

    error_str = str(error).lower()
    error_type = type(error).__name__

    if "invalid_grant" in error_str or "401" in error_str:
        return (
            "Error: Gmail rejected the stored token. "
            "Reconnect the account to obtain a new authorization."
        )

    if "403" in error_str or "insufficient" in error_str:
        return (
            "Error: Access denied. "
            "The token is missing the gmail.readonly scope."
        )

    if "429" in error_str or "rate limit" in error_str:
        return (
            "Error: Rate limit exceeded. "
            "Lower the page count or wait before running again."
        )

    return f"Error in {operation}: {error_type} - {error}"
