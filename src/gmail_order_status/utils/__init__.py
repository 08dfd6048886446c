"""
Utility functions and helpers for gmail-order-status.
"""

from .errors import (
    AuthError,
    ConfigurationError,
    DataError,
    GmailOrderStatusError,
    NotFoundError,
    TransportError,
    error_type_of,
    handle_error,
)
from .helpers import decode_json_robust, parse_start_date, parse_token_text, split_statuses

__all__ = [
    # Errors
    "GmailOrderStatusError",
    "ConfigurationError",
    "NotFoundError",
    "AuthError",
    "TransportError",
    "DataError",
    "error_type_of",
    "handle_error",
    # Helpers
    "decode_json_robust",
    "parse_start_date",
    "parse_token_text",
    "split_statuses",
]
