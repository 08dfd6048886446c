"""Pydantic models for settings, messages and run summaries."""

from .accounts import (
    CURRENT_SCHEMA_VERSION,
    Account,
    ExtraFieldSpec,
    Filter,
    FilterOverrides,
    ParserSettings,
    SettingsDocument,
    new_id,
)
from .enums import ContentArea, ErrorType, OrderIdArea
from .messages import ExtraFieldValue, FetchResult, MailMessage, MatchResult
from .summary import (
    AccountMessages,
    AccountSummary,
    FilterMessages,
    RunCounters,
    RunSummary,
    UpdateReport,
)

__all__ = [
    # Settings
    "CURRENT_SCHEMA_VERSION",
    "Account",
    "ExtraFieldSpec",
    "Filter",
    "FilterOverrides",
    "ParserSettings",
    "SettingsDocument",
    "new_id",
    # Enums
    "ContentArea",
    "ErrorType",
    "OrderIdArea",
    # Messages
    "ExtraFieldValue",
    "FetchResult",
    "MailMessage",
    "MatchResult",
    # Summaries
    "AccountMessages",
    "AccountSummary",
    "FilterMessages",
    "RunCounters",
    "RunSummary",
    "UpdateReport",
]
