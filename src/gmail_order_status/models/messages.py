"""
Message and match models.

Defines fetched mail messages and the match records produced for them.
"""

from pydantic import BaseModel, Field

from gmail_order_status.models.accounts import ExtraFieldSpec
from gmail_order_status.models.enums import ErrorType
from gmail_order_status.utils.errors import error_type_of


class MailMessage(BaseModel):
    """A Gmail message reduced to the fields matching needs."""

    id: str = Field(..., description="Gmail message ID")
    thread_id: str = Field(default="", description="Gmail thread ID")
    sender: str = Field(default="", description="From header")
    to: str = Field(default="", description="To header, or Delivered-To")
    delivered_to: str = Field(default="", description="Delivered-To header, or To")
    subject: str = Field(default="", description="Subject header")
    body: str = Field(default="", description="Best-effort plain text body")


class ExtraFieldValue(BaseModel):
    """Value captured for one extra field (empty when the mask missed)."""

    spec: ExtraFieldSpec
    value: str = ""


class MatchResult(BaseModel):
    """One message that passed the title and order-id gates of a filter."""

    message_id: str = Field(..., serialization_alias="messageId")
    subject: str = Field(default="")
    sender: str = Field(default="", serialization_alias="from")
    delivered_to: str = Field(default="", serialization_alias="deliveredTo")
    status: str = Field(default="", description="Matched status or empty")
    entry_id: str = Field(
        default="", serialization_alias="entryId", description="Captured digits"
    )
    extras: list[ExtraFieldValue] = Field(default_factory=list)
    body: str = Field(default="")


class FetchResult(BaseModel):
    """Items for one filter run, or the error that stopped it."""

    items: list[MatchResult] = Field(default_factory=list)
    error: str | None = Field(default=None)
    error_type: ErrorType | None = Field(default=None)
    total: int = Field(default=0, description="Items found before truncation")

    @classmethod
    def failure(cls, error: Exception) -> "FetchResult":
        try:
            error_type = ErrorType(error_type_of(error))
        except ValueError:
            error_type = ErrorType.TRANSPORT
        return cls(error=str(error), error_type=error_type)

    @property
    def ok(self) -> bool:
        return self.error is None
