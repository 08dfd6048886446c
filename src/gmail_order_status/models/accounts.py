"""
Account and filter settings models.

These are the persisted entities of the settings document. Accounts,
filters and extra fields carry stable ids so that callers can address them
independently of their position in the document.
"""

from datetime import date, datetime
from typing import Any
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gmail_order_status.models.enums import ContentArea, OrderIdArea
from gmail_order_status.utils.helpers import (
    parse_start_date,
    parse_token_text,
    split_statuses,
)

CURRENT_SCHEMA_VERSION = 3


def new_id(prefix: str) -> str:
    """Generate a stable identifier such as ``flt_1a2b3c4d5e6f``."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class ExtraFieldSpec(BaseModel):
    """A secondary value extracted with a ``{value}`` mask."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(default_factory=lambda: new_id("xf"))
    title: str = Field(default="", description="Human readable label")
    code: str = Field(default="", description="Machine code for the value")
    mask: str = Field(default="", description="Template containing {value}")
    search_area: ContentArea = Field(default=ContentArea.SUBJECT)
    entry_field_id: int = Field(default=0, description="Destination entry field")

    @field_validator("search_area", mode="before")
    @classmethod
    def _coerce_area(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() in ("subject", "body"):
            return value.strip().lower()
        if isinstance(value, ContentArea):
            return value
        return ContentArea.SUBJECT

    @field_validator("entry_field_id", mode="before")
    @classmethod
    def _coerce_field_id(cls, value: Any) -> int:
        try:
            return int(value or 0)
        except (TypeError, ValueError):
            return 0

    @property
    def label(self) -> str:
        return self.title or self.code or "(unnamed)"

    def is_empty(self) -> bool:
        return not (self.title or self.code or self.mask) and self.entry_field_id <= 0


class Filter(BaseModel):
    """A rule set scoped to one mailbox account."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(default_factory=lambda: new_id("flt"))
    parser_code: str = Field(default="", description="Label for the filter")
    title_filter: str = Field(default="", description="Subject substring")
    order_id_search_area: OrderIdArea = Field(default=OrderIdArea.SUBJECT)
    mask: str = Field(default="", description="Order id template with {entry_id}")
    status_search_area: list[ContentArea] = Field(
        default_factory=lambda: [ContentArea.SUBJECT]
    )
    statuses: list[str] = Field(
        default_factory=list,
        description="Statuses in tie-break order; the first match wins",
    )
    status_field_id: int = Field(default=0, description="Destination entry field")
    extra_fields: list[ExtraFieldSpec] = Field(default_factory=list)

    @field_validator("order_id_search_area", mode="before")
    @classmethod
    def _coerce_order_id_area(cls, value: Any) -> Any:
        if isinstance(value, OrderIdArea):
            return value
        if isinstance(value, str) and value.strip().lower() in ("to", "from", "subject"):
            return value.strip().lower()
        return OrderIdArea.SUBJECT

    @field_validator("status_search_area", mode="before")
    @classmethod
    def _coerce_status_areas(cls, value: Any) -> list[str]:
        if value is None:
            value = []
        elif isinstance(value, (str, ContentArea)):
            value = [value]

        areas: list[str] = []
        for area in value:
            name = area.value if isinstance(area, ContentArea) else str(area).strip().lower()
            if name in ("subject", "body") and name not in areas:
                areas.append(name)
        return areas or ["subject"]

    @field_validator("statuses", mode="before")
    @classmethod
    def _coerce_statuses(cls, value: Any) -> list[str]:
        return split_statuses(value)

    @field_validator("status_field_id", mode="before")
    @classmethod
    def _coerce_status_field_id(cls, value: Any) -> int:
        try:
            return int(value or 0)
        except (TypeError, ValueError):
            return 0

    def searches(self, area: ContentArea) -> bool:
        return area in self.status_search_area

    def is_empty(self) -> bool:
        """True when no user-entered field carries a value."""
        return not (
            self.parser_code
            or self.title_filter
            or self.mask
            or self.statuses
            or self.status_field_id > 0
            or any(not spec.is_empty() for spec in self.extra_fields)
        )


class FilterOverrides(BaseModel):
    """Unsaved filter parameters layered over a stored (or empty) filter."""

    model_config = ConfigDict(extra="forbid")

    parser_code: str | None = None
    title_filter: str | None = None
    order_id_search_area: str | None = None
    mask: str | None = None
    status_search_area: list[str] | str | None = None
    statuses: list[str] | str | None = Field(
        default=None, description="List or comma/newline separated string"
    )
    status_field_id: int | None = None
    extra_fields: list[ExtraFieldSpec] | None = None

    def apply(self, base: Filter | None = None) -> Filter:
        """Return a validated filter with these overrides applied."""
        data = base.model_dump() if base is not None else {}
        data.update(self.model_dump(exclude_none=True))
        return Filter.model_validate(data)


class Account(BaseModel):
    """A Gmail mailbox with its OAuth client and filters."""

    id: str = Field(default_factory=lambda: new_id("acc"))
    title: str = Field(default="")
    credentials: str = Field(default="", description="OAuth client JSON text")
    token: dict[str, Any] | None = Field(default=None)
    connected_email: str = Field(default="")
    created_at: datetime = Field(default_factory=datetime.now)
    connected_at: datetime | None = Field(default=None)
    filters: list[Filter] = Field(default_factory=list)

    @field_validator("token", mode="before")
    @classmethod
    def _coerce_token(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_token_text(value)
        if isinstance(value, dict) and not value:
            return None
        return value

    @property
    def display_title(self) -> str:
        return self.title or self.id

    def get_filter(self, filter_ref: str) -> Filter | None:
        """Find a filter by id, falling back to a case-insensitive parser code."""
        for flt in self.filters:
            if flt.id == filter_ref:
                return flt
        ref = filter_ref.strip().casefold()
        for flt in self.filters:
            if flt.parser_code and flt.parser_code.casefold() == ref:
                return flt
        return None


class ParserSettings(BaseModel):
    """Settings shared by every account."""

    start_date: date | None = Field(
        default=None, description="Only search messages after this date"
    )

    @field_validator("start_date", mode="before")
    @classmethod
    def _coerce_start_date(cls, value: Any) -> date | None:
        return parse_start_date(value)


class SettingsDocument(BaseModel):
    """The versioned, persisted configuration document."""

    schema_version: int = Field(default=CURRENT_SCHEMA_VERSION)
    parser: ParserSettings = Field(default_factory=ParserSettings)
    accounts: list[Account] = Field(default_factory=list)

    def get_account(self, account_id: str) -> Account | None:
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None
