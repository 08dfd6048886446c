"""
Run summary models for message listings and entry updates.
"""

from pydantic import BaseModel, Field

from gmail_order_status.models.messages import FetchResult, MatchResult


class RunCounters(BaseModel):
    """Counters rolled up across filters and accounts."""

    updated: int = Field(default=0, description="Status values written")
    extras_updated: int = Field(default=0, description="Extra field values written")
    skipped_no_status_field: int = Field(default=0)
    skipped_no_entry_id: int = Field(default=0)
    skipped_empty_status: int = Field(default=0)
    errors: int = Field(default=0)

    def add(self, other: "RunCounters") -> None:
        for name in RunCounters.model_fields:
            setattr(self, name, getattr(self, name) + getattr(other, name))

    def counters(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in RunCounters.model_fields}


class RunSummary(RunCounters):
    """Result of applying one filter's matches to the entry store."""

    account_id: str
    filter_id: str = ""
    parser_code: str = ""
    status_field_id: int = 0
    error: str | None = None
    items: list[MatchResult] = Field(default_factory=list)


class AccountSummary(BaseModel):
    """Entry update roll-up for one account."""

    account_id: str
    title: str = ""
    email: str = ""
    filters_count: int = 0
    totals: RunCounters = Field(default_factory=RunCounters)
    filters: list[RunSummary] = Field(default_factory=list)
    error: str | None = None


class UpdateReport(BaseModel):
    """Entry update roll-up for every configured account."""

    totals: RunCounters = Field(default_factory=RunCounters)
    accounts: list[AccountSummary] = Field(default_factory=list)
    error: str | None = None


class FilterMessages(FetchResult):
    """Fetch result annotated with the filter it came from."""

    account_id: str
    filter_id: str = ""
    parser_code: str = ""
    status_field_id: int = 0


class AccountMessages(BaseModel):
    """Message listing for every filter of one account."""

    account_id: str
    title: str = ""
    email: str = ""
    filters_count: int = 0
    messages: int = 0
    errors: int = 0
    filters: list[FilterMessages] = Field(default_factory=list)
    error: str | None = None
