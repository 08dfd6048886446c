from typing import Any

from fastmcp import Context, FastMCP
from pydantic import BaseModel, Field

from gmail_order_status.services.entry_updates import (
    EntryUpdateCoordinator,
    get_entry_update_coordinator,
)
from gmail_order_status.utils.errors import handle_error


class UpdateResponse(BaseModel):
    success: bool
    counters: dict[str, int] = Field(default_factory=dict)
    report: dict[str, Any] | None = None
    error: str | None = None


class SetValueResponse(BaseModel):
    success: bool
    entry_id: int
    field_id: int
    value: str


async def update_entries(
    coordinator: EntryUpdateCoordinator,
    account_id: str | None = None,
    filter_id: str | None = None,
) -> UpdateResponse:
    """Run entry updates for one filter, one account, or every account."""
    try:
        if filter_id and account_id:
            summary = await coordinator.update_filter(account_id, filter_id)
            return UpdateResponse(
                success=summary.error is None,
                counters=summary.counters(),
                report=summary.model_dump(mode="json", by_alias=True),
                error=summary.error,
            )
        if filter_id:
            return UpdateResponse(success=False, error="filter_id requires account_id")
        if account_id:
            account = await coordinator.update_account(account_id)
            return UpdateResponse(
                success=account.error is None,
                counters=account.totals.counters(),
                report=account.model_dump(mode="json", by_alias=True),
                error=account.error,
            )
        report = await coordinator.update_all()
    except Exception as e:
        return UpdateResponse(success=False, error=handle_error(e, "update entries"))

    return UpdateResponse(
        success=report.error is None,
        counters=report.totals.counters(),
        report=report.model_dump(mode="json", by_alias=True),
        error=report.error,
    )


def register_entry_tools(mcp: FastMCP) -> None:
    """Register entry tools with the MCP server."""

    @mcp.tool()
    async def gmail_update_entries(
        ctx: Context,
        account_id: str | None = None,
        filter_id: str | None = None,
    ) -> UpdateResponse:
        """Write matched statuses into entry fields.

        Args:
            account_id: Account id (omit for every account).
            filter_id: Filter id or parser code (requires account_id).
        """
        await ctx.info("Updating entries from Gmail matches")
        return await update_entries(get_entry_update_coordinator(), account_id, filter_id)

    @mcp.tool()
    async def gmail_set_entry_value(
        entry_id: int, field_id: int, value: str, ctx: Context
    ) -> SetValueResponse:
        """Set one entry field value (insert or update).

        Args:
            entry_id: Entry id (positive).
            field_id: Field id (positive).
            value: Value to store.
        """
        ok = get_entry_update_coordinator().set_value(entry_id, field_id, value)
        return SetValueResponse(success=ok, entry_id=entry_id, field_id=field_id, value=value)
