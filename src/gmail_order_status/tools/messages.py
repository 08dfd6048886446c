from typing import Any

from fastmcp import Context, FastMCP
from pydantic import BaseModel, Field, ValidationError

from gmail_order_status.models.accounts import FilterOverrides
from gmail_order_status.services.parser_service import ParserService, get_parser_service
from gmail_order_status.utils.errors import handle_error


class MessagesResponse(BaseModel):
    success: bool
    total: int = 0
    items: list[dict[str, Any]] = Field(default_factory=list)
    error: str | None = None
    error_type: str | None = None


class AccountListingResponse(BaseModel):
    success: bool
    accounts: list[dict[str, Any]] = Field(default_factory=list)
    error: str | None = None


async def preview_filter(
    service: ParserService,
    account_id: str,
    filter_id: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> MessagesResponse:
    """Preview a filter, optionally with unsaved overrides."""
    try:
        parsed = FilterOverrides.model_validate(overrides) if overrides else None
    except ValidationError as e:
        return MessagesResponse(success=False, error=str(e), error_type="configuration")

    result = await service.preview(account_id, filter_id=filter_id, overrides=parsed)
    return MessagesResponse(
        success=result.ok,
        total=result.total,
        items=[item.model_dump(mode="json", by_alias=True) for item in result.items],
        error=result.error,
        error_type=result.error_type.value if result.error_type else None,
    )


async def list_messages(
    service: ParserService,
    account_id: str | None = None,
    filter_id: str | None = None,
) -> AccountListingResponse:
    """List matches for one filter, one account, or every account."""
    try:
        if filter_id and account_id:
            listing = [await service.messages_by_filter(account_id, filter_id)]
        elif account_id:
            listing = [await service.messages_by_account(account_id)]
        elif filter_id:
            return AccountListingResponse(success=False, error="filter_id requires account_id")
        else:
            listing = await service.messages_for_all_accounts()
    except Exception as e:
        return AccountListingResponse(success=False, error=handle_error(e, "list messages"))

    return AccountListingResponse(
        success=True,
        accounts=[entry.model_dump(mode="json", by_alias=True) for entry in listing],
    )


def register_message_tools(mcp: FastMCP) -> None:
    """Register message tools with the MCP server."""

    @mcp.tool()
    async def gmail_test_filter(
        account_id: str,
        ctx: Context,
        filter_id: str | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> MessagesResponse:
        """Preview the first matches of a filter without saving anything.

        Args:
            account_id: Account id.
            filter_id: Stored filter id or parser code (optional).
            overrides: Unsaved filter fields, e.g. {"statuses": ["Paid"], "mask": "order-{entry_id}"}.
        """
        await ctx.info(f"Testing filter {filter_id or '(unsaved)'} on {account_id}")
        return await preview_filter(get_parser_service(), account_id, filter_id, overrides)

    @mcp.tool()
    async def gmail_list_messages(
        ctx: Context,
        account_id: str | None = None,
        filter_id: str | None = None,
    ) -> AccountListingResponse:
        """List matching messages by filter, by account, or for every account.

        Args:
            account_id: Account id (omit for every account).
            filter_id: Filter id or parser code (requires account_id).
        """
        return await list_messages(get_parser_service(), account_id, filter_id)
