"""Tests for the message MCP tool handlers."""

import pytest

from gmail_order_status.server import create_server
from gmail_order_status.services.parser_service import ParserService
from gmail_order_status.tools.messages import list_messages, preview_filter


@pytest.fixture
def service(settings_store, app_settings, fake_gmail, raw_message):
    client = fake_gmail(
        [raw_message("m1", subject="order-12 Paid"), raw_message("m2", subject="order-13 Refunded")]
    )
    return ParserService(settings_store, client_factory=lambda creds: client, settings=app_settings)


@pytest.mark.asyncio
async def test_preview_filter_with_overrides(service):
    response = await preview_filter(
        service, "acc_main", "flt_orders", {"statuses": ["Refunded"]}
    )

    assert response.success is True
    assert response.total == 1
    assert response.items[0]["entryId"] == "13"
    assert response.items[0]["status"] == "Refunded"


@pytest.mark.asyncio
async def test_preview_filter_rejects_unknown_override(service):
    response = await preview_filter(service, "acc_main", None, {"colour": "red"})

    assert response.success is False
    assert response.error_type == "configuration"


@pytest.mark.asyncio
async def test_preview_filter_reports_error_type(service):
    response = await preview_filter(service, "acc_missing")

    assert response.success is False
    assert response.error_type == "configuration"
    assert "Account not found" in response.error


@pytest.mark.asyncio
async def test_list_messages_scopes(service):
    by_filter = await list_messages(service, "acc_main", "orders")
    assert by_filter.success
    assert by_filter.accounts[0]["filter_id"] == "flt_orders"

    everything = await list_messages(service)
    assert [a["account_id"] for a in everything.accounts] == ["acc_main"]

    invalid = await list_messages(service, filter_id="orders")
    assert invalid.success is False


def test_create_server():
    mcp = create_server()
    assert mcp.name == "gmail-order-status"
