"""Tests for the entry MCP tool handlers."""

import pytest

from gmail_order_status.services.entry_updates import EntryUpdateCoordinator
from gmail_order_status.services.parser_service import ParserService
from gmail_order_status.tools.entries import update_entries


@pytest.fixture
def coordinator(settings_store, entry_store, app_settings, fake_gmail, raw_message):
    client = fake_gmail([raw_message("m1", subject="order-21 Paid")])
    service = ParserService(settings_store, client_factory=lambda creds: client, settings=app_settings)
    return EntryUpdateCoordinator(service, entry_store, settings=app_settings)


@pytest.mark.asyncio
async def test_update_entries_for_filter(coordinator, entry_store):
    response = await update_entries(coordinator, "acc_main", "flt_orders")

    assert response.success is True
    assert response.counters["updated"] == 1
    assert entry_store.get_value(21, 3) == "Paid"


@pytest.mark.asyncio
async def test_update_entries_for_everything(coordinator):
    response = await update_entries(coordinator)

    assert response.success is True
    assert response.counters["updated"] == 1
    assert response.report["accounts"][0]["account_id"] == "acc_main"


@pytest.mark.asyncio
async def test_update_entries_unknown_account(coordinator):
    response = await update_entries(coordinator, "acc_missing")

    assert response.success is False
    assert response.error == "Account not found"
    assert response.counters["errors"] == 1


@pytest.mark.asyncio
async def test_update_entries_filter_requires_account(coordinator):
    response = await update_entries(coordinator, filter_id="flt_orders")
    assert response.success is False
