import base64
import json
from typing import Any
import pytest

from gmail_order_status.settings import Settings
from gmail_order_status.stores.entry_store import EntryStore
from gmail_order_status.stores.settings_store import SettingsStore

CLIENT_JSON = json.dumps(
    {"installed": {"client_id": "client-123.apps.googleusercontent.com", "client_secret": "s3cret"}}
)

VALID_TOKEN = {
    "token": "ya29.valid",
    "refresh_token": "1//refresh",
    "expiry": "2999-01-01T00:00:00Z",
}


def encode_body(text: str) -> str:
    """Base64url without padding, as Gmail returns it."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def make_raw_message(
    message_id: str,
    subject: str = "",
    sender: str = "shop@example.com",
    to: str = "me@example.com",
    body: str = "",
    mime_type: str = "text/plain",
) -> dict[str, Any]:
    """A Gmail API message resource in format=full."""
    headers = [
        {"name": "From", "value": sender},
        {"name": "To", "value": to},
        {"name": "Subject", "value": subject},
    ]
    parts = [{"mimeType": mime_type, "body": {"data": encode_body(body)}}] if body else []
    return {
        "id": message_id,
        "threadId": f"t-{message_id}",
        "payload": {"mimeType": "multipart/alternative", "headers": headers, "parts": parts},
    }


class FakeGmailClient:
    """In-memory stand-in for GmailClient."""

    def __init__(self, messages: list[dict[str, Any]], page_size: int | None = None, email: str = "me@example.com"):
        self.messages = {m["id"]: m for m in messages}
        self.order = [m["id"] for m in messages]
        self.page_size = page_size
        self.email = email
        self.queries: list[str] = []
        self.list_calls = 0

    async def list_message_ids(self, query="", page_size=500, page_token=None):
        self.queries.append(query)
        self.list_calls += 1
        size = self.page_size or page_size
        start = int(page_token or 0)
        ids = self.order[start : start + size]
        next_token = str(start + size) if start + size < len(self.order) else None
        return ids, next_token

    async def get_message(self, message_id):
        return self.messages[message_id]

    async def get_profile_email(self):
        return self.email


@pytest.fixture
def app_settings(tmp_path):
    """Settings isolated in a temporary directory."""
    return Settings(
        settings_path=tmp_path / "settings.json",
        entries_db_path=tmp_path / "entries.sqlite3",
    )


@pytest.fixture
def settings_document() -> dict[str, Any]:
    return {
        "schema_version": 3,
        "parser": {"start_date": None},
        "accounts": [
            {
                "id": "acc_main",
                "title": "Shop",
                "credentials": CLIENT_JSON,
                "token": dict(VALID_TOKEN),
                "filters": [
                    {
                        "id": "flt_orders",
                        "parser_code": "orders",
                        "mask": "order-{entry_id}",
                        "order_id_search_area": "subject",
                        "status_search_area": ["subject"],
                        "statuses": ["Paid", "Cancelled"],
                        "status_field_id": 3,
                    }
                ],
            }
        ],
    }


@pytest.fixture
def settings_store(tmp_path, settings_document) -> SettingsStore:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(settings_document), encoding="utf-8")
    return SettingsStore(path)


@pytest.fixture
def entry_store():
    store = EntryStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def raw_message():
    """Factory for Gmail API message resources."""
    return make_raw_message


@pytest.fixture
def fake_gmail():
    """The in-memory GmailClient class."""
    return FakeGmailClient
