"""
Settings document persistence with schema migration.

The document is a single JSON file. Older layouts are upgraded on load:

- v1: one mask and status list per account (no filters)
- v2: positional filters with a ``status`` string
- v3: stable ids on accounts, filters and extra fields
"""

from collections.abc import Callable
import copy
from datetime import datetime
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Any

from gmail_order_status.models.accounts import (
    CURRENT_SCHEMA_VERSION,
    Account,
    Filter,
    ParserSettings,
    SettingsDocument,
    new_id,
)
from gmail_order_status.settings import get_settings
from gmail_order_status.utils.errors import ConfigurationError, NotFoundError

logger = logging.getLogger(__name__)


# -------------------- Migration --------------------


def detect_schema_version(raw: dict[str, Any]) -> int:
    """Guess the layout of an unversioned document."""
    version = raw.get("schema_version")
    if version is not None:
        try:
            return int(version)
        except (TypeError, ValueError):
            pass

    accounts = raw.get("accounts") or []
    if any(isinstance(a, dict) and "filters" in a for a in accounts):
        return 2
    if any(isinstance(a, dict) and ("mask" in a or "statuses" in a) for a in accounts):
        return 1
    return CURRENT_SCHEMA_VERSION


def _v1_to_v2(raw: dict[str, Any]) -> dict[str, Any]:
    for account in raw.get("accounts") or []:
        if not isinstance(account, dict):
            continue
        mask = account.pop("mask", "") or ""
        statuses = account.pop("statuses", "") or ""
        account["filters"] = [{"mask": mask, "status": statuses}] if (mask or statuses) else []
    return raw


def _v2_to_v3(raw: dict[str, Any]) -> dict[str, Any]:
    for account in raw.get("accounts") or []:
        if not isinstance(account, dict):
            continue
        account.setdefault("id", new_id("acc"))
        for flt in account.get("filters") or []:
            if not isinstance(flt, dict):
                continue
            flt.setdefault("id", new_id("flt"))
            status = flt.pop("status", None)
            if status and not flt.get("statuses"):
                flt["statuses"] = status
            for extra in flt.get("extra_fields") or []:
                if isinstance(extra, dict):
                    extra.setdefault("id", new_id("xf"))
    return raw


def _missing_ids(raw: dict[str, Any]) -> bool:
    for account in raw.get("accounts") or []:
        if not isinstance(account, dict):
            continue
        if not account.get("id"):
            return True
        for flt in account.get("filters") or []:
            if not isinstance(flt, dict):
                continue
            if not flt.get("id"):
                return True
            for extra in flt.get("extra_fields") or []:
                if isinstance(extra, dict) and not extra.get("id"):
                    return True
    return False


_MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    1: _v1_to_v2,
    2: _v2_to_v3,
}


def migrate_settings(raw: dict[str, Any] | None) -> SettingsDocument:
    """Upgrade a raw document to the current schema and validate it."""
    data = copy.deepcopy(raw or {})
    version = detect_schema_version(data)

    while version < CURRENT_SCHEMA_VERSION:
        step = _MIGRATIONS.get(version)
        if step is None:
            raise ConfigurationError(f"Unsupported settings schema version {version}")
        logger.info(f"Migrating settings schema v{version} -> v{version + 1}")
        data = step(data)
        version += 1

    data["schema_version"] = CURRENT_SCHEMA_VERSION
    return SettingsDocument.model_validate(data)


# -------------------- Store --------------------


class SettingsStore:
    """
    Load and save the settings document.

    Every mutation re-reads the file before writing so concurrent runs only
    overwrite the fields they changed.
    """

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path).expanduser() if path else get_settings().settings_path

    def load_raw(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Settings file {self.path} is not valid JSON: {e}"
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {self.path} must hold an object")
        return data

    def load(self) -> SettingsDocument:
        """Load the document; outdated or id-less documents are written back upgraded."""
        raw = self.load_raw()
        document = migrate_settings(raw)
        if raw and (detect_schema_version(raw) < CURRENT_SCHEMA_VERSION or _missing_ids(raw)):
            self.save(document)
        return document

    def save(self, document: SettingsDocument) -> None:
        """Write the document atomically; empty filters and extra fields are dropped."""
        for account in document.accounts:
            account.filters = [f for f in account.filters if not f.is_empty()]
            for flt in account.filters:
                flt.extra_fields = [x for x in flt.extra_fields if not x.is_empty()]
        document.schema_version = CURRENT_SCHEMA_VERSION

        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = document.model_dump_json(indent=2)

        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".settings-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"Saved settings to {self.path}")

    def migrate(self) -> bool:
        """Rewrite an outdated document in the current schema."""
        raw = self.load_raw()
        if not raw or (
            detect_schema_version(raw) >= CURRENT_SCHEMA_VERSION and not _missing_ids(raw)
        ):
            return False
        self.save(migrate_settings(raw))
        return True

    # -------------------- Accounts --------------------

    def get_account(self, account_id: str) -> Account | None:
        return self.load().get_account(account_id)

    def require_account(self, account_id: str) -> Account:
        account = self.get_account(account_id)
        if account is None:
            raise NotFoundError("Account not found", f"No account with id {account_id!r}")
        return account

    def update_account(self, account_id: str, mutate: Callable[[Account], None]) -> Account:
        """Apply ``mutate`` to a freshly loaded account and save."""
        document = self.load()
        account = document.get_account(account_id)
        if account is None:
            raise NotFoundError("Account not found", f"No account with id {account_id!r}")
        mutate(account)
        self.save(document)
        return account

    def upsert_account(self, account: Account) -> Account:
        document = self.load()
        for i, existing in enumerate(document.accounts):
            if existing.id == account.id:
                document.accounts[i] = account
                break
        else:
            document.accounts.append(account)
        self.save(document)
        return account

    def set_token(self, account_id: str, token: dict[str, Any] | None) -> Account:
        def _apply(account: Account) -> None:
            account.token = token or None

        return self.update_account(account_id, _apply)

    def set_connected(self, account_id: str, email: str = "") -> Account:
        def _apply(account: Account) -> None:
            if email:
                account.connected_email = email
            account.connected_at = datetime.now()

        return self.update_account(account_id, _apply)

    def upsert_filter(self, account_id: str, flt: Filter) -> Filter:
        """Replace the filter with the same id, or append it."""

        def _apply(account: Account) -> None:
            for i, existing in enumerate(account.filters):
                if existing.id == flt.id:
                    account.filters[i] = flt
                    return
            account.filters.append(flt)

        self.update_account(account_id, _apply)
        return flt

    def set_start_date(self, value: Any) -> SettingsDocument:
        document = self.load()
        document.parser = ParserSettings(start_date=value)
        self.save(document)
        return document
