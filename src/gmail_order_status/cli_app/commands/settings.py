"""Settings command group: inspect and upgrade the settings document."""

from __future__ import annotations

import argparse
from typing import Any

from gmail_order_status.cli_app.common import add_output_arg, add_settings_arg, exit_code
from gmail_order_status.cli_app.output import emit
from gmail_order_status.stores.settings_store import SettingsStore
from gmail_order_status.utils.errors import GmailOrderStatusError, handle_error


def obfuscate_sensitive_value(value: str | None, keep_chars: int = 4) -> str | None:
    """Obfuscate sensitive values by showing only the first few characters."""
    if not value or not isinstance(value, str):
        return value
    if len(value) <= keep_chars:
        return "*" * len(value)
    return value[:keep_chars] + "*" * (len(value) - keep_chars)


def obfuscate_document_for_display(document: dict[str, Any]) -> dict[str, Any]:
    """Copy of the settings document with credentials and tokens masked."""
    shown = dict(document)
    accounts = []
    for account in document.get("accounts", []):
        account = dict(account)
        account["credentials"] = obfuscate_sensitive_value(account.get("credentials"), 8)
        token = account.get("token")
        if isinstance(token, dict):
            account["token"] = {
                k: obfuscate_sensitive_value(v) if "token" in k else v
                for k, v in token.items()
            }
        accounts.append(account)
    shown["accounts"] = accounts
    return shown


def register(subparsers: argparse._SubParsersAction) -> None:
    settings_cmd = subparsers.add_parser("settings", help="Settings document")
    settings_sub = settings_cmd.add_subparsers(dest="subcommand", required=True)

    show = settings_sub.add_parser("show", help="Show settings with secrets masked")
    add_settings_arg(show)
    add_output_arg(show)

    migrate = settings_sub.add_parser("migrate", help="Upgrade the document schema")
    add_settings_arg(migrate)
    add_output_arg(migrate)

    start_date = settings_sub.add_parser(
        "start-date", help="Only search messages after this date"
    )
    start_date.add_argument("date", help="YYYY-MM-DD, or 'none' to clear")
    add_settings_arg(start_date)
    add_output_arg(start_date)


def run(args: argparse.Namespace) -> int:
    store = SettingsStore(args.settings_file)

    try:
        if args.subcommand == "show":
            document = store.load().model_dump(mode="json")
            payload: dict[str, Any] = {
                "path": str(store.path),
                "document": obfuscate_document_for_display(document),
            }
        elif args.subcommand == "migrate":
            payload = {"path": str(store.path), "migrated": store.migrate()}
        elif args.subcommand == "start-date":
            value = None if args.date.lower() == "none" else args.date
            document = store.set_start_date(value)
            payload = {"start_date": document.parser.start_date}
        else:
            raise ValueError(f"Unknown settings subcommand: {args.subcommand}")
    except GmailOrderStatusError as e:
        payload = {"error": handle_error(e, f"settings {args.subcommand}")}

    emit(args, payload)
    return exit_code(payload)


__all__ = ["register", "run"]
