"""Arguments and service wiring shared by command groups."""

from __future__ import annotations

import argparse
from typing import Any

from gmail_order_status.models.accounts import FilterOverrides
from gmail_order_status.services.entry_updates import EntryUpdateCoordinator
from gmail_order_status.services.parser_service import ParserService
from gmail_order_status.stores.entry_store import EntryStore
from gmail_order_status.stores.settings_store import SettingsStore
from gmail_order_status.utils.logging_config import setup_task_logger


def add_output_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        choices=["json", "text"],
        default="json",
        help="Output format (default: json)",
    )


def add_settings_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--settings-file",
        default=None,
        help="Settings document path (default: GMAIL_ORDER_STATUS_SETTINGS_PATH)",
    )


def add_entries_db_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--entries-db",
        default=None,
        help="Entry store SQLite path (default: GMAIL_ORDER_STATUS_ENTRIES_DB_PATH)",
    )


def add_paging_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--batch-size", type=int, default=None, help="Message ids per page")
    parser.add_argument("--max-pages", type=int, default=None, help="Maximum pages to scan")


def add_filter_override_args(parser: argparse.ArgumentParser) -> None:
    """Unsaved filter parameters for an interactive test."""
    parser.add_argument("--statuses", nargs="+", default=None, help="Statuses in priority order")
    parser.add_argument("--mask", default=None, help="Order id mask containing {entry_id}")
    parser.add_argument("--title-filter", default=None, help="Required subject substring")
    parser.add_argument(
        "--order-id-area",
        choices=["to", "from", "subject"],
        default=None,
        help="Header the order id mask is applied to",
    )
    parser.add_argument(
        "--status-area",
        choices=["subject", "body"],
        action="append",
        default=None,
        help="Where statuses are searched (repeatable)",
    )


def overrides_from_args(args: argparse.Namespace) -> FilterOverrides | None:
    values: dict[str, Any] = {
        "statuses": args.statuses,
        "mask": args.mask,
        "title_filter": args.title_filter,
        "order_id_search_area": args.order_id_area,
        "status_search_area": args.status_area,
    }
    values = {k: v for k, v in values.items() if v is not None}
    return FilterOverrides(**values) if values else None


def build_parser_service(args: argparse.Namespace) -> ParserService:
    return ParserService(SettingsStore(getattr(args, "settings_file", None)))


def build_coordinator(args: argparse.Namespace) -> EntryUpdateCoordinator:
    return EntryUpdateCoordinator(
        build_parser_service(args),
        EntryStore(getattr(args, "entries_db", None)),
        task_logger=setup_task_logger("entry_update"),
    )


def exit_code(payload: Any) -> int:
    if not isinstance(payload, dict):
        return 0
    if payload.get("error"):
        return 1
    if payload.get("success") is False:
        return 1
    return 0
