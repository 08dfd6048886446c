"""Entry command group: propagate statuses into entry fields."""

from __future__ import annotations

import argparse
import asyncio
from typing import Any

from gmail_order_status.cli_app.common import (
    add_entries_db_arg,
    add_output_arg,
    add_settings_arg,
    build_coordinator,
    exit_code,
)
from gmail_order_status.cli_app.output import emit, to_payload
from gmail_order_status.utils.errors import GmailOrderStatusError, handle_error


def register(subparsers: argparse._SubParsersAction) -> None:
    entries_cmd = subparsers.add_parser("entries", help="Entry field updates")
    entries_sub = entries_cmd.add_subparsers(dest="subcommand", required=True)

    update = entries_sub.add_parser(
        "update", help="Write matched statuses to entries (scheduled run)"
    )
    update.add_argument("--account", help="Account id (default: every account)")
    update.add_argument("--filter", dest="filter_ref", help="Filter id or parser code")
    add_settings_arg(update)
    add_entries_db_arg(update)
    add_output_arg(update)

    set_cmd = entries_sub.add_parser("set", help="Set one entry field value")
    set_cmd.add_argument("--entry-id", type=int, required=True)
    set_cmd.add_argument("--field-id", type=int, required=True)
    set_cmd.add_argument("--value", required=True)
    add_entries_db_arg(set_cmd)
    add_output_arg(set_cmd)

    get_cmd = entries_sub.add_parser("get", help="Show stored field values of an entry")
    get_cmd.add_argument("--entry-id", type=int, required=True)
    add_entries_db_arg(get_cmd)
    add_output_arg(get_cmd)


def run(args: argparse.Namespace) -> int:
    coordinator = build_coordinator(args)

    try:
        if args.subcommand == "update":
            if args.filter_ref and not args.account:
                payload: Any = {"error": "--filter requires --account"}
            elif args.filter_ref:
                payload = asyncio.run(coordinator.update_filter(args.account, args.filter_ref))
            elif args.account:
                payload = asyncio.run(coordinator.update_account(args.account))
            else:
                payload = asyncio.run(coordinator.update_all())
        elif args.subcommand == "set":
            ok = coordinator.set_value(args.entry_id, args.field_id, args.value)
            payload = {
                "success": ok,
                "entry_id": args.entry_id,
                "field_id": args.field_id,
                "value": args.value,
            }
        elif args.subcommand == "get":
            values = coordinator.entry_store.get_values(args.entry_id)
            payload = {"entry_id": args.entry_id, "values": values}
        else:
            raise ValueError(f"Unknown entries subcommand: {args.subcommand}")
    except GmailOrderStatusError as e:
        payload = {"error": handle_error(e, f"entries {args.subcommand}")}
    finally:
        coordinator.entry_store.close()

    payload = to_payload(payload)
    emit(args, payload)
    return exit_code(payload)


__all__ = ["register", "run"]
