"""Message command group: interactive filter tests and listings."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from gmail_order_status.cli_app.common import (
    add_filter_override_args,
    add_output_arg,
    add_paging_args,
    add_settings_arg,
    build_parser_service,
    exit_code,
    overrides_from_args,
)
from gmail_order_status.cli_app.output import emit, to_payload
from gmail_order_status.utils.errors import GmailOrderStatusError, handle_error


def register(subparsers: argparse._SubParsersAction) -> None:
    messages_cmd = subparsers.add_parser("messages", help="Run filters against Gmail")
    messages_sub = messages_cmd.add_subparsers(dest="subcommand", required=True)

    test = messages_sub.add_parser(
        "test", help="Preview the first matches of a filter (unsaved overrides allowed)"
    )
    test.add_argument("--account", required=True, help="Account id")
    test.add_argument("--filter", dest="filter_ref", help="Filter id or parser code")
    add_filter_override_args(test)
    add_settings_arg(test)
    add_output_arg(test)

    listing = messages_sub.add_parser("list", help="List matching messages")
    listing.add_argument("--account", help="Account id (default: every account)")
    listing.add_argument("--filter", dest="filter_ref", help="Filter id or parser code")
    listing.add_argument(
        "--show-all",
        action="store_true",
        help="Use the 'show all' page bound for a single filter",
    )
    add_paging_args(listing)
    add_settings_arg(listing)
    add_output_arg(listing)


def run(args: argparse.Namespace) -> int:
    service = build_parser_service(args)

    async def _test() -> Any:
        return await service.preview(
            args.account,
            filter_id=args.filter_ref,
            overrides=overrides_from_args(args),
        )

    async def _list() -> Any:
        if args.filter_ref and not args.account:
            return {"error": "--filter requires --account"}
        if args.show_all and not args.filter_ref:
            return {"error": "--show-all requires --filter"}
        if args.filter_ref and args.show_all:
            return await service.list_all(args.account, args.filter_ref)
        if args.filter_ref:
            return await service.messages_by_filter(
                args.account, args.filter_ref, args.batch_size, args.max_pages
            )
        if args.account:
            return await service.messages_by_account(
                args.account, args.batch_size, args.max_pages
            )
        accounts = await service.messages_for_all_accounts(args.batch_size, args.max_pages)
        return {"count": len(accounts), "accounts": accounts}

    handlers: dict[str, Callable[[], Awaitable[Any]]] = {
        "test": _test,
        "list": _list,
    }

    handler = handlers.get(args.subcommand)
    if handler is None:
        raise ValueError(f"Unknown messages subcommand: {args.subcommand}")

    try:
        payload = to_payload(asyncio.run(handler()))
    except GmailOrderStatusError as e:
        payload = {"error": handle_error(e, f"messages {args.subcommand}")}
    emit(args, payload)
    return exit_code(payload)


__all__ = ["register", "run"]
