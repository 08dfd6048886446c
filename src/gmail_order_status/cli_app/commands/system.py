"""System command group."""

from __future__ import annotations

import argparse


def register(subparsers: argparse._SubParsersAction) -> None:
    subparsers.add_parser("serve", help="Run the MCP server over stdio")
    subparsers.add_parser("version", help="Show the installed version")


def run_serve(args: argparse.Namespace) -> int:
    from gmail_order_status.server import serve

    serve()
    return 0


def run_version(args: argparse.Namespace) -> int:
    from gmail_order_status import __version__

    print(f"gmail-order-status {__version__}")
    return 0


__all__ = ["register", "run_serve", "run_version"]
