"""
Command-line interface for gmail-order-status.
"""

import sys

from gmail_order_status.cli_app.registry import build_parser, dispatch
from gmail_order_status.utils.logging_config import enable_debug_logging, initialize_logging


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    initialize_logging()
    if args.debug:
        enable_debug_logging()

    if not args.command:
        parser.print_help()
        return 1

    try:
        return dispatch(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
