"""MCP server entry point for gmail-order-status."""

from __future__ import annotations

from fastmcp import FastMCP

from gmail_order_status.settings import get_settings
from gmail_order_status.tools import register_all_tools
from gmail_order_status.utils.logging_config import initialize_logging


def create_server() -> FastMCP:
    """Build the FastMCP server with every tool registered."""
    settings = get_settings()
    mcp = FastMCP(
        settings.server_name,
        instructions=(
            f"{settings.application_name}: test Gmail filters, list matching "
            "order messages and write statuses to entry fields."
        ),
    )
    register_all_tools(mcp)
    return mcp


def serve() -> None:
    """Run the MCP server using stdio transport."""
    initialize_logging()
    create_server().run()


if __name__ == "__main__":
    serve()
