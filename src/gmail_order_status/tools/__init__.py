"""
MCP tools for gmail-order-status.

This module registers all tools with the FastMCP server.
"""

from fastmcp import FastMCP

from .entries import register_entry_tools
from .messages import register_message_tools


def register_all_tools(mcp: FastMCP) -> None:
    """
    Register all MCP tools.

    Args:
        mcp: FastMCP server instance
    """
    register_message_tools(mcp)
    register_entry_tools(mcp)


__all__ = [
    "register_all_tools",
    "register_entry_tools",
    "register_message_tools",
]
