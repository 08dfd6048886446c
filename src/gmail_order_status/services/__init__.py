"""
Services for gmail-order-status.

Filter runs (ParserService) and their propagation to entry fields
(EntryUpdateCoordinator).
"""

from .entry_updates import EntryUpdateCoordinator, get_entry_update_coordinator
from .parser_service import ParserService, get_parser_service

__all__ = [
    "EntryUpdateCoordinator",
    "ParserService",
    "get_entry_update_coordinator",
    "get_parser_service",
]
