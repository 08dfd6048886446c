"""
Clients for gmail-order-status.

- GmailClient: Gmail API (search, read, profile)
"""

from .gmail import GmailClient

__all__ = ["GmailClient"]
