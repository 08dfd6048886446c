"""
gmail-order-status: extract order statuses from Gmail messages.

Filters search a mailbox, pull an order id and a workflow status out of each
matching message, and write the status into an entry field.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gmail-order-status")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = ["__version__"]
