"""Gmail authentication, retrieval and message parsing."""

from .auth import ClientConfig, TokenLifecycle, parse_client_config
from .fetcher import MessageFetcher
from .message_parser import parse_message

__all__ = [
    "ClientConfig",
    "MessageFetcher",
    "TokenLifecycle",
    "parse_client_config",
    "parse_message",
]
