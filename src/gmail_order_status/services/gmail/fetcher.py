"""Paged message retrieval for one Gmail account."""

from collections.abc import AsyncIterator
import logging

from gmail_order_status.clients.gmail import GmailClient
from gmail_order_status.models.messages import MailMessage
from gmail_order_status.services.common.pagination import iter_token_pages
from gmail_order_status.services.gmail.message_parser import parse_message
from gmail_order_status.utils.logging_config import PerformanceMonitor

logger = logging.getLogger(__name__)


class MessageFetcher:
    """Search a mailbox and yield parsed messages page by page."""

    def __init__(self, gmail_client: GmailClient):
        self.gmail_client = gmail_client

    async def iter_messages(
        self,
        query: str,
        batch_size: int,
        max_pages: int,
    ) -> AsyncIterator[MailMessage]:
        """
        Yield every message matching ``query``.

        A page's messages are all read in full before the first of them is
        yielded, so the per-page timing covers Gmail calls only. At most
        ``max(1, max_pages)`` search pages are followed.
        """
        logger.info(f"Searching Gmail with query: {query or '(none)'}")

        async def fetch_page(page_token: str | None) -> tuple[list[str], str | None]:
            return await self.gmail_client.list_message_ids(
                query=query, page_size=batch_size, page_token=page_token
            )

        async for page_number, message_ids in iter_token_pages(fetch_page, max_pages=max_pages):
            with PerformanceMonitor(logger, f"Gmail page {page_number}", messages=len(message_ids)):
                raw_messages = [
                    await self.gmail_client.get_message(message_id) for message_id in message_ids
                ]
            for raw in raw_messages:
                yield parse_message(raw)
