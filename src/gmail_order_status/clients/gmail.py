"""
Gmail API client.

Thin async wrapper over the blocking Google API client: search message ids
page by page, read full messages, and read the mailbox profile.
"""

import asyncio
from collections.abc import Callable
import logging
from typing import Any

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)


class GmailClient:
    """
    Gmail API client bound to one account's credentials.

    Token refresh is handled before construction by TokenLifecycle, so this
    class never touches the token store.
    """

    def __init__(self, credentials: Credentials, user_id: str = "me"):
        """
        Initialize Gmail client.

        Args:
            credentials: Fresh OAuth2 credentials for the mailbox
            user_id: Gmail user id ("me" for the authorized account)
        """
        self._credentials = credentials
        self.user_id = user_id
        self._service: Any = None

    @property
    def service(self) -> Any:
        """Get Gmail API service (lazy initialization)."""
        if self._service is None:
            self._service = build(
                "gmail", "v1", credentials=self._credentials, cache_discovery=False
            )
            logger.debug("Gmail API service initialized")
        return self._service

    async def _execute(self, make_request: Callable[[], Any]) -> Any:
        """Run a blocking API request in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: make_request().execute())

    async def list_message_ids(
        self,
        query: str = "",
        page_size: int = 500,
        page_token: str | None = None,
    ) -> tuple[list[str], str | None]:
        """
        Search one page of message ids.

        Args:
            query: Gmail search expression; empty means no server-side filter
            page_size: Maximum ids in this page
            page_token: Continuation token from the previous page

        Returns:
            Tuple of (message ids, next page token or None)
        """
        params: dict[str, Any] = {"userId": self.user_id, "maxResults": max(1, page_size)}
        if query:
            params["q"] = query
        if page_token:
            params["pageToken"] = page_token

        try:
            result = await self._execute(
                lambda: self.service.users().messages().list(**params)
            )
        except HttpError as e:
            logger.error(f"Gmail API error: {e}")
            raise

        ids = [m["id"] for m in result.get("messages", []) if m.get("id")]
        return ids, result.get("nextPageToken") or None

    async def get_message(self, message_id: str) -> dict[str, Any]:
        """
        Get full message content by ID.

        Args:
            message_id: Gmail message ID

        Returns:
            Full message data including payload and headers
        """
        try:
            return await self._execute(
                lambda: self.service.users()
                .messages()
                .get(userId=self.user_id, id=message_id, format="full")
            )
        except HttpError as e:
            logger.error(f"Failed to get message {message_id}: {e}")
            raise

    async def get_profile_email(self) -> str:
        """Email address of the authorized mailbox."""
        profile = await self._execute(
            lambda: self.service.users().getProfile(userId=self.user_id)
        )
        return str(profile.get("emailAddress") or "")
