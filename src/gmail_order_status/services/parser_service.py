"""
Parser service: run filters against Gmail accounts and collect matches.

This is the fetch boundary. Every failure below it (bad configuration,
missing token, Google API errors) is captured on the returned result rather
than raised.
"""

import asyncio
from collections.abc import Callable
from functools import lru_cache
import logging
from typing import Any

from gmail_order_status.clients.gmail import GmailClient
from gmail_order_status.models.accounts import Account, Filter, FilterOverrides
from gmail_order_status.models.messages import FetchResult, MatchResult
from gmail_order_status.models.summary import AccountMessages, FilterMessages
from gmail_order_status.services.gmail.auth import TokenLifecycle
from gmail_order_status.services.gmail.fetcher import MessageFetcher
from gmail_order_status.services.matching.matcher import MessageMatcher
from gmail_order_status.services.matching.query import build_query
from gmail_order_status.settings import Settings, get_settings
from gmail_order_status.stores.settings_store import SettingsStore
from gmail_order_status.utils.errors import ConfigurationError, NotFoundError

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Any], GmailClient]


class ParserService:
    """
    Fetch and match messages for configured accounts and filters.

    Token refresh and its write-back are serialized per account, so two runs
    against the same account never refresh concurrently.
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        client_factory: ClientFactory | None = None,
        settings: Settings | None = None,
    ):
        self.store = settings_store
        self.client_factory = client_factory or GmailClient
        self.settings = settings or get_settings()
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, account_id: str) -> asyncio.Lock:
        if account_id not in self._locks:
            self._locks[account_id] = asyncio.Lock()
        return self._locks[account_id]

    # -------------------- Resolution --------------------

    @staticmethod
    def _resolve_filter(
        account: Account,
        filter_id: str | None,
        overrides: FilterOverrides | None,
    ) -> Filter:
        base: Filter | None = None
        if filter_id:
            base = account.get_filter(filter_id)
            if base is None:
                raise NotFoundError("Filter not found", f"No filter {filter_id!r} on this account")
        elif overrides is None and account.filters:
            base = account.filters[0]

        if overrides is not None:
            return overrides.apply(base)
        return base if base is not None else Filter()

    async def connect(self, account_id: str) -> GmailClient:
        """
        Build a Gmail client with fresh credentials.

        The account is re-read under the lock so a token refreshed by a
        concurrent run is reused instead of refreshed twice.
        """
        async with self._lock_for(account_id):
            account = self.store.require_account(account_id)
            lifecycle = TokenLifecycle(account.credentials, account.token)
            credentials = lifecycle.build_credentials()

            loop = asyncio.get_running_loop()
            new_token = await loop.run_in_executor(None, lifecycle.ensure_fresh, credentials)

            client = self.client_factory(credentials)
            if new_token is not None:
                self.store.set_token(account_id, new_token)
                email = await self._profile_email(client)
                self.store.set_connected(account_id, email)
                logger.info(f"Stored refreshed token for account {account.display_title}")
            return client

    @staticmethod
    async def _profile_email(client: GmailClient) -> str:
        try:
            return await client.get_profile_email()
        except Exception as e:
            logger.warning(f"Could not read mailbox profile: {e}")
            return ""

    # -------------------- Fetch --------------------

    async def fetch_messages(
        self,
        account_id: str,
        batch_size: int | None = None,
        max_pages: int | None = None,
        filter_id: str | None = None,
        overrides: FilterOverrides | None = None,
    ) -> FetchResult:
        """
        Run one filter and return its reported matches.

        Args:
            account_id: Account to search
            batch_size: Message ids per search page (default: scan batch size)
            max_pages: Maximum search pages (default: scan page limit)
            filter_id: Stored filter id or parser code
            overrides: Unsaved filter parameters layered over the stored filter

        Returns:
            FetchResult with items, or error/error_type when the run failed
        """
        batch_size = batch_size or self.settings.scan_batch_size
        max_pages = max_pages or self.settings.scan_max_pages

        try:
            document = self.store.load()
            account = document.get_account(account_id)
            if account is None:
                raise NotFoundError("Account not found", f"No account with id {account_id!r}")

            flt = self._resolve_filter(account, filter_id, overrides)
            if not flt.statuses:
                raise ConfigurationError("Please add at least one status to test")

            matcher = MessageMatcher(flt)
            query = build_query(
                flt.statuses,
                title_filter=flt.title_filter,
                start_date=document.parser.start_date,
                status_search_areas=flt.status_search_area,
            )

            client = await self.connect(account_id)
            items = await self._collect(MessageFetcher(client), matcher, query, batch_size, max_pages)
        except Exception as e:
            logger.error(f"Fetch failed for account {account_id}: {e}")
            return FetchResult.failure(e)

        logger.info(f"Filter {flt.parser_code or flt.id}: {len(items)} matching messages")
        return FetchResult(items=items, total=len(items))

    async def _collect(
        self,
        fetcher: MessageFetcher,
        matcher: MessageMatcher,
        query: str,
        batch_size: int,
        max_pages: int,
    ) -> list[MatchResult]:
        items: list[MatchResult] = []
        async for message in fetcher.iter_messages(query, batch_size, max_pages):
            result = matcher.match(message)
            if result is None:
                continue
            if not result.status and not self.settings.report_unmatched_status:
                logger.debug(f"Message {message.id} matched no status")
                continue
            items.append(result)
        return items

    async def preview(
        self,
        account_id: str,
        filter_id: str | None = None,
        overrides: FilterOverrides | None = None,
    ) -> FetchResult:
        """Interactive test: a bounded scan showing the first few matches."""
        result = await self.fetch_messages(
            account_id,
            batch_size=self.settings.preview_batch_size,
            max_pages=self.settings.preview_max_pages,
            filter_id=filter_id,
            overrides=overrides,
        )
        if result.ok:
            result.items = result.items[: self.settings.preview_limit]
        return result

    async def list_all(self, account_id: str, filter_id: str) -> FetchResult:
        """The "show all" listing for one stored filter."""
        return await self.fetch_messages(
            account_id,
            batch_size=self.settings.scan_batch_size,
            max_pages=self.settings.listing_max_pages,
            filter_id=filter_id,
        )

    # -------------------- Aggregates --------------------

    async def messages_by_filter(
        self,
        account_id: str,
        filter_id: str,
        batch_size: int | None = None,
        max_pages: int | None = None,
    ) -> FilterMessages:
        meta: dict[str, Any] = {"account_id": account_id, "filter_id": filter_id}
        try:
            account = self.store.get_account(account_id)
        except Exception as e:
            logger.error(f"Could not load account {account_id}: {e}")
            return FilterMessages(**FetchResult.failure(e).model_dump(), **meta)

        flt = account.get_filter(filter_id) if account else None
        if flt is not None:
            meta.update(
                filter_id=flt.id,
                parser_code=flt.parser_code,
                status_field_id=flt.status_field_id,
            )

        result = await self.fetch_messages(
            account_id, batch_size=batch_size, max_pages=max_pages, filter_id=filter_id
        )
        return FilterMessages(**result.model_dump(), **meta)

    async def messages_by_account(
        self,
        account_id: str,
        batch_size: int | None = None,
        max_pages: int | None = None,
    ) -> AccountMessages:
        try:
            account = self.store.get_account(account_id)
            if account is None:
                raise NotFoundError("Account not found", f"No account with id {account_id!r}")
        except Exception as e:
            return AccountMessages(
                account_id=account_id,
                errors=1,
                error=str(e),
                filters=[
                    FilterMessages(account_id=account_id, **FetchResult.failure(e).model_dump())
                ],
            )

        listing = AccountMessages(
            account_id=account.id,
            title=account.title,
            email=account.connected_email,
            filters_count=len(account.filters),
        )
        for flt in account.filters:
            result = await self.messages_by_filter(account.id, flt.id, batch_size, max_pages)
            listing.filters.append(result)
            listing.messages += len(result.items)
            if not result.ok:
                listing.errors += 1
        return listing

    async def messages_for_all_accounts(
        self,
        batch_size: int | None = None,
        max_pages: int | None = None,
    ) -> list[AccountMessages]:
        """One listing per account; an unreadable settings file yields a single error listing."""
        try:
            document = self.store.load()
        except Exception as e:
            logger.error(f"Could not load settings: {e}")
            return [AccountMessages(account_id="", errors=1, error=str(e))]

        return [
            await self.messages_by_account(account.id, batch_size, max_pages)
            for account in document.accounts
        ]


@lru_cache(maxsize=1)
def get_parser_service() -> ParserService:
    """Get the singleton parser service over the configured settings file."""
    return ParserService(SettingsStore())
