"""Shared pagination helpers for token-based scanning."""

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

PageFetcher = Callable[[str | None], Awaitable[tuple[list[Any], str | None]]]


async def iter_token_pages(
    fetch_page: PageFetcher,
    *,
    max_pages: int,
) -> AsyncIterator[tuple[int, list[Any]]]:
    """
    Yield ``(page_number, items)`` following opaque continuation tokens.

    Stops when:
    - the store returns no continuation token, or
    - ``max(1, max_pages)`` pages have been fetched.
    """
    limit = max(1, int(max_pages))
    page_token: str | None = None
    page_number = 0

    while True:
        items, next_token = await fetch_page(page_token)
        page_number += 1

        yield page_number, items

        if not next_token or page_number >= limit:
            return

        page_token = next_token
