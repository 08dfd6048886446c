"""Test token pagination helper."""

import pytest

from gmail_order_status.services.common.pagination import iter_token_pages


@pytest.mark.asyncio
async def test_iter_token_pages_passes_tokens_through():
    seen_tokens = []
    pages = {None: (["a", "b"], "t1"), "t1": (["c"], "t2"), "t2": (["d"], None)}

    async def fetch_page(token):
        seen_tokens.append(token)
        return pages[token]

    result = [page async for page in iter_token_pages(fetch_page, max_pages=10)]

    assert result == [(1, ["a", "b"]), (2, ["c"]), (3, ["d"])]
    assert seen_tokens == [None, "t1", "t2"]


@pytest.mark.asyncio
async def test_iter_token_pages_respects_max_pages():
    async def fetch_page(token):
        return ["x"], "more"

    result = [page async for page in iter_token_pages(fetch_page, max_pages=3)]
    assert [number for number, _ in result] == [1, 2, 3]


@pytest.mark.asyncio
async def test_iter_token_pages_treats_empty_token_as_end():
    async def fetch_page(token):
        return [], ""

    result = [page async for page in iter_token_pages(fetch_page, max_pages=5)]
    assert result == [(1, [])]
