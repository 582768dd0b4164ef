"""Shared fixtures: feed items and an in-memory feed source."""

from __future__ import annotations

import asyncio

import pytest

from mastodon_tui.models import FeedItem
from mastodon_tui.source import SourceError


def make_item(item_id: str, body: str = "<p>hello</p>", **kwargs) -> FeedItem:
    fields = {
        "author_handle": "alice",
        "created_at": "2024-05-01T12:00:00.000Z",
        "body_html": body,
    }
    fields.update(kwargs)
    return FeedItem(id=item_id, **fields)


def make_items(*ids: str) -> list[FeedItem]:
    return [make_item(item_id) for item_id in ids]


class FakeSource:
    """In-memory ``FeedSource`` that records every call.

    ``pages`` maps a call name to the list it returns, or to an exception to
    raise. ``gate`` can hold fetches until a test releases them.
    """

    def __init__(self, account_id: str = "42") -> None:
        self.account_id = account_id
        self.pages: dict[str, list[FeedItem] | Exception] = {}
        self.calls: list[tuple] = []
        self.gate: asyncio.Event | None = None

    async def _answer(self, name: str, *args) -> list[FeedItem]:
        self.calls.append((name, *args))
        if self.gate is not None:
            await self.gate.wait()
        page = self.pages.get(name, [])
        if isinstance(page, Exception):
            raise page
        return list(page)

    async def fetch_home(self, limit: int, since_id: str = "") -> list[FeedItem]:
        return await self._answer("home", limit, since_id)

    async def fetch_public(
        self, limit: int, local_only: bool, since_id: str = ""
    ) -> list[FeedItem]:
        name = "local" if local_only else "federated"
        return await self._answer(name, limit, since_id)

    async def fetch_trending(self, limit: int) -> list[FeedItem]:
        return await self._answer("trending", limit)

    async def fetch_account_statuses(
        self, account_id: str, limit: int, since_id: str = ""
    ) -> list[FeedItem]:
        return await self._answer("profile", account_id, limit, since_id)

    async def resolve_current_account_id(self) -> str:
        self.calls.append(("whoami",))
        if isinstance(self.account_id, Exception):
            raise self.account_id
        return self.account_id


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def failing_source() -> FakeSource:
    fake = FakeSource()
    for name in ("home", "local", "federated", "trending", "profile"):
        fake.pages[name] = SourceError("boom")
    return fake
