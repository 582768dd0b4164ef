"""
Async fetch orchestration.

``fetch_feed`` turns one ``FetchFeed`` request into exactly one completion
event. ``FetchDispatcher`` runs those coroutines as background tasks and posts
each completion back to the event loop. Fetches cannot be cancelled; a
completion for a feed that is no longer on screen still updates its state.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Sequence, assert_never

import structlog

from .models import Feed, FeedItem
from .session import Event, FetchFeed, LoadCompleted, LoadFailed
from .source import FeedSource, SourceError

logger = structlog.get_logger()

PAGE_SIZE = 40


def _id_key(item_id: str) -> int | None:
    return int(item_id) if item_id.isdigit() else None


def check_newest_first(items: Sequence[FeedItem], since_id: str = "") -> None:
    """Raise ``SourceError`` unless ``items`` is newest first and above the cursor.

    Only numeric ids can be ordered; anything else is treated as opaque.
    """
    keys = [_id_key(item.id) for item in items]
    cursor = _id_key(since_id) if since_id else None
    if cursor is not None and any(key is not None and key <= cursor for key in keys):
        raise SourceError(f"Source returned statuses at or before {since_id}")

    numeric = [key for key in keys if key is not None]
    if any(newer >= older for older, newer in zip(numeric, numeric[1:])):
        raise SourceError("Source returned statuses out of order")


async def _fetch_items(
    source: FeedSource, request: FetchFeed, limit: int
) -> tuple[list[FeedItem], str]:
    match request.feed:
        case Feed.HOME:
            return await source.fetch_home(limit, request.since_id), ""
        case Feed.LOCAL:
            return await source.fetch_public(limit, True, request.since_id), ""
        case Feed.FEDERATED:
            return await source.fetch_public(limit, False, request.since_id), ""
        case Feed.TRENDING:
            return await source.fetch_trending(limit), ""
        case Feed.PROFILE:
            account_id = request.account_id
            if not account_id:
                account_id = await source.resolve_current_account_id()
            items = await source.fetch_account_statuses(
                account_id, limit, request.since_id
            )
            return items, account_id
        case _:
            assert_never(request.feed)


async def fetch_feed(
    source: FeedSource, request: FetchFeed, limit: int = PAGE_SIZE
) -> LoadCompleted | LoadFailed:
    """Run one fetch and describe its outcome as an event."""
    since_id = "" if request.feed is Feed.TRENDING else request.since_id
    logger.debug("fetch_started", feed=str(request.feed), since_id=since_id)

    try:
        items, account_id = await _fetch_items(source, request, limit)
        if request.feed is not Feed.TRENDING:
            check_newest_first(items, since_id)
    except SourceError as e:
        logger.error("fetch_failed", feed=str(request.feed), error=str(e))
        return LoadFailed(feed=request.feed, error=str(e))

    logger.debug("fetch_finished", feed=str(request.feed), count=len(items))
    return LoadCompleted(
        feed=request.feed,
        items=tuple(items),
        since_id=since_id,
        account_id=account_id,
    )


class FetchDispatcher:
    """Runs fetches in the background and posts their completions."""

    def __init__(
        self,
        source: FeedSource,
        post: Callable[[Event], object],
        limit: int = PAGE_SIZE,
    ) -> None:
        self.source = source
        self.post = post
        self.limit = limit
        self._tasks: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def dispatch(self, request: FetchFeed) -> asyncio.Task:
        """Start the fetch for ``request``; the caller guards against duplicates."""
        task = asyncio.create_task(self._run(request), name=f"fetch-{request.feed}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, request: FetchFeed) -> None:
        try:
            event = await fetch_feed(self.source, request, self.limit)
        except Exception as e:
            logger.exception("fetch_crashed", feed=str(request.feed))
            event = LoadFailed(feed=request.feed, error=f"Unexpected error: {e}")
        self.post(event)

    async def drain(self) -> None:
        """Wait until every dispatched fetch has posted its completion."""
        while self._tasks:
            await asyncio.gather(*self._tasks)
