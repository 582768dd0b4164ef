"""
The feed source capability the core fetches from.

``MastodonClient`` is the real implementation; tests swap in fakes.
"""

from typing import Protocol

from .models import FeedItem


class SourceError(Exception):
    """The feed source failed. The message is shown to the user as is."""


class FeedSource(Protocol):
    """Protocol for fetching pages of feed items.

    With a non-empty ``since_id`` only items strictly newer than it are
    returned; without one, up to ``limit`` of the most recent items. Results
    are newest first. Failures raise ``SourceError``.
    """

    async def fetch_home(self, limit: int, since_id: str = "") -> list[FeedItem]:
        ...

    async def fetch_public(
        self, limit: int, local_only: bool, since_id: str = ""
    ) -> list[FeedItem]:
        ...

    async def fetch_trending(self, limit: int) -> list[FeedItem]:
        ...

    async def fetch_account_statuses(
        self, account_id: str, limit: int, since_id: str = ""
    ) -> list[FeedItem]:
        ...

    async def resolve_current_account_id(self) -> str:
        ...
