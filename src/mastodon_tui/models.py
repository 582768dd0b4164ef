from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import NotRequired, Self, TypedDict


class Feed(StrEnum):
    """Every independently loadable feed."""

    HOME = "home"
    LOCAL = "local"
    FEDERATED = "federated"
    TRENDING = "trending"
    PROFILE = "profile"


TIMELINE_MODES: tuple[Feed, ...] = (
    Feed.HOME,
    Feed.LOCAL,
    Feed.FEDERATED,
    Feed.TRENDING,
)


class Tab(StrEnum):
    """Top level tabs of the terminal app."""

    TIMELINE = "timeline"
    SEARCH = "search"
    PROFILE = "profile"


class MastodonAccount(TypedDict):
    """Type definition for the account fields we read."""

    id: str
    acct: str
    display_name: NotRequired[str]


class MastodonStatus(TypedDict):
    """Type definition for Mastodon status structure."""

    id: str
    content: str
    created_at: str
    account: MastodonAccount
    reblog: NotRequired[MastodonStatus | None]


@dataclass(frozen=True)
class FeedItem:
    """A displayable status.

    ``id`` is always the timeline entry id, which is what pagination cursors
    refer to. For a boost, the display fields come from the boosted status
    and ``boosted_by`` holds the handle of the account that boosted it.
    """

    id: str
    author_handle: str
    created_at: str
    body_html: str
    author_display_name: str | None = None
    boosted_by: str | None = None

    @classmethod
    def from_status(cls, status: MastodonStatus) -> Self:
        boosted_by = None
        display = status
        if reblog := status.get("reblog"):
            boosted_by = status["account"]["acct"]
            display = reblog

        account = display["account"]
        return cls(
            id=status["id"],
            author_handle=account["acct"],
            author_display_name=account.get("display_name") or None,
            created_at=display.get("created_at") or "",
            body_html=display.get("content") or "",
            boosted_by=boosted_by,
        )
