"""
The session state machine.

``update(session, event)`` is the only way the session changes. It returns the
next session plus the effects the caller has to carry out; the caller owns
I/O and feeds completions back in as further events.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, assert_never

import structlog

from . import feeds
from .feeds import FeedState
from .models import TIMELINE_MODES, Feed, FeedItem, Tab

logger = structlog.get_logger()

TAB_ORDER: tuple[Tab, ...] = (Tab.TIMELINE, Tab.SEARCH, Tab.PROFILE)

TAB_KEYS = {"t": Tab.TIMELINE, "s": Tab.SEARCH, "p": Tab.PROFILE}
MODE_KEYS = {
    "h": Feed.HOME,
    "l": Feed.LOCAL,
    "f": Feed.FEDERATED,
    "g": Feed.TRENDING,
}
QUIT_KEYS = frozenset({"q", "ctrl+c"})


# Events


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class Selected:
    """The list cursor of the visible feed moved."""

    index: int


@dataclass(frozen=True)
class RefreshTick:
    """The auto refresh timer fired."""


@dataclass(frozen=True)
class LoadCompleted:
    feed: Feed
    items: tuple[FeedItem, ...]
    since_id: str = ""
    account_id: str = ""


@dataclass(frozen=True)
class LoadFailed:
    feed: Feed
    error: str


Event = Resized | KeyPressed | Selected | RefreshTick | LoadCompleted | LoadFailed


# Effects


@dataclass(frozen=True)
class FetchFeed:
    """Request one fetch for ``feed``; ``since_id`` makes it incremental."""

    feed: Feed
    since_id: str = ""
    account_id: str = ""


@dataclass(frozen=True)
class Quit:
    pass


Effect = FetchFeed | Quit


def _initial_feeds() -> Mapping[Feed, FeedState]:
    return MappingProxyType({feed: FeedState() for feed in Feed})


@dataclass(frozen=True)
class Session:
    """Everything the app displays, owned by the single event loop."""

    active_tab: Tab = Tab.TIMELINE
    active_mode: Feed = Feed.HOME
    feeds: Mapping[Feed, FeedState] = field(default_factory=_initial_feeds)
    profile_account_id: str = ""
    width: int = 0
    height: int = 0
    status: str = ""
    auto_refresh: bool = True

    @property
    def active_feed(self) -> Feed | None:
        """The feed shown on screen, ``None`` on the search tab."""
        match self.active_tab:
            case Tab.TIMELINE:
                return self.active_mode
            case Tab.PROFILE:
                return Feed.PROFILE
            case Tab.SEARCH:
                return None

    @property
    def timelines(self) -> Mapping[Feed, FeedState]:
        return {mode: self.feeds[mode] for mode in TIMELINE_MODES}

    def feed(self, feed: Feed) -> FeedState:
        return self.feeds[feed]

    def with_feed(self, feed: Feed, state: FeedState) -> Session:
        if self.feeds[feed] is state:
            return self
        updated = dict(self.feeds)
        updated[feed] = state
        return replace(self, feeds=MappingProxyType(updated))


Transition = tuple[Session, list[Effect]]


def start(session: Session) -> Transition:
    """Kick off the first load of whatever the session shows."""
    return _ensure_loaded(session)


def update(session: Session, event: Event) -> Transition:
    match event:
        case Resized(width=width, height=height):
            if (width, height) == (session.width, session.height):
                return session, []
            return replace(session, width=max(0, width), height=max(0, height)), []
        case KeyPressed(key=key):
            return _handle_key(session, key)
        case Selected(index=index):
            feed = session.active_feed
            if feed is None:
                return session, []
            return session.with_feed(feed, feeds.select_index(session.feed(feed), index)), []
        case RefreshTick():
            if not session.auto_refresh:
                return session, []
            return _refresh(session, quiet=True)
        case LoadCompleted():
            return _load_completed(session, event), []
        case LoadFailed(feed=feed, error=error):
            logger.warning("feed_load_failed", feed=str(feed), error=error)
            session = session.with_feed(feed, feeds.fail(session.feed(feed)))
            return replace(session, status=f"Error: {error}"), []
        case _:
            assert_never(event)


def _handle_key(session: Session, key: str) -> Transition:
    if key in QUIT_KEYS:
        return session, [Quit()]

    match key:
        case "tab":
            index = TAB_ORDER.index(session.active_tab)
            return _switch_tab(session, TAB_ORDER[(index + 1) % len(TAB_ORDER)])
        case "shift+tab":
            index = TAB_ORDER.index(session.active_tab)
            return _switch_tab(session, TAB_ORDER[(index - 1) % len(TAB_ORDER)])
        case "r":
            return _refresh(session)
        case "a":
            auto_refresh = not session.auto_refresh
            status = "Auto-refresh enabled" if auto_refresh else "Auto-refresh disabled"
            return replace(session, auto_refresh=auto_refresh, status=status), []

    if key in TAB_KEYS:
        return _switch_tab(session, TAB_KEYS[key])
    if key in MODE_KEYS and session.active_tab is Tab.TIMELINE:
        return _switch_mode(session, MODE_KEYS[key])
    return session, []


def _switch_tab(session: Session, tab: Tab) -> Transition:
    if tab is session.active_tab:
        return _ensure_loaded(session)
    return _ensure_loaded(replace(session, active_tab=tab))


def _switch_mode(session: Session, mode: Feed) -> Transition:
    if mode is session.active_mode:
        return session, []
    return _ensure_loaded(replace(session, active_mode=mode))


def _fetch_request(session: Session, feed: Feed, since_id: str = "") -> FetchFeed:
    if feed is Feed.TRENDING:
        since_id = ""
    account_id = session.profile_account_id if feed is Feed.PROFILE else ""
    return FetchFeed(feed=feed, since_id=since_id, account_id=account_id)


def _ensure_loaded(session: Session) -> Transition:
    feed = session.active_feed
    if feed is None:
        return session, []

    state, issue = feeds.begin_loading(session.feed(feed))
    if not issue:
        return session, []

    logger.debug("feed_fetch_requested", feed=str(feed), reason="ensure_loaded")
    return session.with_feed(feed, state), [_fetch_request(session, feed)]


def _refresh(session: Session, *, quiet: bool = False) -> Transition:
    feed = session.active_feed
    if feed is None:
        return session, []

    current = session.feed(feed)
    if quiet and not current.items:
        return session, []

    state, issue = feeds.begin_loading(current, force=True)
    if not issue:
        return session, []

    logger.debug("feed_fetch_requested", feed=str(feed), reason="refresh")
    request = _fetch_request(session, feed, since_id=current.watermark_id if current.items else "")
    return session.with_feed(feed, state), [request]


def _load_completed(session: Session, event: LoadCompleted) -> Session:
    state = session.feed(event.feed)
    count = len(event.items)

    if event.since_id:
        state = feeds.prepend(state, event.items)
        status = f"Fetched {count} new statuses." if count else "No new statuses."
    else:
        state = feeds.load(state, event.items)
        status = f"Loaded {count} statuses." if count else "No statuses returned."

    logger.info(
        "feed_loaded",
        feed=str(event.feed),
        count=count,
        incremental=bool(event.since_id),
        watermark=state.watermark_id,
    )

    session = session.with_feed(event.feed, state)
    if event.feed is Feed.PROFILE and event.account_id:
        session = replace(session, profile_account_id=event.account_id)
    return replace(session, status=status)
