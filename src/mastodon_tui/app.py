"""
Mastodon terminal app.

The app owns the one ``Session``. Key presses, resizes, list movement, timer
ticks and fetch completions all arrive on the app's message queue, are turned
into session events and applied with ``update``; the resulting effects are
carried out here and the screen is redrawn from the new session.
"""

from __future__ import annotations

from typing import assert_never

import structlog
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.message import Message
from textual.widgets import OptionList

from .fetch import PAGE_SIZE, FetchDispatcher
from .layout import compute_layout
from .render import SEARCH_PLACEHOLDER, feed_detail, feed_rows
from .session import (
    Effect,
    Event,
    FetchFeed,
    KeyPressed,
    Quit,
    RefreshTick,
    Resized,
    Selected,
    Session,
    start,
    update,
)
from .source import FeedSource
from .widgets import FeedPane, SearchPane, StatusLine, TabHeader

logger = structlog.get_logger()

# The status line sits below the panes and is not part of the layout.
STATUS_LINES = 1


class FeedFetched(Message):
    """A background fetch finished."""

    def __init__(self, event: Event) -> None:
        super().__init__()
        self.event = event


class MastodonApp(App):
    """Split list/detail viewer for Mastodon timelines."""

    TITLE = "Mastodon"

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    BINDINGS = [
        Binding("q", "command('q')", "Quit", show=True),
        Binding("ctrl+c", "command('ctrl+c')", "Quit", show=False, priority=True),
        Binding("tab", "command('tab')", "Next tab", show=False, priority=True),
        Binding("shift+tab", "command('shift+tab')", "Prev tab", show=False, priority=True),
        Binding("t", "command('t')", "Timeline", show=False),
        Binding("s", "command('s')", "Search", show=False),
        Binding("p", "command('p')", "Profile", show=False),
        Binding("h", "command('h')", "Home", show=False),
        Binding("l", "command('l')", "Local", show=False),
        Binding("f", "command('f')", "Federated", show=False),
        Binding("g", "command('g')", "Trending", show=False),
        Binding("r", "command('r')", "Refresh", show=True),
        Binding("a", "command('a')", "Auto-Refresh", show=True),
    ]

    def __init__(
        self,
        source: FeedSource,
        refresh_interval: float = 0.0,
        page_size: int = PAGE_SIZE,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.session = Session()
        self.dispatcher = FetchDispatcher(source, self._post_fetched, limit=page_size)
        self._refresh_interval = refresh_interval
        self._session_mounted = False

    def compose(self) -> ComposeResult:
        yield TabHeader(id="header")
        yield FeedPane(id="feed")
        yield SearchPane(id="search")
        yield StatusLine(id="status")

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self._session_mounted = True
        self.handle_event(Resized(self.size.width, self.size.height - STATUS_LINES))
        self._apply(*start(self.session))
        self._render_session()

        if self._refresh_interval > 0:
            self.set_interval(self._refresh_interval, self._tick)

    def on_resize(self, event: events.Resize) -> None:
        self.handle_event(Resized(event.size.width, event.size.height - STATUS_LINES))

    def on_option_list_option_highlighted(
        self, event: OptionList.OptionHighlighted
    ) -> None:
        self.handle_event(Selected(event.option_index))

    def on_feed_fetched(self, message: FeedFetched) -> None:
        self.handle_event(message.event)

    def action_command(self, key: str) -> None:
        self.handle_event(KeyPressed(key))

    def handle_event(self, event: Event) -> None:
        self._apply(*update(self.session, event))

    def _tick(self) -> None:
        self.handle_event(RefreshTick())

    def _post_fetched(self, event: Event) -> None:
        self.post_message(FeedFetched(event))

    def _apply(self, session: Session, effects: list[Effect]) -> None:
        changed = session is not self.session
        self.session = session

        for effect in effects:
            match effect:
                case FetchFeed():
                    logger.debug("fetch_dispatched", feed=str(effect.feed), since_id=effect.since_id)
                    self.dispatcher.dispatch(effect)
                case Quit():
                    self.exit()
                case _:
                    assert_never(effect)

        if changed and self._session_mounted:
            self._render_session()

    def _render_session(self) -> None:
        """Redraw every widget from the current session."""
        session = self.session
        layout = compute_layout(session.width, session.height, session.active_tab)

        self.query_one(TabHeader).show(session.active_tab, session.active_mode)
        self.query_one(StatusLine).update(session.status)

        feed = session.active_feed
        feed_pane = self.query_one(FeedPane)
        search_pane = self.query_one(SearchPane)
        feed_pane.display = feed is not None
        search_pane.display = feed is None

        if not layout.sized:
            return
        if feed is None:
            search_pane.show(SEARCH_PLACEHOLDER, layout)
            return

        feed_list = feed_pane.query_one("#feed-list", OptionList)
        if not feed_list.has_focus:
            feed_list.focus()

        state = session.feed(feed)
        feed_pane.show(
            feed_rows(state, layout.list_width),
            state.selected_index,
            feed_detail(state, layout.detail_width),
            layout,
        )


def run(source: FeedSource, refresh_interval: float = 0.0, page_size: int = PAGE_SIZE) -> None:
    """Run the TUI application."""
    app = MastodonApp(source, refresh_interval=refresh_interval, page_size=page_size)
    app.run()
