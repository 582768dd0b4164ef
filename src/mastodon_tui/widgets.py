"""Widgets that draw a ``Session`` onto the terminal."""

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from .layout import Layout
from .models import TIMELINE_MODES, Feed, Tab
from .render import Row
from .session import TAB_ORDER

ACCENT = "color(86)"
MUTED = "color(241)"
SUBTLE = "color(245)"
TIME = "color(220)"
SEPARATOR = "color(240)"

TAB_LABELS = {Tab.TIMELINE: "Timeline", Tab.SEARCH: "Search", Tab.PROFILE: "Profile"}
MODE_LABELS = {
    Feed.HOME: "Home",
    Feed.LOCAL: "Local",
    Feed.FEDERATED: "Federated",
    Feed.TRENDING: "Trending",
}


def key_label(label: str, active: bool, inactive_style: str) -> Text:
    """A padded label with its first letter underlined as the key hint."""
    style = f"bold {ACCENT}" if active else inactive_style
    text = Text(f" {label} ", style=style)
    if label:
        text.stylize("underline", 1, 2)
    return text


def row_prompt(row: Row) -> Text:
    prompt = Text(row.title, style="bold")
    prompt.append("\n")
    prompt.append(row.snippet, style=SUBTLE)
    return prompt


def styled_detail(detail: str) -> Text:
    text = Text(detail)
    text.highlight_words(["Author:"], style=ACCENT)
    text.highlight_words(["Time:"], style=TIME)
    text.highlight_words(["Boost:"], style=MUTED)
    return text


class TabHeader(Static):
    """Tab row, plus the timeline mode row on the timeline tab."""

    DEFAULT_CSS = """
    TabHeader {
        height: auto;
        padding: 0 0 0 1;
    }
    """

    def show(self, active_tab: Tab, active_mode: Feed) -> None:
        header = Text.assemble(
            *(key_label(TAB_LABELS[tab], tab is active_tab, MUTED) for tab in TAB_ORDER)
        )
        if active_tab is Tab.TIMELINE:
            header.append("\n")
            for mode in TIMELINE_MODES:
                header.append_text(
                    key_label(MODE_LABELS[mode], mode is active_mode, SUBTLE)
                )
        self.update(header)


class FeedPane(Horizontal):
    """List of items on the left, detail of the selected item on the right."""

    DEFAULT_CSS = """
    FeedPane {
        height: 1fr;
    }

    FeedPane #feed-list {
        border: none;
        height: 100%;
    }

    FeedPane #separator {
        width: 1;
        height: 100%;
    }

    FeedPane #detail-scroll {
        height: 100%;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._rows: list[Row] | None = None

    def compose(self) -> ComposeResult:
        yield OptionList(id="feed-list")
        yield Static(id="separator")
        with VerticalScroll(id="detail-scroll"):
            yield Static(id="detail")

    def show(self, rows: list[Row], selected: int, detail: str, layout: Layout) -> None:
        option_list = self.query_one("#feed-list", OptionList)
        if rows != self._rows:
            self._rows = rows
            option_list.clear_options()
            option_list.add_options([Option(row_prompt(row)) for row in rows])
        if option_list.highlighted != selected:
            option_list.highlighted = selected

        self.styles.height = layout.content_height
        option_list.styles.width = layout.list_width

        separator = self.query_one("#separator", Static)
        detail_scroll = self.query_one("#detail-scroll", VerticalScroll)
        separator.display = layout.show_detail
        detail_scroll.display = layout.show_detail
        if not layout.show_detail:
            return

        separator.update(Text("\n".join(["│"] * layout.content_height), style=SEPARATOR))
        detail_scroll.styles.width = layout.detail_width
        self.query_one("#detail", Static).update(styled_detail(detail))


class SearchPane(VerticalScroll):
    can_focus = False

    DEFAULT_CSS = """
    SearchPane {
        height: 1fr;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static(id="search-body")

    def show(self, content: str, layout: Layout) -> None:
        self.styles.height = layout.content_height
        self.query_one("#search-body", Static).update(content)


class StatusLine(Static):
    DEFAULT_CSS = """
    StatusLine {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    """
