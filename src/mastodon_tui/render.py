"""
Plain-text rendering of feeds for the display surface.

Nothing here knows about terminals or widgets: rows and detail blocks are
strings, and label styling is left to the caller.
"""

from typing import Iterable, NamedTuple

from . import feeds
from .feeds import FeedState
from .models import FeedItem
from .text import strip_markup, truncate_lines, wrap

NO_TEXT = "(no text)"
SNIPPET_LINES = 2
DETAIL_LABELS = ("Author:", "Time:", "Boost:", "Text:")

SEARCH_PLACEHOLDER = (
    "Search\n\n"
    "This tab will let you search accounts, hashtags, and statuses.\n"
    "(Coming soon)"
)


class Row(NamedTuple):
    title: str
    snippet: str


LOADING_ROW = Row("Loading timeline...", "Fetching latest statuses...")
EMPTY_ROW = Row("No statuses", "Nothing to show here yet.")


def format_author(item: FeedItem) -> str:
    name = strip_markup(item.author_display_name or "")
    if name and name != item.author_handle:
        return f"{name} (@{item.author_handle})"
    return f"@{item.author_handle}"


def item_row(item: FeedItem, width: int) -> Row:
    boosted = f" · boosted by @{item.boosted_by}" if item.boosted_by else ""
    title = f"{format_author(item)}{boosted} · {item.created_at}"

    snippet = wrap(strip_markup(item.body_html), max(20, width - 6))
    snippet = truncate_lines(snippet, SNIPPET_LINES)
    return Row(title, snippet or NO_TEXT)


def feed_rows(state: FeedState, width: int) -> list[Row]:
    """Rows for the list pane; never empty."""
    if not state.items:
        return [LOADING_ROW if state.loading else EMPTY_ROW]
    return [item_row(item, width) for item in state.items]


def _detail_block(item: FeedItem, separator: str, wrap_width: int) -> str:
    lines = [
        separator,
        f"Author: {format_author(item)}",
        f"Time:   {item.created_at}",
    ]
    if item.boosted_by:
        lines.append(f"Boost:  @{item.boosted_by}")
    lines.append("Text:")
    lines.append(wrap(strip_markup(item.body_html), wrap_width) or NO_TEXT)
    return "\n".join(lines)


def render_detail(item: FeedItem, width: int) -> str:
    return _detail_block(item, "-" * width, max(20, width - 2))


def feed_detail(state: FeedState, width: int) -> str:
    """Detail pane content for the selected item of ``state``."""
    if width <= 0:
        return ""
    item = feeds.selected_item(state)
    if item is None:
        return "Loading timeline..." if state.loading else "No status selected."
    return render_detail(item, width)


def format_statuses(items: Iterable[FeedItem], width: int = 80) -> str:
    """Blocks for printing a page of statuses outside the terminal app."""
    blocks = [_detail_block(item, "----", width) for item in items]
    if not blocks:
        return "No statuses returned."
    return "\n\n".join(blocks)
