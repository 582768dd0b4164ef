"""
Per-feed state and the operations that merge fetched pages into it.

Every operation takes a ``FeedState`` and returns a new one; nothing here
mutates in place or performs I/O.
"""

from dataclasses import dataclass, replace
from typing import Sequence

from .models import FeedItem


@dataclass(frozen=True)
class FeedState:
    """Items held for one feed, newest first."""

    items: tuple[FeedItem, ...] = ()
    watermark_id: str = ""
    loading: bool = False
    selected_index: int = 0


def load(state: FeedState, items: Sequence[FeedItem]) -> FeedState:
    """Full replace: install ``items`` as delivered by the source."""
    items = tuple(items)
    return replace(
        state,
        items=items,
        watermark_id=items[0].id if items else state.watermark_id,
        loading=False,
        selected_index=0,
    )


def prepend(state: FeedState, new_items: Sequence[FeedItem]) -> FeedState:
    """Incremental refresh: put items newer than the watermark in front.

    The source never returns anything at or older than the watermark, so no
    de-duplication happens here. The selection moves with the selected item;
    an empty feed has nothing selected yet, so it stays on the first item.
    """
    new_items = tuple(new_items)
    if not new_items:
        return replace(state, loading=False)

    return replace(
        state,
        items=new_items + state.items,
        watermark_id=new_items[0].id,
        loading=False,
        selected_index=state.selected_index + len(new_items) if state.items else 0,
    )


def begin_loading(state: FeedState, *, force: bool = False) -> tuple[FeedState, bool]:
    """Mark the feed as loading.

    Returns the new state and whether a fetch should be issued. A feed that is
    already loading never gets a second fetch; a feed that already holds items
    only gets one when ``force`` is set.
    """
    if state.loading:
        return state, False
    if state.items and not force:
        return state, False
    return replace(state, loading=True), True


def fail(state: FeedState) -> FeedState:
    return replace(state, loading=False)


def select_index(state: FeedState, index: int) -> FeedState:
    index = max(0, min(index, len(state.items) - 1))
    if index == state.selected_index:
        return state
    return replace(state, selected_index=index)


def selected_item(state: FeedState) -> FeedItem | None:
    if not state.items:
        return None
    index = max(0, min(state.selected_index, len(state.items) - 1))
    return state.items[index]
