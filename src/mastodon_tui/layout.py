"""Pane sizing for the split list/detail view."""

from dataclasses import dataclass

from .models import Tab

MIN_LIST_WIDTH = 30
MIN_DETAIL_WIDTH = 20
MIN_DIMENSION = 5
SEPARATOR_WIDTH = 1


@dataclass(frozen=True)
class Layout:
    """Computed pane sizes. ``sized`` is false until the terminal reports a size."""

    sized: bool = False
    list_width: int = 0
    detail_width: int = 0
    content_height: int = 0
    header_lines: int = 0

    @property
    def show_detail(self) -> bool:
        return self.sized and self.detail_width >= MIN_DETAIL_WIDTH


def header_lines(tab: Tab) -> int:
    # The timeline tab has an extra row for the mode selector.
    return 2 if tab is Tab.TIMELINE else 1


def compute_layout(width: int, height: int, tab: Tab) -> Layout:
    if width <= 0 or height <= 0:
        return Layout()

    lines = header_lines(tab)
    list_width = max(MIN_LIST_WIDTH, width // 2)
    detail_width = width - list_width - SEPARATOR_WIDTH
    return Layout(
        sized=True,
        list_width=max(MIN_DIMENSION, list_width),
        detail_width=detail_width if detail_width >= MIN_DETAIL_WIDTH else 0,
        content_height=max(MIN_DIMENSION, height - lines),
        header_lines=lines,
    )
