"""Tests for pane sizing."""

import pytest

from mastodon_tui.layout import Layout, compute_layout
from mastodon_tui.models import Tab


class TestComputeLayout:
    """Tests for compute_layout."""

    def test_split_on_wide_terminal(self) -> None:
        layout = compute_layout(120, 40, Tab.TIMELINE)

        assert layout == Layout(
            sized=True,
            list_width=60,
            detail_width=59,
            content_height=38,
            header_lines=2,
        )
        assert layout.show_detail is True

    def test_list_width_floor(self) -> None:
        layout = compute_layout(52, 30, Tab.PROFILE)

        assert layout.list_width == 30
        assert layout.detail_width == 21
        assert layout.show_detail is True

    def test_collapses_to_list_only(self) -> None:
        layout = compute_layout(50, 30, Tab.TIMELINE)

        assert layout.list_width == 30
        assert layout.show_detail is False

    @pytest.mark.parametrize("tab,lines", [(Tab.TIMELINE, 2), (Tab.SEARCH, 1), (Tab.PROFILE, 1)])
    def test_header_lines(self, tab: Tab, lines: int) -> None:
        layout = compute_layout(100, 30, tab)

        assert layout.header_lines == lines
        assert layout.content_height == 30 - lines

    def test_height_floor(self) -> None:
        assert compute_layout(100, 3, Tab.TIMELINE).content_height == 5

    @pytest.mark.parametrize("width,height", [(0, 0), (0, 40), (120, 0)])
    def test_unsized(self, width: int, height: int) -> None:
        layout = compute_layout(width, height, Tab.TIMELINE)

        assert layout.sized is False
        assert layout.show_detail is False
        assert layout.list_width == 0

    def test_same_input_same_layout(self) -> None:
        assert compute_layout(97, 33, Tab.SEARCH) == compute_layout(97, 33, Tab.SEARCH)
