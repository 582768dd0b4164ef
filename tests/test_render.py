"""Tests for list rows and detail blocks."""

from conftest import make_item, make_items

from mastodon_tui import feeds
from mastodon_tui.feeds import FeedState
from mastodon_tui.render import (
    EMPTY_ROW,
    LOADING_ROW,
    NO_TEXT,
    feed_detail,
    feed_rows,
    format_author,
    format_statuses,
    item_row,
    render_detail,
)
from mastodon_tui.text import ELLIPSIS


class TestFormatAuthor:
    def test_name_and_handle(self) -> None:
        item = make_item("1", author_display_name="Alice <b>A</b>")
        assert format_author(item) == "Alice A (@alice)"

    def test_handle_only_when_name_missing_or_same(self) -> None:
        assert format_author(make_item("1")) == "@alice"
        assert format_author(make_item("1", author_display_name="alice")) == "@alice"


class TestItemRow:
    """Tests for item_row."""

    def test_title_and_snippet(self) -> None:
        row = item_row(make_item("1", body="<p>Hi &amp; bye</p>"), 40)

        assert row.title == "@alice · 2024-05-01T12:00:00.000Z"
        assert row.snippet == "Hi & bye"

    def test_boost_in_title(self) -> None:
        row = item_row(make_item("1", boosted_by="bob"), 40)
        assert row.title == "@alice · boosted by @bob · 2024-05-01T12:00:00.000Z"

    def test_snippet_capped_at_two_lines(self) -> None:
        body = "<p>" + " ".join(["word"] * 60) + "</p>"
        row = item_row(make_item("1", body=body), 30)

        lines = row.snippet.split("\n")
        assert len(lines) == 2
        assert lines[-1].endswith(ELLIPSIS)
        assert all(len(line.rstrip(ELLIPSIS)) <= 24 for line in lines)

    def test_narrow_width_uses_minimum(self) -> None:
        row = item_row(make_item("1", body="aaaa bbbb cccc dddd eeee"), 10)
        assert row.snippet.split("\n")[0] == "aaaa bbbb cccc dddd"

    def test_empty_body(self) -> None:
        assert item_row(make_item("1", body="<p></p>"), 40).snippet == NO_TEXT


class TestFeedRows:
    def test_placeholders(self) -> None:
        assert feed_rows(FeedState(), 40) == [EMPTY_ROW]
        assert feed_rows(FeedState(loading=True), 40) == [LOADING_ROW]

    def test_one_row_per_item(self) -> None:
        state = feeds.load(FeedState(), make_items("3", "2", "1"))
        assert len(feed_rows(state, 40)) == 3


class TestDetail:
    """Tests for render_detail and feed_detail."""

    def test_detail_block(self) -> None:
        item = make_item(
            "1",
            body="<p>the quick brown fox jumps over the lazy dog</p>",
            author_display_name="Alice",
            boosted_by="bob",
        )

        assert render_detail(item, 22).split("\n") == [
            "-" * 22,
            "Author: Alice (@alice)",
            "Time:   2024-05-01T12:00:00.000Z",
            "Boost:  @bob",
            "Text:",
            "the quick brown fox",
            "jumps over the lazy",
            "dog",
        ]

    def test_no_boost_line_for_original_post(self) -> None:
        assert "Boost:" not in render_detail(make_item("1"), 40)

    def test_detail_is_not_truncated(self) -> None:
        body = " ".join(["word"] * 200)
        assert ELLIPSIS not in render_detail(make_item("1", body=body), 40)

    def test_feed_detail_uses_selection(self) -> None:
        state = feeds.select_index(
            feeds.load(FeedState(), [make_item("2", body="second"), make_item("1", body="first")]),
            1,
        )
        assert feed_detail(state, 40).endswith("first")

    def test_feed_detail_placeholders(self) -> None:
        assert feed_detail(FeedState(), 0) == ""
        assert feed_detail(FeedState(loading=True), 40) == "Loading timeline..."
        assert feed_detail(FeedState(), 40) == "No status selected."


class TestFormatStatuses:
    def test_empty(self) -> None:
        assert format_statuses([]) == "No statuses returned."

    def test_blocks_separated(self) -> None:
        output = format_statuses(make_items("2", "1"))

        assert output.count("----\n") == 2
        assert output.count("Text:\nhello") == 2
