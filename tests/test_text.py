"""Tests for the text rendering pipeline."""

import pytest

from mastodon_tui.text import ELLIPSIS, strip_markup, truncate_lines, wrap


class TestStripMarkup:
    """Tests for strip_markup."""

    def test_removes_tags_and_decodes_entities(self) -> None:
        assert strip_markup("<p>Hi &amp; bye</p>") == "Hi & bye"

    def test_no_line_breaks_between_blocks(self) -> None:
        assert strip_markup("<p>one</p><p>two</p>") == "onetwo"

    def test_links_keep_their_text(self) -> None:
        html = '<p>see <a href="https://example.com/x">example.com/x</a> now</p>'
        assert strip_markup(html) == "see example.com/x now"

    def test_unclosed_tag_hides_rest_of_input(self) -> None:
        assert strip_markup("before <span class='x' after") == "before"

    def test_stray_closing_bracket_is_dropped(self) -> None:
        assert strip_markup("a > b") == "a  b"

    def test_trims_whitespace(self) -> None:
        assert strip_markup("  <br>  padded \n ") == "padded"

    def test_numeric_entities(self) -> None:
        assert strip_markup("it&#39;s &quot;fine&quot;") == "it's \"fine\""

    def test_empty_input(self) -> None:
        assert strip_markup("") == ""

    @pytest.mark.parametrize(
        "html",
        [
            "<p>Hi &amp; bye</p>",
            "<p>plain</p><br/>text",
            "no markup at all",
            "<b>unterminated",
            "",
        ],
    )
    def test_second_pass_is_noop(self, html: str) -> None:
        once = strip_markup(html)
        assert strip_markup(once) == once


class TestWrap:
    """Tests for wrap."""

    def test_greedy_wrap(self) -> None:
        assert wrap("the quick brown fox", 10) == "the quick\nbrown fox"

    def test_collapses_whitespace_and_newlines(self) -> None:
        assert wrap("a  b\n\nc\td", 80) == "a b c d"

    def test_exact_fit_stays_on_line(self) -> None:
        assert wrap("abcd efghi", 10) == "abcd efghi"

    def test_long_word_gets_own_line(self) -> None:
        assert wrap("hi supercalifragilistic yo", 5) == "hi\nsupercalifragilistic\nyo"

    def test_zero_width_returns_input(self) -> None:
        text = "  keep   this\nas is "
        assert wrap(text, 0) == text
        assert wrap(text, -3) == text

    def test_empty_input(self) -> None:
        assert wrap("", 10) == ""
        assert wrap("   \n ", 10) == ""

    def test_lines_fit_width(self) -> None:
        text = "lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod"
        for width in (11, 15, 20, 33):
            assert all(len(line) <= width for line in wrap(text, width).split("\n"))

    def test_counts_characters_not_bytes(self) -> None:
        assert wrap("héllo wörld", 11) == "héllo wörld"


class TestTruncateLines:
    """Tests for truncate_lines."""

    def test_under_limit_unchanged(self) -> None:
        assert truncate_lines("a\nb", 2) == "a\nb"

    def test_over_limit_appends_ellipsis_to_last_line(self) -> None:
        result = truncate_lines("a\nb\nc\nd", 2)
        assert result == f"a\nb{ELLIPSIS}"
        assert len(result.split("\n")) == 2

    def test_zero_or_negative_limit(self) -> None:
        assert truncate_lines("a\nb", 0) == ""
        assert truncate_lines("a\nb", -1) == ""

    def test_composes_with_wrap(self) -> None:
        snippet = truncate_lines(
            wrap(strip_markup("<p>one two three four five six</p>"), 8), 2
        )
        assert snippet == f"one two\nthree{ELLIPSIS}"
