"""Tests for pi.multiselect.utils -- display width and truncation."""

from __future__ import annotations

from pi.multiselect.utils import take_columns, truncate_to_width, visible_width

# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------


class TestVisibleWidth:
    """Measure the visible terminal width of text."""

    def test_plain_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty_string(self) -> None:
        assert visible_width("") == 0

    def test_ansi_codes_do_not_count(self) -> None:
        assert visible_width("\x1b[1mhi\x1b[0m") == 2

    def test_wide_cjk_characters_count_as_two(self) -> None:
        assert visible_width("世界") == 4

    def test_combining_mark_adds_nothing(self) -> None:
        # "e" + COMBINING ACUTE ACCENT is one column
        assert visible_width("e\u0301") == 1

    def test_emoji_is_wide(self) -> None:
        assert visible_width("\U0001F600") == 2

    def test_cursor_arrow(self) -> None:
        assert visible_width("→ [x] a") == 7


# ---------------------------------------------------------------------------
# truncate_to_width
# ---------------------------------------------------------------------------


class TestTruncateToWidth:
    """Truncate text to a maximum visible width."""

    def test_short_text_unchanged(self) -> None:
        assert truncate_to_width("hi", 10) == "hi"

    def test_exact_width_unchanged(self) -> None:
        assert truncate_to_width("hello", 5) == "hello"

    def test_truncates_with_ellipsis(self) -> None:
        assert truncate_to_width("hello world", 8) == "hello..."

    def test_zero_width(self) -> None:
        assert truncate_to_width("hello", 0) == ""

    def test_width_smaller_than_ellipsis(self) -> None:
        assert truncate_to_width("hello", 2) == ".."

    def test_pad(self) -> None:
        assert truncate_to_width("hi", 5, pad=True) == "hi   "

    def test_wide_characters_never_split(self) -> None:
        result = truncate_to_width("世界世界", 6)
        assert result == "世..."
        assert visible_width(result) <= 6


class TestTakeColumns:
    def test_keeps_ansi_codes(self) -> None:
        assert take_columns("\x1b[1mhello\x1b[0m", 3) == "\x1b[1mhel"

    def test_cuts_on_grapheme_boundary(self) -> None:
        assert take_columns("e\u0301" * 3, 2) == "e\u0301" * 2
