"""Tests for pi.multiselect.frame -- frame construction."""

from __future__ import annotations

from pi.multiselect.frame import (
    BLANK,
    NO_MATCH_TEXT,
    build_frame,
    park_position,
    render_group_header,
    render_item,
)
from pi.multiselect.items import Group, Item, build_items
from pi.multiselect.state import SelectionState
from pi.multiselect.utils import visible_width
from pi.multiselect.viewport import Viewport


def _state(count: int = 5, **kwargs) -> SelectionState:
    return SelectionState(build_items([f"item {i}" for i in range(count)], **kwargs))


class TestRenderItem:
    def test_cursor_row(self) -> None:
        line = render_item(Item("one"), True, 80)
        assert line.text == "→ [ ] one"
        assert line.style == "cursor"

    def test_checked_row(self) -> None:
        line = render_item(Item("one", checked=True), False, 80)
        assert line.text == "  [x] one"
        assert line.style == "checked"

    def test_disabled_row_shows_reason(self) -> None:
        line = render_item(Item("one", disabled=True, reason="in use"), False, 80)
        assert line.text == "  [ ] one  (in use)"
        assert line.style == "disabled"

    def test_disabled_under_cursor(self) -> None:
        line = render_item(Item("one", disabled=True), True, 80)
        assert line.style == "cursor_disabled"

    def test_warning_row(self) -> None:
        line = render_item(Item("one", warning="slow"), False, 80)
        assert line.text.endswith("(slow)")
        assert line.style == "warning"

    def test_long_label_is_truncated_below_width(self) -> None:
        line = render_item(Item("x" * 200), False, 40)
        assert visible_width(line.text) <= 39
        assert line.text.endswith("...")


class TestBuildFrame:
    def test_height_is_page_size_plus_header(self) -> None:
        frame = build_frame(_state(10), Viewport(page_size=4), width=80)
        assert len(frame) == 5

    def test_short_list_is_padded_with_blanks(self) -> None:
        frame = build_frame(_state(2), Viewport(page_size=4), width=80)
        assert len(frame) == 5
        assert frame[3] == BLANK
        assert frame[4] == BLANK

    def test_header_shows_prompt_and_page(self) -> None:
        frame = build_frame(_state(10), Viewport(page_size=4), width=80, prompt="Pick")
        assert frame[0].text == "Pick [1/3]"
        assert frame[0].style == "prompt"

    def test_header_without_pages(self) -> None:
        frame = build_frame(_state(3), Viewport(page_size=4), width=80, prompt="Pick")
        assert frame[0].text == "Pick"

    def test_header_shows_filter(self) -> None:
        state = _state(5)
        state.set_filter("3")
        frame = build_frame(state, Viewport(page_size=4), width=80, prompt="Pick",
                            show_filter=True)
        assert frame[0].text == "Pick filter: 3"
        assert frame[1].text == "→ [ ] item 3"

    def test_rows_follow_viewport_offset(self) -> None:
        state = _state(10)
        state.move_to(6)
        viewport = Viewport(page_size=3)
        viewport.follow(state.cursor, 10)
        frame = build_frame(state, viewport, width=80)
        assert [line.text[6:] for line in frame[1:]] == ["item 4", "item 5", "item 6"]
        assert frame[3].text.startswith("→")

    def test_page_counts_from_window_top(self) -> None:
        state = _state(10)
        state.move_to(6)
        viewport = Viewport(page_size=3)
        viewport.follow(state.cursor, 10)
        frame = build_frame(state, viewport, width=80)
        assert frame[0].text == "[2/4]"

    def test_no_match_hint(self) -> None:
        state = _state(5)
        state.set_filter("zzz")
        frame = build_frame(state, Viewport(page_size=3), width=80, show_filter=True)
        assert NO_MATCH_TEXT in frame[1].text
        assert frame[1].style == "hint"
        assert frame[2] == BLANK

    def test_exactly_one_cursor_row(self) -> None:
        state = _state(6)
        state.move_to(2)
        frame = build_frame(state, Viewport(page_size=6), width=80)
        assert sum(1 for line in frame if line.style.startswith("cursor")) == 1


class TestParkPosition:
    def test_parks_after_prompt(self) -> None:
        frame = build_frame(_state(2), Viewport(page_size=2), width=80, prompt="Pick")
        assert park_position(frame) == (0, 4)

    def test_empty_frame(self) -> None:
        assert park_position(()) == (0, 0)


def _grouped(**kwargs) -> SelectionState:
    items = build_items(["apple", "banana", "cherry", "bread"], **kwargs)
    return SelectionState(items, groups=[Group("fruit", 0, 3)])


class TestGroupRows:
    """Group headers carry a tri-state glyph; members are indented."""

    def test_header_glyphs(self) -> None:
        assert render_group_header("fruit", "none", False, 80).text == "  [ ] fruit"
        assert render_group_header("fruit", "partial", False, 80).text == "  [-] fruit"
        assert render_group_header("fruit", "all", False, 80).text == "  [x] fruit"

    def test_header_styles(self) -> None:
        assert render_group_header("fruit", "none", False, 80).style == "header"
        assert render_group_header("fruit", "none", True, 80).style == "cursor"

    def test_frame_draws_header_above_members(self) -> None:
        frame = build_frame(_grouped(initial_checked=(0,)), Viewport(page_size=6), width=80)
        assert [line.text for line in frame[1:6]] == [
            "→ [-] fruit",
            "    [x] apple",
            "    [ ] banana",
            "    [ ] cherry",
            "  [ ] bread",
        ]

    def test_all_glyph_ignores_disabled_member(self) -> None:
        state = _grouped(initial_checked=(0, 2), disabled={1: None})
        state.move(1)
        frame = build_frame(state, Viewport(page_size=6), width=80)
        assert frame[1].text == "  [x] fruit"
        assert frame[1].style == "header"

    def test_headers_count_towards_pages(self) -> None:
        frame = build_frame(_grouped(), Viewport(page_size=4), width=80)
        assert frame[0].text == "[1/2]"
