"""Pure construction of a render frame from the selection state."""

from __future__ import annotations

from dataclasses import dataclass

from pi.multiselect.items import Item
from pi.multiselect.state import GroupState, SelectionState
from pi.multiselect.theme import Style
from pi.multiselect.utils import truncate_to_width, visible_width
from pi.multiselect.viewport import Viewport

CURSOR_PREFIX = "→ "
PLAIN_PREFIX = "  "
CHECKED_GLYPH = "[x]"
UNCHECKED_GLYPH = "[ ]"
GROUP_GLYPHS: dict[GroupState, str] = {
    "none": "[ ]",
    "partial": "[-]",
    "all": "[x]",
}
# Items inside a group sit under their header
GROUP_INDENT = "  "
NO_MATCH_TEXT = "No matching items"

# Row 0 of every frame
PROMPT_ROW = 0


@dataclass(frozen=True)
class Line:
    text: str
    style: Style


Frame = tuple[Line, ...]

BLANK = Line("", "blank")


def _item_style(item: Item, is_cursor: bool) -> Style:
    if is_cursor:
        return "cursor_disabled" if item.disabled else "cursor"
    if item.disabled:
        return "disabled"
    if item.checked:
        return "checked"
    if item.warning:
        return "warning"
    return "item"


def _fit(text: str, width: int) -> str:
    return truncate_to_width(text, max(width - 1, 1))


def render_item(item: Item, is_cursor: bool, width: int, indent: str = "") -> Line:
    """Render one item row: cursor marker, checkbox glyph, label, annotation."""
    prefix = CURSOR_PREFIX if is_cursor else PLAIN_PREFIX
    glyph = CHECKED_GLYPH if item.checked else UNCHECKED_GLYPH
    text = f"{prefix}{indent}{glyph} {item.label}"

    annotation = item.annotation
    if annotation:
        text += f"  ({annotation})"

    return Line(_fit(text, width), _item_style(item, is_cursor))


def render_group_header(label: str, state: GroupState, is_cursor: bool, width: int) -> Line:
    prefix = CURSOR_PREFIX if is_cursor else PLAIN_PREFIX
    text = f"{prefix}{GROUP_GLYPHS[state]} {label}"
    return Line(_fit(text, width), "cursor" if is_cursor else "header")


def render_header(
    prompt: str,
    page_info: tuple[int, int] | None,
    filter_text: str | None,
    width: int,
) -> Line:
    parts: list[str] = []
    if prompt:
        parts.append(prompt)
    if page_info is not None:
        parts.append(f"[{page_info[0]}/{page_info[1]}]")
    if filter_text is not None:
        parts.append(f"filter: {filter_text}")
    return Line(_fit(" ".join(parts), width), "prompt")


def build_frame(
    selection: SelectionState,
    viewport: Viewport,
    *,
    width: int,
    prompt: str = "",
    show_filter: bool = False,
) -> Frame:
    """Snapshot the prompt row and one row per page slot.

    The frame always has ``viewport.page_size + 1`` rows so that a shrinking
    visible list blanks the rows it no longer uses.
    """
    rows = selection.rows
    total = len(rows)

    header = render_header(
        prompt,
        viewport.page_info(total),
        selection.filter if show_filter else None,
        width,
    )
    lines: list[Line] = [header]

    if total == 0:
        lines.append(Line(_fit(PLAIN_PREFIX + NO_MATCH_TEXT, width), "hint"))
    else:
        groups = selection.groups
        for position in viewport.window(total):
            row = rows[position]
            is_cursor = position == selection.cursor
            if row.header:
                lines.append(
                    render_group_header(
                        groups[row.index].label,
                        selection.group_state(row.index),
                        is_cursor,
                        width,
                    )
                )
                continue
            grouped = any(row.index in group for group in groups)
            lines.append(
                render_item(
                    selection.items[row.index],
                    is_cursor,
                    width,
                    GROUP_INDENT if grouped else "",
                )
            )

    while len(lines) < viewport.page_size + 1:
        lines.append(BLANK)

    return tuple(lines[: viewport.page_size + 1])


def park_position(frame: Frame) -> tuple[int, int]:
    """Where the terminal cursor rests: the end of the prompt row."""
    if not frame:
        return PROMPT_ROW, 0
    return PROMPT_ROW, visible_width(frame[PROMPT_ROW].text)
