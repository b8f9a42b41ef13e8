"""Incremental renderer: diff two frames and emit the minimal terminal ops.

The diff is a pure function from ``(previous, current)`` to a list of
operations; :class:`Renderer` keeps the previous frame and applies the
operations to a :class:`~pi.multiselect.terminal.Terminal`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from pi.multiselect.frame import BLANK, Frame, PROMPT_ROW
from pi.multiselect.theme import Style

if TYPE_CHECKING:
    from pi.multiselect.terminal import Terminal

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MoveCursor:
    row: int
    col: int


@dataclass(frozen=True)
class ClearLine:
    pass


@dataclass(frozen=True)
class WriteStyled:
    text: str
    style: Style


Op = Union[MoveCursor, ClearLine, WriteStyled]


def _rewrite_row(row: int, text: str, style: Style) -> list[Op]:
    ops: list[Op] = [MoveCursor(row, 0), ClearLine()]
    if text:
        ops.append(WriteStyled(text, style))
    return ops


def diff_frames(
    previous: Frame | None,
    current: Frame,
    park: tuple[int, int] = (PROMPT_ROW, 0),
) -> list[Op]:
    """Compute the operations that turn *previous* into *current* on screen.

    Rows are compared at matching positions; unchanged rows produce no
    operations.  With no previous frame every row is written.  Rows that
    only exist in *previous* are cleared.  The list always ends by parking
    the cursor at *park*.
    """
    ops: list[Op] = []

    if previous is None:
        for row, line in enumerate(current):
            ops.extend(_rewrite_row(row, line.text, line.style))
    else:
        for row in range(max(len(previous), len(current))):
            old = previous[row] if row < len(previous) else None
            new = current[row] if row < len(current) else None
            if new is None:
                ops.extend(_rewrite_row(row, "", BLANK.style))
            elif new != old:
                ops.extend(_rewrite_row(row, new.text, new.style))

    ops.append(MoveCursor(*park))
    return ops


def touched_rows(ops: list[Op]) -> set[int]:
    """Rows that receive a clear or a write in *ops*."""
    rows: set[int] = set()
    row: int | None = None
    for op in ops:
        if isinstance(op, MoveCursor):
            row = op.row
        elif row is not None:
            rows.add(row)
    return rows


def apply_ops(terminal: Terminal, ops: list[Op]) -> None:
    for op in ops:
        if isinstance(op, MoveCursor):
            terminal.move_cursor(op.row, op.col)
        elif isinstance(op, ClearLine):
            terminal.clear_line()
        else:
            terminal.write_styled(op.text, op.style)


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class Renderer:
    """Keeps the last drawn frame and reconciles the screen against new ones."""

    def __init__(self, terminal: Terminal) -> None:
        self.terminal = terminal
        self._previous: Frame | None = None
        # Rows drawn since the last clear, including rows of older,
        # taller frames that were later blanked.
        self._height = 0
        self._full_redraw_count = 0

    @property
    def full_redraws(self) -> int:
        """Number of renders that rewrote every row."""
        return self._full_redraw_count

    @property
    def previous(self) -> Frame | None:
        return self._previous

    @property
    def height(self) -> int:
        return self._height

    def invalidate(self) -> None:
        """Forget the previous frame; the next render rewrites every row."""
        self._previous = None

    def render(self, frame: Frame, park: tuple[int, int] = (PROMPT_ROW, 0)) -> list[Op]:
        previous = self._previous
        if previous is None:
            self._full_redraw_count += 1
            logger.debug("full redraw #%d (%d rows)", self._full_redraw_count, len(frame))
            ops = diff_frames(None, frame, park)
            # A full redraw must also blank rows left over from a taller frame.
            if self._height > len(frame):
                stale = [
                    op
                    for row in range(len(frame), self._height)
                    for op in _rewrite_row(row, "", BLANK.style)
                ]
                ops = ops[:-1] + stale + ops[-1:]
        else:
            ops = diff_frames(previous, frame, park)

        apply_ops(self.terminal, ops)
        self._previous = frame
        self._height = max(self._height, len(frame))
        return ops

    def clear(self) -> None:
        """Blank every row drawn so far and return to the prompt origin."""
        for row in range(self._height):
            self.terminal.move_cursor(row, 0)
            self.terminal.clear_line()
        self.terminal.move_cursor(PROMPT_ROW, 0)
        self._previous = None
        self._height = 0
