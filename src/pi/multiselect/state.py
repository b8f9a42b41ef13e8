"""Selection state: cursor, checked set, filter and the derived visible list."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from pi.multiselect.errors import Cancelled
from pi.multiselect.items import Group, Item, Row

GroupState = Literal["none", "partial", "all"]


class SelectionState:
    """Cursor, checked set and filter over a fixed list of items.

    ``visible`` holds the absolute indices of the items that match the filter.
    ``rows`` is what gets drawn: the visible items, each run of grouped items
    preceded by its group header.  Without groups the two line up one to one.
    ``cursor`` indexes into ``rows`` and only ever rests on a header or an
    enabled item, unless no such row exists.

    The *anchor* is the row the user last navigated to.  Filtering never
    replaces it, which lets the cursor return to the same row once a filter
    that hid it is relaxed.
    """

    def __init__(
        self,
        items: list[Item],
        *,
        groups: Sequence[Group] = (),
        wrap: bool = True,
    ) -> None:
        self._items = items
        self._groups = list(groups)
        self._group_of = {
            index: g for g, group in enumerate(self._groups)
            for index in range(group.start, group.stop)
        }
        self._wrap = wrap
        self._filter = ""
        self._visible: list[int] = []
        self._rows: list[Row] = []
        self._rebuild()
        self._cursor = self._first_selectable()
        self._anchor: Row | None = self._rows[self._cursor] if self._rows else None
        self._aborted = False

    # -- read access -------------------------------------------------------

    @property
    def items(self) -> list[Item]:
        return self._items

    @property
    def groups(self) -> list[Group]:
        return self._groups

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def filter(self) -> str:
        return self._filter

    @property
    def visible(self) -> list[int]:
        return list(self._visible)

    @property
    def rows(self) -> list[Row]:
        return list(self._rows)

    @property
    def checked(self) -> frozenset[int]:
        return frozenset(i for i, item in enumerate(self._items) if item.checked)

    @property
    def wrap(self) -> bool:
        return self._wrap

    @property
    def aborted(self) -> bool:
        return self._aborted

    def is_checked(self, index: int) -> bool:
        return self._items[index].checked

    def current_row(self) -> Row | None:
        if not self._rows:
            return None
        return self._rows[self._cursor]

    def current(self) -> int | None:
        """Absolute index of the item under the cursor, or ``None``.

        ``None`` is also returned while the cursor is on a group header.
        """
        row = self.current_row()
        if row is None or row.header:
            return None
        return row.index

    def group_members(self, group: int) -> list[int]:
        """Visible, enabled items of *group*."""
        return [
            i for i in self._visible
            if self._group_of.get(i) == group and not self._items[i].disabled
        ]

    def group_state(self, group: int) -> GroupState:
        members = self.group_members(group)
        count = sum(1 for i in members if self._items[i].checked)
        if count == 0:
            return "none"
        return "all" if count == len(members) else "partial"

    # -- mutations ---------------------------------------------------------

    def toggle_current(self) -> bool:
        """Flip the item under the cursor, or the whole group on a header.

        Disabled items are left alone.
        """
        row = self.current_row()
        if row is None:
            return False
        if row.header:
            return self._toggle_items(self.group_members(row.index))
        item = self._items[row.index]
        if item.disabled:
            return False
        item.checked = not item.checked
        return True

    def move(self, delta: int) -> bool:
        """Step the cursor *delta* selectable rows, clamping or wrapping.

        Disabled items are skipped.  When no selectable row lies further in
        that direction the cursor stays put, or with wrapping enabled jumps
        to the first selectable row from the opposite end.
        """
        if not self._rows or delta == 0:
            return False

        step = 1 if delta > 0 else -1
        target = self._cursor
        for _ in range(abs(delta)):
            following = self._next_selectable(target, step)
            if following is None:
                break
            target = following

        if target == self._cursor and self._wrap:
            start = -1 if step > 0 else len(self._rows)
            wrapped = self._next_selectable(start, step)
            if wrapped is not None:
                target = wrapped

        return self._place(target)

    def move_to(self, position: int) -> bool:
        """Jump to *position* in ``rows`` (clamped, never wraps).

        A disabled item at *position* hands the cursor to the next
        selectable row below it, or failing that the one above.
        """
        if not self._rows:
            return False
        target = max(0, min(position, len(self._rows) - 1))
        if not self._selectable(self._rows[target]):
            below = self._next_selectable(target, 1)
            above = self._next_selectable(target, -1)
            if below is not None:
                target = below
            elif above is not None:
                target = above
        return self._place(target)

    def set_filter(self, text: str) -> None:
        """Replace the filter and recompute the visible list."""
        self._filter = text
        self._rebuild()
        if self._anchor is not None and self._anchor in self._rows:
            self._cursor = self._rows.index(self._anchor)
        else:
            self._cursor = self._first_selectable()

    def toggle_all(self) -> bool:
        """Check every visible selectable item, or uncheck them all.

        Items hidden by the filter are never touched.
        """
        return self._toggle_items([i for i in self._visible if not self._items[i].disabled])

    def abort(self) -> None:
        self._aborted = True

    # -- results -----------------------------------------------------------

    def finalize(self) -> list[int]:
        """Return the checked indices in original order.

        Raises :class:`Cancelled` if the prompt was aborted.
        """
        if self._aborted:
            raise Cancelled()
        return [i for i, item in enumerate(self._items) if item.checked]

    def finalize_groups(self) -> list[list[int]]:
        """Checked positions within each group, one list per group."""
        checked = self.finalize()
        return [
            [i - group.start for i in checked if i in group]
            for group in self._groups
        ]

    def selected_labels(self) -> list[str]:
        return [item.label for item in self._items if item.checked]

    # -- helpers -----------------------------------------------------------

    def _rebuild(self) -> None:
        self._visible = [
            i for i, item in enumerate(self._items) if item.matches(self._filter)
        ]
        rows: list[Row] = []
        previous: int | None = None
        for index in self._visible:
            group = self._group_of.get(index)
            if group is not None and group != previous:
                rows.append(Row(group, header=True))
            previous = group
            rows.append(Row(index))
        self._rows = rows

    def _selectable(self, row: Row) -> bool:
        return row.header or not self._items[row.index].disabled

    def _next_selectable(self, position: int, step: int) -> int | None:
        position += step
        while 0 <= position < len(self._rows):
            if self._selectable(self._rows[position]):
                return position
            position += step
        return None

    def _first_selectable(self) -> int:
        first = self._next_selectable(-1, 1)
        return 0 if first is None else first

    def _place(self, target: int) -> bool:
        changed = target != self._cursor
        self._cursor = target
        self._anchor = self._rows[target]
        return changed

    def _toggle_items(self, indices: list[int]) -> bool:
        if not indices:
            return False
        items = [self._items[i] for i in indices]
        value = not all(item.checked for item in items)
        for item in items:
            item.checked = value
        return True
