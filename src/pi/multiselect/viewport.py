"""Scrollable window over the visible list."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Viewport:
    """A window of ``page_size`` rows starting at ``offset``."""

    page_size: int
    offset: int = 0

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {self.page_size}")

    def follow(
        self,
        cursor_row: int,
        total_rows: int,
        page_size: int | None = None,
    ) -> int:
        """Scroll the minimum amount needed to keep *cursor_row* on the page.

        Returns the new offset.
        """
        if page_size is not None:
            self.resize(page_size)

        if total_rows <= self.page_size:
            self.offset = 0
            return self.offset

        if cursor_row < self.offset:
            self.offset = cursor_row
        elif cursor_row >= self.offset + self.page_size:
            self.offset = cursor_row - self.page_size + 1

        # The list may have shrunk (filtering) or the page grown (resize).
        self.offset = max(0, min(self.offset, total_rows - self.page_size))
        return self.offset

    def resize(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.page_size = page_size

    def window(self, total_rows: int) -> range:
        """Positions of the visible list that are drawn on the page."""
        return range(self.offset, min(self.offset + self.page_size, total_rows))

    def page_info(self, total_rows: int) -> tuple[int, int] | None:
        """``(current_page, total_pages)``, or ``None`` when everything fits.

        The current page is the page the top of the window falls on.
        """
        if total_rows <= self.page_size:
            return None
        total_pages = (total_rows + self.page_size - 1) // self.page_size
        return self.offset // self.page_size + 1, total_pages
