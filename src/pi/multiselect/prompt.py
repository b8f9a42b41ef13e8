"""Prompt controller: owns the read-dispatch-render loop."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pi.multiselect.config import PromptConfig, load_config
from pi.multiselect.dispatcher import Dispatcher, PromptState
from pi.multiselect.errors import Cancelled, InvalidConfiguration
from pi.multiselect.frame import build_frame, park_position
from pi.multiselect.items import build_items
from pi.multiselect.keybindings import PromptKeybindingsManager
from pi.multiselect.keys import Key
from pi.multiselect.render import Renderer
from pi.multiselect.state import SelectionState
from pi.multiselect.terminal import ProcessTerminal, Terminal, raw_mode
from pi.multiselect.utils import truncate_to_width
from pi.multiselect.viewport import Viewport

logger = logging.getLogger(__name__)

# Rows taken by the prompt line above the item rows
_HEADER_ROWS = 1


class MultiSelect:
    """Interactive checkbox list.

    Construction validates everything and never touches the terminal, so
    configuration errors surface before raw mode is entered.  Each instance
    runs once: :meth:`interact` returns the checked indices in original
    order, or raises :class:`Cancelled`.
    """

    def __init__(self, config: PromptConfig, terminal: Terminal | None = None) -> None:
        self.config = config
        self.terminal: Terminal = terminal if terminal is not None else ProcessTerminal()

        try:
            keybindings = PromptKeybindingsManager(config.keybindings)  # type: ignore[arg-type]
        except ValueError as exc:
            raise InvalidConfiguration(str(exc)) from exc

        self.items = build_items(
            config.items, config.initial_checked, config.disabled, config.warnings
        )
        self.selection = SelectionState(
            self.items, groups=config.groups, wrap=config.wrap_navigation
        )
        self.dispatcher = Dispatcher(
            self.selection,
            keybindings=keybindings,
            filter_enabled=config.filter_enabled,
            start_filtering=config.start_filtering,
        )
        self.renderer = Renderer(self.terminal)
        self.viewport = Viewport(page_size=1)
        self._size: tuple[int, int] = (0, 0)

    @classmethod
    def from_options(
        cls,
        items: Sequence[str],
        *,
        terminal: Terminal | None = None,
        **options: object,
    ) -> MultiSelect:
        return cls(load_config(items=list(items), **options), terminal)

    @property
    def state(self) -> PromptState:
        return self.dispatcher.state

    # -- entry points -------------------------------------------------------

    def interact(self) -> list[int]:
        """Run the prompt to completion and return the checked indices."""
        with raw_mode(self.terminal):
            try:
                self._loop()
            finally:
                self._finish()
        return self.selection.finalize()

    def interact_opt(self) -> list[int] | None:
        """Like :meth:`interact`, but returns ``None`` when cancelled."""
        try:
            return self.interact()
        except Cancelled:
            return None

    def interact_groups(self) -> list[list[int]]:
        """Like :meth:`interact`, but returns the checked positions per group."""
        self.interact()
        return self.selection.finalize_groups()

    # -- loop ---------------------------------------------------------------

    def _loop(self) -> None:
        self._apply_size(self.terminal.terminal_size())
        self._render()

        while not self.dispatcher.done:
            symbol = self.terminal.read_key()
            resized = self._check_resize(symbol)
            outcome = self.dispatcher.dispatch(symbol)
            if outcome.state.is_terminal:
                break
            if resized or outcome.changed:
                self._render()

    def _page_size(self, rows: int) -> int:
        # Every group adds a header row
        wanted = self.config.page_size or len(self.items) + len(self.config.groups)
        return max(1, min(wanted, rows - _HEADER_ROWS))

    def _apply_size(self, size: tuple[int, int]) -> None:
        self._size = size
        page_size = self._page_size(size[0])
        self.viewport.resize(page_size)
        self.dispatcher.page_size = page_size

    def _check_resize(self, symbol: str) -> bool:
        size = self.terminal.terminal_size()
        if symbol != Key.resize and size == self._size:
            return False
        logger.debug("terminal resized %s -> %s", self._size, size)
        self._apply_size(size)
        self.renderer.invalidate()
        return True

    def _render(self) -> None:
        selection = self.selection
        self.viewport.follow(selection.cursor, len(selection.rows))

        show_filter = self.config.filter_enabled and (
            bool(selection.filter) or self.dispatcher.state is PromptState.FILTERING
        )
        frame = build_frame(
            selection,
            self.viewport,
            width=self._size[1],
            prompt=self.config.prompt,
            show_filter=show_filter,
        )
        row, col = park_position(frame)
        self.renderer.render(frame, (row, min(col, max(self._size[1] - 1, 0))))

    # -- tear-down ----------------------------------------------------------

    def _finish(self) -> None:
        """Leave the screen tidy before raw mode is released."""
        if self.config.clear:
            self.renderer.clear()
            row = 0
        else:
            row = self.renderer.height
            self.terminal.move_cursor(row, 0)

        if self.config.report and self.dispatcher.state is PromptState.DONE:
            self.terminal.write_styled(self.report_text(), "prompt")
            self.terminal.move_cursor(row + 1, 0)

    def report_text(self) -> str:
        """One-line summary of the confirmed selection."""
        labels = ", ".join(self.selection.selected_labels()) or "(none)"
        text = f"{self.config.prompt}: {labels}" if self.config.prompt else labels
        return truncate_to_width(text, max(self._size[1] - 1, 1))


def multiselect(
    items: Sequence[str],
    *,
    terminal: Terminal | None = None,
    **options: object,
) -> list[int]:
    """Show a prompt for *items* and return the checked indices.

    Keyword options are the fields of :class:`PromptConfig`.  Raises
    :class:`Cancelled` if the user aborts and :class:`InvalidConfiguration`
    for bad options.
    """
    return MultiSelect.from_options(items, terminal=terminal, **options).interact()
