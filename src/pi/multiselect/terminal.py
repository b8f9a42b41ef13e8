"""Terminal abstraction for the prompt: the capability set the engine uses.

Provides the ``Terminal`` protocol, the :func:`raw_mode` scoped-acquisition
helper and a concrete ``ProcessTerminal`` that drives a real TTY with
``termios``/``tty`` and ANSI escape sequences.
"""

from __future__ import annotations

import codecs
import logging
import os
import select
import signal
import sys
import termios
import threading
import tty
from collections import deque
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol, TextIO

from pi.multiselect.errors import IoFailure
from pi.multiselect.keys import Key, KeySymbol, parse_key
from pi.multiselect.stdin_buffer import StdinBuffer
from pi.multiselect.theme import AnsiTheme, PlainTheme, Style, Theme, apply_style

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_CLEAR_LINE = "\x1b[2K\r"
_CURSOR_UP_FMT = "\x1b[{}A"
_CURSOR_DOWN_FMT = "\x1b[{}B"
_CURSOR_FORWARD_FMT = "\x1b[{}C"
_NEW_ROW = "\r\n"

# How long to wait for the rest of an escape sequence after a bare ESC
_ESCAPE_TIMEOUT = 0.05


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Capabilities the prompt needs from a terminal.

    Rows passed to ``move_cursor`` are relative to the row the prompt
    started on; row 0 is the prompt row.
    """

    def enter_raw_mode(self) -> None: ...

    def leave_raw_mode(self) -> None: ...

    def read_key(self) -> KeySymbol: ...

    def move_cursor(self, row: int, col: int) -> None: ...

    def clear_line(self) -> None: ...

    def write_styled(self, text: str, style: Style) -> None: ...

    def terminal_size(self) -> tuple[int, int]: ...


@contextmanager
def raw_mode(terminal: Terminal) -> Iterator[Terminal]:
    """Hold *terminal* in raw mode for the duration of the block.

    The terminal is restored on every exit path, including exceptions
    raised inside the block.
    """
    terminal.enter_raw_mode()
    try:
        yield terminal
    finally:
        terminal.leave_raw_mode()


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by a TTY file descriptor and a text stream.

    Keys are read from *input_fd* (stdin by default) and the prompt is drawn
    on *output* (stderr by default, so stdout stays free for results).
    SIGWINCH is turned into a :attr:`Key.resize` symbol through a self-pipe
    so a blocked :meth:`read_key` wakes up when the window changes size.
    Resize events are only watched when raw mode is entered from the main
    thread.
    """

    def __init__(
        self,
        *,
        input_fd: int | None = None,
        output: TextIO | None = None,
        theme: Theme | None = None,
        escape_timeout: float = _ESCAPE_TIMEOUT,
    ) -> None:
        self._input_fd = input_fd
        self._output = output
        self._theme = theme
        self._escape_timeout = escape_timeout
        self._original_termios: list | None = None
        self._prev_sigwinch_handler: Any = None
        self._watching_resize = False
        self._wake_r: int | None = None
        self._wake_w: int | None = None
        self._buffer = StdinBuffer()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending: deque[KeySymbol] = deque()
        self._row = 0
        self._height = 1
        self._write_log_path: str = os.environ.get("PI_MULTISELECT_WRITE_LOG", "")

    # -- properties ---------------------------------------------------------

    @property
    def output(self) -> TextIO:
        return self._output if self._output is not None else sys.stderr

    @property
    def input_fd(self) -> int:
        return self._input_fd if self._input_fd is not None else sys.stdin.fileno()

    @property
    def theme(self) -> Theme:
        if self._theme is None:
            self._theme = _default_theme(self.output)
        return self._theme

    def terminal_size(self) -> tuple[int, int]:
        try:
            size = os.get_terminal_size(self.output.fileno())
            return size.lines, size.columns
        except (ValueError, OSError):
            return 24, 80

    # -- raw mode -----------------------------------------------------------

    def enter_raw_mode(self) -> None:
        """Save the TTY attributes, switch to raw mode, watch for resizes.

        If any step fails the terminal is put back as it was before the
        error propagates.
        """
        fd = self.input_fd
        try:
            self._original_termios = termios.tcgetattr(fd)
        except termios.error as exc:
            raise IoFailure(f"cannot enter raw mode on fd {fd}: {exc}") from exc

        try:
            tty.setraw(fd)
            self._watch_resize()
        except (termios.error, OSError, ValueError) as exc:
            self._release()
            raise IoFailure(f"cannot enter raw mode on fd {fd}: {exc}") from exc
        except BaseException:
            self._release()
            raise

        self._row = 0
        self._height = 1
        self._buffer.clear()
        self._pending.clear()
        logger.debug("raw mode on fd %d", fd)

    def leave_raw_mode(self) -> None:
        """Restore TTY attributes and the previous SIGWINCH handler."""
        self._release()
        logger.debug("raw mode off")

    def _watch_resize(self) -> None:
        # Signal handlers can only be installed from the main thread
        if threading.current_thread() is not threading.main_thread():
            logger.debug("not on the main thread, resize events disabled")
            return
        self._wake_r, self._wake_w = os.pipe()
        os.set_blocking(self._wake_w, False)
        self._prev_sigwinch_handler = signal.getsignal(signal.SIGWINCH)
        signal.signal(signal.SIGWINCH, self._on_sigwinch)
        self._watching_resize = True

    def _release(self) -> None:
        if self._watching_resize:
            signal.signal(signal.SIGWINCH, self._prev_sigwinch_handler or signal.SIG_DFL)
            self._prev_sigwinch_handler = None
            self._watching_resize = False

        for fd in (self._wake_r, self._wake_w):
            if fd is not None:
                os.close(fd)
        self._wake_r = self._wake_w = None

        if self._original_termios is not None:
            try:
                termios.tcsetattr(self.input_fd, termios.TCSADRAIN, self._original_termios)
            except termios.error as exc:
                raise IoFailure(f"cannot restore terminal mode: {exc}") from exc
            finally:
                self._original_termios = None

    # -- input --------------------------------------------------------------

    def read_key(self) -> KeySymbol:
        """Block until the next key (or a resize) and return its symbol."""
        while not self._pending:
            ready = self._wait(timeout=None)
            if self._wake_r is not None and self._wake_r in ready:
                self._drain_wakeups()
                return Key.resize

            self._queue(self._buffer.feed(self._read_chunk()))

            # A bare ESC might be the start of a sequence still in flight
            while self._buffer.pending:
                if self._wait(timeout=self._escape_timeout, wake=False):
                    self._queue(self._buffer.feed(self._read_chunk()))
                else:
                    self._queue(self._buffer.flush())

        return self._pending.popleft()

    def _queue(self, sequences: list[str]) -> None:
        for sequence in sequences:
            self._pending.append(parse_key(sequence) or sequence)

    def _wait(self, timeout: float | None, wake: bool = True) -> list[int]:
        fds = [self.input_fd]
        if wake and self._wake_r is not None:
            fds.append(self._wake_r)
        try:
            ready, _, _ = select.select(fds, [], [], timeout)
        except OSError as exc:
            raise IoFailure(f"waiting for input failed: {exc}") from exc
        return ready

    def _read_chunk(self) -> str:
        try:
            raw = os.read(self.input_fd, 4096)
        except OSError as exc:
            raise IoFailure(f"reading from the terminal failed: {exc}") from exc
        if not raw:
            raise IoFailure("end of input while waiting for a key")
        return self._decoder.decode(raw)

    def _drain_wakeups(self) -> None:
        try:
            while os.read(self._wake_r, 512):  # type: ignore[arg-type]
                pass
        except BlockingIOError:
            pass

    def _on_sigwinch(self, signum: int, frame: object) -> None:
        if self._wake_w is not None:
            try:
                os.write(self._wake_w, b"\0")
            except BlockingIOError:
                pass

    # -- output -------------------------------------------------------------

    def move_cursor(self, row: int, col: int) -> None:
        """Move to *row*/*col* of the prompt region, growing it if needed."""
        out: list[str] = []
        last = self._height - 1

        if row > last:
            if self._row < last:
                out.append(_CURSOR_DOWN_FMT.format(last - self._row))
            # New rows are opened with newlines so the screen scrolls at the bottom
            out.append(_NEW_ROW * (row - last))
            self._height = row + 1
        elif row < self._row:
            out.append(_CURSOR_UP_FMT.format(self._row - row))
        elif row > self._row:
            out.append(_CURSOR_DOWN_FMT.format(row - self._row))

        out.append("\r")
        if col > 0:
            out.append(_CURSOR_FORWARD_FMT.format(col))

        self._row = row
        self.write("".join(out))

    def clear_line(self) -> None:
        self.write(_CLEAR_LINE)

    def write_styled(self, text: str, style: Style) -> None:
        self.write(apply_style(self.theme, text, style))

    def write(self, data: str) -> None:
        """Write data to the output stream and optionally to the write log."""
        try:
            self.output.write(data)
            self.output.flush()
        except OSError as exc:
            raise IoFailure(f"writing to the terminal failed: {exc}") from exc

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a", newline="") as f:
                    f.write(data)
            except OSError:
                logger.debug("cannot append to write log %s", self._write_log_path)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _default_theme(output: TextIO) -> Theme:
    """Colour unless ``NO_COLOR`` is set or the output is not a terminal."""
    if os.environ.get("NO_COLOR"):
        return PlainTheme()
    try:
        if not output.isatty():
            return PlainTheme()
    except (AttributeError, ValueError):
        return PlainTheme()
    return AnsiTheme()
