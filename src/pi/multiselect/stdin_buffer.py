"""StdinBuffer splits raw terminal input into complete key sequences.

Reads from a TTY can end in the middle of an escape sequence (an arrow key
is three bytes).  The buffer holds a partial sequence until the rest arrives,
or until the caller decides no more is coming and calls :meth:`flush`, which
is how a lone ESC keypress is told apart from the start of a sequence.
"""

from __future__ import annotations

import re
from typing import Literal

ESC = "\x1b"

Completeness = Literal["complete", "incomplete", "not-escape"]

_SGR_MOUSE_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def _is_complete_sequence(data: str) -> Completeness:
    """Check if a string is a complete escape sequence or needs more data."""
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    # CSI sequences: ESC [
    if after_esc.startswith("["):
        if after_esc.startswith("[M"):
            return "complete" if len(data) >= 6 else "incomplete"
        return _is_complete_csi_sequence(data)

    # OSC, DCS and APC sequences all run to a terminator
    if after_esc[0] in "]P_":
        if data.endswith(f"{ESC}\\"):
            return "complete"
        if after_esc[0] == "]" and data.endswith("\x07"):
            return "complete"
        return "incomplete"

    # SS3 sequences: ESC O
    if after_esc.startswith("O"):
        return "complete" if len(after_esc) >= 2 else "incomplete"

    # Meta key: ESC followed by a single character
    return "complete"


def _is_complete_csi_sequence(data: str) -> Completeness:
    if len(data) < 3:
        return "incomplete"

    payload = data[2:]
    if 0x40 <= ord(payload[-1]) <= 0x7E:
        if payload.startswith("<"):
            return "complete" if _SGR_MOUSE_RE.match(payload) else "incomplete"
        return "complete"

    return "incomplete"


def _extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split accumulated buffer into complete sequences.

    Returns (sequences, remainder).
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            sequences.append(remaining[0])
            pos += 1
            continue

        for seq_end in range(1, len(remaining) + 1):
            if _is_complete_sequence(remaining[:seq_end]) == "complete":
                sequences.append(remaining[:seq_end])
                pos += seq_end
                break
        else:
            return sequences, remaining

    return sequences, ""


class StdinBuffer:
    """Accumulates input chunks and hands back complete sequences."""

    def __init__(self) -> None:
        self._buffer: str = ""

    def feed(self, data: str) -> list[str]:
        """Add *data* and return every sequence that is now complete."""
        self._buffer += data
        sequences, self._buffer = _extract_complete_sequences(self._buffer)
        return sequences

    @property
    def pending(self) -> bool:
        """``True`` while a partial escape sequence is held back."""
        return bool(self._buffer)

    def flush(self) -> list[str]:
        """Give up waiting and return whatever is buffered as one sequence."""
        if not self._buffer:
            return []
        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    def clear(self) -> None:
        self._buffer = ""

    def get_buffer(self) -> str:
        return self._buffer
