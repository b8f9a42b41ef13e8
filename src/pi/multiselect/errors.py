"""Exceptions raised by the multi-select prompt."""

from __future__ import annotations


class MultiSelectError(Exception):
    """Base class for all prompt errors."""


class Cancelled(MultiSelectError):
    """The user aborted the prompt instead of confirming a selection."""

    def __init__(self, message: str = "Cancelled") -> None:
        super().__init__(message)


class IoFailure(MultiSelectError):
    """Reading from or writing to the terminal failed.

    Raw mode has already been restored by the time this reaches the caller.
    """


class InvalidConfiguration(MultiSelectError, ValueError):
    """The prompt configuration was rejected before the terminal was touched."""
