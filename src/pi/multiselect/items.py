"""Item model: candidate labels with checked/disabled flags."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)


def _normalize_to_single_line(text: str) -> str:
    return re.sub(r"[\r\n]+", " ", text).strip()


@dataclass
class Item:
    """A single selectable row.

    Only ``checked`` changes during the lifetime of a prompt, and only
    through :class:`~pi.multiselect.state.SelectionState`.
    """

    label: str
    checked: bool = False
    disabled: bool = False
    reason: str | None = None
    warning: str | None = None

    def matches(self, filter_text: str) -> bool:
        """Case-insensitive substring match against the label."""
        return filter_text.lower() in self.label.lower()

    @property
    def annotation(self) -> str | None:
        """Text shown after the label: the disabled reason or the warning."""
        if self.disabled:
            return _normalize_to_single_line(self.reason) if self.reason else None
        if self.warning:
            return _normalize_to_single_line(self.warning)
        return None


@dataclass(frozen=True)
class Group:
    """A labelled run of consecutive items, ``items[start:stop]``."""

    label: str
    start: int
    stop: int

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.start <= index < self.stop


@dataclass(frozen=True)
class Row:
    """One drawable row: an item, or the header of a group.

    ``index`` is an item index, or a group index when ``header`` is set.
    """

    index: int
    header: bool = False


def build_items(
    labels: Sequence[str],
    initial_checked: Iterable[int] = (),
    disabled: Mapping[int, str | None] | None = None,
    warnings: Mapping[int, str] | None = None,
) -> list[Item]:
    """Create the item list for a prompt.

    Indices in *initial_checked* that point at a disabled item are dropped,
    since a disabled item can never be part of the checked set.
    """
    disabled = disabled or {}
    warnings = warnings or {}

    items = [
        Item(
            label=_normalize_to_single_line(label),
            disabled=index in disabled,
            reason=disabled.get(index),
            warning=warnings.get(index),
        )
        for index, label in enumerate(labels)
    ]

    for index in sorted(set(initial_checked)):
        item = items[index]
        if item.disabled:
            logger.warning(
                "Ignoring initial check of disabled item %d (%r)", index, item.label
            )
            continue
        item.checked = True

    return items
