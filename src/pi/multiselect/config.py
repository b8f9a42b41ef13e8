"""Validated construction-time configuration for a prompt."""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from pi.multiselect.errors import InvalidConfiguration
from pi.multiselect.items import Group
from pi.multiselect.keybindings import PROMPT_ACTIONS


class PromptConfig(BaseModel):
    """Everything a :class:`~pi.multiselect.prompt.MultiSelect` is built from.

    ``page_size`` of ``None`` means "as many rows as fit": the item count
    plus one header row per group, capped by the terminal height.

    ``groups`` label consecutive runs of items; each run is drawn under a
    header row that toggles the whole run.  Items outside every group are
    drawn without a header.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    items: list[str]
    initial_checked: frozenset[int] = Field(default_factory=frozenset)
    page_size: Optional[int] = None
    filter_enabled: bool = False
    wrap_navigation: bool = True

    prompt: str = ""
    disabled: dict[int, Optional[str]] = Field(default_factory=dict)
    warnings: dict[int, str] = Field(default_factory=dict)
    start_filtering: bool = False
    report: bool = True
    clear: bool = True
    keybindings: dict[str, Union[str, list[str]]] = Field(default_factory=dict)
    groups: list[Group] = Field(default_factory=list)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise InvalidConfiguration(str(exc)) from exc

    @field_validator("items")
    @classmethod
    def _require_items(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one item is required")
        return value

    @field_validator("page_size")
    @classmethod
    def _positive_page_size(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 1:
            raise ValueError(f"page_size must be at least 1, got {value}")
        return value

    @field_validator("keybindings")
    @classmethod
    def _known_actions(
        cls, value: dict[str, Union[str, list[str]]]
    ) -> dict[str, Union[str, list[str]]]:
        unknown = sorted(set(value) - PROMPT_ACTIONS)
        if unknown:
            raise ValueError(f"unknown keybinding actions: {', '.join(unknown)}")
        return value

    @model_validator(mode="after")
    def _indices_in_range(self) -> PromptConfig:
        count = len(self.items)
        for name, indices in (
            ("initial_checked", self.initial_checked),
            ("disabled", self.disabled.keys()),
            ("warnings", self.warnings.keys()),
        ):
            bad = sorted(i for i in indices if not 0 <= i < count)
            if bad:
                raise ValueError(
                    f"{name} refers to items {bad} but there are only {count} items"
                )

        claimed: set[int] = set()
        for group in self.groups:
            if not 0 <= group.start < group.stop <= count:
                raise ValueError(
                    f"group {group.label!r} covers items {group.start}..{group.stop - 1}"
                    f" but there are only {count} items"
                )
            span = set(range(group.start, group.stop))
            if span & claimed:
                raise ValueError(f"group {group.label!r} overlaps another group")
            claimed |= span
        return self


def load_config(**options: object) -> PromptConfig:
    """Build a :class:`PromptConfig` from keyword options.

    Problems are reported as :class:`InvalidConfiguration`, as they are when
    the model is constructed directly.
    """
    return PromptConfig(**options)
