"""Base model and enums shared by the snapshot and live-state models.

Every persisted or browser-sourced model inherits from
:class:`TabkeepBaseModel` which provides:

* ``alias_generator=to_camel`` so the camelCase keys used by the browser
  and by the stored document map to snake_case fields.
* A ``model_validator(mode="before")`` that drops ``None`` values so the
  field default is used instead (the browser omits or nulls ``url`` and
  ``title`` for tabs that are still loading).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class TabGroupColor(StrEnum):
    """Colors a browser tab group can carry.

    Values without a mapped member resolve to ``GREY``, the browser's
    own default, instead of raising ``ValueError``.
    """

    GREY = "grey"
    BLUE = "blue"
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
    PINK = "pink"
    PURPLE = "purple"
    CYAN = "cyan"
    ORANGE = "orange"

    @classmethod
    def _missing_(cls, value: object) -> TabGroupColor:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return cls.GREY


class TabkeepBaseModel(BaseModel):
    """Base for snapshot and live-state models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_none_values(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return {key: value for key, value in values.items() if value is not None}
