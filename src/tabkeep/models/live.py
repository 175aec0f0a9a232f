"""Live browser state models.

These mirror what the browser reports right now and are never persisted.
Raw browser payloads use camelCase keys (``groupId``, ``windowId``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tabkeep._constants import TAB_GROUP_ID_NONE
from tabkeep.models._base import TabGroupColor, TabkeepBaseModel


class LiveTab(TabkeepBaseModel):
    """A currently open tab.

    Parameters
    ----------
    id : int or None
        Live tab id.  Changes on every browser restart.
    url : str
        Current url, ``""`` while unknown.
    title : str
        Current title, ``""`` while unknown.
    pinned : bool
        Whether the tab is pinned.
    index : int
        Position of the tab within its window.
    group_id : int
        Live id of the containing group, or ``TAB_GROUP_ID_NONE``.
    window_id : int or None
        Live id of the containing window.
    """

    id: int | None = None
    url: str = ""
    title: str = ""
    pinned: bool = False
    index: int = 0
    group_id: int = TAB_GROUP_ID_NONE
    window_id: int | None = None

    @property
    def is_ungrouped(self) -> bool:
        return self.group_id == TAB_GROUP_ID_NONE


class LiveGroup(TabkeepBaseModel):
    """A currently open tab group."""

    id: int
    title: str = ""
    color: TabGroupColor = TabGroupColor.GREY
    collapsed: bool = False
    window_id: int | None = None


def parse_tab(value: LiveTab | Mapping[str, Any]) -> LiveTab:
    """Validate a browser tab payload (model or raw camelCase mapping)."""
    if isinstance(value, LiveTab):
        return value
    return LiveTab.model_validate(dict(value))


def parse_group(value: LiveGroup | Mapping[str, Any]) -> LiveGroup:
    """Validate a browser group payload (model or raw camelCase mapping)."""
    if isinstance(value, LiveGroup):
        return value
    return LiveGroup.model_validate(dict(value))
