"""Persisted snapshot models.

The stored document is the camelCase dump of :class:`SavedState`::

    {
        "savedAt": 1760000000000,
        "ungroupedTabs": [{"url": ..., "title": ..., "pinned": false, "index": 0}],
        "groups": [{"title": "Work", "color": "blue", "collapsed": false, "tabs": [...]}]
    }
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from tabkeep.models._base import TabGroupColor, TabkeepBaseModel


class SavedTab(TabkeepBaseModel):
    """A tab as stored in the snapshot.

    Parameters
    ----------
    url : str
        Identity key within its containing list.
    title : str
        Tab title at capture time.
    pinned : bool
        Whether the tab was pinned.
    index : int
        Position at capture time.  Only used to order a group's tabs when
        the snapshot is built.
    """

    url: str = ""
    title: str = ""
    pinned: bool = False
    index: int = 0


class SavedGroup(TabkeepBaseModel):
    """A tab group as stored in the snapshot, keyed by ``title``."""

    title: str = ""
    color: TabGroupColor = TabGroupColor.GREY
    collapsed: bool = False
    tabs: list[SavedTab] = Field(default_factory=list)


class CapturedSnapshot(TabkeepBaseModel):
    """Freshly captured live state, before it is merged into a document."""

    ungrouped_tabs: list[SavedTab] = Field(default_factory=list)
    groups: list[SavedGroup] = Field(default_factory=list)


class SavedState(TabkeepBaseModel):
    """The single persisted snapshot document.

    ``saved_at`` is epoch milliseconds.
    """

    saved_at: int
    ungrouped_tabs: list[SavedTab] = Field(default_factory=list)
    groups: list[SavedGroup] = Field(default_factory=list)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> SavedState:
        return cls.model_validate(document)

    def to_document(self) -> dict[str, Any]:
        """Return the camelCase JSON-compatible document for the store."""
        return self.model_dump(by_alias=True, mode="json")

    def find_group(self, title: str) -> SavedGroup | None:
        """First saved group with exactly this title."""
        return next((group for group in self.groups if group.title == title), None)

    def find_ungrouped_tab(self, url: str) -> SavedTab | None:
        """First saved ungrouped tab with exactly this url."""
        return next((tab for tab in self.ungrouped_tabs if tab.url == url), None)
