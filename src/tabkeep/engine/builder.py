"""Convert a live tab/group enumeration into the persisted shape."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from tabkeep.models.live import LiveGroup, LiveTab
from tabkeep.models.saved import CapturedSnapshot, SavedGroup, SavedTab


def to_saved_tab(tab: LiveTab) -> SavedTab:
    return SavedTab(url=tab.url, title=tab.title, pinned=tab.pinned, index=tab.index)


def member_tabs(group: LiveGroup, tabs: Iterable[LiveTab]) -> list[LiveTab]:
    """Tabs belonging to *group*, ordered by their live position."""
    return sorted((tab for tab in tabs if tab.group_id == group.id), key=lambda tab: tab.index)


def build_group(group: LiveGroup, tabs: Sequence[LiveTab]) -> SavedGroup:
    """Snapshot a single live group.

    A group without member tabs still yields a :class:`SavedGroup`, with
    an empty tab list.
    """
    return SavedGroup(
        title=group.title,
        color=group.color,
        collapsed=group.collapsed,
        tabs=[to_saved_tab(tab) for tab in member_tabs(group, tabs)],
    )


def build_snapshot(tabs: Sequence[LiveTab], groups: Sequence[LiveGroup]) -> CapturedSnapshot:
    """Snapshot the full live enumeration.

    Ungrouped tabs keep enumeration order; each group's tabs are sorted
    by index.  Tabs pointing at a group missing from *groups* are dropped.
    """
    return CapturedSnapshot(
        ungrouped_tabs=[to_saved_tab(tab) for tab in tabs if tab.is_ungrouped],
        groups=[build_group(group, tabs) for group in groups],
    )
