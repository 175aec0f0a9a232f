"""Merge freshly captured state into the previously persisted snapshot.

Groups are keyed by title.  A merge only ever replaces or appends groups;
saved groups with no live counterpart are closed groups and are kept so
they can be restored later.

Titles are a weak identity: renaming a live group orphans its saved
counterpart, and two live groups sharing a title collide.  Both merges
keep that behavior unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tabkeep.exceptions import NotFoundError
from tabkeep.models.live import LiveGroup
from tabkeep.models.saved import CapturedSnapshot, SavedGroup, SavedState

_logger = logging.getLogger(__name__)


def _upsert_group(groups: list[SavedGroup], group: SavedGroup) -> None:
    """Replace the first same-title entry in place, else append."""
    for position, existing in enumerate(groups):
        if existing.title == group.title:
            groups[position] = group
            return
    groups.append(group)


def merge_full(
    previous: SavedState | None,
    captured: CapturedSnapshot,
    *,
    saved_at: int,
) -> SavedState:
    """Merge a full capture into *previous*.

    Ungrouped tabs are replaced wholesale: a previously saved ungrouped
    tab that is not open any more is dropped.  Groups are merged by title;
    when several captured groups share a title, the last one is kept.
    """
    groups = list(previous.groups) if previous is not None else []
    for group in captured.groups:
        _upsert_group(groups, group)

    _logger.debug(
        "Full merge: %d ungrouped tabs, %d captured groups, %d saved groups",
        len(captured.ungrouped_tabs),
        len(captured.groups),
        len(groups),
    )
    return SavedState(
        saved_at=saved_at,
        ungrouped_tabs=list(captured.ungrouped_tabs),
        groups=groups,
    )


def find_live_group(groups: Sequence[LiveGroup], title: str) -> LiveGroup:
    """First live group titled *title*, in enumeration order.

    Duplicated live titles are not disambiguated further.
    """
    for group in groups:
        if group.title == title:
            return group
    raise NotFoundError(f'No open group named "{title}"', kind="group", key=title)


def merge_group(
    previous: SavedState | None,
    group: SavedGroup,
    *,
    saved_at: int,
) -> SavedState:
    """Re-save a single group, leaving every other saved entry untouched.

    ``saved_at`` is only used when there is no previous snapshot; an
    existing snapshot keeps its ``saved_at`` and ungrouped tabs.
    """
    if previous is None:
        return SavedState(saved_at=saved_at, ungrouped_tabs=[], groups=[group])

    groups = list(previous.groups)
    _upsert_group(groups, group)
    return previous.model_copy(update={"groups": groups})
