"""Join live and saved state into a display view.

Nothing here mutates its inputs, so the view can be recomputed as often
as the browser or the store reports a change.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from tabkeep._constants import TAB_GROUP_ID_NONE
from tabkeep.models.live import LiveGroup, LiveTab
from tabkeep.models.saved import SavedGroup, SavedState
from tabkeep.models.view import (
    ClosedGroup,
    LiveGroupStatus,
    LiveTabStatus,
    SyncStatus,
    SyncView,
)


def url_set(urls: Iterable[str]) -> frozenset[str]:
    """De-duplicated, order-independent url set."""
    return frozenset(urls)


def group_status(live_urls: Iterable[str], saved_urls: Iterable[str] | None) -> SyncStatus:
    """Classify a live group against its saved counterpart.

    ``saved_urls`` is ``None`` when no saved group shares the title.
    """
    if saved_urls is None:
        return SyncStatus.UNSAVED
    if url_set(live_urls) == url_set(saved_urls):
        return SyncStatus.SAVED
    return SyncStatus.OUT_OF_SYNC


def compute_sync_view(
    state: SavedState | None,
    tabs: Sequence[LiveTab],
    groups: Sequence[LiveGroup],
) -> SyncView:
    saved_groups = state.groups if state is not None else []
    saved_ungrouped = state.ungrouped_tabs if state is not None else []
    saved_group_by_title: dict[str, SavedGroup] = {}
    for saved_group in saved_groups:
        saved_group_by_title.setdefault(saved_group.title, saved_group)
    saved_ungrouped_urls = url_set(tab.url for tab in saved_ungrouped)

    tabs_by_group_id: dict[int, list[LiveTab]] = {}
    for tab in tabs:
        if tab.group_id < 0:
            continue
        tabs_by_group_id.setdefault(tab.group_id, []).append(tab)

    live_groups: list[LiveGroupStatus] = []
    for group in groups:
        members = sorted(tabs_by_group_id.get(group.id, []), key=lambda tab: tab.index)
        saved = saved_group_by_title.get(group.title)
        status = group_status(
            (tab.url for tab in members),
            [tab.url for tab in saved.tabs] if saved is not None else None,
        )
        live_groups.append(
            LiveGroupStatus(
                group=group,
                tabs=members,
                sync_status=status,
                saved_tabs=list(saved.tabs) if saved is not None else None,
            )
        )

    live_ungrouped = [
        LiveTabStatus(
            tab=tab,
            sync_status=SyncStatus.SAVED if tab.url in saved_ungrouped_urls else SyncStatus.UNSAVED,
        )
        for tab in sorted(
            (tab for tab in tabs if tab.group_id == TAB_GROUP_ID_NONE),
            key=lambda tab: tab.index,
        )
    ]

    open_titles = {group.title for group in groups}
    open_urls = {tab.url for tab in tabs}

    return SyncView(
        live_groups=live_groups,
        live_ungrouped_tabs=live_ungrouped,
        closed_groups=[
            ClosedGroup(title=group.title, tab_count=len(group.tabs))
            for group in saved_groups
            if group.title not in open_titles
        ],
        closed_tabs=[tab for tab in saved_ungrouped if tab.url not in open_urls],
    )
