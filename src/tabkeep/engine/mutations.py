"""Small single-entry edits of the saved snapshot.

Removals never signal a missing target; that is deliberate and differs
from the restore operations, which report it as :class:`NotFoundError`.
"""

from __future__ import annotations

from tabkeep._constants import SAVED_TAB_PLACEHOLDER_INDEX
from tabkeep.models.saved import SavedState, SavedTab


def remove_group(state: SavedState, title: str) -> SavedState:
    """Drop every saved group titled *title*."""
    return state.model_copy(update={"groups": [group for group in state.groups if group.title != title]})


def remove_tab(state: SavedState, url: str) -> SavedState:
    """Drop every saved ungrouped tab with *url*."""
    return state.model_copy(update={"ungrouped_tabs": [tab for tab in state.ungrouped_tabs if tab.url != url]})


def upsert_tab(
    state: SavedState | None,
    url: str,
    title: str,
    pinned: bool,
    *,
    saved_at: int,
) -> SavedState:
    """Save one ungrouped tab keyed by *url*.

    An existing entry is replaced in place, otherwise the tab is appended.
    ``saved_at`` only seeds a brand-new snapshot.
    """
    base = state if state is not None else SavedState(saved_at=saved_at)
    tab = SavedTab(url=url, title=title, pinned=pinned, index=SAVED_TAB_PLACEHOLDER_INDEX)

    tabs = list(base.ungrouped_tabs)
    for position, existing in enumerate(tabs):
        if existing.url == url:
            tabs[position] = tab
            break
    else:
        tabs.append(tab)
    return base.model_copy(update={"ungrouped_tabs": tabs})
