"""Replay a saved snapshot into live browser entities.

The replay is strictly sequential: a group can only be created from tab
ids that already exist, and tabs are created one at a time so the browser
keeps them in saved order.  There is no rollback; the first failing step
aborts the restore and whatever was already created stays open.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tabkeep._invoke import Invoker
from tabkeep.collaborators import GroupsApi, TabsApi, WindowsApi
from tabkeep.exceptions import BrowserApiError, NotFoundError, TabkeepError, WindowResolutionError
from tabkeep.models.live import LiveTab, parse_tab
from tabkeep.models.saved import SavedGroup, SavedState, SavedTab

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RestoreSummary:
    """What a restore call created in the browser."""

    window_id: int | None = None
    tabs_created: int = 0
    groups_created: int = 0


class RestoreEngine:
    """Recreate saved tabs and groups through the browser collaborators."""

    def __init__(
        self,
        tabs_api: TabsApi,
        groups_api: GroupsApi,
        windows_api: WindowsApi,
        *,
        invoker: Invoker | None = None,
    ) -> None:
        self._tabs = tabs_api
        self._groups = groups_api
        self._windows = windows_api
        self._invoke = invoker or Invoker()

    async def resolve_window(self) -> int:
        """Id of the window restored entities are created in."""
        try:
            window_id = await self._windows.get_current_window_id()
        except TabkeepError:
            raise
        except Exception as exc:
            raise WindowResolutionError(f"Cannot resolve current window: {exc}") from exc
        if window_id is None:
            raise WindowResolutionError("Current window has no id")
        return window_id

    async def _create_tab(self, tab: SavedTab, window_id: int, summary: RestoreSummary) -> LiveTab:
        async def _call() -> LiveTab:
            created = await self._tabs.create_tab(url=tab.url, pinned=tab.pinned, window_id=window_id, active=False)
            return parse_tab(created)

        created = await self._invoke("create_tab", _call, url=tab.url, pinned=tab.pinned, window_id=window_id)
        summary.tabs_created += 1
        return created

    async def _restore_group(self, group: SavedGroup, window_id: int, summary: RestoreSummary) -> int:
        tab_ids: list[int] = []
        for tab in group.tabs:
            created = await self._create_tab(tab, window_id, summary)
            if created.id is None:
                raise BrowserApiError("Created tab has no id", operation="create_tab")
            tab_ids.append(created.id)

        group_id = await self._invoke(
            "group_tabs",
            lambda: self._groups.group_tabs(tab_ids, window_id),
            tab_ids=tab_ids,
            window_id=window_id,
        )
        await self._invoke(
            "update_group",
            lambda: self._groups.update_group(
                group_id,
                title=group.title,
                color=group.color.value,
                collapsed=group.collapsed,
            ),
            group_id=group_id,
            title=group.title,
        )
        summary.groups_created += 1
        _logger.debug("Restored group %r with %d tabs as group %s", group.title, len(tab_ids), group_id)
        return group_id

    async def restore_all(self, state: SavedState | None) -> RestoreSummary:
        """Recreate every saved ungrouped tab, then every saved group.

        Does nothing when no snapshot exists.
        """
        summary = RestoreSummary()
        if state is None:
            return summary

        window_id = await self.resolve_window()
        summary.window_id = window_id

        for tab in state.ungrouped_tabs:
            await self._create_tab(tab, window_id, summary)

        for group in state.groups:
            await self._restore_group(group, window_id, summary)

        return summary

    async def restore_group(self, state: SavedState | None, title: str) -> RestoreSummary:
        """Recreate the first saved group titled *title*."""
        group = state.find_group(title) if state is not None else None
        if group is None:
            raise NotFoundError(f'No saved group named "{title}"', kind="group", key=title)

        window_id = await self.resolve_window()
        summary = RestoreSummary(window_id=window_id)
        await self._restore_group(group, window_id, summary)
        return summary

    async def restore_tab(self, state: SavedState | None, url: str) -> RestoreSummary:
        """Recreate one saved ungrouped tab.

        Tabs stored inside a saved group are not searched.
        """
        tab = state.find_ungrouped_tab(url) if state is not None else None
        if tab is None:
            raise NotFoundError(f'No saved tab with URL "{url}"', kind="tab", key=url)

        window_id = await self.resolve_window()
        summary = RestoreSummary(window_id=window_id)
        await self._create_tab(tab, window_id, summary)
        return summary
