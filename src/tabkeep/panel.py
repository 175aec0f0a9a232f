"""Per-session display state for a tab-session panel.

:class:`PanelViewModel` owns everything a panel needs between frames:
the latest :class:`SyncView`, per-group expand flags, the "collapse all"
flag, the closed-items section flag and the transient error message.
One instance lives for one display session and is discarded on
:meth:`PanelViewModel.close`.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from tabkeep.client import TabSessionClient
from tabkeep.exceptions import TabkeepError
from tabkeep.models.live import LiveTab
from tabkeep.models.result import OperationResult
from tabkeep.models.view import SyncView

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class PanelViewModel:
    """Display state for one panel session.

    Usage::

        async with PanelViewModel(client) as panel:
            await panel.save_group("Work")
            if panel.error_message:
                ...
    """

    def __init__(self, client: TabSessionClient) -> None:
        self._client = client
        self._unsubscribe: Callable[[], None] | None = None
        self._closed = False
        self._group_expanded: dict[str, bool] = {}
        self.view: SyncView | None = None
        self.error_message = ""
        self.all_collapsed = False
        self.closed_section_collapsed = True
        self.dirty = True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PanelViewModel:
        self.open()
        await self.refresh()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self) -> None:
        """Start listening for snapshot changes."""
        self._require_open()
        if self._unsubscribe is None:
            self._unsubscribe = self._client.subscribe(self._on_store_change)

    def close(self) -> None:
        """Stop listening and discard all display state."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._group_expanded.clear()
        self.view = None
        self.error_message = ""
        self._closed = True

    def _require_open(self) -> None:
        if self._closed:
            raise TabkeepError("Panel view model is closed")

    def _on_store_change(self, _document: dict[str, Any] | None) -> None:
        self.dirty = True

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    async def refresh(self) -> SyncView | None:
        """Recompute the sync view from the store and the browser."""
        self._require_open()
        result = await self._client.build_view()
        if not result.ok or result.value is None:
            self.view = None
            self.error_message = result.error or ""
            return None

        view = result.value
        for entry in view.live_groups:
            self._group_expanded.setdefault(entry.title, True)
        self.all_collapsed = bool(view.live_groups) and all(
            not self._group_expanded.get(entry.title, True) for entry in view.live_groups
        )
        self.view = view
        self.dirty = False
        return view

    async def refresh_if_dirty(self) -> SyncView | None:
        if self.dirty:
            return await self.refresh()
        return self.view

    def is_expanded(self, title: str) -> bool:
        if self.all_collapsed:
            return False
        return self._group_expanded.get(title, True)

    def toggle_group(self, title: str) -> None:
        expanded = not self._group_expanded.get(title, True)
        self._group_expanded[title] = expanded
        if expanded:
            self.all_collapsed = False

    def toggle_all(self) -> None:
        self.all_collapsed = not self.all_collapsed
        if self.view is None:
            return
        for entry in self.view.live_groups:
            self._group_expanded[entry.title] = not self.all_collapsed

    def toggle_closed_section(self) -> None:
        self.closed_section_collapsed = not self.closed_section_collapsed

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def run_action(self, action: Callable[[], Awaitable[OperationResult[T]]]) -> OperationResult[T]:
        """Run a client operation and fold its outcome into the display state.

        The error message is cleared first, the view is refreshed
        afterwards, and a failed action leaves its error on display.
        """
        self._require_open()
        self.error_message = ""
        result = await action()
        await self.refresh()
        if not result.ok:
            _logger.debug("Panel action failed: %s", result.error)
            self.error_message = result.error or ""
        return result

    async def save_group(self, title: str) -> OperationResult[Any]:
        return await self.run_action(lambda: self._client.resave_group(title))

    async def remove_group(self, title: str) -> OperationResult[Any]:
        return await self.run_action(lambda: self._client.remove_group(title))

    async def restore_group(self, title: str) -> OperationResult[Any]:
        return await self.run_action(lambda: self._client.restore_group(title))

    async def save_tab(self, tab: LiveTab) -> OperationResult[Any]:
        return await self.run_action(lambda: self._client.save_tab(tab.url, tab.title, tab.pinned))

    async def remove_tab(self, url: str) -> OperationResult[Any]:
        return await self.run_action(lambda: self._client.remove_tab(url))

    async def restore_tab(self, url: str) -> OperationResult[Any]:
        return await self.run_action(lambda: self._client.restore_tab(url))

    async def sync_out_of_sync(self) -> OperationResult[Any]:
        return await self.run_action(self._client.sync_out_of_sync)
