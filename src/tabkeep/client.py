"""High-level async client for capturing and restoring tab sessions."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from pydantic import ValidationError

from tabkeep._invoke import Invoker
from tabkeep._redact import redact_url
from tabkeep.collaborators import ChangeListener, GroupsApi, SnapshotStore, TabsApi, WindowsApi
from tabkeep.config import TabkeepConfig
from tabkeep.engine import mutations
from tabkeep.engine.builder import build_group, build_snapshot
from tabkeep.engine.reconcile import find_live_group, merge_full, merge_group
from tabkeep.engine.restore import RestoreEngine, RestoreSummary
from tabkeep.engine.sync_status import compute_sync_view
from tabkeep.exceptions import SnapshotStoreError
from tabkeep.models.live import LiveGroup, LiveTab, parse_group, parse_tab
from tabkeep.models.result import OperationResult
from tabkeep.models.saved import SavedState
from tabkeep.models.view import SyncView
from tabkeep.store import create_store

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


class TabSessionClient:
    """Async client for tab-session snapshots.

    Every public operation returns an :class:`OperationResult`; failures
    are reported through ``result.error`` and never raised.  Writes
    replace the whole stored document, so two concurrent writes race and
    the later one wins.  Callers that can trigger writes concurrently must
    serialize them.

    Usage::

        async with TabSessionClient(store, browser, browser, browser) as client:
            result = await client.save_all()
            if not result.ok:
                print(result.error)
    """

    def __init__(
        self,
        store: SnapshotStore,
        tabs_api: TabsApi,
        groups_api: GroupsApi,
        windows_api: WindowsApi,
        *,
        config: TabkeepConfig | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._config = config or TabkeepConfig()
        self._store = store
        self._tabs = tabs_api
        self._groups = groups_api
        self._clock = clock
        self._invoke = Invoker.from_config(self._config)
        self._restore = RestoreEngine(tabs_api, groups_api, windows_api, invoker=self._invoke)
        self._subscriptions: list[Callable[[], None]] = []

    @classmethod
    def from_config(
        cls,
        config: TabkeepConfig,
        *,
        tabs_api: TabsApi,
        groups_api: GroupsApi,
        windows_api: WindowsApi,
        clock: Callable[[], int] = _now_ms,
    ) -> TabSessionClient:
        """Build a client whose store is described by *config*."""
        return cls(create_store(config), tabs_api, groups_api, windows_api, config=config, clock=clock)

    @property
    def config(self) -> TabkeepConfig:
        return self._config

    @property
    def store(self) -> SnapshotStore:
        return self._store

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TabSessionClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        """Drop every store subscription made through this client."""
        for unsubscribe in list(self._subscriptions):
            unsubscribe()

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Listen for snapshot store changes until unsubscribed or closed."""
        store_unsubscribe = self._store.subscribe(listener)

        def _unsubscribe() -> None:
            if _unsubscribe in self._subscriptions:
                self._subscriptions.remove(_unsubscribe)
                store_unsubscribe()

        self._subscriptions.append(_unsubscribe)
        return _unsubscribe

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _url_for_log(self, url: str) -> str:
        return redact_url(url) if self._config.redact_urls else url

    async def _run(self, operation: str, fn: Callable[[], Awaitable[T]]) -> OperationResult[T]:
        """Run an operation, converting any failure into an error result."""
        try:
            value = await fn()
        except Exception as exc:
            _logger.debug("%s failed: %s", operation, exc, exc_info=True)
            return OperationResult.failure(str(exc))
        return OperationResult.success(value)

    async def _load_state(self) -> SavedState | None:
        document = await self._invoke("load", self._store.load, error_cls=SnapshotStoreError)
        if document is None:
            return None
        try:
            return SavedState.from_document(document)
        except ValidationError as exc:
            raise SnapshotStoreError(f"Stored snapshot is malformed: {exc}", operation="load") from exc

    async def _save_state(self, state: SavedState) -> None:
        document = state.to_document()
        await self._invoke(
            "save",
            lambda: self._store.save(document),
            error_cls=SnapshotStoreError,
            saved_at=state.saved_at,
            groups=len(state.groups),
            ungrouped_tabs=len(state.ungrouped_tabs),
        )

    async def _query_tabs(self) -> list[LiveTab]:
        async def _call() -> list[LiveTab]:
            return [parse_tab(tab) for tab in await self._tabs.query_tabs()]

        return await self._invoke("query_tabs", _call)

    async def _query_groups(self) -> list[LiveGroup]:
        async def _call() -> list[LiveGroup]:
            return [parse_group(group) for group in await self._groups.query_groups()]

        return await self._invoke("query_groups", _call)

    async def _read_all(self) -> tuple[SavedState | None, list[LiveTab], list[LiveGroup]]:
        """Load the snapshot and enumerate live state concurrently."""
        state, tabs, groups = await asyncio.gather(
            self._load_state(),
            self._query_tabs(),
            self._query_groups(),
        )
        return state, tabs, groups

    async def _resave_group(self, title: str) -> SavedState:
        groups = await self._query_groups()
        live_group = find_live_group(groups, title)
        tabs, state = await asyncio.gather(self._query_tabs(), self._load_state())
        merged = merge_group(state, build_group(live_group, tabs), saved_at=self._clock())
        await self._save_state(merged)
        _logger.debug("Re-saved group %r", title)
        return merged

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    async def save_all(self) -> OperationResult[SavedState]:
        """Capture every open tab and group and merge them into the snapshot."""

        async def _call() -> SavedState:
            state, tabs, groups = await self._read_all()
            merged = merge_full(state, build_snapshot(tabs, groups), saved_at=self._clock())
            await self._save_state(merged)
            return merged

        return await self._run("save_all", _call)

    async def resave_group(self, title: str) -> OperationResult[SavedState]:
        """Re-capture the first open group titled *title*."""
        return await self._run("resave_group", lambda: self._resave_group(title))

    async def sync_out_of_sync(self) -> OperationResult[list[str]]:
        """Re-save every open group whose saved copy is out of sync.

        Stops at the first failure.  The result value lists the titles
        that were re-saved.
        """

        async def _call() -> list[str]:
            state, tabs, groups = await self._read_all()
            resaved: list[str] = []
            for title in compute_sync_view(state, tabs, groups).out_of_sync_titles:
                await self._resave_group(title)
                resaved.append(title)
            return resaved

        return await self._run("sync_out_of_sync", _call)

    # ------------------------------------------------------------------
    # Restore
    # ------------------------------------------------------------------

    async def restore_all(self) -> OperationResult[RestoreSummary]:
        """Reopen every saved ungrouped tab and group."""

        async def _call() -> RestoreSummary:
            return await self._restore.restore_all(await self._load_state())

        return await self._run("restore_all", _call)

    async def restore_group(self, title: str) -> OperationResult[RestoreSummary]:
        """Reopen the saved group titled *title*."""

        async def _call() -> RestoreSummary:
            return await self._restore.restore_group(await self._load_state(), title)

        return await self._run("restore_group", _call)

    async def restore_tab(self, url: str) -> OperationResult[RestoreSummary]:
        """Reopen the saved ungrouped tab at *url*."""

        async def _call() -> RestoreSummary:
            summary = await self._restore.restore_tab(await self._load_state(), url)
            _logger.debug("Restored tab %s", self._url_for_log(url))
            return summary

        return await self._run("restore_tab", _call)

    # ------------------------------------------------------------------
    # Single-entry mutations
    # ------------------------------------------------------------------

    async def remove_group(self, title: str) -> OperationResult[SavedState]:
        """Forget every saved group titled *title*.  Missing titles are a no-op."""

        async def _call() -> SavedState | None:
            state = await self._load_state()
            if state is None:
                return None
            updated = mutations.remove_group(state, title)
            await self._save_state(updated)
            return updated

        return await self._run("remove_group", _call)

    async def remove_tab(self, url: str) -> OperationResult[SavedState]:
        """Forget the saved ungrouped tab at *url*.  Missing urls are a no-op."""

        async def _call() -> SavedState | None:
            state = await self._load_state()
            if state is None:
                return None
            updated = mutations.remove_tab(state, url)
            await self._save_state(updated)
            return updated

        return await self._run("remove_tab", _call)

    async def save_tab(self, url: str, title: str, pinned: bool) -> OperationResult[SavedState]:
        """Save or update one ungrouped tab."""

        async def _call() -> SavedState:
            state = await self._load_state()
            updated = mutations.upsert_tab(state, url, title, pinned, saved_at=self._clock())
            await self._save_state(updated)
            _logger.debug("Saved tab %s", self._url_for_log(url))
            return updated

        return await self._run("save_tab", _call)

    # ------------------------------------------------------------------
    # Read-only
    # ------------------------------------------------------------------

    async def load_state(self) -> OperationResult[SavedState]:
        """Current snapshot; ``value`` is ``None`` when nothing was saved yet."""
        return await self._run("load_state", self._load_state)

    async def build_view(self) -> OperationResult[SyncView]:
        """Join live and saved state for display."""

        async def _call() -> SyncView:
            state, tabs, groups = await self._read_all()
            return compute_sync_view(state, tabs, groups)

        return await self._run("build_view", _call)
