"""Structural interfaces for the external collaborators.

Having protocols here makes it easy to plug in a real browser bridge or
test doubles while keeping the engine free of any browser specifics.
Browser methods may return either validated models or the raw camelCase
dicts the browser hands out; the client validates both.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol

from tabkeep.models.live import LiveGroup, LiveTab

#: Called with the new document (``None`` once cleared) after every write.
ChangeListener = Callable[[dict[str, Any] | None], None]


class SnapshotStore(Protocol):
    """One persisted document under a single fixed key."""

    async def load(self) -> dict[str, Any] | None: ...

    async def save(self, document: dict[str, Any]) -> None: ...

    async def clear(self) -> None: ...

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        ...


class TabsApi(Protocol):
    async def query_tabs(self) -> Sequence[LiveTab | Mapping[str, Any]]: ...

    async def create_tab(
        self,
        *,
        url: str,
        pinned: bool,
        window_id: int,
        active: bool,
    ) -> LiveTab | Mapping[str, Any]: ...


class GroupsApi(Protocol):
    async def query_groups(self) -> Sequence[LiveGroup | Mapping[str, Any]]: ...

    async def group_tabs(self, tab_ids: Sequence[int], window_id: int) -> int: ...

    async def update_group(
        self,
        group_id: int,
        *,
        title: str | None = None,
        color: str | None = None,
        collapsed: bool | None = None,
    ) -> None: ...


class WindowsApi(Protocol):
    async def get_current_window_id(self) -> int | None:
        """Id of the current window; ``None`` or an exception if unavailable."""
        ...
