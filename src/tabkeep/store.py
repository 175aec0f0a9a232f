"""Reference snapshot stores.

Both stores hold one document under a single key and notify subscribers
after every write.  Notification is best-effort: a failing listener must
not break the write that triggered it.
"""

from __future__ import annotations

import asyncio
import contextlib
import copy
import json
import logging
import os
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from tabkeep._constants import STORAGE_KEY
from tabkeep.collaborators import ChangeListener, SnapshotStore
from tabkeep.config import TabkeepConfig
from tabkeep.exceptions import SnapshotStoreError

_logger = logging.getLogger(__name__)


class _ListenerRegistry:
    """Subscriber bookkeeping shared by the reference stores."""

    def __init__(self) -> None:
        self._listeners: list[ChangeListener] = []

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, document: dict[str, Any] | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(copy.deepcopy(document))
            except Exception:
                _logger.debug("Snapshot change listener failed", exc_info=True)


class MemorySnapshotStore(_ListenerRegistry):
    """In-memory store; the snapshot lives as long as the process."""

    def __init__(self, document: dict[str, Any] | None = None) -> None:
        super().__init__()
        self._document = copy.deepcopy(document)

    async def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._document)

    async def save(self, document: dict[str, Any]) -> None:
        self._document = copy.deepcopy(document)
        self._notify(self._document)

    async def clear(self) -> None:
        self._document = None
        self._notify(None)


class JsonFileSnapshotStore(_ListenerRegistry):
    """Store the snapshot as ``{key: document}`` in a UTF-8 JSON file.

    Other top-level keys in the file are preserved.  Each write goes to
    its own sibling temp file and is moved into place with ``os.replace``,
    so readers only ever see a complete document.  Concurrent saves from
    one store are serialized; the last one wins.
    File I/O runs in the default executor so the event loop never blocks.
    """

    def __init__(self, path: str | Path, *, key: str = STORAGE_KEY) -> None:
        super().__init__()
        self._path = Path(path)
        self._key = key
        self._io_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, Any]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise SnapshotStoreError(f"Cannot read {self._path}: {exc}", operation="load") from exc
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SnapshotStoreError(f"Invalid JSON in {self._path}: {exc}", operation="load") from exc
        if not isinstance(data, dict):
            raise SnapshotStoreError(f"Expected a JSON object in {self._path}", operation="load")
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        tmp_path: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_path)
            raise SnapshotStoreError(f"Cannot write {self._path}: {exc}", operation="save") from exc

    def _load_sync(self) -> dict[str, Any] | None:
        document = self._read_all().get(self._key)
        if document is None:
            return None
        if not isinstance(document, dict):
            raise SnapshotStoreError(f"Expected an object under {self._key!r}", operation="load")
        return document

    def _save_sync(self, document: dict[str, Any]) -> None:
        with self._io_lock:
            data = self._read_all()
            data[self._key] = document
            self._write_all(data)

    def _clear_sync(self) -> bool:
        with self._io_lock:
            data = self._read_all()
            if self._key not in data:
                return False
            del data[self._key]
            self._write_all(data)
            return True

    async def load(self) -> dict[str, Any] | None:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._load_sync)

    async def save(self, document: dict[str, Any]) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._save_sync, copy.deepcopy(document))
        _logger.debug("Snapshot written to %s", self._path)
        self._notify(document)

    async def clear(self) -> None:
        loop = asyncio.get_running_loop()
        removed = await loop.run_in_executor(None, self._clear_sync)
        if removed:
            _logger.debug("Snapshot cleared from %s", self._path)
        self._notify(None)


def create_store(config: TabkeepConfig) -> SnapshotStore:
    """Build the store described by *config*."""
    if config.state_path is not None:
        return JsonFileSnapshotStore(config.state_path, key=config.storage_key)
    return MemorySnapshotStore()
