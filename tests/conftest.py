from __future__ import annotations

import pytest

from tabkeep.client import TabSessionClient
from tests.fakes import FakeBrowser, RecordingStore

FIXED_NOW_MS = 5000


@pytest.fixture
def browser() -> FakeBrowser:
    return FakeBrowser()


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def client(store: RecordingStore, browser: FakeBrowser) -> TabSessionClient:
    return TabSessionClient(store, browser, browser, browser, clock=lambda: FIXED_NOW_MS)
