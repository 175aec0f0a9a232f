"""End-to-end client tests against in-memory store and browser doubles."""

from __future__ import annotations

import pytest

from tabkeep.client import TabSessionClient
from tabkeep.config import TabkeepConfig
from tabkeep.exceptions import TabkeepConfigError
from tabkeep.models.view import SyncStatus
from tabkeep.store import JsonFileSnapshotStore, MemorySnapshotStore
from tests.conftest import FIXED_NOW_MS
from tests.fakes import FakeBrowser, RecordingStore, make_group, make_tab


def _work_session(browser: FakeBrowser) -> None:
    browser.tabs = [
        make_tab(1, "https://x.com", index=0, title="X"),
        make_tab(2, "https://q.com", index=3, group_id=10, title="Q"),
        make_tab(3, "https://y.com", index=1, title="Y", pinned=True),
        make_tab(4, "https://p.com", index=2, group_id=10, title="P"),
    ]
    browser.groups = [make_group(10, "Work", color="blue")]


def _saved_document(*, groups: list[dict] | None = None, ungrouped: list[dict] | None = None) -> dict:
    return {"savedAt": 1000, "ungroupedTabs": ungrouped or [], "groups": groups or []}


def _doc_tab(url: str, index: int = 0, *, pinned: bool = False) -> dict:
    return {"url": url, "title": url, "pinned": pinned, "index": index}


def _doc_group(title: str, *urls: str, color: str = "blue", collapsed: bool = False) -> dict:
    return {
        "title": title,
        "color": color,
        "collapsed": collapsed,
        "tabs": [_doc_tab(url, index) for index, url in enumerate(urls)],
    }


# ------------------------------------------------------------------
# Capture
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_save_all_into_empty_store_writes_camel_case_document(
    client: TabSessionClient, store: RecordingStore, browser: FakeBrowser
) -> None:
    _work_session(browser)

    result = await client.save_all()

    assert result.ok
    assert store.saves == [
        {
            "savedAt": FIXED_NOW_MS,
            "ungroupedTabs": [
                {"url": "https://x.com", "title": "X", "pinned": False, "index": 0},
                {"url": "https://y.com", "title": "Y", "pinned": True, "index": 1},
            ],
            "groups": [
                {
                    "title": "Work",
                    "color": "blue",
                    "collapsed": False,
                    "tabs": [
                        {"url": "https://p.com", "title": "P", "pinned": False, "index": 2},
                        {"url": "https://q.com", "title": "Q", "pinned": False, "index": 3},
                    ],
                }
            ],
        }
    ]


@pytest.mark.asyncio
async def test_repeated_save_all_only_changes_timestamp(store: RecordingStore, browser: FakeBrowser) -> None:
    _work_session(browser)
    ticks = iter([1000, 2000])
    client = TabSessionClient(store, browser, browser, browser, clock=lambda: next(ticks))

    await client.save_all()
    await client.save_all()

    first, second = store.saves
    assert (first["savedAt"], second["savedAt"]) == (1000, 2000)
    assert first["ungroupedTabs"] == second["ungroupedTabs"]
    assert first["groups"] == second["groups"]


@pytest.mark.asyncio
async def test_save_all_keeps_closed_groups(
    client: TabSessionClient, store: RecordingStore, browser: FakeBrowser
) -> None:
    store.document = _saved_document(
        groups=[_doc_group("Archive", "https://old.com"), _doc_group("Work", "https://stale.com")],
        ungrouped=[_doc_tab("https://gone.com")],
    )
    _work_session(browser)

    result = await client.save_all()

    assert result.ok and result.value is not None
    assert [group.title for group in result.value.groups] == ["Archive", "Work"]
    assert [tab.url for tab in result.value.groups[1].tabs] == ["https://p.com", "https://q.com"]
    assert [tab.url for tab in result.value.ungrouped_tabs] == ["https://x.com", "https://y.com"]


@pytest.mark.asyncio
async def test_resave_group_updates_only_that_group(
    client: TabSessionClient, store: RecordingStore, browser: FakeBrowser
) -> None:
    store.document = _saved_document(
        groups=[_doc_group("Work", "P", "Q"), _doc_group("Personal", "S")],
        ungrouped=[_doc_tab("U")],
    )
    browser.tabs = [
        make_tab(1, "P", index=0, group_id=10),
        make_tab(2, "Q", index=1, group_id=10),
        make_tab(3, "R", index=2, group_id=10),
    ]
    browser.groups = [make_group(10, "Work", color="red")]

    view = await client.build_view()
    assert view.value is not None
    assert view.value.live_groups[0].sync_status == SyncStatus.OUT_OF_SYNC

    result = await client.resave_group("Work")

    assert result.ok
    saved = store.saves[-1]
    assert saved["savedAt"] == 1000
    assert saved["ungroupedTabs"] == [_doc_tab("U")]
    assert saved["groups"][0]["color"] == "red"
    assert [tab["url"] for tab in saved["groups"][0]["tabs"]] == ["P", "Q", "R"]
    assert saved["groups"][1] == _doc_group("Personal", "S")


@pytest.mark.asyncio
async def test_resave_group_with_duplicate_live_titles_uses_first(
    client: TabSessionClient, store: RecordingStore, browser: FakeBrowser
) -> None:
    browser.tabs = [
        make_tab(1, "a", index=0, group_id=1),
        make_tab(2, "b", index=1, group_id=2),
    ]
    browser.groups = [make_group(1, "Dup", color="blue"), make_group(2, "Dup", color="red")]

    result = await client.resave_group("Dup")

    assert result.ok
    assert store.document is not None
    assert store.document["groups"] == [_doc_group("Dup", "a", color="blue")]


@pytest.mark.asyncio
async def test_resave_unknown_group_reports_not_found(client: TabSessionClient, store: RecordingStore) -> None:
    result = await client.resave_group("Missing")

    assert not result.ok
    assert result.error == 'No open group named "Missing"'
    assert store.saves == []


@pytest.mark.asyncio
async def test_sync_out_of_sync_resaves_each_diverged_group(
    client: TabSessionClient, store: RecordingStore, browser: FakeBrowser
) -> None:
    store.document = _saved_document(
        groups=[_doc_group("A", "a1"), _doc_group("B", "b1"), _doc_group("C", "c1")],
    )
    browser.tabs = [
        make_tab(1, "a1", index=0, group_id=1),
        make_tab(2, "a2", index=1, group_id=1),
        make_tab(3, "b1", index=2, group_id=2),
        make_tab(4, "c2", index=3, group_id=3),
    ]
    browser.groups = [make_group(1, "A"), make_group(2, "B"), make_group(3, "C")]

    result = await client.sync_out_of_sync()

    assert result.ok
    assert result.value == ["A", "C"]
    assert len(store.saves) == 2
    groups = {group["title"]: [tab["url"] for tab in group["tabs"]] for group in store.document["groups"]}
    assert groups == {"A": ["a1", "a2"], "B": ["b1"], "C": ["c2"]}


# ------------------------------------------------------------------
# Restore
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_restore_tab_inside_saved_group_is_not_found(
    client: TabSessionClient, store: RecordingStore, browser: FakeBrowser
) -> None:
    store.document = _saved_document(groups=[_doc_group("Work", "P")])

    result = await client.restore_tab("P")

    assert result.error == 'No saved tab with URL "P"'
    assert browser.calls_named("create_tab") == []


@pytest.mark.asyncio
async def test_restore_missing_group_creates_nothing(
    client: TabSessionClient, store: RecordingStore, browser: FakeBrowser
) -> None:
    store.document = _saved_document(groups=[_doc_group("Work", "P")])

    result = await client.restore_group("Missing")

    assert result.error == 'No saved group named "Missing"'
    assert browser.calls_named("create_tab") == []
    assert browser.calls_named("group_tabs") == []


@pytest.mark.asyncio
async def test_restore_all_without_snapshot_does_nothing(client: TabSessionClient, browser: FakeBrowser) -> None:
    result = await client.restore_all()

    assert result.ok
    assert browser.calls == []


@pytest.mark.asyncio
async def test_restore_all_reports_window_failure(
    client: TabSessionClient, store: RecordingStore, browser: FakeBrowser
) -> None:
    store.document = _saved_document(ungrouped=[_doc_tab("https://a.com")])
    browser.window_id = None

    result = await client.restore_all()

    assert result.error == "Current window has no id"
    assert browser.calls_named("create_tab") == []


@pytest.mark.asyncio
async def test_restore_all_surfaces_first_browser_failure(
    client: TabSessionClient, store: RecordingStore, browser: FakeBrowser
) -> None:
    store.document = _saved_document(ungrouped=[_doc_tab("https://a.com"), _doc_tab("https://b.com", 1)])
    browser.fail_create_at = 2

    result = await client.restore_all()

    assert result.error == "create_tab failed: Cannot open https://b.com"
    assert [tab["url"] for tab in browser.tabs] == ["https://a.com"]


@pytest.mark.asyncio
async def test_restore_group_recreates_metadata(
    client: TabSessionClient, store: RecordingStore, browser: FakeBrowser
) -> None:
    store.document = _saved_document(groups=[_doc_group("Work", "P", "Q", color="purple", collapsed=True)])

    result = await client.restore_group("Work")

    assert result.ok and result.value is not None
    assert result.value.tabs_created == 2
    assert browser.groups == [make_group(20, "Work", color="purple", collapsed=True)]


# ------------------------------------------------------------------
# Single-entry mutations
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_remove_without_snapshot_does_not_write(client: TabSessionClient, store: RecordingStore) -> None:
    group_result = await client.remove_group("Work")
    tab_result = await client.remove_tab("https://a.com")

    assert group_result.ok and group_result.value is None
    assert tab_result.ok and tab_result.value is None
    assert store.saves == []


@pytest.mark.asyncio
async def test_remove_group_is_idempotent(client: TabSessionClient, store: RecordingStore) -> None:
    store.document = _saved_document(groups=[_doc_group("Work", "P"), _doc_group("Home", "H")])

    await client.remove_group("Work")
    await client.remove_group("Work")

    assert len(store.saves) == 2
    assert store.saves[0] == store.saves[1]
    assert [group["title"] for group in store.document["groups"]] == ["Home"]


@pytest.mark.asyncio
async def test_remove_tab_drops_matching_ungrouped_tab(client: TabSessionClient, store: RecordingStore) -> None:
    store.document = _saved_document(ungrouped=[_doc_tab("https://a.com"), _doc_tab("https://b.com", 1)])

    result = await client.remove_tab("https://a.com")

    assert result.ok
    assert store.document["ungroupedTabs"] == [_doc_tab("https://b.com", 1)]


@pytest.mark.asyncio
async def test_save_tab_creates_snapshot_when_missing(client: TabSessionClient, store: RecordingStore) -> None:
    result = await client.save_tab("https://a.com", "A", True)

    assert result.ok
    assert store.document == {
        "savedAt": FIXED_NOW_MS,
        "ungroupedTabs": [{"url": "https://a.com", "title": "A", "pinned": True, "index": 0}],
        "groups": [],
    }


@pytest.mark.asyncio
async def test_save_tab_replaces_existing_entry_in_place(client: TabSessionClient, store: RecordingStore) -> None:
    store.document = _saved_document(ungrouped=[_doc_tab("https://a.com", 4), _doc_tab("https://b.com", 5)])

    await client.save_tab("https://a.com", "Renamed", False)

    assert store.document["savedAt"] == 1000
    assert store.document["ungroupedTabs"] == [
        {"url": "https://a.com", "title": "Renamed", "pinned": False, "index": 0},
        _doc_tab("https://b.com", 5),
    ]


# ------------------------------------------------------------------
# Failures
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_malformed_snapshot_is_reported(client: TabSessionClient, store: RecordingStore) -> None:
    store.document = {"savedAt": "not-a-number", "groups": "nope"}

    result = await client.load_state()

    assert not result.ok
    assert result.error is not None
    assert result.error.startswith("Stored snapshot is malformed")


@pytest.mark.asyncio
async def test_store_failures_become_error_results(client: TabSessionClient, store: RecordingStore) -> None:
    store.fail_save = True

    save_result = await client.save_tab("https://a.com", "A", False)
    store.fail_load = True
    load_result = await client.load_state()

    assert save_result.error == "save failed: quota exceeded"
    assert load_result.error == "load failed: storage unavailable"


@pytest.mark.asyncio
async def test_load_state_without_snapshot_is_empty_success(client: TabSessionClient) -> None:
    result = await client.load_state()

    assert result.ok
    assert result.value is None


# ------------------------------------------------------------------
# Wiring
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_close_drops_subscriptions(client: TabSessionClient, store: RecordingStore) -> None:
    seen: list[dict | None] = []
    async with client:
        client.subscribe(seen.append)
        await client.save_tab("https://a.com", "A", False)
    await client.save_tab("https://b.com", "B", False)

    assert len(seen) == 1
    assert store.listeners == []


def test_close_releases_every_listener_once(client: TabSessionClient, store: RecordingStore) -> None:
    first: list[dict | None] = []
    second: list[dict | None] = []
    unsubscribe_first = client.subscribe(first.append)
    client.subscribe(second.append)
    store.subscribe(print)

    unsubscribe_first()
    client.close()
    client.close()

    assert store.listeners == [print]


def test_from_config_uses_memory_store_without_path(browser: FakeBrowser) -> None:
    client = TabSessionClient.from_config(
        TabkeepConfig(), tabs_api=browser, groups_api=browser, windows_api=browser
    )

    assert isinstance(client.store, MemorySnapshotStore)


def test_from_config_uses_json_store_with_path(browser: FakeBrowser, tmp_path) -> None:
    config = TabkeepConfig(state_path=tmp_path / "state.json", storage_key="session")

    client = TabSessionClient.from_config(config, tabs_api=browser, groups_api=browser, windows_api=browser)

    assert isinstance(client.store, JsonFileSnapshotStore)
    assert client.store.path == tmp_path / "state.json"


def test_empty_storage_key_is_rejected() -> None:
    with pytest.raises(TabkeepConfigError):
        TabkeepConfig(storage_key="")
