"""
Unit tests for the report store.

Validates newest-first ordering, rename/remove semantics, whole-sequence
persistence and recovery from corrupt persisted state.
"""

import json

import pytest

from artillery_viewer.config import STORAGE_KEY
from artillery_viewer.storage import MemoryStorage
from artillery_viewer.store import ReportStore

pytestmark = pytest.mark.unit


def test_empty_storage_gives_empty_store(store):
    assert store.list() == []


def test_add_returns_entry_and_lists_it_first(store, clock, report):
    clock.values = [1000, 2000]
    first = store.add("first.json", report)
    second = store.add("second.json", report)

    assert first.timestamp == 1000
    assert second.timestamp == 2000
    assert store.list() == [second, first]


def test_add_persists_full_sequence(store, storage, clock, report, report_dict):
    clock.values = [1000, 2000]
    store.add("first.json", report)
    store.add("second.json", report)

    persisted = json.loads(storage.get(STORAGE_KEY))
    assert [e["name"] for e in persisted] == ["second.json", "first.json"]
    assert persisted[0] == {"name": "second.json", "data": report_dict, "timestamp": 2000}


def test_same_millisecond_uploads_get_distinct_ids(store, report):
    a = store.add("a.json", report)
    b = store.add("b.json", report)

    assert b.timestamp == a.timestamp + 1
    assert store.list()[0] is b


def test_remove_keeps_relative_order(store, clock, report):
    clock.values = [1, 2, 3]
    a, b, c = (store.add(name, report) for name in ("a", "b", "c"))

    store.remove(b.timestamp)

    assert store.list() == [c, a]


def test_remove_unknown_timestamp_is_noop(store, report):
    entry = store.add("a", report)

    store.remove(42)

    assert store.list() == [entry]


def test_rename_trims_name(store, report):
    entry = store.add("a.json", report)

    store.rename(entry.timestamp, " New Name ")

    assert store.get(entry.timestamp).name == "New Name"


@pytest.mark.parametrize("blank", ["", "   ", "\t\n"])
def test_rename_with_blank_name_is_noop(store, report, blank):
    entry = store.add("a.json", report)

    store.rename(entry.timestamp, blank)

    assert store.get(entry.timestamp).name == "a.json"


def test_rename_touches_only_the_matching_entry(store, clock, report):
    clock.values = [1, 2]
    a = store.add("a", report)
    b = store.add("b", report)

    store.rename(a.timestamp, "renamed")

    assert [r.name for r in store.list()] == ["b", "renamed"]
    assert store.get(a.timestamp).data == report
    assert store.get(b.timestamp).timestamp == 2


def test_reload_yields_equal_sequence(storage, clock, report):
    clock.values = [1, 2, 3]
    store = ReportStore(storage, clock=clock)
    for name in ("a", "b", "c"):
        store.add(name, report)
    store.rename(2, "middle")

    reloaded = ReportStore(storage)

    assert reloaded.list() == store.list()


def test_list_returns_a_copy(store, report):
    store.add("a", report)

    store.list().clear()

    assert len(store) == 1


@pytest.mark.parametrize(
    "persisted",
    [
        "{not json",
        '{"name": "a"}',
        '[{"name": "a", "timestamp": 1}]',
        '[{"name": "a", "timestamp": 1, "data": {"aggregate": {}}}]',
        '[{"name": 3, "timestamp": 1, "data": {"aggregate": {}, "intermediate": []}}]',
        '["a"]',
    ],
)
def test_corrupt_storage_recovers_to_empty(persisted, capsys):
    store = ReportStore(MemoryStorage({STORAGE_KEY: persisted}))

    assert store.list() == []
    assert "Stored reports could not be loaded" in capsys.readouterr().out


def test_deeply_nested_storage_recovers_to_empty(capsys):
    store = ReportStore(MemoryStorage({STORAGE_KEY: "[" * 100000 + "]" * 100000}))

    assert store.list() == []
    assert "Stored reports could not be loaded" in capsys.readouterr().out
