"""Tests for the in-memory scheduling store."""

from datetime import date, datetime

import pytest

from taskdates.exceptions import MissingReferenceError
from tests.conftest import build_store, snapshot


def test_reads_are_scoped_by_project_and_task() -> None:
    store = build_store({"b": 10, "a": 5}, {"a": ["b"]})

    assert store.get_project("proj") is not None
    assert store.get_project("other") is None
    assert [t.id for t in store.get_tasks("proj")] == ["b", "a"]
    assert store.get_tasks("other") == []
    assert store.get_dependencies("a") == ["b"]
    assert store.get_dependencies("b") == []
    assert [a.estimated_days for a in store.get_resource_assignments("a")] == [5]


def test_update_task_dates() -> None:
    store = build_store({"a": 5})
    store.update_task_dates("a", date(2025, 1, 1), date(2025, 1, 7))

    task = store.data.get_task_by_id("a")
    assert task is not None
    assert (task.start_date, task.end_date) == (date(2025, 1, 1), date(2025, 1, 7))


def test_update_unknown_task() -> None:
    store = build_store({"a": 5})
    with pytest.raises(MissingReferenceError, match="ghost"):
        store.update_task_dates("ghost", date(2025, 1, 1), date(2025, 1, 2))


class TestUpsertSnapshot:
    """Snapshots are unique per (task, date)."""

    def test_insert_sets_timestamps(self) -> None:
        store = build_store({"a": 5})
        saved = store.upsert_snapshot(snapshot("a", date(2025, 1, 8), 3))

        assert saved.created_at is not None
        assert saved.updated_at == saved.created_at
        assert store.get_progress_snapshots("a") == [saved]

    def test_same_date_overwrites(self) -> None:
        store = build_store({"a": 5})
        first = snapshot("a", date(2025, 1, 8), 3)
        first.created_at = datetime(2025, 1, 8, 9, 0)
        store.upsert_snapshot(first)

        second = store.upsert_snapshot(snapshot("a", date(2025, 1, 8), 1, progress=80))

        [stored] = store.get_progress_snapshots("a")
        assert stored is second
        assert stored.remaining_estimate == 1
        assert stored.progress == 80
        assert stored.created_at == datetime(2025, 1, 8, 9, 0)
        assert stored.updated_at is not None
        assert stored.updated_at > stored.created_at

    def test_different_dates_are_kept(self) -> None:
        store = build_store({"a": 5})
        store.upsert_snapshot(snapshot("a", date(2025, 1, 8), 3))
        store.upsert_snapshot(snapshot("a", date(2025, 1, 9), 2))

        assert [s.date for s in store.get_progress_snapshots("a")] == [
            date(2025, 1, 8),
            date(2025, 1, 9),
        ]

    def test_unknown_task(self) -> None:
        store = build_store({"a": 5})
        with pytest.raises(MissingReferenceError):
            store.upsert_snapshot(snapshot("ghost", date(2025, 1, 8), 3))

    def test_project_mismatch(self) -> None:
        store = build_store({"a": 5})
        with pytest.raises(MissingReferenceError, match="belongs to proj"):
            store.upsert_snapshot(snapshot("a", date(2025, 1, 8), 3, project_id="other"))
