from __future__ import annotations

from datetime import datetime

import pytest

from tasknest.domain.enums import Collection
from tasknest.infra.store import StoreError


def test_create_assigns_id_and_timestamp(store) -> None:
    tag_id = store.create(Collection.TAGS, {"id": "ignored", "name": "Work", "color": "blue"})

    [record] = store.snapshot(Collection.TAGS)
    assert record["id"] == tag_id != "ignored"
    assert isinstance(record["created_at"], datetime)


def test_subscribe_delivers_current_snapshot_then_every_write(store) -> None:
    store.create(Collection.QUOTES, {"text": "one"})
    seen = []

    store.subscribe(Collection.QUOTES, seen.append)
    store.create(Collection.QUOTES, {"text": "two", "created_at": datetime(2100, 1, 1)})

    assert [[r["text"] for r in snap] for snap in seen] == [["one"], ["one", "two"]]


def test_tasks_are_ordered_newest_first(store) -> None:
    store.create(Collection.TASKS, {"title": "old", "created_at": datetime(2026, 1, 1)})
    store.create(Collection.TASKS, {"title": "new", "created_at": datetime(2026, 2, 1)})

    assert [r["title"] for r in store.snapshot(Collection.TASKS)] == ["new", "old"]


def test_update_changes_only_given_fields(store) -> None:
    task_id = store.create(Collection.TASKS, {"title": "draft", "note": "keep"})

    store.update(Collection.TASKS, task_id, {"title": "final"})

    [record] = store.snapshot(Collection.TASKS)
    assert (record["title"], record["note"]) == ("final", "keep")


def test_update_rejects_missing_record_unknown_field_and_id_change(store) -> None:
    task_id = store.create(Collection.TASKS, {"title": "x"})

    with pytest.raises(StoreError):
        store.update(Collection.TASKS, "missing", {"title": "y"})
    with pytest.raises(StoreError):
        store.update(Collection.TASKS, task_id, {"colour": "red"})
    with pytest.raises(StoreError):
        store.update(Collection.TASKS, task_id, {"id": "other"})


def test_delete_removes_record_and_publishes(store) -> None:
    tag_id = store.create(Collection.TAGS, {"name": "Temp", "color": "rose"})
    seen = []
    store.subscribe(Collection.TAGS, seen.append)

    store.delete(Collection.TAGS, tag_id)

    assert seen[-1] == []
    with pytest.raises(StoreError):
        store.delete(Collection.TAGS, tag_id)


def test_failing_subscriber_does_not_break_others(store) -> None:
    def broken(snapshot) -> None:
        raise RuntimeError("boom")

    seen = []
    store.subscribe(Collection.TAGS, broken)
    store.subscribe(Collection.TAGS, seen.append)

    store.create(Collection.TAGS, {"name": "Life", "color": "amber"})

    assert len(seen[-1]) == 1


def test_unsubscribed_listener_stops_receiving(store) -> None:
    seen = []
    unsubscribe = store.subscribe(Collection.TAGS, seen.append)
    unsubscribe()

    store.create(Collection.TAGS, {"name": "Life", "color": "amber"})

    assert seen == [[]]


def test_writes_to_one_collection_do_not_notify_others(store) -> None:
    seen = []
    store.subscribe(Collection.TASKS, seen.append)

    store.create(Collection.QUOTES, {"text": "hello"})

    assert seen == [[]]
