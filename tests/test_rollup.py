from __future__ import annotations

from datetime import datetime

import pytest

from tasknest.domain.entities import SubtaskEntity, TaskEntity
from tasknest.domain.enums import TaskStatus
from tasknest.domain.rollup import (
    Retrospective,
    complete_main,
    complete_subtask,
    correct_main,
    correct_subtask,
    derive_status,
    rollup_completed_at,
    rollup_status,
)

NOON = datetime(2026, 5, 2, 12, 0)


def container(*subtasks: SubtaskEntity) -> TaskEntity:
    return TaskEntity(
        id="t1",
        title="Thesis",
        is_temp=False,
        tag_id="school",
        status=TaskStatus.PENDING,
        created_at=datetime(2026, 5, 1, 8, 0),
        subtasks=subtasks,
    )


def test_rollup_status_requires_every_subtask_done() -> None:
    assert rollup_status([]) == TaskStatus.PENDING
    assert rollup_status([SubtaskEntity(id="a", title="A", is_completed=True)]) == TaskStatus.COMPLETED
    assert (
        rollup_status(
            [
                SubtaskEntity(id="a", title="A", is_completed=True),
                SubtaskEntity(id="b", title="B"),
            ]
        )
        == TaskStatus.PENDING
    )


def test_derive_status_keeps_leaf_status() -> None:
    assert derive_status([], TaskStatus.COMPLETED) == TaskStatus.COMPLETED
    assert derive_status([SubtaskEntity(id="a", title="A")], TaskStatus.COMPLETED) == TaskStatus.PENDING


def test_completing_one_of_two_subtasks_keeps_parent_pending() -> None:
    task = container(SubtaskEntity(id="a", title="A"), SubtaskEntity(id="b", title="B"))

    result = complete_subtask(task, "a", Retrospective(completed_at=NOON, actual_time=30, reflection="ok"))

    first = result.find_subtask("a")
    assert first.is_completed and first.completed_at == NOON
    assert first.actual_time == 30 and first.reflection == "ok"
    assert result.status == TaskStatus.PENDING
    assert result.completed_at is None


def test_completing_last_subtask_completes_parent_at_same_instant() -> None:
    task = container(
        SubtaskEntity(id="a", title="A", is_completed=True, completed_at=datetime(2026, 5, 1, 9, 0)),
        SubtaskEntity(id="b", title="B"),
    )

    result = complete_subtask(task, "b", Retrospective(completed_at=NOON))

    assert result.status == TaskStatus.COMPLETED
    assert result.completed_at == NOON


def test_complete_subtask_rejects_unknown_id() -> None:
    task = container(SubtaskEntity(id="a", title="A"))

    with pytest.raises(ValueError):
        complete_subtask(task, "missing", Retrospective(completed_at=NOON))


def test_complete_main_sets_retrospective_fields() -> None:
    task = TaskEntity(
        id="t2", title="Report", is_temp=False, tag_id="work",
        status=TaskStatus.PENDING, created_at=NOON,
    )

    result = complete_main(task, Retrospective(completed_at=NOON, actual_time=75, reflection="long"))

    assert result.status == TaskStatus.COMPLETED
    assert (result.completed_at, result.actual_time, result.reflection) == (NOON, 75, "long")


def test_corrections_leave_status_and_flags_untouched() -> None:
    later = datetime(2026, 5, 3, 7, 0)
    task = container(SubtaskEntity(id="a", title="A", is_completed=True, completed_at=NOON))

    fixed = correct_subtask(task, "a", Retrospective(completed_at=later, actual_time=10))
    assert fixed.find_subtask("a").completed_at == later
    assert fixed.find_subtask("a").is_completed
    assert fixed.status == task.status

    leaf = TaskEntity(
        id="t3", title="Done", is_temp=False, tag_id="work",
        status=TaskStatus.COMPLETED, created_at=NOON, completed_at=NOON,
    )
    moved = correct_main(leaf, Retrospective(completed_at=later, reflection="again"))
    assert moved.status == TaskStatus.COMPLETED
    assert moved.completed_at == later and moved.reflection == "again"


def test_rollup_is_stable_when_reapplied() -> None:
    task = container(SubtaskEntity(id="a", title="A"))
    retro = Retrospective(completed_at=NOON)

    once = complete_subtask(task, "a", retro)
    twice = complete_subtask(once, "a", retro)

    assert once == twice
    assert rollup_status(once.subtasks) == rollup_status(twice.subtasks) == TaskStatus.COMPLETED


def test_rollup_completed_at_takes_latest_subtask_stamp() -> None:
    fallback = datetime(2026, 5, 9, 9, 0)
    subtasks = [
        SubtaskEntity(id="a", title="A", is_completed=True, completed_at=NOON),
        SubtaskEntity(id="b", title="B", is_completed=True, completed_at=datetime(2026, 5, 3, 8, 0)),
        SubtaskEntity(id="c", title="C", is_completed=True),
    ]

    assert rollup_completed_at(subtasks, fallback) == datetime(2026, 5, 3, 8, 0)
    assert rollup_completed_at(subtasks[2:], fallback) == fallback
