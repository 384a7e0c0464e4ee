"""Completion rules for tasks and subtasks.

A container task's ``status`` is stored, but it is only ever produced here:
every write path that touches a container's subtasks goes through
:func:`rollup_status` so the stored value cannot drift from the subtasks.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime

from .entities import SubtaskEntity, TaskEntity
from .enums import TaskStatus


@dataclass(frozen=True)
class Retrospective:
    completed_at: datetime
    actual_time: int | None = None
    reflection: str = ""


def rollup_status(subtasks: Sequence[SubtaskEntity]) -> TaskStatus:
    if subtasks and all(sub.is_completed for sub in subtasks):
        return TaskStatus.COMPLETED
    return TaskStatus.PENDING


def rollup_completed_at(subtasks: Sequence[SubtaskEntity], fallback: datetime) -> datetime:
    """Completion time of a container completed by a subtask list edit."""
    stamps = [sub.completed_at for sub in subtasks if sub.completed_at is not None]
    return max(stamps, default=fallback)


def derive_status(subtasks: Sequence[SubtaskEntity], current: TaskStatus) -> TaskStatus:
    """Status a task should be saved with after its subtask list was edited."""
    if subtasks:
        return rollup_status(subtasks)
    return current


def complete_main(task: TaskEntity, retro: Retrospective) -> TaskEntity:
    return replace(
        task,
        status=TaskStatus.COMPLETED,
        completed_at=retro.completed_at,
        actual_time=retro.actual_time,
        reflection=retro.reflection,
    )


def complete_subtask(task: TaskEntity, subtask_id: str, retro: Retrospective) -> TaskEntity:
    subtasks = _replace_subtask(
        task,
        subtask_id,
        is_completed=True,
        completed_at=retro.completed_at,
        actual_time=retro.actual_time,
        reflection=retro.reflection,
    )
    status = rollup_status(subtasks)
    completed_at = task.completed_at
    if status == TaskStatus.COMPLETED:
        completed_at = retro.completed_at
    return replace(task, subtasks=subtasks, status=status, completed_at=completed_at)


def correct_main(task: TaskEntity, retro: Retrospective) -> TaskEntity:
    return replace(
        task,
        completed_at=retro.completed_at,
        actual_time=retro.actual_time,
        reflection=retro.reflection,
    )


def correct_subtask(task: TaskEntity, subtask_id: str, retro: Retrospective) -> TaskEntity:
    subtasks = _replace_subtask(
        task,
        subtask_id,
        completed_at=retro.completed_at,
        actual_time=retro.actual_time,
        reflection=retro.reflection,
    )
    return replace(task, subtasks=subtasks)


def _replace_subtask(task: TaskEntity, subtask_id: str, **changes) -> tuple[SubtaskEntity, ...]:
    if task.find_subtask(subtask_id) is None:
        raise ValueError(f"Subtask {subtask_id!r} does not belong to task {task.id!r}")
    return tuple(
        replace(sub, **changes) if sub.id == subtask_id else sub
        for sub in task.subtasks
    )
