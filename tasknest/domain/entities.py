from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .enums import Energy, TaskStatus


@dataclass(frozen=True)
class SubtaskEntity:
    id: str
    title: str
    time: int | None = None
    energy: Optional[Energy] = None
    deadline: Optional[date] = None
    note: str | None = None
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    reflection: str | None = None
    actual_time: int | None = None


@dataclass(frozen=True)
class TaskEntity:
    id: str | None
    title: str
    is_temp: bool
    tag_id: str | None
    status: TaskStatus
    created_at: Optional[datetime]
    est_time: int | None = None
    energy: Optional[Energy] = None
    deadline: Optional[date] = None
    note: str | None = None
    subtasks: tuple[SubtaskEntity, ...] = ()
    completed_at: Optional[datetime] = None
    reflection: str | None = None
    actual_time: int | None = None

    @property
    def is_container(self) -> bool:
        return bool(self.subtasks)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def open_subtasks(self) -> tuple[SubtaskEntity, ...]:
        return tuple(sub for sub in self.subtasks if not sub.is_completed)

    def find_subtask(self, subtask_id: str) -> SubtaskEntity | None:
        return next((sub for sub in self.subtasks if sub.id == subtask_id), None)


@dataclass(frozen=True)
class TagEntity:
    id: str
    name: str
    color: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class QuoteEntity:
    id: str
    text: str
    created_at: Optional[datetime] = None
