from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Optional

from .entities import SubtaskEntity, TagEntity, TaskEntity
from .enums import Energy, TaskStatus
from .rollup import derive_status, rollup_completed_at

SUBTASK_FIELDS = ("title", "time", "energy", "deadline", "note")


def new_subtask_id() -> str:
    return uuid.uuid4().hex


@dataclass
class TaskDraft:
    """Editor state for a task that is being created or edited.

    The draft is local; nothing is written until the service saves it.
    """

    task_id: str | None = None
    title: str = ""
    is_temp: bool = True
    tag_id: str | None = None
    est_time: int | None = None
    energy: Energy = Energy.LOW
    deadline: Optional[date] = None
    note: str = ""
    subtasks: list[SubtaskEntity] = field(default_factory=list)
    status: TaskStatus = TaskStatus.PENDING
    created_at: Optional[datetime] = None

    @classmethod
    def from_task(cls, task: TaskEntity) -> TaskDraft:
        return cls(
            task_id=task.id,
            title=task.title,
            is_temp=task.is_temp,
            tag_id=task.tag_id,
            est_time=None if task.is_container else task.est_time,
            energy=(task.energy or Energy.LOW) if not task.is_container else Energy.LOW,
            deadline=None if task.is_container else task.deadline,
            note="" if task.is_container else (task.note or ""),
            subtasks=list(task.subtasks),
            status=task.status,
            created_at=task.created_at,
        )

    @property
    def is_container(self) -> bool:
        return bool(self.subtasks)

    def add_subtask(
        self,
        title: str,
        time: int | None = None,
        energy: Energy = Energy.LOW,
        deadline: date | None = None,
        note: str = "",
    ) -> SubtaskEntity | None:
        title = title.strip()
        if not title:
            return None
        subtask = SubtaskEntity(
            id=new_subtask_id(),
            title=title,
            time=_minutes(time),
            energy=Energy(energy),
            deadline=deadline,
            note=note.strip() or None,
        )
        self.subtasks.append(subtask)
        return subtask

    def edit_subtask(self, subtask_id: str, **changes: Any) -> SubtaskEntity | None:
        unknown = set(changes) - set(SUBTASK_FIELDS)
        if unknown:
            raise ValueError(f"Cannot edit subtask fields: {', '.join(sorted(unknown))}")
        if "title" in changes:
            title = (changes["title"] or "").strip()
            if not title:
                return None
            changes["title"] = title
        if "time" in changes:
            changes["time"] = _minutes(changes["time"])
        if changes.get("energy") is not None:
            changes["energy"] = Energy(changes["energy"])
        if "note" in changes:
            changes["note"] = (changes["note"] or "").strip() or None

        for index, sub in enumerate(self.subtasks):
            if sub.id == subtask_id:
                self.subtasks[index] = replace(sub, **changes)
                return self.subtasks[index]
        return None

    def remove_subtask(self, subtask_id: str) -> None:
        self.subtasks = [sub for sub in self.subtasks if sub.id != subtask_id]

    def move_subtask(self, from_index: int, to_index: int) -> None:
        count = len(self.subtasks)
        if not (0 <= from_index < count and 0 <= to_index < count) or from_index == to_index:
            return
        item = self.subtasks.pop(from_index)
        self.subtasks.insert(to_index, item)

    def problems(self, tags: Iterable[TagEntity]) -> list[str]:
        problems = []
        if not self.title.strip():
            problems.append("title is required")
        if not self.is_temp:
            known = {tag.id for tag in tags}
            if not self.tag_id:
                problems.append("a tag is required")
            elif self.tag_id not in known:
                problems.append("unknown tag")
        if any(not sub.title.strip() for sub in self.subtasks):
            problems.append("subtask title is required")
        if not self.is_container and self.est_time is not None and self.est_time <= 0:
            problems.append("estimate must be positive")
        return problems

    def is_savable(self, tags: Iterable[TagEntity]) -> bool:
        return not self.problems(tags)

    def to_record(self, now: datetime | None = None) -> dict[str, Any]:
        """Storable fields for this draft.

        A container whose edit leaves every remaining subtask done is completed
        here, stamped with its latest subtask completion (or ``now``).
        """
        container = self.is_container
        status = derive_status(self.subtasks, self.status)
        record: dict[str, Any] = {
            "title": self.title.strip(),
            "is_temp": self.is_temp,
            "tag_id": None if self.is_temp else self.tag_id,
            "status": status,
            "est_time": None if container else _minutes(self.est_time),
            "energy": None if container else Energy(self.energy),
            "deadline": None if container else self.deadline,
            "note": None if container else (self.note.strip() or None),
            "subtasks": list(self.subtasks),
        }
        if self.created_at is not None:
            record["created_at"] = self.created_at
        if container and status == TaskStatus.COMPLETED and self.status != TaskStatus.COMPLETED:
            record["completed_at"] = rollup_completed_at(self.subtasks, now or datetime.now())
        return record


def _minutes(value: Any) -> int | None:
    if value in (None, ""):
        return None
    minutes = int(value)
    return minutes if minutes > 0 else None
