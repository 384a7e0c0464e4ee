from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime

from .defaults import effective_tags
from .entities import SubtaskEntity, TagEntity, TaskEntity
from .enums import HistoryKind, TaskStatus

OTHER_BUCKET = "other"


@dataclass(frozen=True)
class TagBucket:
    key: str
    tag: TagEntity | None
    tasks: tuple[TaskEntity, ...]

    @property
    def is_other(self) -> bool:
        return self.tag is None


@dataclass(frozen=True)
class DashboardView:
    inbox: tuple[TaskEntity, ...]
    buckets: tuple[TagBucket, ...]

    def bucket(self, key: str) -> TagBucket | None:
        return next((bucket for bucket in self.buckets if bucket.key == key), None)


@dataclass(frozen=True)
class HistoryRecord:
    kind: HistoryKind
    task: TaskEntity
    subtasks: tuple[SubtaskEntity, ...]
    sort_key: datetime

    @property
    def items(self) -> tuple[TaskEntity | SubtaskEntity, ...]:
        if self.kind == HistoryKind.GROUPED:
            return self.subtasks
        return (self.task,)


@dataclass(frozen=True)
class HistoryDay:
    day: date
    records: tuple[HistoryRecord, ...]

    @property
    def total_actual_time(self) -> int:
        return sum(item.actual_time or 0 for record in self.records for item in record.items)


def is_dashboard_visible(task: TaskEntity) -> bool:
    # Containers are judged by their subtasks, never by their own status.
    if task.is_container:
        return bool(task.open_subtasks)
    return True


def group_dashboard(tasks: Iterable[TaskEntity], tags: Sequence[TagEntity]) -> DashboardView:
    active = [task for task in tasks if task.status == TaskStatus.PENDING]
    inbox = tuple(task for task in active if task.is_temp)
    normal = [task for task in active if not task.is_temp]

    known = effective_tags(tags)
    grouped: dict[str, list[TaskEntity]] = {tag.id: [] for tag in known}
    other: list[TaskEntity] = []

    for task in normal:
        if not is_dashboard_visible(task):
            continue
        bucket = grouped.get(task.tag_id) if task.tag_id else None
        if bucket is None:
            other.append(task)
        else:
            bucket.append(task)

    buckets = [
        TagBucket(key=tag.id, tag=tag, tasks=tuple(grouped[tag.id]))
        for tag in known
        if grouped[tag.id]
    ]
    if other:
        buckets.append(TagBucket(key=OTHER_BUCKET, tag=None, tasks=tuple(other)))
    return DashboardView(inbox=inbox, buckets=tuple(buckets))


def build_history(tasks: Iterable[TaskEntity], now: datetime | None = None) -> list[HistoryDay]:
    """Group everything completed by calendar day, most recent day first.

    Completed leaf tasks become ``single`` records. Completed subtasks are
    gathered per parent and per day into ``grouped`` records, sorted by the
    earliest completion in the group. Items missing ``completed_at`` are
    dated ``now``.
    """
    fallback = now or datetime.now()
    days: dict[date, list[HistoryRecord]] = defaultdict(list)

    for task in tasks:
        if not task.is_container:
            if task.status != TaskStatus.COMPLETED:
                continue
            stamp = task.completed_at or fallback
            days[stamp.date()].append(
                HistoryRecord(kind=HistoryKind.SINGLE, task=task, subtasks=(), sort_key=stamp)
            )
            continue

        by_day: dict[date, list[SubtaskEntity]] = defaultdict(list)
        for sub in task.subtasks:
            if sub.is_completed:
                by_day[(sub.completed_at or fallback).date()].append(sub)
        for day, subs in by_day.items():
            earliest = min(sub.completed_at or fallback for sub in subs)
            days[day].append(
                HistoryRecord(
                    kind=HistoryKind.GROUPED,
                    task=task,
                    subtasks=tuple(subs),
                    sort_key=earliest,
                )
            )

    return [
        HistoryDay(
            day=day,
            records=tuple(sorted(days[day], key=lambda record: record.sort_key, reverse=True)),
        )
        for day in sorted(days, reverse=True)
    ]
