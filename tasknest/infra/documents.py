"""Conversion between store records and domain entities.

Timestamps arrive in whatever shape the store hands out (database datetimes,
ISO strings inside the JSON subtask list, epoch numbers from older exports).
They are normalized into naive local ``datetime``/``date`` values here, on
ingestion, for top-level and nested fields alike.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from tasknest.domain.entities import QuoteEntity, SubtaskEntity, TagEntity, TaskEntity
from tasknest.domain.enums import Energy, TaskStatus

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, datetime.min.time())
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        # epoch milliseconds or seconds
        seconds = value / 1000 if value > 10_000_000_000 else value
        return datetime.fromtimestamp(seconds)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            logger.warning("Ignoring unparseable timestamp %r", value)
            return None
    else:
        logger.warning("Ignoring timestamp of type %s", type(value).__name__)
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return parse_timestamp(value).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and len(value.strip()) == 10:
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            logger.warning("Ignoring unparseable date %r", value)
            return None
    stamp = parse_timestamp(value)
    return stamp.date() if stamp else None


def _minutes(value: Any) -> int | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        return None
    return minutes if minutes > 0 else None


def _energy(value: Any) -> Energy | None:
    if not value:
        return None
    try:
        return Energy(value)
    except ValueError:
        return None


def _text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def to_subtask_entity(record: Mapping[str, Any]) -> SubtaskEntity:
    return SubtaskEntity(
        id=str(record.get("id") or ""),
        title=str(record.get("title") or ""),
        time=_minutes(record.get("time")),
        energy=_energy(record.get("energy")),
        deadline=parse_date(record.get("deadline")),
        note=_text(record.get("note")) or None,
        is_completed=bool(record.get("is_completed")),
        completed_at=parse_timestamp(record.get("completed_at")),
        reflection=_text(record.get("reflection")),
        actual_time=_minutes(record.get("actual_time")),
    )


def to_task_entity(record: Mapping[str, Any]) -> TaskEntity:
    try:
        status = TaskStatus(record.get("status") or TaskStatus.PENDING)
    except ValueError:
        status = TaskStatus.PENDING
    is_temp = bool(record.get("is_temp"))
    return TaskEntity(
        id=record.get("id"),
        title=str(record.get("title") or ""),
        is_temp=is_temp,
        tag_id=None if is_temp else record.get("tag_id"),
        status=status,
        created_at=parse_timestamp(record.get("created_at")),
        est_time=_minutes(record.get("est_time")),
        energy=_energy(record.get("energy")),
        deadline=parse_date(record.get("deadline")),
        note=_text(record.get("note")) or None,
        subtasks=tuple(to_subtask_entity(sub) for sub in record.get("subtasks") or ()),
        completed_at=parse_timestamp(record.get("completed_at")),
        reflection=_text(record.get("reflection")),
        actual_time=_minutes(record.get("actual_time")),
    )


def to_tag_entity(record: Mapping[str, Any]) -> TagEntity:
    return TagEntity(
        id=str(record["id"]),
        name=str(record.get("name") or ""),
        color=str(record.get("color") or "stone"),
        created_at=parse_timestamp(record.get("created_at")),
    )


def to_quote_entity(record: Mapping[str, Any]) -> QuoteEntity:
    return QuoteEntity(
        id=str(record["id"]),
        text=str(record.get("text") or ""),
        created_at=parse_timestamp(record.get("created_at")),
    )


def _isoformat(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def encode_subtask(subtask: SubtaskEntity) -> dict[str, Any]:
    return {
        "id": subtask.id,
        "title": subtask.title,
        "time": subtask.time,
        "energy": subtask.energy.value if subtask.energy else None,
        "deadline": _isoformat(subtask.deadline),
        "note": subtask.note,
        "is_completed": subtask.is_completed,
        "completed_at": _isoformat(subtask.completed_at),
        "reflection": subtask.reflection,
        "actual_time": subtask.actual_time,
    }


def encode_task_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Turn domain values in a (partial) task record into storable ones."""
    encoded = dict(fields)
    for key in ("status", "energy"):
        value = encoded.get(key)
        if value is not None and hasattr(value, "value"):
            encoded[key] = value.value
    if "subtasks" in encoded:
        encoded["subtasks"] = [
            encode_subtask(sub) if isinstance(sub, SubtaskEntity) else dict(sub)
            for sub in encoded["subtasks"] or ()
        ]
    return encoded


def task_fields(task: TaskEntity, fields: tuple[str, ...]) -> dict[str, Any]:
    """Encoded partial record holding only ``fields`` of ``task``."""
    return encode_task_fields({name: getattr(task, name) for name in fields})
