from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from tasknest.domain.entities import SubtaskEntity, TaskEntity
from tasknest.domain.enums import Collection, CompletionKind, TaskStatus
from tasknest.domain.rollup import (
    Retrospective,
    complete_main,
    complete_subtask,
    correct_main,
    correct_subtask,
)
from tasknest.infra.documents import task_fields
from tasknest.infra.store import StoreError

logger = logging.getLogger(__name__)

RETRO_FIELDS = ("completed_at", "actual_time", "reflection")
_UNSET: Any = object()


@dataclass
class CompletionDraft:
    kind: CompletionKind
    task: TaskEntity
    subtask: SubtaskEntity | None
    completed_at: datetime
    actual_time: int | None = None
    reflection: str = ""
    correction: bool = False

    @property
    def task_id(self) -> str | None:
        return self.task.id

    @property
    def title(self) -> str:
        return self.subtask.title if self.subtask else self.task.title

    def retrospective(self) -> Retrospective:
        return Retrospective(
            completed_at=self.completed_at,
            actual_time=self.actual_time,
            reflection=self.reflection,
        )


class CompletionEngine:
    """Owns the single completion/correction draft slot.

    A completion draft moves a pending task or subtask to completed and
    applies the parent rollup on confirm. A correction draft only rewrites the
    retrospective of something already completed. Opening a draft while one is
    open replaces it.
    """

    def __init__(
        self,
        store,
        on_completed: Callable[[CompletionDraft], None] | None = None,
        on_error: Callable[[str], None] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._on_completed = on_completed
        self._on_error = on_error
        self._clock = clock
        self._draft: CompletionDraft | None = None

    @property
    def draft(self) -> CompletionDraft | None:
        return self._draft

    def begin_completion(
        self,
        kind: CompletionKind | str,
        task: TaskEntity,
        subtask: SubtaskEntity | None = None,
    ) -> CompletionDraft | None:
        kind = CompletionKind(kind)
        if kind == CompletionKind.SUB:
            current = task.find_subtask(subtask.id) if subtask else None
            if current is None or current.is_completed:
                return None
            subtask = current
        elif task.is_container or task.status == TaskStatus.COMPLETED:
            # containers only complete through their subtasks
            return None
        else:
            subtask = None

        return self._open(
            CompletionDraft(kind=kind, task=task, subtask=subtask, completed_at=self._clock())
        )

    def begin_correction(
        self,
        kind: CompletionKind | str,
        task: TaskEntity,
        subtask: SubtaskEntity | None = None,
    ) -> CompletionDraft | None:
        kind = CompletionKind(kind)
        if kind == CompletionKind.SUB:
            current = task.find_subtask(subtask.id) if subtask else None
            if current is None or not current.is_completed:
                return None
            subject: Any = current
        elif task.status != TaskStatus.COMPLETED:
            return None
        else:
            current = None
            subject = task

        return self._open(
            CompletionDraft(
                kind=kind,
                task=task,
                subtask=current,
                completed_at=subject.completed_at or self._clock(),
                actual_time=subject.actual_time,
                reflection=subject.reflection or "",
                correction=True,
            )
        )

    def update_draft(
        self,
        *,
        completed_at: datetime | None = None,
        actual_time: int | None = _UNSET,
        reflection: str | None = None,
    ) -> bool:
        draft = self._draft
        if draft is None:
            return False
        if completed_at is not None:
            draft.completed_at = completed_at
        if actual_time is not _UNSET:
            if actual_time is not None and int(actual_time) <= 0:
                raise ValueError("actual time must be positive")
            draft.actual_time = int(actual_time) if actual_time is not None else None
        if reflection is not None:
            draft.reflection = reflection
        return True

    def confirm(self) -> bool:
        draft = self._draft
        if draft is None:
            return False
        self._draft = None

        retro = draft.retrospective()
        if draft.correction:
            if draft.kind == CompletionKind.SUB:
                updated = correct_subtask(draft.task, draft.subtask.id, retro)
                changes = task_fields(updated, ("subtasks",))
            else:
                updated = correct_main(draft.task, retro)
                changes = task_fields(updated, RETRO_FIELDS)
        elif draft.kind == CompletionKind.SUB:
            updated = complete_subtask(draft.task, draft.subtask.id, retro)
            fields: tuple[str, ...] = ("subtasks", "status")
            if updated.status == TaskStatus.COMPLETED:
                fields += ("completed_at",)
            changes = task_fields(updated, fields)
        else:
            updated = complete_main(draft.task, retro)
            changes = task_fields(updated, ("status", *RETRO_FIELDS))

        try:
            self._store.update(Collection.TASKS, draft.task.id, changes)
        except StoreError:
            logger.exception("Failed to save %s for task %s", self._label(draft), draft.task.id)
            if self._on_error:
                self._on_error(f"Could not save {self._label(draft)}. Please try again.")
            return False

        logger.info("Saved %s for task %s", self._label(draft), draft.task.id)
        if not draft.correction and self._on_completed:
            self._on_completed(draft)
        return True

    def discard(self) -> None:
        if self._draft is not None:
            logger.debug("Discarded %s draft", self._label(self._draft))
        self._draft = None

    def cancel_for_task(self, task_id: str | None) -> bool:
        if self._draft is None or self._draft.task_id != task_id:
            return False
        self.discard()
        return True

    def _open(self, draft: CompletionDraft) -> CompletionDraft:
        if self._draft is not None:
            logger.info("Replacing open %s draft for task %s", self._label(self._draft), self._draft.task_id)
        self._draft = draft
        return draft

    @staticmethod
    def _label(draft: CompletionDraft) -> str:
        action = "correction" if draft.correction else "completion"
        return f"{draft.kind.value} {action}"
