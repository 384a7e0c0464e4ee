from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from tasknest.domain.defaults import normalize_color
from tasknest.domain.drafts import TaskDraft
from tasknest.domain.enums import Collection
from tasknest.domain.quotes import QuoteSelector
from tasknest.infra.documents import encode_task_fields
from tasknest.infra.store import StoreError

from .completion import CompletionEngine
from .live_model import LiveModel

logger = logging.getLogger(__name__)


class TaskService:
    """Writes tasks, tags and quotes to the store.

    Validation happens before any write; a rejected draft never reaches the
    store. Store failures are logged, reported once through ``on_error`` and
    not retried; the next snapshot stays the source of truth.
    """

    def __init__(
        self,
        store,
        model: LiveModel,
        completion: CompletionEngine | None = None,
        quote_selector: QuoteSelector | None = None,
        on_error: Callable[[str], None] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._model = model
        self._clock = clock
        self._completion = completion
        self._quote_selector = quote_selector
        self._on_error = on_error
        self._editing: TaskDraft | None = None

    @property
    def editing(self) -> TaskDraft | None:
        return self._editing

    def new_draft(self) -> TaskDraft:
        self._editing = TaskDraft()
        return self._editing

    def edit_task(self, task_id: str) -> TaskDraft | None:
        task = self._model.find_task(task_id)
        if task is None:
            return None
        self._editing = TaskDraft.from_task(task)
        return self._editing

    def discard_edit(self) -> None:
        self._editing = None

    def can_save(self, draft: TaskDraft | None = None) -> bool:
        draft = draft or self._editing
        return draft is not None and draft.is_savable(self._model.effective_tags)

    def save_draft(self, draft: TaskDraft | None = None) -> str | None:
        draft = draft or self._editing
        if draft is None:
            return None
        problems = draft.problems(self._model.effective_tags)
        if problems:
            logger.debug("Task draft rejected: %s", ", ".join(problems))
            return None

        record = encode_task_fields(draft.to_record(now=self._clock()))
        if draft is self._editing:
            self._editing = None
        try:
            if draft.task_id is None:
                task_id = self._store.create(Collection.TASKS, record)
            else:
                self._store.update(Collection.TASKS, draft.task_id, record)
                task_id = draft.task_id
        except StoreError:
            self._fail("save the task")
            return None
        return task_id

    def delete_task(self, task_id: str) -> bool:
        if self._editing is not None and self._editing.task_id == task_id:
            self._editing = None
        if self._completion is not None:
            self._completion.cancel_for_task(task_id)
        try:
            self._store.delete(Collection.TASKS, task_id)
        except StoreError:
            self._fail("delete the task")
            return False
        return True

    def save_tag(self, name: str, color: str | None = None, tag_id: str | None = None) -> str | None:
        name = (name or "").strip()
        if not name:
            return None
        record = {"name": name, "color": normalize_color(color)}
        try:
            if tag_id is None:
                return self._store.create(Collection.TAGS, record)
            self._store.update(Collection.TAGS, tag_id, record)
        except StoreError:
            self._fail("save the tag")
            return None
        return tag_id

    def delete_tag(self, tag_id: str) -> bool:
        stored = [tag.id for tag in self._model.tags]
        if tag_id not in stored or len(stored) <= 1:
            return False
        try:
            self._store.delete(Collection.TAGS, tag_id)
        except StoreError:
            self._fail("delete the tag")
            return False
        if self._editing is not None and self._editing.tag_id == tag_id:
            self._editing.tag_id = None
        return True

    def save_quote(self, text: str, quote_id: str | None = None) -> str | None:
        text = (text or "").strip()
        if not text:
            return None
        try:
            if quote_id is None:
                return self._store.create(Collection.QUOTES, {"text": text})
            self._store.update(Collection.QUOTES, quote_id, {"text": text})
        except StoreError:
            self._fail("save the quote")
            return None
        return quote_id

    def delete_quote(self, quote_id: str) -> bool:
        index = next(
            (i for i, quote in enumerate(self._model.quotes) if quote.id == quote_id),
            None,
        )
        if index is None:
            return False
        # The snapshot echo re-selects the quote, so shift the choice first.
        selector = self._quote_selector
        previous = selector.fixed_index if selector else 0
        if selector is not None:
            selector.forget(index)
        try:
            self._store.delete(Collection.QUOTES, quote_id)
        except StoreError:
            if selector is not None:
                selector.fixed_index = previous
            self._fail("delete the quote")
            return False
        return True

    def _fail(self, action: str) -> None:
        logger.exception("Failed to %s", action)
        if self._on_error:
            self._on_error(f"Could not {action}. Check the connection and try again.")
