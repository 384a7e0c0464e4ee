from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from tasknest.domain.defaults import effective_quotes, effective_tags
from tasknest.domain.entities import QuoteEntity, TagEntity, TaskEntity
from tasknest.domain.enums import Collection
from tasknest.domain.views import DashboardView, HistoryDay, build_history, group_dashboard
from tasknest.infra.documents import to_quote_entity, to_tag_entity, to_task_entity

logger = logging.getLogger(__name__)


class LiveModel:
    """Read-only mirror of the store.

    Each snapshot replaces the mirrored collection wholesale; nothing here is
    ever edited in place. Listeners are told which collection changed.
    """

    def __init__(self, store) -> None:
        self._store = store
        self.tasks: tuple[TaskEntity, ...] = ()
        self.tags: tuple[TagEntity, ...] = ()
        self.quotes: tuple[QuoteEntity, ...] = ()
        self._listeners: list[Callable[[Collection], None]] = []
        self._unsubscribers: list[Callable[[], None]] = []

    def start(self) -> None:
        if self._unsubscribers:
            return
        self._unsubscribers = [
            self._store.subscribe(Collection.TAGS, self._on_tags),
            self._store.subscribe(Collection.QUOTES, self._on_quotes),
            self._store.subscribe(Collection.TASKS, self._on_tasks),
        ]

    def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def add_listener(self, listener: Callable[[Collection], None]) -> None:
        self._listeners.append(listener)

    @property
    def effective_tags(self) -> tuple[TagEntity, ...]:
        return effective_tags(self.tags)

    @property
    def effective_quotes(self) -> tuple[QuoteEntity, ...]:
        return effective_quotes(self.quotes)

    def find_task(self, task_id: str | None) -> TaskEntity | None:
        return next((task for task in self.tasks if task.id == task_id), None)

    def find_tag(self, tag_id: str | None) -> TagEntity | None:
        return next((tag for tag in self.effective_tags if tag.id == tag_id), None)

    def dashboard(self) -> DashboardView:
        return group_dashboard(self.tasks, self.tags)

    def history(self, now: datetime | None = None) -> list[HistoryDay]:
        return build_history(self.tasks, now=now)

    def _on_tasks(self, records: list[dict]) -> None:
        self.tasks = tuple(to_task_entity(record) for record in records)
        logger.debug("Task snapshot: %s records", len(self.tasks))
        self._notify(Collection.TASKS)

    def _on_tags(self, records: list[dict]) -> None:
        self.tags = tuple(to_tag_entity(record) for record in records)
        self._notify(Collection.TAGS)

    def _on_quotes(self, records: list[dict]) -> None:
        self.quotes = tuple(to_quote_entity(record) for record in records)
        self._notify(Collection.QUOTES)

    def _notify(self, collection: Collection) -> None:
        for listener in list(self._listeners):
            listener(collection)
