from __future__ import annotations

import contextlib
import logging
from collections import defaultdict
from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from tasknest.domain.enums import Collection

from .db import SessionLocal
from .models import QuoteModel, TagModel, TaskModel

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Listener = Callable[[list[Record]], None]

_MODELS = {
    Collection.TASKS: TaskModel,
    Collection.TAGS: TagModel,
    Collection.QUOTES: QuoteModel,
}

_ORDERING = {
    Collection.TASKS: TaskModel.created_at.desc(),
    Collection.TAGS: TagModel.created_at.asc(),
    Collection.QUOTES: QuoteModel.created_at.asc(),
}


class StoreError(RuntimeError):
    """A write or read was rejected by the store. Nothing was applied."""


def _to_record(row) -> Record:
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}


class DocumentStore:
    """Collection store with live snapshot subscriptions.

    Every committed write re-reads the affected collection and hands the full,
    ordered snapshot to each subscriber of that collection. Subscribers never
    see a partially applied write.
    """

    def __init__(self, session_factory=None) -> None:
        self._session_factory = session_factory or SessionLocal
        self._listeners: dict[Collection, list[Listener]] = defaultdict(list)

    def subscribe(self, collection: Collection | str, listener: Listener) -> Callable[[], None]:
        collection = Collection(collection)
        self._listeners[collection].append(listener)
        self._deliver(collection, listener, self.snapshot(collection))

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners[collection].remove(listener)

        return unsubscribe

    def snapshot(self, collection: Collection | str) -> list[Record]:
        collection = Collection(collection)
        model = _MODELS[collection]
        try:
            with self._session_factory() as session:
                stmt = select(model).order_by(_ORDERING[collection])
                return [_to_record(row) for row in session.scalars(stmt)]
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not read {collection.value}") from exc

    def create(self, collection: Collection | str, record: Mapping[str, Any]) -> str:
        collection = Collection(collection)
        model = _MODELS[collection]
        data = self._checked(model, record)
        data.pop("id", None)
        if data.get("created_at") is None:
            data.pop("created_at", None)
        try:
            with self._session_factory() as session:
                row = model(**data)
                session.add(row)
                session.commit()
                record_id = row.id
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not create {collection.value} record") from exc
        logger.info("Created %s/%s", collection.value, record_id)
        self._publish(collection)
        return record_id

    def update(self, collection: Collection | str, record_id: str, changes: Mapping[str, Any]) -> None:
        collection = Collection(collection)
        model = _MODELS[collection]
        data = self._checked(model, changes)
        if "id" in data:
            raise StoreError("Record ids are assigned by the store and cannot change")
        try:
            with self._session_factory() as session:
                row = session.get(model, record_id)
                if row is None:
                    raise StoreError(f"{collection.value}/{record_id} does not exist")
                for key, value in data.items():
                    setattr(row, key, value)
                session.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not update {collection.value}/{record_id}") from exc
        logger.info("Updated %s/%s fields=%s", collection.value, record_id, sorted(data))
        self._publish(collection)

    def delete(self, collection: Collection | str, record_id: str) -> None:
        collection = Collection(collection)
        model = _MODELS[collection]
        try:
            with self._session_factory() as session:
                row = session.get(model, record_id)
                if row is None:
                    raise StoreError(f"{collection.value}/{record_id} does not exist")
                session.delete(row)
                session.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not delete {collection.value}/{record_id}") from exc
        logger.info("Deleted %s/%s", collection.value, record_id)
        self._publish(collection)

    @staticmethod
    def _checked(model, record: Mapping[str, Any]) -> Record:
        columns = set(model.__table__.columns.keys())
        unknown = set(record) - columns
        if unknown:
            raise StoreError(f"Unknown fields for {model.__tablename__}: {', '.join(sorted(unknown))}")
        return dict(record)

    def _publish(self, collection: Collection) -> None:
        listeners = list(self._listeners.get(collection, ()))
        if not listeners:
            return
        try:
            snapshot = self.snapshot(collection)
        except StoreError:
            logger.exception("Write to %s landed but the snapshot could not be read", collection.value)
            return
        for listener in listeners:
            self._deliver(collection, listener, snapshot)

    @staticmethod
    def _deliver(collection: Collection, listener: Listener, snapshot: list[Record]) -> None:
        try:
            listener([dict(record) for record in snapshot])
        except Exception:  # noqa: BLE001
            logger.exception("Subscriber to %s failed on snapshot", collection.value)
