from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import ValidationError

from task_tracker.config import SETTINGS
from task_tracker.domain.entities import TaskEntity
from task_tracker.domain.errors import StorageFailure

from .kv_store import KeyValueStore, KeyValueStoreError
from .schema import TaskCollection, TaskRecord

logger = logging.getLogger(__name__)


def _to_entity(record: TaskRecord) -> TaskEntity:
    return TaskEntity(
        id=record.id,
        title=record.title,
        deadline=record.deadline,
        priority=record.priority,
        completed=record.completed,
    )


def _to_record(task: TaskEntity) -> TaskRecord:
    return TaskRecord(
        id=task.id,
        title=task.title,
        deadline=task.deadline,
        priority=task.priority,
        completed=task.completed,
    )


class TaskStore:
    """Reads and writes the whole task collection as one blob under one key."""

    def __init__(self, kv: KeyValueStore, key: str = SETTINGS.storage_key) -> None:
        self._kv = kv
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> list[TaskEntity]:
        try:
            blob = await self._kv.get(self._key)
        except KeyValueStoreError as exc:
            logger.error("Task collection read failed key=%s: %s", self._key, exc)
            raise StorageFailure(StorageFailure.LOAD, str(exc)) from exc

        if blob is None:
            logger.debug("No task collection stored under key=%s", self._key)
            return []

        try:
            collection = TaskCollection.model_validate_json(blob)
        except ValidationError as exc:
            logger.warning(
                "Stored task collection is malformed key=%s errors=%s",
                self._key,
                exc.error_count(),
            )
            raise StorageFailure(StorageFailure.LOAD, str(exc)) from exc

        tasks = [_to_entity(record) for record in collection.root]
        logger.debug("Loaded %s tasks key=%s", len(tasks), self._key)
        return tasks

    async def save(self, tasks: Sequence[TaskEntity]) -> None:
        try:
            collection = TaskCollection([_to_record(task) for task in tasks])
        except ValidationError as exc:
            logger.error("Refusing to store invalid task collection: %s", exc)
            raise StorageFailure(StorageFailure.SAVE, str(exc)) from exc

        payload = collection.model_dump_json().encode("utf-8")
        try:
            await self._kv.set(self._key, payload)
        except KeyValueStoreError as exc:
            logger.error("Task collection write failed key=%s: %s", self._key, exc)
            raise StorageFailure(StorageFailure.SAVE, str(exc)) from exc
        logger.debug("Saved %s tasks key=%s", len(tasks), self._key)
