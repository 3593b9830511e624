from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import replace

from task_tracker.domain.entities import TaskEntity
from task_tracker.domain.enums import Priority
from task_tracker.domain.errors import NotFoundFailure, StorageFailure, ValidationFailure
from task_tracker.infra.task_store import TaskStore

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class TaskRepository:
    """Authoritative in-memory task collection for one session.

    Every mutator builds the new collection from a copy, persists it through
    the store, and adopts it only after the store accepted it. A
    ``StorageFailure`` therefore leaves memory exactly as it was.

    Callers are expected to await one mutation before starting the next;
    there is no internal locking.
    """

    def __init__(self, store: TaskStore, clock: Callable[[], int] = _now_ms) -> None:
        self._store = store
        self._clock = clock
        self._tasks: list[TaskEntity] = []
        self._last_id = 0

    @property
    def tasks(self) -> tuple[TaskEntity, ...]:
        return tuple(self._tasks)

    def replace_all(self, tasks: Iterable[TaskEntity]) -> None:
        tasks = list(tasks)
        ids = [task.id for task in tasks]
        if len(set(ids)) != len(ids):
            raise ValueError("task ids must be unique")
        self._tasks = tasks
        for task_id in ids:
            if task_id.isascii() and task_id.isdigit():
                self._last_id = max(self._last_id, int(task_id))

    def get(self, task_id: str) -> TaskEntity:
        return self._tasks[self._index_of(task_id)]

    def stats(self) -> dict[str, int]:
        completed = sum(1 for task in self._tasks if task.completed)
        return {
            "total": len(self._tasks),
            "active": len(self._tasks) - completed,
            "completed": completed,
        }

    async def add(
        self,
        title: str,
        deadline: str,
        priority: Priority | str = Priority.MEDIUM,
    ) -> TaskEntity:
        title, deadline, level = _clean_fields(title, deadline, priority)
        task = TaskEntity(
            id=self._mint_id(),
            title=title,
            deadline=deadline,
            priority=level,
            completed=False,
        )
        await self._commit([*self._tasks, task], "add")
        logger.info("Task added id=%s priority=%s", task.id, task.priority.value)
        return task

    async def update(
        self,
        task_id: str,
        title: str,
        deadline: str,
        priority: Priority | str,
    ) -> TaskEntity:
        index = self._index_of(task_id)
        title, deadline, level = _clean_fields(title, deadline, priority)
        updated = replace(self._tasks[index], title=title, deadline=deadline, priority=level)
        tasks = list(self._tasks)
        tasks[index] = updated
        await self._commit(tasks, "update")
        logger.info("Task updated id=%s", task_id)
        return updated

    async def toggle_completed(self, task_id: str) -> TaskEntity:
        index = self._index_of(task_id)
        current = self._tasks[index]
        toggled = replace(current, completed=not current.completed)
        tasks = list(self._tasks)
        tasks[index] = toggled
        await self._commit(tasks, "toggle")
        logger.info("Task toggled id=%s completed=%s", task_id, toggled.completed)
        return toggled

    async def remove(self, task_id: str) -> None:
        index = self._index_of(task_id)
        tasks = self._tasks[:index] + self._tasks[index + 1:]
        await self._commit(tasks, "remove")
        logger.info("Task removed id=%s", task_id)

    async def _commit(self, tasks: list[TaskEntity], action: str) -> None:
        try:
            await self._store.save(tasks)
        except StorageFailure:
            logger.warning("Task %s was not persisted; in-memory collection kept", action)
            raise
        self._tasks = tasks

    def _index_of(self, task_id: str) -> int:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        raise NotFoundFailure(task_id)

    def _mint_id(self) -> str:
        # Strictly increasing even if the clock stalls or goes backwards.
        candidate = max(self._clock(), self._last_id + 1)
        self._last_id = candidate
        return str(candidate)


def _clean_fields(title: str, deadline: str, priority: Priority | str) -> tuple[str, str, Priority]:
    title = (title or "").strip()
    if not title:
        raise ValidationFailure("Please enter a task title")
    deadline = (deadline or "").strip()
    if not deadline:
        raise ValidationFailure("Please enter a deadline")
    try:
        level = Priority(priority)
    except ValueError as exc:
        raise ValidationFailure(f"Unknown priority: {priority}") from exc
    return title, deadline, level
