from __future__ import annotations

import logging

from task_tracker.domain.entities import TaskEntity
from task_tracker.infra.task_store import TaskStore

from .task_repository import TaskRepository

logger = logging.getLogger(__name__)


class SessionLoader:
    """Fills a repository from the store when a session or screen starts.

    A ``StorageFailure`` propagates to the caller and the repository keeps
    whatever it held before.
    """

    def __init__(self, store: TaskStore, repository: TaskRepository) -> None:
        self._store = store
        self._repository = repository

    async def load(self) -> tuple[TaskEntity, ...]:
        tasks = await self._store.load()
        self._repository.replace_all(tasks)
        logger.info("Session loaded %s tasks", len(tasks))
        return self._repository.tasks
