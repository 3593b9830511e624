from __future__ import annotations

import pytest

from task_tracker.domain.entities import TaskEntity
from task_tracker.domain.errors import StorageFailure
from task_tracker.services.session_loader import SessionLoader
from task_tracker.services.task_repository import TaskRepository

STORED = (
    b'[{"id":"1","title":"Buy milk","deadline":"2024-03-20","priority":"low","completed":false},'
    b'{"id":"2","title":"File taxes","deadline":"2024-03-01","priority":"high","completed":false}]'
)


@pytest.mark.asyncio
async def test_load_populates_repository(store, kv, repository) -> None:
    kv.data["tasks"] = STORED
    loader = SessionLoader(store, repository)

    tasks = await loader.load()

    assert [task.title for task in tasks] == ["Buy milk", "File taxes"]
    assert repository.tasks == tasks


@pytest.mark.asyncio
async def test_first_run_loads_nothing(store, repository) -> None:
    loader = SessionLoader(store, repository)

    assert await loader.load() == ()
    assert repository.tasks == ()


@pytest.mark.asyncio
async def test_reload_picks_up_tasks_saved_by_another_repository(store, repository, clock) -> None:
    writer = TaskRepository(store, clock=clock)
    created = await writer.add("Buy milk", "2024-03-20", "low")

    await SessionLoader(store, repository).load()

    assert repository.tasks == (created,)


@pytest.mark.asyncio
async def test_malformed_store_keeps_previous_state(store, kv, repository) -> None:
    previous = TaskEntity(id="9", title="Keep me", deadline="2024-01-01")
    repository.replace_all([previous])
    kv.data["tasks"] = b"[{"
    loader = SessionLoader(store, repository)

    with pytest.raises(StorageFailure) as excinfo:
        await loader.load()

    assert excinfo.value.operation == StorageFailure.LOAD
    assert repository.tasks == (previous,)


@pytest.mark.asyncio
async def test_unavailable_store_keeps_empty_repository(store, kv, repository) -> None:
    kv.fail_reads = True

    with pytest.raises(StorageFailure, match="Could not load tasks"):
        await SessionLoader(store, repository).load()

    assert repository.tasks == ()
