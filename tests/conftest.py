from __future__ import annotations

import pytest

from task_tracker.infra.kv_store import KeyValueStoreError
from task_tracker.infra.task_store import TaskStore
from task_tracker.services.task_repository import TaskRepository


class FakeKeyValueStore:
    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0

    async def get(self, key: str) -> bytes | None:
        if self.fail_reads:
            raise KeyValueStoreError("store offline")
        return self.data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        if self.fail_writes:
            raise KeyValueStoreError("disk full")
        self.data[key] = value
        self.writes += 1


class FrozenClock:
    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def kv() -> FakeKeyValueStore:
    return FakeKeyValueStore()


@pytest.fixture
def store(kv: FakeKeyValueStore) -> TaskStore:
    return TaskStore(kv, key="tasks")


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def repository(store: TaskStore, clock: FrozenClock) -> TaskRepository:
    return TaskRepository(store, clock=clock)
