from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .db import SessionLocal
from .models import KeyValueModel

logger = logging.getLogger(__name__)


class KeyValueStoreError(Exception):
    """The backing byte store could not be read or written."""


class KeyValueStore(Protocol):
    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, value: bytes) -> None: ...


class SqlKeyValueStore:
    """Byte store keeping one row per key in the ``kv_store`` table.

    ``set`` replaces the value inside a single transaction, so readers see
    either the old blob or the new one.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = SessionLocal) -> None:
        self._session_factory = session_factory

    async def get(self, key: str) -> bytes | None:
        try:
            async with self._session_factory() as session:
                row = await session.get(KeyValueModel, key)
                return bytes(row.value) if row else None
        except (SQLAlchemyError, OSError) as exc:
            raise KeyValueStoreError(f"read of key {key!r} failed: {exc}") from exc

    async def set(self, key: str, value: bytes) -> None:
        try:
            async with self._session_factory() as session:
                row = await session.get(KeyValueModel, key)
                if row is None:
                    session.add(KeyValueModel(key=key, value=value))
                else:
                    row.value = value
                await session.commit()
        except (SQLAlchemyError, OSError) as exc:
            raise KeyValueStoreError(f"write of key {key!r} failed: {exc}") from exc
        logger.debug("kv_store write key=%s bytes=%s", key, len(value))
