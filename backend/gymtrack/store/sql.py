# gymtrack/store/sql.py
from __future__ import annotations
import asyncio
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gymtrack.errors import PersistenceReadError, PersistenceWriteError
from gymtrack.repositories.store_repo import StoreEntryRepository
from gymtrack.store.base import SessionStore


class SqlSessionStore(SessionStore):
    """``store_entries`` table behind the async store port.

    Each call opens its own session on a worker thread so the event loop never
    blocks on the database.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _get(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            entry = StoreEntryRepository(db).get(key)
            return entry.value if entry else None

    def _set(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            StoreEntryRepository(db).put(key, value)

    def _remove(self, key: str) -> None:
        with self.session_factory() as db:
            StoreEntryRepository(db).delete(key)

    async def get(self, key: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._get, key)
        except SQLAlchemyError as e:
            raise PersistenceReadError(f"{key}: {e}") from e

    async def set(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._set, key, value)
        except SQLAlchemyError as e:
            raise PersistenceWriteError(f"{key}: {e}") from e

    async def remove(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._remove, key)
        except SQLAlchemyError as e:
            raise PersistenceWriteError(f"{key}: {e}") from e
