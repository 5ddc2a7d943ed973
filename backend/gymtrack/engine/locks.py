# gymtrack/engine/locks.py
from __future__ import annotations
import logging
from datetime import datetime
from typing import Callable, Optional

from gymtrack.errors import InvalidDayError, LockConflictError, PersistenceReadError
from gymtrack.engine.types import SessionLock, utcnow
from gymtrack.store import keys
from gymtrack.store.base import SessionStore
from gymtrack.store.writer import PersistenceWriter

log = logging.getLogger(__name__)

DAYS_OF_WEEK = range(1, 8)


def check_day(day_number: int) -> int:
    if day_number not in DAYS_OF_WEEK:
        raise InvalidDayError(day_number)
    return day_number


class SessionLockManager:
    """
    Keeps at most one open day per routine template.

    The lock is just the session start time stored under the (template, day)
    key; it doubles as the ``start_time`` of the record written at the end.
    """

    def __init__(
        self,
        store: SessionStore,
        writer: PersistenceWriter,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.writer = writer
        self.clock = clock
        self._started: dict[tuple[str, int], datetime] = {}

    async def _read(self, template_id: str, day_number: int) -> Optional[datetime]:
        key = keys.daily_start(template_id, day_number)
        try:
            raw = await self.store.get(key)
        except PersistenceReadError as e:
            log.debug("lock read failed key=%s: %s", key, e)
            return None
        if not raw:
            return None
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            log.debug("lock key=%s holds unparseable start %r", key, raw)
            return None

    async def load(self, template_id: str, day_number: int) -> Optional[SessionLock]:
        started = await self._read(template_id, day_number)
        if started is None:
            self._started.pop((template_id, day_number), None)
            return None
        self._started[(template_id, day_number)] = started
        return SessionLock(template_id, day_number, started)

    def started_at(self, template_id: str, day_number: int) -> Optional[datetime]:
        return self._started.get((template_id, day_number))

    def acquire_on_first_mutation(self, template_id: str, day_number: int) -> datetime:
        started = self._started.get((template_id, day_number))
        if started is None:
            started = self.clock()
            self._started[(template_id, day_number)] = started
            self.writer.set(keys.daily_start(template_id, day_number), started.isoformat())
            log.debug("session lock taken template=%s day=%s", template_id, day_number)
        return started

    async def find_conflict(self, template_id: str, requested_day: int) -> Optional[int]:
        check_day(requested_day)
        # pending acquire/release writes must land before the store is scanned
        await self.writer.flush()
        for day in DAYS_OF_WEEK:
            held = (template_id, day) in self._started or await self._read(template_id, day) is not None
            if held:
                return day if day != requested_day else None
        return None

    async def ensure_can_switch(self, template_id: str, requested_day: int) -> None:
        conflict = await self.find_conflict(template_id, requested_day)
        if conflict is not None:
            log.info("day switch refused template=%s from=%s to=%s", template_id, conflict, requested_day)
            raise LockConflictError(template_id, conflict, requested_day)

    def release(self, template_id: str, day_number: int) -> None:
        self._started.pop((template_id, day_number), None)
        self.writer.remove(keys.daily_start(template_id, day_number))
