"""Fakes shared by the engine tests."""
import asyncio
from datetime import datetime, timedelta, timezone

from gymtrack.adapters import InMemoryCatalog, InMemorySubmissionBackend
from gymtrack.engine import ExerciseAssignment, SessionEngine
from gymtrack.errors import (
    PersistenceReadError,
    PersistenceWriteError,
    SetRecordSubmissionError,
    SubmissionError,
)
from gymtrack.store import InMemorySessionStore

TEMPLATE = "tpl-1"


class StepClock:
    """Every call is one minute after the previous one."""

    def __init__(self, start=datetime(2026, 1, 5, 7, 0, tzinfo=timezone.utc), step=timedelta(minutes=1)):
        self.now = start
        self.step = step

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


def ex(id, sets, reps="10", day=1, **kw):
    return ExerciseAssignment(id=id, day_number=day, planned_sets=sets, planned_reps=reps, **kw)


async def load_engine(exercises, *, store=None, backend=None, day=1, user_id="user-1", clock=None, **kw):
    store = store if store is not None else InMemorySessionStore()
    backend = backend if backend is not None else InMemorySubmissionBackend()
    catalog = InMemoryCatalog({(TEMPLATE, day): exercises})
    engine = await SessionEngine.load(
        TEMPLATE, day,
        catalog=catalog, store=store, backend=backend,
        user_id=user_id, clock=clock or StepClock(), **kw,
    )
    return engine, store, backend


class FailingRecordBackend(InMemorySubmissionBackend):
    def __init__(self, fail_times=1):
        super().__init__()
        self.fail_times = fail_times
        self.attempts = 0

    async def create_session_record(self, record):
        self.attempts += 1
        if self.attempts <= self.fail_times:
            raise SubmissionError("backend unavailable")
        return await super().create_session_record(record)


class FailingBulkBackend(InMemorySubmissionBackend):
    async def create_session_set_records(self, records):
        self.bulk_calls += 1
        raise SetRecordSubmissionError("bulk rejected")


class NoIdBackend(InMemorySubmissionBackend):
    async def create_session_record(self, record):
        await super().create_session_record(record)
        return None


class BrokenReadStore(InMemorySessionStore):
    async def get(self, key):
        raise PersistenceReadError(key)


class BrokenWriteStore(InMemorySessionStore):
    async def set(self, key, value):
        raise PersistenceWriteError(key)

    async def remove(self, key):
        raise PersistenceWriteError(key)


class GatedBackend(InMemorySubmissionBackend):
    """Holds the session record call until ``gate`` is set."""

    def __init__(self):
        super().__init__()
        self.gate = asyncio.Event()
        self.waiting = asyncio.Event()

    async def create_session_record(self, record):
        self.waiting.set()
        await self.gate.wait()
        return await super().create_session_record(record)
