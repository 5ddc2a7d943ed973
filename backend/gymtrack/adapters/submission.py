# gymtrack/adapters/submission.py
from __future__ import annotations
import asyncio
import dataclasses
from typing import Callable, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gymtrack.engine.types import SessionRecordDraft, SessionSetRecordDraft
from gymtrack.errors import SetRecordSubmissionError, SubmissionError
from gymtrack.repositories.session_record_repo import SessionRecordRepository
from gymtrack.repositories.session_set_record_repo import SessionSetRecordRepository


class SqlSubmissionBackend:
    """Writes session and set records through the repositories."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _create_record(self, record: SessionRecordDraft) -> str:
        with self.session_factory() as db:
            rec = SessionRecordRepository(db).create(**dataclasses.asdict(record))
            return str(rec.id)

    def _create_sets(self, records: Sequence[SessionSetRecordDraft]) -> None:
        rows = [
            {
                "session_record_id": int(r.session_record_id),
                "exercise_id": r.exercise_id,
                "set_index": r.set_index,
                "performed_reps": r.performed_reps,
            }
            for r in records
        ]
        with self.session_factory() as db:
            SessionSetRecordRepository(db).bulk_create(rows)

    async def create_session_record(self, record: SessionRecordDraft) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._create_record, record)
        except SQLAlchemyError as e:
            raise SubmissionError(str(e)) from e

    async def create_session_set_records(self, records: Sequence[SessionSetRecordDraft]) -> None:
        try:
            await asyncio.to_thread(self._create_sets, records)
        except (SQLAlchemyError, ValueError) as e:
            raise SetRecordSubmissionError(str(e)) from e

class InMemorySubmissionBackend:
    """Keeps submissions in lists; handy for local runs and tests."""

    def __init__(self):
        self.records: list[tuple[str, SessionRecordDraft]] = []
        self.set_records: list[SessionSetRecordDraft] = []
        self.bulk_calls = 0

    async def create_session_record(self, record: SessionRecordDraft) -> Optional[str]:
        record_id = str(len(self.records) + 1)
        self.records.append((record_id, record))
        return record_id

    async def create_session_set_records(self, records: Sequence[SessionSetRecordDraft]) -> None:
        self.bulk_calls += 1
        self.set_records.extend(records)
