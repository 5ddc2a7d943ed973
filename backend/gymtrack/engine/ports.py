# gymtrack/engine/ports.py
from __future__ import annotations
from typing import Optional, Protocol, Sequence

from gymtrack.engine.types import ExerciseAssignment, SessionRecordDraft, SessionSetRecordDraft


class ExerciseCatalog(Protocol):
    async def list_for_day(self, template_id: str, day_number: int) -> list[ExerciseAssignment]:
        """Ordered exercises of one routine day."""
        ...


class SubmissionBackend(Protocol):
    async def create_session_record(self, record: SessionRecordDraft) -> Optional[str]:
        """Return the new record id (``None`` if the backend did not send one).

        Raises ``SubmissionError`` on failure.
        """
        ...

    async def create_session_set_records(self, records: Sequence[SessionSetRecordDraft]) -> None:
        """Raises ``SetRecordSubmissionError`` on failure."""
        ...


class CelebrationHook(Protocol):
    def __call__(self, phrase: Optional[str], *, full: bool) -> None: ...
