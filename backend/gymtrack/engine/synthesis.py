# gymtrack/engine/synthesis.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Mapping, Optional

from gymtrack.errors import SetRecordSubmissionError
from gymtrack.engine.locks import SessionLockManager
from gymtrack.engine.planned_reps import parse_planned_reps
from gymtrack.engine.ports import SubmissionBackend
from gymtrack.engine.progress import ProgressTracker
from gymtrack.engine.types import (
    ExerciseAssignment,
    PerSetRepLog,
    SessionRecordDraft,
    SessionSetRecordDraft,
    utcnow,
)

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SynthesisResult:
    record_id: Optional[str]
    set_records: int
    sets_submitted: bool


def build_set_records(
    assignments: Iterable[ExerciseAssignment],
    rep_logs: Mapping[str, PerSetRepLog],
    record_id: str,
) -> list[SessionSetRecordDraft]:
    """One record per planned set; logged reps win, planned reps fill the gaps."""
    out: list[SessionSetRecordDraft] = []
    for a in assignments:
        if a.planned_sets <= 0:
            continue
        fallback = parse_planned_reps(a.planned_reps).fallback
        rep_log = rep_logs.get(a.id)
        for i in range(1, a.planned_sets + 1):
            performed = rep_log.at(i - 1) if rep_log else None
            out.append(SessionSetRecordDraft(
                set_index=i,
                performed_reps=str(performed) if performed is not None else fallback,
                session_record_id=record_id,
                exercise_id=a.record_exercise_id,
            ))
    return out


class RecordSynthesizer:
    """Turns a finished day into one session record plus its per-set records."""

    def __init__(self, backend: SubmissionBackend, clock: Callable[[], datetime] = utcnow):
        self.backend = backend
        self.clock = clock

    async def synthesize(
        self,
        tracker: ProgressTracker,
        locks: SessionLockManager,
        *,
        percentage: int,
        user_id: Optional[str],
        is_current: Callable[[], bool] = lambda: True,
    ) -> Optional[SynthesisResult]:
        """
        Returns ``None`` when there is nobody or nothing to record for.
        ``SubmissionError`` from the session record call propagates untouched:
        lock, progress and rep logs stay as they are so the finish can be retried.

        Everything the records are built from is read before the first await.
        Once ``is_current()`` turns false (the day was reset meanwhile) the
        tracker and the lock belong to a new session and are left alone.
        """
        day_reference = tracker.assignments[0].id if tracker.assignments else None
        if not user_id or not day_reference:
            log.info("record skipped: user=%r day_reference=%r", user_id, day_reference)
            return None

        assignments = list(tracker.assignments)
        rep_logs = {k: PerSetRepLog(v.exercise_id, list(v.performed_reps)) for k, v in tracker.rep_logs.items()}
        end = self.clock()
        start = locks.started_at(tracker.template_id, tracker.day_number) or end
        record_id = await self.backend.create_session_record(SessionRecordDraft(
            start_time=start,
            end_time=end,
            completion_percentage=percentage,
            user_id=user_id,
            day_reference=day_reference,
        ))
        if is_current():
            tracker.mark_recorded(record_id)

        bulk: list[SessionSetRecordDraft] = []
        submitted = False
        if record_id:
            bulk = build_set_records(assignments, rep_logs, record_id)
            if bulk:
                try:
                    await self.backend.create_session_set_records(bulk)
                    submitted = True
                except SetRecordSubmissionError as e:
                    # the session record already carries the completion percentage
                    log.warning("set records dropped record=%s count=%d: %s", record_id, len(bulk), e)

        if is_current():
            if submitted:
                tracker.clear_rep_logs()
            locks.release(tracker.template_id, tracker.day_number)
        else:
            log.info(
                "day reset while recording record=%s template=%s day=%s",
                record_id, tracker.template_id, tracker.day_number,
            )
        log.info(
            "session recorded record=%s template=%s day=%s pct=%d sets=%d",
            record_id, tracker.template_id, tracker.day_number, percentage, len(bulk),
        )
        return SynthesisResult(record_id=record_id, set_records=len(bulk), sets_submitted=submitted)
