# gymtrack/engine/progress.py
from __future__ import annotations
import logging
import math
from datetime import datetime
from typing import Callable, Iterable, Mapping, Optional, Sequence

from gymtrack.errors import PersistenceReadError, UnknownExerciseError, ValidationError
from gymtrack.engine.locks import SessionLockManager
from gymtrack.engine.types import ExerciseAssignment, ExerciseProgress, PerSetRepLog, utcnow
from gymtrack.store import keys
from gymtrack.store.base import SessionStore
from gymtrack.store.writer import PersistenceWriter

log = logging.getLogger(__name__)


def _round_half_up(done: int, total: int) -> int:
    # round(done / total * 100) with .5 going up, in integers
    return (200 * done + total) // (2 * total)


def overall_progress(
    assignments: Iterable[ExerciseAssignment],
    progress: Mapping[str, ExerciseProgress],
) -> int:
    """Completed share of all planned sets of the day, 0..100."""
    total = done = 0
    for a in assignments:
        planned = max(a.planned_sets, 0)
        total += planned
        p = progress.get(a.id)
        if p is not None:
            done += min(p.completed_sets, planned)
    if total == 0:
        return 0
    return _round_half_up(done, total)


def _as_int(v) -> Optional[int]:
    # JSON booleans are ints in Python; they are not rep counts
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    if isinstance(v, float) and not math.isfinite(v):
        return None
    return int(v)


class ProgressTracker:
    """Completed-set counts (and logged reps) for the exercises of one day."""

    def __init__(
        self,
        template_id: str,
        day_number: int,
        assignments: Sequence[ExerciseAssignment],
        writer: PersistenceWriter,
        locks: SessionLockManager,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.template_id = template_id
        self.day_number = day_number
        self.assignments = list(assignments)
        self.writer = writer
        self.locks = locks
        self.clock = clock
        self._by_id = {a.id: a for a in self.assignments}
        self.progress: dict[str, ExerciseProgress] = {a.id: self._empty(a) for a in self.assignments}
        self.rep_logs: dict[str, PerSetRepLog] = {}
        # a session record for this day went out since the last reset
        self.recorded = False

    @staticmethod
    def _empty(a: ExerciseAssignment) -> ExerciseProgress:
        return ExerciseProgress(exercise_id=a.id, is_completed=a.planned_sets <= 0)

    # READS
    def assignment(self, exercise_id: str) -> ExerciseAssignment:
        try:
            return self._by_id[exercise_id]
        except KeyError:
            raise UnknownExerciseError(exercise_id) from None

    def completed_sets(self, exercise_id: str) -> int:
        self.assignment(exercise_id)
        return self.progress[exercise_id].completed_sets

    def overall_progress(self) -> int:
        return overall_progress(self.assignments, self.progress)

    def exercise_percent(self, exercise_id: str) -> int:
        a = self.assignment(exercise_id)
        if a.planned_sets <= 0:
            return 0
        return _round_half_up(min(self.progress[a.id].completed_sets, a.planned_sets), a.planned_sets)

    def has_any_progress(self) -> bool:
        return any(p.completed_sets > 0 for p in self.progress.values())

    async def load(self, store: SessionStore) -> None:
        """Read persisted counts back; anything missing or unreadable counts as zero."""
        for a in self.assignments:
            completed = 0
            last: Optional[datetime] = None
            try:
                data = await store.get_json(keys.exercise_progress(a.id))
            except PersistenceReadError as e:
                log.debug("progress read failed exercise=%s: %s", a.id, e)
                data = None
            if isinstance(data, dict):
                completed = max(_as_int(data.get("completedSets")) or 0, 0)
                try:
                    last = datetime.fromisoformat(data["lastCompleted"])
                except (KeyError, TypeError, ValueError):
                    last = None
            completed = min(completed, max(a.planned_sets, 0))
            self.progress[a.id] = ExerciseProgress(
                exercise_id=a.id,
                completed_sets=completed,
                is_completed=completed >= a.planned_sets,
                last_updated=last,
            )

            try:
                reps = await store.get_json(keys.exercise_reps(a.id))
            except PersistenceReadError as e:
                log.debug("rep log read failed exercise=%s: %s", a.id, e)
                reps = None
            if isinstance(reps, dict) and isinstance(reps.get("sets"), list):
                self.rep_logs[a.id] = PerSetRepLog(a.id, [_as_int(v) for v in reps["sets"]])

        try:
            marker = await store.get_json(keys.daily_recorded(self.template_id, self.day_number))
        except PersistenceReadError as e:
            log.debug("recorded marker read failed template=%s day=%s: %s", self.template_id, self.day_number, e)
            marker = None
        self.recorded = isinstance(marker, dict)

    # WRITES
    def _set_completed(self, a: ExerciseAssignment, completed: int) -> ExerciseProgress:
        p = ExerciseProgress(
            exercise_id=a.id,
            completed_sets=completed,
            is_completed=completed >= a.planned_sets,
            last_updated=self.clock(),
        )
        self.progress[a.id] = p
        self._persist(p)
        return p

    def _persist(self, p: ExerciseProgress) -> None:
        key = keys.exercise_progress(p.exercise_id)
        if p.completed_sets == 0:
            self.writer.remove(key)
            return
        self.writer.set_json(key, {
            "exerciseId": p.exercise_id,
            "completedSets": p.completed_sets,
            "lastCompleted": p.last_updated.isoformat() if p.last_updated else None,
        })

    def mark_set(self, exercise_id: str) -> ExerciseProgress:
        a = self.assignment(exercise_id)
        self.locks.acquire_on_first_mutation(self.template_id, self.day_number)
        current = self.progress[a.id].completed_sets
        return self._set_completed(a, min(current + 1, max(a.planned_sets, 0)))

    def undo_set(self, exercise_id: str) -> ExerciseProgress:
        a = self.assignment(exercise_id)
        self.locks.acquire_on_first_mutation(self.template_id, self.day_number)
        current = self.progress[a.id].completed_sets
        return self._set_completed(a, max(current - 1, 0))

    def mark_all_sets(self, exercise_id: str) -> ExerciseProgress:
        a = self.assignment(exercise_id)
        p = self.progress[a.id]
        planned = max(a.planned_sets, 0)
        if p.completed_sets == planned and p.is_completed:
            return p
        return self._set_completed(a, planned)

    def record_reps(self, exercise_id: str, set_index: int, reps: int) -> PerSetRepLog:
        """Remember what was actually performed for set ``set_index`` (1-based)."""
        a = self.assignment(exercise_id)
        if not 1 <= set_index <= a.planned_sets:
            raise ValidationError(
                f"set {set_index} is out of range for {exercise_id!r} ({a.planned_sets} planned)"
            )
        log_ = self.rep_logs.setdefault(a.id, PerSetRepLog(a.id))
        while len(log_.performed_reps) < set_index:
            log_.performed_reps.append(None)
        log_.performed_reps[set_index - 1] = max(0, int(reps))
        self.writer.set_json(keys.exercise_reps(a.id), {"sets": list(log_.performed_reps)})
        return log_

    def mark_recorded(self, record_id: Optional[str]) -> None:
        self.recorded = True
        self.writer.set_json(
            keys.daily_recorded(self.template_id, self.day_number), {"recordId": record_id}
        )

    def clear_rep_logs(self) -> None:
        self.rep_logs.clear()
        for a in self.assignments:
            self.writer.remove(keys.exercise_reps(a.id))

    def reset_all(self) -> None:
        # memory first, then best-effort deletes
        for a in self.assignments:
            self.progress[a.id] = self._empty(a)
        self.rep_logs.clear()
        self.recorded = False
        for a in self.assignments:
            self.writer.remove(keys.exercise_progress(a.id))
            self.writer.remove(keys.exercise_reps(a.id))
        self.writer.remove(keys.daily_recorded(self.template_id, self.day_number))
        self.locks.release(self.template_id, self.day_number)
