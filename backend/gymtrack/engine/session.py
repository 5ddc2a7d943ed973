# gymtrack/engine/session.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from gymtrack.errors import EngineError
from gymtrack.engine.coordinator import PARTIAL_FINISH_FLOOR, CompletionCoordinator
from gymtrack.engine.locks import SessionLockManager, check_day
from gymtrack.engine.ports import CelebrationHook, ExerciseCatalog, SubmissionBackend
from gymtrack.engine.progress import ProgressTracker
from gymtrack.engine.synthesis import RecordSynthesizer
from gymtrack.engine.types import ExerciseAssignment, ExerciseProgress, FinishMode, SessionState, utcnow
from gymtrack.store.base import SessionStore
from gymtrack.store.writer import PersistenceWriter

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ExerciseView:
    id: str
    planned_sets: int
    planned_reps: str
    category_id: Optional[str]
    completed_sets: int
    is_completed: bool
    percent: int
    performed_reps: list[Optional[int]] = field(default_factory=list)


@dataclass(slots=True)
class SessionSnapshot:
    template_id: str
    day_number: int
    state: SessionState
    overall_progress: int
    can_finish_partial: bool
    started_at: Optional[datetime]
    final_phrase: Optional[str]
    record_id: Optional[str]
    exercises: list[ExerciseView]


class SessionEngine:
    """
    Everything that is live for one selected routine day.

    Built by :meth:`load` when a day is selected, dropped with :meth:`close` when
    the user switches day or the app goes away. In-memory state is the source of
    truth while the engine lives; the store is read once, in ``load``.
    """

    def __init__(
        self,
        template_id: str,
        day_number: int,
        assignments: list[ExerciseAssignment],
        *,
        writer: PersistenceWriter,
        locks: SessionLockManager,
        backend: SubmissionBackend,
        user_id: Optional[str] = None,
        clock: Callable[[], datetime] = utcnow,
        celebrate: Optional[CelebrationHook] = None,
        rng: Optional[random.Random] = None,
    ):
        self.template_id = template_id
        self.day_number = day_number
        self.writer = writer
        self.locks = locks
        self.tracker = ProgressTracker(template_id, day_number, assignments, writer, locks, clock)
        self.coordinator = CompletionCoordinator(
            self.tracker,
            locks,
            RecordSynthesizer(backend, clock),
            user_id=user_id,
            celebrate=celebrate,
            rng=rng,
        )
        self.closed = False

    @classmethod
    async def load(
        cls,
        template_id: str,
        day_number: int,
        *,
        catalog: ExerciseCatalog,
        store: SessionStore,
        backend: SubmissionBackend,
        writer: Optional[PersistenceWriter] = None,
        locks: Optional[SessionLockManager] = None,
        user_id: Optional[str] = None,
        clock: Callable[[], datetime] = utcnow,
        celebrate: Optional[CelebrationHook] = None,
        rng: Optional[random.Random] = None,
    ) -> "SessionEngine":
        check_day(day_number)
        writer = writer or PersistenceWriter(store)
        locks = locks or SessionLockManager(store, writer, clock)

        assignments = [
            a for a in await catalog.list_for_day(template_id, day_number)
            if a.day_number == day_number
        ]
        engine = cls(
            template_id, day_number, assignments,
            writer=writer, locks=locks, backend=backend, user_id=user_id,
            clock=clock, celebrate=celebrate, rng=rng,
        )
        await locks.load(template_id, day_number)
        await engine.tracker.load(store)
        engine.coordinator.restore()
        log.info(
            "day loaded template=%s day=%s exercises=%d state=%s progress=%d",
            template_id, day_number, len(assignments),
            engine.state.value, engine.overall_progress,
        )
        return engine

    def _live(self) -> CompletionCoordinator:
        if self.closed:
            raise EngineError(f"session for day {self.day_number} is closed")
        return self.coordinator

    # READS
    @property
    def state(self) -> SessionState:
        return self.coordinator.state

    @property
    def overall_progress(self) -> int:
        return self.tracker.overall_progress()

    @property
    def assignments(self) -> list[ExerciseAssignment]:
        return self.tracker.assignments

    def exercise_percent(self, exercise_id: str) -> int:
        return self.tracker.exercise_percent(exercise_id)

    def snapshot(self) -> SessionSnapshot:
        views = []
        for a in self.tracker.assignments:
            p = self.tracker.progress[a.id]
            rep_log = self.tracker.rep_logs.get(a.id)
            views.append(ExerciseView(
                id=a.id,
                planned_sets=a.planned_sets,
                planned_reps=a.planned_reps,
                category_id=a.category_id,
                completed_sets=p.completed_sets,
                is_completed=p.is_completed,
                percent=self.tracker.exercise_percent(a.id),
                performed_reps=list(rep_log.performed_reps) if rep_log else [],
            ))
        progress = self.overall_progress
        return SessionSnapshot(
            template_id=self.template_id,
            day_number=self.day_number,
            state=self.state,
            overall_progress=progress,
            can_finish_partial=progress >= PARTIAL_FINISH_FLOOR,
            started_at=self.locks.started_at(self.template_id, self.day_number),
            final_phrase=self.coordinator.final_phrase,
            record_id=self.coordinator.record_id,
            exercises=views,
        )

    # UI OPERATIONS
    def mark_set(self, exercise_id: str) -> ExerciseProgress:
        return self._live().mark_set(exercise_id)

    def undo_set(self, exercise_id: str) -> ExerciseProgress:
        return self._live().undo_set(exercise_id)

    def mark_all_sets(self, exercise_id: str) -> ExerciseProgress:
        return self._live().mark_all_sets(exercise_id)

    def complete_set(self, exercise_id: str, reps: int) -> ExerciseProgress:
        return self._live().complete_set(exercise_id, reps)

    async def request_finish(self) -> SessionState:
        return await self._live().request_finish()

    def cancel_finish(self) -> SessionState:
        return self._live().cancel_finish()

    async def choose_finish_mode(self, mode: FinishMode | str) -> SessionState:
        return await self._live().choose_finish_mode(mode)

    async def finish_full(self) -> SessionState:
        return await self._live().finish_full()

    async def finish_partial(self) -> SessionState:
        return await self._live().finish_partial()

    def reset(self, *, confirm: bool) -> SessionState:
        return self._live().reset(confirm=confirm)

    async def flush(self) -> None:
        """Wait for pending writes and for a record submission in flight."""
        await self.coordinator.flush()

    async def close(self) -> None:
        if self.closed:
            return
        await self.flush()
        self.closed = True
        log.debug("day closed template=%s day=%s", self.template_id, self.day_number)
