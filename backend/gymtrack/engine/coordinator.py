# gymtrack/engine/coordinator.py
from __future__ import annotations
import asyncio
import logging
import random
from typing import Optional

from gymtrack.errors import (
    InvalidTransitionError,
    PartialFinishRejectedError,
    ResetNotConfirmedError,
    SessionFinishedError,
    SubmissionError,
    ValidationError,
)
from gymtrack.engine.locks import SessionLockManager
from gymtrack.engine.phrases import pick_phrase
from gymtrack.engine.ports import CelebrationHook
from gymtrack.engine.progress import ProgressTracker
from gymtrack.engine.synthesis import RecordSynthesizer, SynthesisResult
from gymtrack.engine.types import ExerciseProgress, FinishMode, SessionState

log = logging.getLogger(__name__)

# Fixed policy: a day can be closed early only once this share of sets is done.
PARTIAL_FINISH_FLOOR = 30


class CompletionCoordinator:
    """
    State machine for one routine day.

    NOT_STARTED -> IN_PROGRESS on the first mutation; IN_PROGRESS ->
    FINISHED_FULL by itself when progress hits 100; otherwise the user asks to
    finish (AWAITING_FINISH_CHOICE) and picks "partial" (>= 30%) or "full"
    (marks everything). Only a confirmed reset leaves a finished state.

    Two one-shot flags live here for the whole session:

    * ``completion_fired``: celebration side effects already ran.
    * ``record_guard``: a session record was (or is being) submitted. It is
      cleared again by ``reset`` or when the submission fails, which is what
      makes a finish retryable.
    """

    def __init__(
        self,
        tracker: ProgressTracker,
        locks: SessionLockManager,
        synthesizer: RecordSynthesizer,
        *,
        user_id: Optional[str] = None,
        celebrate: Optional[CelebrationHook] = None,
        rng: Optional[random.Random] = None,
    ):
        self.tracker = tracker
        self.locks = locks
        self.synthesizer = synthesizer
        self.user_id = user_id
        self.celebrate = celebrate
        self.rng = rng

        self.state = SessionState.not_started
        self.completion_fired = False
        self.record_guard = False
        self.record_id: Optional[str] = None
        self.final_phrase: Optional[str] = None
        self._synthesis: Optional[asyncio.Task] = None
        # bumped by reset; submissions started under an older value are stale
        self.generation = 0
        self._in_flight: set[asyncio.Task] = set()

    @property
    def overall_progress(self) -> int:
        return self.tracker.overall_progress()

    def restore(self) -> SessionState:
        """Pick the state that matches freshly loaded progress."""
        started = self.locks.started_at(self.tracker.template_id, self.tracker.day_number)
        if self.tracker.assignments and self.overall_progress == 100:
            self.state = SessionState.finished_full
            self.completion_fired = True
            # without the recorded marker the finish is retried
            self.record_guard = self.tracker.recorded
        elif self.tracker.has_any_progress() or started is not None:
            self.state = SessionState.in_progress
        else:
            self.state = SessionState.not_started
        return self.state

    # MUTATIONS
    def _before_mutation(self) -> None:
        if self.state.finished:
            raise SessionFinishedError()

    def _after_mutation(self) -> None:
        if self.state is SessionState.not_started:
            self.state = SessionState.in_progress
        if self.overall_progress == 100:
            self._fire_completion()
            self.state = SessionState.finished_full
            self._enter_finished()

    def mark_set(self, exercise_id: str) -> ExerciseProgress:
        self._before_mutation()
        p = self.tracker.mark_set(exercise_id)
        self._after_mutation()
        return p

    def undo_set(self, exercise_id: str) -> ExerciseProgress:
        self._before_mutation()
        p = self.tracker.undo_set(exercise_id)
        self._after_mutation()
        return p

    def mark_all_sets(self, exercise_id: str) -> ExerciseProgress:
        self._before_mutation()
        p = self.tracker.mark_all_sets(exercise_id)
        self._after_mutation()
        return p

    def complete_set(self, exercise_id: str, reps: int) -> ExerciseProgress:
        """Log the reps of the next open set, then mark it."""
        self._before_mutation()
        a = self.tracker.assignment(exercise_id)
        done = self.tracker.completed_sets(exercise_id)
        if done >= a.planned_sets:
            raise ValidationError(f"all sets of {exercise_id!r} are already completed")
        self.tracker.record_reps(exercise_id, done + 1, reps)
        return self.mark_set(exercise_id)

    # FINISHING
    def _fire_completion(self) -> None:
        if self.completion_fired:
            return
        self.completion_fired = True
        self.final_phrase = pick_phrase(self.rng)
        if self.celebrate is not None:
            self.celebrate(self.final_phrase, full=True)

    def _percentage(self) -> int:
        if self.state is SessionState.finished_full:
            return 100
        return self.overall_progress

    def _enter_finished(self) -> Optional[asyncio.Task]:
        if self.record_guard:
            return self._synthesis
        self.record_guard = True
        task = asyncio.get_running_loop().create_task(self._synthesize(self._percentage(), self.generation))
        self._synthesis = task
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def _synthesize(self, percentage: int, generation: int) -> Optional[SynthesisResult]:
        def is_current() -> bool:
            return self.generation == generation

        try:
            result = await self.synthesizer.synthesize(
                self.tracker, self.locks,
                percentage=percentage, user_id=self.user_id, is_current=is_current,
            )
        except SubmissionError as e:
            log.warning(
                "session record failed template=%s day=%s: %s",
                self.tracker.template_id, self.tracker.day_number, e,
            )
            if is_current():
                self.record_guard = False
            return None
        if not is_current():
            return result
        if result is None:
            self.record_guard = False
        else:
            self.record_id = result.record_id
        return result

    async def _await_synthesis(self) -> None:
        pending = [t for t in self._in_flight if not t.done()]
        if pending:
            await asyncio.gather(*pending)

    async def request_finish(self) -> SessionState:
        if self.state.finished:
            # retry path after a failed or skipped submission
            self._enter_finished()
        elif self.tracker.assignments and self.overall_progress == 100:
            self._after_mutation()
        elif self.state in (SessionState.not_started, SessionState.in_progress):
            self.state = SessionState.awaiting_finish_choice
        await self._await_synthesis()
        return self.state

    def cancel_finish(self) -> SessionState:
        if self.state is SessionState.awaiting_finish_choice:
            self.state = (
                SessionState.in_progress
                if self.tracker.has_any_progress()
                else SessionState.not_started
            )
        return self.state

    async def choose_finish_mode(self, mode: FinishMode | str) -> SessionState:
        mode = FinishMode(mode)
        if self.state.finished:
            self._enter_finished()
            await self._await_synthesis()
            return self.state
        if self.state is not SessionState.awaiting_finish_choice:
            raise InvalidTransitionError(f"finish ({mode.value})", self.state.value)

        if mode is FinishMode.partial:
            progress = self.overall_progress
            if progress < PARTIAL_FINISH_FLOOR:
                raise PartialFinishRejectedError(progress, PARTIAL_FINISH_FLOOR)
            self.state = SessionState.finished_partial
            if self.final_phrase is None:
                self.final_phrase = pick_phrase(self.rng)
            if self.celebrate is not None:
                self.celebrate(self.final_phrase, full=False)
        else:
            for a in self.tracker.assignments:
                self.tracker.mark_all_sets(a.id)
            self._fire_completion()
            self.state = SessionState.finished_full

        self._enter_finished()
        await self._await_synthesis()
        return self.state

    async def finish_full(self) -> SessionState:
        if not self.state.finished:
            await self.request_finish()
        return await self.choose_finish_mode(FinishMode.full)

    async def finish_partial(self) -> SessionState:
        before = self.state
        if not self.state.finished:
            await self.request_finish()
        try:
            return await self.choose_finish_mode(FinishMode.partial)
        except PartialFinishRejectedError:
            self.state = before
            raise

    # RESET
    def reset(self, *, confirm: bool) -> SessionState:
        if not confirm:
            raise ResetNotConfirmedError()
        if self.state is SessionState.not_started and not self.tracker.has_any_progress():
            return self.state
        self.generation += 1
        self.tracker.reset_all()
        self.state = SessionState.not_started
        self.completion_fired = False
        self.record_guard = False
        self.record_id = None
        self.final_phrase = None
        return self.state

    async def flush(self) -> None:
        await self._await_synthesis()
        await self.tracker.writer.flush()
