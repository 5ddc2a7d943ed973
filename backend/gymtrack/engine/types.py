# gymtrack/engine/types.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionState(str, Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    awaiting_finish_choice = "awaiting_finish_choice"
    finished_partial = "finished_partial"
    finished_full = "finished_full"

    @property
    def finished(self) -> bool:
        return self in (SessionState.finished_partial, SessionState.finished_full)


class FinishMode(str, Enum):
    partial = "partial"
    full = "full"


@dataclass(slots=True, frozen=True)
class ExerciseAssignment:
    """One prescribed exercise of a routine day, as the catalog hands it out."""
    id: str
    day_number: int
    planned_sets: int
    planned_reps: str = ""
    category_id: Optional[str] = None
    exercise_ref: Optional[str] = None

    @property
    def record_exercise_id(self) -> str:
        return self.exercise_ref or self.id


@dataclass(slots=True)
class ExerciseProgress:
    exercise_id: str
    completed_sets: int = 0
    is_completed: bool = False
    last_updated: Optional[datetime] = None


@dataclass(slots=True)
class PerSetRepLog:
    exercise_id: str
    performed_reps: list[Optional[int]] = field(default_factory=list)

    def at(self, index: int) -> Optional[int]:
        if 0 <= index < len(self.performed_reps):
            return self.performed_reps[index]
        return None


@dataclass(slots=True)
class SessionLock:
    template_id: str
    day_number: int
    started_at: datetime


@dataclass(slots=True, frozen=True)
class SessionRecordDraft:
    start_time: datetime
    end_time: datetime
    completion_percentage: int
    user_id: str
    day_reference: str


@dataclass(slots=True, frozen=True)
class SessionSetRecordDraft:
    set_index: int
    performed_reps: str
    session_record_id: str
    exercise_id: str
