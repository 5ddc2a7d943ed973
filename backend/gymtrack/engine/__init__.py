from gymtrack.engine.coordinator import PARTIAL_FINISH_FLOOR, CompletionCoordinator
from gymtrack.engine.locks import SessionLockManager
from gymtrack.engine.planned_reps import PlannedReps, parse_planned_reps
from gymtrack.engine.progress import ProgressTracker, overall_progress
from gymtrack.engine.registry import EngineRegistry
from gymtrack.engine.session import SessionEngine, SessionSnapshot
from gymtrack.engine.synthesis import RecordSynthesizer, SynthesisResult, build_set_records
from gymtrack.engine.types import (
    ExerciseAssignment,
    ExerciseProgress,
    FinishMode,
    PerSetRepLog,
    SessionLock,
    SessionRecordDraft,
    SessionSetRecordDraft,
    SessionState,
)

__all__ = [
    "PARTIAL_FINISH_FLOOR",
    "CompletionCoordinator",
    "EngineRegistry",
    "ExerciseAssignment",
    "ExerciseProgress",
    "FinishMode",
    "PerSetRepLog",
    "PlannedReps",
    "ProgressTracker",
    "RecordSynthesizer",
    "SessionEngine",
    "SessionLock",
    "SessionLockManager",
    "SessionRecordDraft",
    "SessionSetRecordDraft",
    "SessionSnapshot",
    "SessionState",
    "SynthesisResult",
    "build_set_records",
    "overall_progress",
    "parse_planned_reps",
]
