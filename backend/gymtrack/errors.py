# gymtrack/errors.py
from __future__ import annotations


class EngineError(Exception):
    """Base class for everything the session engine raises."""


class ValidationError(EngineError):
    """A request was rejected locally; no state changed and nothing was sent."""


class PartialFinishRejectedError(ValidationError):
    def __init__(self, progress: int, floor: int):
        self.progress = progress
        self.floor = floor
        super().__init__(
            f"cannot finish with current progress: {progress}% is below the {floor}% minimum"
        )


class SessionFinishedError(ValidationError):
    def __init__(self):
        super().__init__("session already finished; reset it to start again")


class UnknownExerciseError(ValidationError):
    def __init__(self, exercise_id: str):
        self.exercise_id = exercise_id
        super().__init__(f"exercise {exercise_id!r} is not part of this day")


class ResetNotConfirmedError(ValidationError):
    def __init__(self):
        super().__init__("reset must be confirmed")


class InvalidDayError(ValidationError):
    def __init__(self, day_number: int):
        self.day_number = day_number
        super().__init__(f"day number must be between 1 and 7, got {day_number}")


class InvalidTransitionError(ValidationError):
    def __init__(self, action: str, state: str):
        self.action = action
        self.state = state
        super().__init__(f"cannot {action} while session is {state}")


class LockConflictError(EngineError):
    """Another day of the same routine template still has a session open."""

    def __init__(self, template_id: str, conflicting_day: int, requested_day: int):
        self.template_id = template_id
        self.conflicting_day = conflicting_day
        self.requested_day = requested_day
        super().__init__(
            f"day {conflicting_day} of routine {template_id} is in progress; "
            f"finish or reset it before switching to day {requested_day}"
        )


class PersistenceReadError(EngineError):
    pass


class PersistenceWriteError(EngineError):
    pass


class SubmissionError(EngineError):
    """The session record could not be created."""


class SetRecordSubmissionError(EngineError):
    """The bulk set-record call failed."""
