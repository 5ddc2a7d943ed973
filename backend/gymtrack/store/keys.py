"""Deterministic store keys. Nothing outside ``gymtrack.store`` formats raw keys."""

PROGRESS_PREFIX = "@exercise_progress"
REPS_PREFIX = "@exercise_reps"
DAILY_START_PREFIX = "@daily_start"
DAILY_RECORDED_PREFIX = "@daily_recorded"


def exercise_progress(exercise_id: str) -> str:
    return f"{PROGRESS_PREFIX}:{exercise_id}"


def exercise_reps(exercise_id: str) -> str:
    return f"{REPS_PREFIX}:{exercise_id}"


def daily_start(template_id: str, day_number: int) -> str:
    return f"{DAILY_START_PREFIX}:{template_id}:{day_number}"


def daily_recorded(template_id: str, day_number: int) -> str:
    return f"{DAILY_RECORDED_PREFIX}:{template_id}:{day_number}"
