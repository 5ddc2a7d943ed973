from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field

from gymtrack.engine.types import FinishMode, SessionState

RepCount = Annotated[int, Field(ge=0, le=1000)]

class SetMark(BaseModel):
    # Optional: reps actually performed for the set being completed
    reps: RepCount | None = None

class FinishChoice(BaseModel):
    mode: FinishMode

class ResetRequest(BaseModel):
    confirm: bool = False

class ExerciseRead(BaseModel):
    id: str
    planned_sets: int
    planned_reps: str
    category_id: str | None = None
    completed_sets: int
    is_completed: bool
    percent: int
    performed_reps: list[int | None] = []

    model_config = {"from_attributes": True}

class SessionRead(BaseModel):
    template_id: str
    day_number: int
    state: SessionState
    overall_progress: int
    can_finish_partial: bool
    started_at: datetime | None = None
    final_phrase: str | None = None
    record_id: str | None = None
    exercises: list[ExerciseRead]

    model_config = {"from_attributes": True}
