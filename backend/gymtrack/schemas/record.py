from datetime import datetime
from pydantic import BaseModel

class SessionSetRecordRead(BaseModel):
    id: int
    exercise_id: str
    set_index: int
    performed_reps: str

    model_config = {"from_attributes": True}

class SessionRecordRead(BaseModel):
    id: int
    user_id: str
    day_reference: str
    start_time: datetime
    end_time: datetime
    completion_percentage: int
    sets: list[SessionSetRecordRead] = []

    model_config = {"from_attributes": True}
