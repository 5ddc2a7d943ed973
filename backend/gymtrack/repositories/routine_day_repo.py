from __future__ import annotations
from sqlalchemy import select
from sqlalchemy.orm import Session
from gymtrack.models import RoutineDay

class RoutineDayRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_for_day(self, template_id: str, day_number: int) -> list[RoutineDay]:
        stmt = select(RoutineDay).where(RoutineDay.template_id == template_id,
                                        RoutineDay.day_number == day_number)\
                                 .order_by(RoutineDay.position.asc(), RoutineDay.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    def create(self, *, id: str, template_id: str, day_number: int, planned_sets: int,
               planned_reps: str = "", position: int = 0, category_id: str | None = None,
               exercise_ref: str | None = None) -> RoutineDay:
        row = RoutineDay(id=id, template_id=template_id, day_number=day_number, position=position,
                         planned_sets=planned_sets, planned_reps=planned_reps,
                         category_id=category_id, exercise_ref=exercise_ref)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row
