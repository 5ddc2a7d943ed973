from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload
from gymtrack.models import SessionRecord

class SessionRecordRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, record_id: int) -> Optional[SessionRecord]:
        return self.db.get(SessionRecord, record_id)

    def list_by_user(self, user_id: str, *, limit: int = 50, offset: int = 0) -> list[SessionRecord]:
        stmt = select(SessionRecord).where(SessionRecord.user_id == user_id)\
                                    .options(selectinload(SessionRecord.sets))\
                                    .order_by(SessionRecord.id.desc())\
                                    .limit(limit).offset(offset)
        return list(self.db.execute(stmt).scalars().all())

    def create(self, *, user_id: str, day_reference: str, start_time: datetime,
               end_time: datetime, completion_percentage: int) -> SessionRecord:
        rec = SessionRecord(user_id=user_id, day_reference=day_reference, start_time=start_time,
                            end_time=end_time, completion_percentage=completion_percentage)
        self.db.add(rec)
        self.db.commit()
        self.db.refresh(rec)
        return rec
