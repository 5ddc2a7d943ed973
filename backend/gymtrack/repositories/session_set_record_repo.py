from __future__ import annotations
from typing import Iterable
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from gymtrack.models import SessionSetRecord

class SessionSetRecordRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_by_record(self, record_id: int) -> list[SessionSetRecord]:
        stmt = select(SessionSetRecord).where(SessionSetRecord.session_record_id == record_id)\
                                       .order_by(SessionSetRecord.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    def bulk_create(self, rows: Iterable[dict]) -> list[SessionSetRecord]:
        """All or nothing: one commit for the whole batch."""
        items = [SessionSetRecord(**row) for row in rows]
        try:
            self.db.add_all(items)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return items
