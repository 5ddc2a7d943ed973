from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, String, DateTime, func
from gymtrack.db import Base

class SessionRecord(Base):
    """One finished routine day ("Daily")."""
    __tablename__ = "session_records"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    day_reference: Mapped[str] = mapped_column(String(64), nullable=False)
    start_time: Mapped[DateTime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[DateTime] = mapped_column(DateTime(timezone=True), nullable=False)
    completion_percentage: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    sets = relationship("SessionSetRecord", back_populates="session_record",
                        cascade="all, delete-orphan", order_by="SessionSetRecord.id")
