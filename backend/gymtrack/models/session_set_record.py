from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, ForeignKey, String
from gymtrack.db import Base

class SessionSetRecord(Base):
    __tablename__ = "session_set_records"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    session_record_id: Mapped[int] = mapped_column(
        ForeignKey("session_records.id", ondelete="CASCADE"), index=True
    )
    exercise_id: Mapped[str] = mapped_column(String(64), nullable=False)
    set_index: Mapped[int] = mapped_column(Integer, nullable=False)
    # free-form: "12", "30s/lado", ...
    performed_reps: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    session_record = relationship("SessionRecord", back_populates="sets")
