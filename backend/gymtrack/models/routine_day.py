from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String
from gymtrack.db import Base

class RoutineDay(Base):
    """Exercise prescribed for one day of a routine template."""
    __tablename__ = "routine_days"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    template_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    day_number: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    planned_sets: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    planned_reps: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    category_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    exercise_ref: Mapped[str | None] = mapped_column(String(64), nullable=True)
