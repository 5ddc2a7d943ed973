# gymtrack/adapters/catalog.py
from __future__ import annotations
import asyncio
from typing import Callable, Iterable

from sqlalchemy.orm import Session

from gymtrack.engine.types import ExerciseAssignment
from gymtrack.repositories.routine_day_repo import RoutineDayRepository


class SqlExerciseCatalog:
    """Reads prescribed exercises from the ``routine_days`` table."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _list(self, template_id: str, day_number: int) -> list[ExerciseAssignment]:
        with self.session_factory() as db:
            return [
                ExerciseAssignment(
                    id=row.id,
                    day_number=row.day_number,
                    planned_sets=row.planned_sets or 0,
                    planned_reps=row.planned_reps or "",
                    category_id=row.category_id,
                    exercise_ref=row.exercise_ref,
                )
                for row in RoutineDayRepository(db).list_for_day(template_id, day_number)
            ]

    async def list_for_day(self, template_id: str, day_number: int) -> list[ExerciseAssignment]:
        return await asyncio.to_thread(self._list, template_id, day_number)


class InMemoryCatalog:
    def __init__(self, days: dict[tuple[str, int], Iterable[ExerciseAssignment]] | None = None):
        self.days = {k: list(v) for k, v in (days or {}).items()}

    async def list_for_day(self, template_id: str, day_number: int) -> list[ExerciseAssignment]:
        return list(self.days.get((template_id, day_number), []))
