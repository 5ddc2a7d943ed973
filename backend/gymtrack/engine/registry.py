# gymtrack/engine/registry.py
from __future__ import annotations
from datetime import datetime
from typing import Callable, Optional

from gymtrack.engine.locks import SessionLockManager, check_day
from gymtrack.engine.ports import ExerciseCatalog, SubmissionBackend
from gymtrack.engine.session import SessionEngine
from gymtrack.engine.types import utcnow
from gymtrack.store.base import SessionStore
from gymtrack.store.writer import PersistenceWriter


class EngineRegistry:
    """At most one live SessionEngine per routine template."""

    def __init__(
        self,
        store: SessionStore,
        catalog: ExerciseCatalog,
        backend: SubmissionBackend,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.catalog = catalog
        self.backend = backend
        self.clock = clock
        self.writer = PersistenceWriter(store)
        self.locks = SessionLockManager(store, self.writer, clock)
        self._engines: dict[str, SessionEngine] = {}

    def get(self, template_id: str) -> Optional[SessionEngine]:
        return self._engines.get(template_id)

    async def select_day(self, template_id: str, day_number: int, *, user_id: Optional[str] = None) -> SessionEngine:
        """
        Switch the template to ``day_number``. Raises ``LockConflictError`` while
        another day of the template is still open; the current engine stays.
        """
        check_day(day_number)
        current = self._engines.get(template_id)
        if current is not None:
            await current.flush()
            if current.day_number == day_number and not current.closed:
                if user_id is not None:
                    current.coordinator.user_id = user_id
                return current

        await self.locks.ensure_can_switch(template_id, day_number)

        if current is not None:
            await current.close()
        engine = await SessionEngine.load(
            template_id, day_number,
            catalog=self.catalog, store=self.store, backend=self.backend,
            writer=self.writer, locks=self.locks, user_id=user_id, clock=self.clock,
        )
        self._engines[template_id] = engine
        return engine

    async def close(self) -> None:
        for engine in list(self._engines.values()):
            await engine.close()
        self._engines.clear()
        await self.writer.flush()
