# gymtrack/store/base.py
from __future__ import annotations
import json
from abc import ABC, abstractmethod
from typing import Any, Optional

from gymtrack.errors import PersistenceReadError


class SessionStore(ABC):
    """Async key/value persistence for session-local state.

    Adapters raise ``PersistenceReadError`` / ``PersistenceWriteError``; callers
    decide whether that matters. ``get`` returns ``None`` for a missing key.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]: ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    async def remove(self, key: str) -> None: ...

    async def get_json(self, key: str) -> Optional[Any]:
        raw = await self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise PersistenceReadError(f"{key}: stored value is not JSON") from e

    async def set_json(self, key: str, value: Any) -> None:
        await self.set(key, json.dumps(value))
