from __future__ import annotations
from typing import Optional

from gymtrack.store.base import SessionStore


class InMemorySessionStore(SessionStore):
    """Dict-backed store; lives as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)
