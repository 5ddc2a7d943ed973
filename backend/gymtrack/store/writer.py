# gymtrack/store/writer.py
from __future__ import annotations
import asyncio
import logging
from typing import Any, Awaitable, Callable

from gymtrack.errors import PersistenceWriteError
from gymtrack.store.base import SessionStore

log = logging.getLogger(__name__)


class PersistenceWriter:
    """Fire-and-forget writes on top of a ``SessionStore``.

    Writes to the same key run strictly in the order they were issued; writes to
    different keys run independently. Failures are logged and dropped, there is
    no retry. Must be driven from inside a running event loop.
    """

    def __init__(self, store: SessionStore):
        self.store = store
        self._tails: dict[str, asyncio.Task] = {}

    def set(self, key: str, value: str) -> None:
        self._submit(key, lambda: self.store.set(key, value))

    def set_json(self, key: str, value: Any) -> None:
        self._submit(key, lambda: self.store.set_json(key, value))

    def remove(self, key: str) -> None:
        self._submit(key, lambda: self.store.remove(key))

    @property
    def pending(self) -> int:
        return len(self._tails)

    def _submit(self, key: str, op: Callable[[], Awaitable[None]]) -> None:
        prev = self._tails.get(key)
        task = asyncio.get_running_loop().create_task(self._run(key, prev, op))
        self._tails[key] = task
        task.add_done_callback(lambda t, key=key: self._forget(key, t))

    async def _run(self, key: str, prev: asyncio.Task | None, op: Callable[[], Awaitable[None]]) -> None:
        if prev is not None and not prev.done():
            await asyncio.gather(prev, return_exceptions=True)
        try:
            await op()
        except PersistenceWriteError as e:
            log.warning("persist failed key=%s: %s", key, e)

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._tails.get(key) is task:
            del self._tails[key]

    async def flush(self) -> None:
        """Wait until every write issued so far has been applied (or dropped)."""
        while self._tails:
            await asyncio.gather(*list(self._tails.values()))
