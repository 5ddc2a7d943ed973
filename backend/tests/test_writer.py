import asyncio
import logging

from engine_helpers import BrokenWriteStore
from gymtrack.store import InMemorySessionStore, PersistenceWriter


class SlowStore(InMemorySessionStore):
    def __init__(self, delays):
        super().__init__()
        self.delays = delays
        self.applied = []

    async def set(self, key, value):
        await asyncio.sleep(self.delays.get(value, 0))
        self.applied.append((key, value))
        await super().set(key, value)

def test_same_key_writes_apply_in_issue_order():
    async def scenario():
        store = SlowStore({"first": 0.05})
        writer = PersistenceWriter(store)
        writer.set("k1", "first")
        writer.set("k1", "second")
        writer.set("k2", "other")
        await writer.flush()
        assert store.data == {"k1": "second", "k2": "other"}
        assert store.applied.index(("k1", "first")) < store.applied.index(("k1", "second"))
        # k2 did not wait behind the slow k1 write
        assert store.applied.index(("k2", "other")) < store.applied.index(("k1", "first"))
        assert writer.pending == 0
    asyncio.run(scenario())

def test_remove_after_set_wins():
    async def scenario():
        store = SlowStore({"v": 0.02})
        writer = PersistenceWriter(store)
        writer.set("k", "v")
        writer.remove("k")
        await writer.flush()
        assert "k" not in store.data
    asyncio.run(scenario())

def test_write_failures_are_logged_not_raised(caplog):
    async def scenario():
        writer = PersistenceWriter(BrokenWriteStore())
        writer.set_json("k", {"a": 1})
        writer.remove("k")
        await writer.flush()
        assert writer.pending == 0
    with caplog.at_level(logging.WARNING, logger="gymtrack.store.writer"):
        asyncio.run(scenario())
    assert sum("persist failed key=k" in r.getMessage() for r in caplog.records) == 2
