from gymtrack.store.base import SessionStore
from gymtrack.store.memory import InMemorySessionStore
from gymtrack.store.sql import SqlSessionStore
from gymtrack.store.writer import PersistenceWriter

__all__ = ["SessionStore", "InMemorySessionStore", "SqlSessionStore", "PersistenceWriter"]
