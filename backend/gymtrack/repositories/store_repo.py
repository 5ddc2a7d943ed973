from __future__ import annotations
from typing import Optional
from sqlalchemy import delete
from sqlalchemy.orm import Session
from gymtrack.models import StoreEntry

class StoreEntryRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[StoreEntry]:
        return self.db.get(StoreEntry, key)

    def put(self, key: str, value: str) -> StoreEntry:
        entry = self.get(key)
        if entry is None:
            entry = StoreEntry(key=key, value=value)
            self.db.add(entry)
        else:
            entry.value = value
        self.db.commit()
        return entry

    def delete(self, key: str) -> None:
        self.db.execute(delete(StoreEntry).where(StoreEntry.key == key))
        self.db.commit()
