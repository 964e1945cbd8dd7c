"""Data access layer for persisted console state"""

import json
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from underwriter_console.infrastructure.database.models import StorageEntry


class StorageRepository:
    """JSON values stored under string keys"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[Any]:
        entry = self.db.get(StorageEntry, key)
        if entry is None:
            return None
        return json.loads(entry.value)

    def get_many(self, keys: Iterable[str]) -> Dict[str, Any]:
        """Fetch several keys at once; missing keys are left out"""
        keys = list(keys)
        entries = self.db.query(StorageEntry).filter(StorageEntry.key.in_(keys)).all()
        return {entry.key: json.loads(entry.value) for entry in entries}

    def put_many(self, values: Dict[str, Any]) -> None:
        """Upsert several keys (caller commits)"""
        for key, value in values.items():
            entry = self.db.get(StorageEntry, key)
            if entry is None:
                self.db.add(StorageEntry(key=key, value=json.dumps(value)))
            else:
                entry.value = json.dumps(value)
        self.db.flush()

    def delete_many(self, keys: Iterable[str]) -> int:
        """Delete several keys (caller commits); returns how many existed"""
        return (
            self.db.query(StorageEntry)
            .filter(StorageEntry.key.in_(list(keys)))
            .delete(synchronize_session=False)
        )
