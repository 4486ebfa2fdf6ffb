"""
Key-value storage over the storage_entries table. Same contract as browser local storage:
string keys, string values, a total size quota. Sizes are counted in characters of key + value.
Writes are staged on the session; the caller decides when to commit or roll back.
"""
from sqlalchemy import func
from sqlalchemy.orm import Session

from coursestore.errors import StorageFullError
from coursestore.models.storage_entry import StorageEntry


class KeyValueStorage:
    def __init__(self, db: Session, namespace: str = "", quota: int | None = None):
        self._db = db
        self._namespace = namespace
        self._quota = quota

    def full_key(self, name: str) -> str:
        return f"{self._namespace}_{name}" if self._namespace else name

    def get_item(self, name: str) -> str | None:
        entry = self._db.get(StorageEntry, self.full_key(name))
        return entry.value if entry is not None else None

    def set_item(self, name: str, value: str) -> None:
        key = self.full_key(name)
        if self._quota is not None:
            needed = self._used_excluding(key) + len(key) + len(value)
            if needed > self._quota:
                raise StorageFullError(key, needed, self._quota)
        entry = self._db.get(StorageEntry, key)
        if entry is None:
            self._db.add(StorageEntry(key=key, value=value))
        else:
            entry.value = value
        self._db.flush()

    def remove_item(self, name: str) -> None:
        entry = self._db.get(StorageEntry, self.full_key(name))
        if entry is not None:
            self._db.delete(entry)
            self._db.flush()

    def keys(self) -> list[str]:
        rows = self._db.query(StorageEntry.key).order_by(StorageEntry.key).all()
        return [r[0] for r in rows]

    def used_bytes(self) -> int:
        return self._used_excluding(None)

    def _used_excluding(self, key: str | None) -> int:
        q = self._db.query(
            func.coalesce(func.sum(func.length(StorageEntry.key) + func.length(StorageEntry.value)), 0)
        )
        if key is not None:
            q = q.filter(StorageEntry.key != key)
        return int(q.scalar() or 0)

    def refresh(self) -> None:
        """Drop cached entries so the next read sees the latest committed values."""
        self._db.expire_all()

    def commit(self) -> None:
        self._db.commit()

    def rollback(self) -> None:
        self._db.rollback()
