from fastapi import Depends
from sqlalchemy.orm import Session

from coursestore.config import get_settings
from coursestore.database import get_db
from coursestore.repositories.storage import KeyValueStorage
from coursestore.repositories.store import CourseStore


def build_store(db: Session) -> CourseStore:
    settings = get_settings()
    return CourseStore(
        KeyValueStorage(db, namespace=settings.storage_namespace, quota=settings.storage_quota_bytes)
    )


def get_store(db: Session = Depends(get_db)) -> CourseStore:
    """Request-scoped store. Override this dependency to swap the backend (tests, remote store)."""
    return build_store(db)
