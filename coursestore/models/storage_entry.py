"""One row per storage key. The value is the JSON text of a whole collection."""
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from coursestore.database import Base


class StorageEntry(Base):
    __tablename__ = "storage_entries"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False, default="[]")
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
