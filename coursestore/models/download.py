import uuid
from datetime import datetime, timezone
from pydantic import BaseModel, Field


class DownloadRecord(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    file_name: str
    course_title: str  # snapshot at download time
    downloaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
