from datetime import datetime, timezone
from pydantic import BaseModel, Field


class AdWatch(BaseModel):
    """Ad views per (user_id, course_id). Count only goes up."""
    user_id: str
    course_id: str
    count: int = Field(default=0, ge=0)
    last_watched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
