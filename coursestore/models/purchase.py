import uuid
import enum
from datetime import datetime, timezone
from pydantic import BaseModel, Field


class PurchaseType(str, enum.Enum):
    BUY = "buy"
    AD_UNLOCK = "ad_unlock"
    MANUAL = "manual"


class Purchase(BaseModel):
    """Access grant. At most one per (user_id, course_id)."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    course_id: str
    granted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    type: PurchaseType
