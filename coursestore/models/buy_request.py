"""Buy request: user uploads payment proof (screenshot), admin approve → manual grant."""
import uuid
import enum
from datetime import datetime, timezone
from pydantic import BaseModel, Field


class BuyRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentMethod(str, enum.Enum):
    BKASH = "Bkash"
    NAGAD = "Nagad"


class BuyRequest(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    course_id: str
    screenshot: str  # encoded image, stored as-is
    status: BuyRequestStatus = BuyRequestStatus.PENDING
    method: PaymentMethod
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
