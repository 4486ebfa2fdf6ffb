from datetime import datetime
from pydantic import BaseModel
from coursestore.models.buy_request import BuyRequestStatus, PaymentMethod


class BuyRequestCreate(BaseModel):
    """Payment proof: screenshot as an encoded image string (e.g. data URL)."""
    screenshot: str
    method: PaymentMethod


class BuyRequestResponse(BaseModel):
    id: str
    user_id: str
    course_id: str
    course_title: str
    status: BuyRequestStatus
    method: PaymentMethod
    created_at: datetime


class BuyRequestAdminItem(BuyRequestResponse):
    """Admin list: includes requester info and the screenshot to verify."""
    user_email: str
    username: str
    screenshot: str


class BuyRequestReview(BaseModel):
    """Body for admin approve/reject."""
    status: BuyRequestStatus  # approved or rejected
