from datetime import datetime
from pydantic import BaseModel
from coursestore.models.purchase import PurchaseType
from coursestore.schemas.user import UserResponse


class PurchaseHistoryItem(BaseModel):
    id: str
    course_id: str
    course_title: str  # "Unknown Course" when the course was deleted
    type: PurchaseType
    granted_at: datetime


class DownloadHistoryItem(BaseModel):
    id: str
    file_name: str
    course_title: str
    downloaded_at: datetime


class ProfileResponse(BaseModel):
    user: UserResponse
    purchases: list[PurchaseHistoryItem]
    downloads: list[DownloadHistoryItem]


class DownloadResponse(BaseModel):
    """How the client should deliver the file: open a link, or save the inline content."""
    file_name: str
    mode: str  # "link" | "inline"
    url: str | None = None
    content: str | None = None
    media_type: str | None = None
