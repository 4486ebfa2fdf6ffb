import uuid
import enum
from datetime import datetime, timezone
from pydantic import BaseModel, Field


class CourseFileType(str, enum.Enum):
    VIDEO = "video"
    PDF = "pdf"
    ZIP = "zip"


class FileSourceType(str, enum.Enum):
    LINK = "link"
    UPLOAD = "upload"


class CourseFile(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    type: CourseFileType = CourseFileType.PDF
    size: str = ""  # human readable label, e.g. "50MB"
    url: str = "#"  # "#" = placeholder, no real content yet
    data: str | None = None  # small uploads embedded as base64
    source_type: FileSourceType = FileSourceType.LINK


class Course(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    description: str = ""
    price: int = Field(default=0, ge=0)  # 0 = free
    thumbnail: str = ""
    banner: str | None = None
    sample_images: list[str] = Field(default_factory=list)
    unlock_ads_required: int = Field(default=5, ge=0)
    files: list[CourseFile] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
