from datetime import datetime
from pydantic import BaseModel, Field
from coursestore.models.course import Course, CourseFile, CourseFileType, FileSourceType


class CourseFileIn(BaseModel):
    id: str | None = None  # existing file id, kept on edit
    name: str
    type: CourseFileType | None = None  # guessed from the file name when omitted
    size: str = ""
    url: str = "#"
    data: str | None = None
    source_type: FileSourceType = FileSourceType.LINK


class CourseCreate(BaseModel):
    title: str
    description: str = ""
    price: int = Field(default=0, ge=0)
    thumbnail: str = ""
    banner: str | None = None
    sample_images: list[str] = Field(default_factory=list)
    unlock_ads_required: int = Field(default=5, ge=0)
    files: list[CourseFileIn] = Field(default_factory=list)


class CourseUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    price: int | None = Field(default=None, ge=0)
    thumbnail: str | None = None
    banner: str | None = None
    sample_images: list[str] | None = None
    unlock_ads_required: int | None = Field(default=None, ge=0)
    files: list[CourseFileIn] | None = None


class CourseListItem(BaseModel):
    id: str
    title: str
    price: int
    thumbnail: str
    file_count: int
    unlock_ads_required: int
    owned: bool
    created_at: datetime


class CourseDetail(BaseModel):
    """Files are only listed for users who own the course."""
    id: str
    title: str
    description: str
    price: int
    thumbnail: str
    banner: str | None
    sample_images: list[str]
    unlock_ads_required: int
    file_count: int
    files: list[CourseFile] | None = None
    owned: bool = False
    ads_watched: int = 0
    pending_request: bool = False
    created_at: datetime


class CourseResponse(Course):
    """Admin view: full record."""
