"""
File delivery for course owners. Every download is logged (DownloadRecord) before delivery.
- url "#" or empty: placeholder file, client saves a small text file.
- embedded data: client saves the inline content.
- anything else: client opens the link.
"""
from coursestore.models.course import Course, CourseFile, CourseFileType
from coursestore.models.download import DownloadRecord
from coursestore.repositories.store import CourseStore
from coursestore.schemas.profile import DownloadResponse

PLACEHOLDER_URLS = ("", "#")


def guess_file_type(name: str) -> CourseFileType:
    lower = name.lower()
    if lower.endswith(".mp4"):
        return CourseFileType.VIDEO
    if lower.endswith(".zip"):
        return CourseFileType.ZIP
    return CourseFileType.PDF


def build_download(course: Course, file: CourseFile) -> DownloadResponse:
    if file.data:
        return DownloadResponse(file_name=file.name, mode="inline", content=file.data)
    if file.url in PLACEHOLDER_URLS:
        return DownloadResponse(
            file_name=file.name,
            mode="inline",
            content=f"This is the demo content of {file.name}",
            media_type="text/plain",
        )
    return DownloadResponse(file_name=file.name, mode="link", url=file.url)


def download_file(store: CourseStore, user_id: str, course: Course, file: CourseFile) -> DownloadResponse:
    """Caller checks access. The record keeps the course title as it is now."""
    store.record_download(DownloadRecord(user_id=user_id, file_name=file.name, course_title=course.title))
    return build_download(course, file)
