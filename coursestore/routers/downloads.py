from fastapi import APIRouter, Depends, HTTPException, status
from coursestore.auth import require_not_banned
from coursestore.dependencies import get_store
from coursestore.models.user import User
from coursestore.repositories.store import CourseStore
from coursestore.schemas.profile import DownloadResponse
from coursestore.services.downloads import download_file

router = APIRouter(prefix="/api/courses", tags=["downloads"])


@router.post("/{course_id}/files/{file_id}/download", response_model=DownloadResponse)
def download_course_file(
    course_id: str,
    file_id: str,
    user: User = Depends(require_not_banned),
    store: CourseStore = Depends(get_store),
):
    """Owners only. Logs the download, then returns a link or inline content."""
    course = store.get_course(course_id)
    if not course:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    if not store.user_has_access(user.id, course.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unlock this course to download its files.")
    file = next((f for f in course.files if f.id == file_id), None)
    if not file:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return download_file(store, user.id, course, file)
