from fastapi import APIRouter, Depends, HTTPException, Response, status
from coursestore.auth import get_current_user_admin, get_optional_user
from coursestore.dependencies import get_store
from coursestore.models.course import Course, CourseFile
from coursestore.models.user import User
from coursestore.repositories.store import CourseStore
from coursestore.schemas.course import (
    CourseCreate,
    CourseDetail,
    CourseFileIn,
    CourseListItem,
    CourseResponse,
    CourseUpdate,
)
from coursestore.services import catalog
from coursestore.services.downloads import guess_file_type

router = APIRouter(prefix="/api/courses", tags=["courses"])


def _to_course_file(f: CourseFileIn) -> CourseFile:
    extra = {"id": f.id} if f.id else {}
    return CourseFile(
        **extra,
        name=f.name,
        type=f.type or guess_file_type(f.name),
        size=f.size,
        url=f.url or "#",
        data=f.data,
        source_type=f.source_type,
    )


@router.get("", response_model=list[CourseListItem])
def list_courses(
    search: str = "",
    owned: bool = False,
    user: User | None = Depends(get_optional_user),
    store: CourseStore = Depends(get_store),
):
    """Browse courses. ?owned=true lists the caller's library (login required)."""
    if owned and not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return catalog.list_courses(store, user, search=search, owned_only=owned)


@router.get("/admin", response_model=list[CourseResponse])
def admin_list_courses(
    _admin: User = Depends(get_current_user_admin),
    store: CourseStore = Depends(get_store),
):
    """Admin: full course records, files included."""
    return [CourseResponse(**c.model_dump()) for c in store.list_courses()]


@router.get("/{course_id}", response_model=CourseDetail)
def get_course(
    course_id: str,
    user: User | None = Depends(get_optional_user),
    store: CourseStore = Depends(get_store),
):
    """Course page with the caller's access state. Files only for owners."""
    course = store.get_course(course_id)
    if not course:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    return catalog.course_detail(store, course, user)


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(
    body: CourseCreate,
    _admin: User = Depends(get_current_user_admin),
    store: CourseStore = Depends(get_store),
):
    title = body.title.strip()
    if not title:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title is required")
    course = Course(
        title=title,
        description=body.description or "No description",
        price=body.price,
        thumbnail=body.thumbnail,
        banner=body.banner,
        sample_images=body.sample_images,
        unlock_ads_required=body.unlock_ads_required,
        files=[_to_course_file(f) for f in body.files],
    )
    store.create_course(course)
    return CourseResponse(**course.model_dump())


@router.patch("/{course_id}", response_model=CourseResponse)
def update_course(
    course_id: str,
    body: CourseUpdate,
    _admin: User = Depends(get_current_user_admin),
    store: CourseStore = Depends(get_store),
):
    # null means "leave unchanged", except banner which can be cleared
    fields = {
        k: v
        for k, v in body.model_dump(exclude_unset=True, exclude={"files"}).items()
        if v is not None or k == "banner"
    }
    if "title" in fields and not fields["title"].strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title is required")
    if body.files is not None:
        fields["files"] = [_to_course_file(f) for f in body.files]
    course = store.update_course(course_id, **fields)
    if not course:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    return CourseResponse(**course.model_dump())


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course(
    course_id: str,
    _admin: User = Depends(get_current_user_admin),
    store: CourseStore = Depends(get_store),
):
    """Hard delete. Existing grants and requests for the course stay."""
    if not store.delete_course(course_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
