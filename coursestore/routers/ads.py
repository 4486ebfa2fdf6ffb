from fastapi import APIRouter, Depends, HTTPException, status
from coursestore.auth import require_not_banned
from coursestore.dependencies import get_store
from coursestore.models.user import User
from coursestore.repositories.store import CourseStore
from coursestore.schemas.ads import AdProgressResponse, AdWatchResponse
from coursestore.services.ads import AdProvider, get_ad_provider
from coursestore.services.unlock import watch_ad

router = APIRouter(prefix="/api/courses", tags=["ads"])


@router.get("/{course_id}/ads", response_model=AdProgressResponse)
def get_ad_progress(
    course_id: str,
    user: User = Depends(require_not_banned),
    store: CourseStore = Depends(get_store),
):
    """Ads watched so far for this course and how many unlock it."""
    course = store.get_course(course_id)
    if not course:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    count = store.get_ad_watch_count(user.id, course.id)
    return AdProgressResponse(
        count=count,
        required=course.unlock_ads_required,
        owned=store.user_has_access(user.id, course.id),
        message=f"{count} / {course.unlock_ads_required} Ads",
    )


@router.post("/{course_id}/ads/watch", response_model=AdWatchResponse)
async def watch_course_ad(
    course_id: str,
    user: User = Depends(require_not_banned),
    store: CourseStore = Depends(get_store),
    provider: AdProvider = Depends(get_ad_provider),
):
    """Play one ad. A completed ad counts +1; reaching the course threshold unlocks it."""
    course = store.get_course(course_id)
    if not course:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    outcome, result = await watch_ad(provider, store, user.id, course)
    if not outcome.completed:
        message = "Ad was not completed. Please try again."
    elif result.unlocked_now:
        message = "Congratulations! You've unlocked this course!"
    else:
        message = "Ad watched successfully! (+1)"
    return AdWatchResponse(
        completed=outcome.completed,
        provider=outcome.provider,
        count=result.count,
        required=result.required,
        owned=result.owned,
        unlocked_now=result.unlocked_now,
        message=message,
    )
