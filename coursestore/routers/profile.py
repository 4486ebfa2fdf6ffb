from fastapi import APIRouter, Depends
from coursestore.auth import get_current_user
from coursestore.dependencies import get_store
from coursestore.models.user import User
from coursestore.repositories.store import CourseStore
from coursestore.schemas.profile import ProfileResponse
from coursestore.services import catalog

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
def get_profile(
    user: User = Depends(get_current_user),
    store: CourseStore = Depends(get_store),
):
    """Access history and download history, newest first."""
    return catalog.profile(store, user)
