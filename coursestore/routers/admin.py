from fastapi import APIRouter, Depends
from coursestore.auth import get_current_user_admin
from coursestore.dependencies import get_store
from coursestore.models.user import User
from coursestore.repositories.store import CourseStore
from coursestore.schemas.admin import StatsResponse
from coursestore.services import catalog

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    _admin: User = Depends(get_current_user_admin),
    store: CourseStore = Depends(get_store),
):
    """Dashboard numbers: users, grants, revenue, requests waiting for review."""
    return catalog.stats(store)
