from fastapi import APIRouter, Depends, HTTPException, status
from coursestore.auth import get_current_user_admin
from coursestore.dependencies import get_store
from coursestore.models.purchase import Purchase, PurchaseType
from coursestore.models.user import User
from coursestore.repositories.store import CourseStore
from coursestore.schemas.admin import ManualGrantRequest
from coursestore.schemas.profile import PurchaseHistoryItem
from coursestore.schemas.user import UserResponse, UserUpdate

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
def get_all_users(
    _admin: User = Depends(get_current_user_admin),
    store: CourseStore = Depends(get_store),
):
    """List all users (admin only), newest first."""
    return [UserResponse.from_user(u) for u in reversed(store.list_users())]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    _admin: User = Depends(get_current_user_admin),
    store: CourseStore = Depends(get_store),
):
    """Get one user by id (admin only)."""
    user = store.get_user(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.from_user(user)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    body: UserUpdate,
    admin: User = Depends(get_current_user_admin),
    store: CourseStore = Depends(get_store),
):
    """Update user (admin only): ban / unban, role, username."""
    if user_id == admin.id and (body.is_banned or (body.role is not None and body.role != admin.role)):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot ban or demote your own account.",
        )
    fields = body.model_dump(exclude_none=True)
    user = store.update_user(user_id, **fields)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.from_user(user)


@router.post("/{user_id}/grants", response_model=PurchaseHistoryItem, status_code=status.HTTP_201_CREATED)
def grant_course(
    user_id: str,
    body: ManualGrantRequest,
    _admin: User = Depends(get_current_user_admin),
    store: CourseStore = Depends(get_store),
):
    """Admin: give a user access to a course. An existing grant is kept as-is."""
    if not store.get_user(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    course = store.get_course(body.course_id)
    if not course:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    purchase = store.grant_access(Purchase(user_id=user_id, course_id=course.id, type=PurchaseType.MANUAL))
    return PurchaseHistoryItem(
        id=purchase.id,
        course_id=purchase.course_id,
        course_title=course.title,
        type=purchase.type,
        granted_at=purchase.granted_at,
    )
