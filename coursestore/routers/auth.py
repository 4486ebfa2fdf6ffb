from fastapi import APIRouter, Depends, HTTPException, status
from coursestore.auth import (
    BANNED_MESSAGE,
    create_access_token,
    get_current_user,
    hash_password,
    verify_credential,
)
from coursestore.config import get_settings
from coursestore.dependencies import get_store
from coursestore.errors import DuplicateEntityError
from coursestore.models.user import User, UserRole
from coursestore.repositories.store import CourseStore
from coursestore.schemas.user import (
    LoginRequest,
    RegisterRequest,
    SetPasswordRequest,
    ThemeUpdate,
    TokenResponse,
    UserResponse,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _check_password_length(password: str) -> None:
    min_length = get_settings().password_min_length
    if len(password) < min_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {min_length} characters",
        )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, store: CourseStore = Depends(get_store)):
    """Create a user account and log it in."""
    username = body.username.strip()
    email = body.email.strip()
    if not username or not email or not body.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required")
    _check_password_length(body.password)
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(body.password),
        role=UserRole.USER,
        theme=body.theme,
    )
    try:
        store.create_user(user)
    except DuplicateEntityError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    token = create_access_token(user.id, user.email)
    return TokenResponse(access_token=token, user=UserResponse.from_user(user))


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, store: CourseStore = Depends(get_store)):
    """Login with email and password."""
    user = store.find_user_by_email(body.email.strip())
    if not user or not verify_credential(user, body.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    if user.is_banned:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=BANNED_MESSAGE)
    token = create_access_token(user.id, user.email)
    return TokenResponse(access_token=token, user=UserResponse.from_user(user))


@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    return UserResponse.from_user(user)


@router.put("/me/theme", response_model=UserResponse)
def set_theme(
    body: ThemeUpdate,
    user: User = Depends(get_current_user),
    store: CourseStore = Depends(get_store),
):
    """Persist the preferred display theme."""
    updated = store.update_user(user.id, theme=body.theme)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.from_user(updated)


@router.put("/me/password")
def set_password(
    body: SetPasswordRequest,
    user: User = Depends(get_current_user),
    store: CourseStore = Depends(get_store),
):
    """Set or change password."""
    _check_password_length(body.new_password)
    store.update_user(user.id, password_hash=hash_password(body.new_password))
    return {"message": "Password updated successfully"}
