from datetime import datetime
from pydantic import BaseModel
from coursestore.models.user import User, UserRole, Theme


class UserResponse(BaseModel):
    """Public view of a user. The password hash never leaves the store."""
    id: str
    username: str
    email: str
    role: UserRole
    is_banned: bool
    theme: Theme
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            is_banned=user.is_banned,
            theme=user.theme,
            created_at=user.created_at,
        )


class UserUpdate(BaseModel):
    """Admin update (fields optional)."""
    username: str | None = None
    role: UserRole | None = None
    is_banned: bool | None = None


class TokenPayload(BaseModel):
    sub: str  # user id
    email: str
    exp: int
    type: str = "access"


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str
    theme: Theme = Theme.PIZZA


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ThemeUpdate(BaseModel):
    theme: Theme


class SetPasswordRequest(BaseModel):
    new_password: str
