import uuid
import enum
from datetime import datetime, timezone
from pydantic import BaseModel, Field


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class Theme(str, enum.Enum):
    PIZZA = "pizza"
    LEMON = "lemon"
    DARK = "dark"


class User(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    username: str
    email: str
    password_hash: str
    role: UserRole = UserRole.USER
    is_banned: bool = False
    theme: Theme = Theme.PIZZA
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
