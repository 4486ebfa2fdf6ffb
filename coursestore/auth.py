from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from coursestore.config import get_settings
from coursestore.dependencies import get_store
from coursestore.models.user import User, UserRole
from coursestore.repositories.store import CourseStore
from coursestore.schemas.user import TokenPayload

security = HTTPBearer(auto_error=False)

# Use Argon2 for password hashing
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)

def verify_credential(user: User, password: str) -> bool:
    """The only way a login password is checked against a stored user."""
    return verify_password(password, user.password_hash)

def create_access_token(user_id: str, email: str) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.access_token_expire_minutes
    )
    payload = {
        "sub": user_id,
        "email": email,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)

def decode_token(token: str) -> TokenPayload | None:
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
        return TokenPayload(
            sub=payload["sub"],
            email=payload["email"],
            exp=payload["exp"],
        )
    except (JWTError, KeyError):
        return None


def _resolve_user(
    credentials: HTTPAuthorizationCredentials | None,
    store: CourseStore,
) -> User | None:
    if not credentials:
        return None
    payload = decode_token(credentials.credentials)
    if not payload:
        return None
    return store.get_user(payload.sub)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    store: CourseStore = Depends(get_store),
) -> User:
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(credentials.credentials)

    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = store.get_user(payload.sub)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return user


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    store: CourseStore = Depends(get_store),
) -> User | None:
    """Browsing works without login; a bad or missing token just means anonymous."""
    return _resolve_user(credentials, store)


# Uniform message for banned users (login and every user action)
BANNED_MESSAGE = "This account has been banned."


def require_not_banned(user: User = Depends(get_current_user)) -> User:
    """User must be logged in and not banned."""
    if user.is_banned:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=BANNED_MESSAGE,
        )
    return user


def get_current_user_admin(
    user: User = Depends(require_not_banned),
) -> User:
    """User must be logged in, not banned, and have admin role."""
    if user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admin can access.",
        )
    return user
