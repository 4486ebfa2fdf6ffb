import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from coursestore.auth import hash_password
from coursestore.database import Base
from coursestore.dependencies import get_store
from coursestore.main import app
from coursestore.models import StorageEntry  # noqa: F401 - register table
from coursestore.models.course import Course, CourseFile, CourseFileType
from coursestore.models.user import User, UserRole
from coursestore.repositories.storage import KeyValueStorage
from coursestore.repositories.store import CourseStore
from coursestore.services.ads import SimulatedAdProvider, get_ad_provider

NAMESPACE = "test"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-secret"


async def _no_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_store(db):
    def _make(quota: int | None = None) -> CourseStore:
        return CourseStore(KeyValueStorage(db, namespace=NAMESPACE, quota=quota))
    return _make


@pytest.fixture
def store(make_store) -> CourseStore:
    return make_store()


@pytest.fixture
def open_store(session_factory):
    """Fresh session per call, so reads see what the API committed."""
    sessions = []

    def _open(quota: int | None = None) -> CourseStore:
        session = session_factory()
        sessions.append(session)
        return CourseStore(KeyValueStorage(session, namespace=NAMESPACE, quota=quota))

    yield _open
    for s in sessions:
        s.close()


@pytest.fixture
def make_client(session_factory):
    def _make(quota: int | None = None) -> TestClient:
        def override_get_store():
            session = session_factory()
            try:
                yield CourseStore(KeyValueStorage(session, namespace=NAMESPACE, quota=quota))
            finally:
                session.close()

        app.dependency_overrides[get_store] = override_get_store
        app.dependency_overrides[get_ad_provider] = lambda: SimulatedAdProvider(0, sleep=_no_sleep)
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def seeded(open_store):
    """Admin account + courses c1 (1500, 5 ads) and c2 (2000, 3 ads)."""
    store = open_store()
    store.create_user(
        User(
            id="admin-1",
            username="Admin",
            email=ADMIN_EMAIL,
            password_hash=hash_password(ADMIN_PASSWORD),
            role=UserRole.ADMIN,
        )
    )
    store.create_course(
        Course(
            id="c1",
            title="Complete PHP Mastery 2024",
            price=1500,
            unlock_ads_required=5,
            files=[CourseFile(id="f1", name="Intro.mp4", type=CourseFileType.VIDEO, size="50MB")],
        )
    )
    store.create_course(
        Course(
            id="c2",
            title="React Native for Beginners",
            price=2000,
            unlock_ads_required=3,
            files=[
                CourseFile(id="f3", name="Guide.pdf", size="5MB", url="https://example.com/guide.pdf"),
            ],
        )
    )
    return store


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client, seeded) -> dict:
    res = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert res.status_code == 200
    return auth_headers(res.json()["access_token"])


@pytest.fixture
def register(client):
    def _register(username: str, email: str | None = None, password: str = "secret123") -> tuple[str, dict]:
        res = client.post(
            "/api/auth/register",
            json={"username": username, "email": email or f"{username}@example.com", "password": password},
        )
        assert res.status_code == 201, res.text
        body = res.json()
        return body["user"]["id"], auth_headers(body["access_token"])
    return _register
