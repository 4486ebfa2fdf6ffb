import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from coursestore.database import Base
from coursestore.models import StorageEntry  # noqa: F401 - register table
from coursestore.models.user import User
from coursestore.repositories.storage import KeyValueStorage
from coursestore.repositories.store import CourseStore


@pytest.fixture
def file_sessions(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'store.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    engine.dispose()


def run_threads(count: int, target) -> list[Exception]:
    errors: list[Exception] = []

    def guarded(n: int):
        try:
            target(n)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=guarded, args=(n,)) for n in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return errors


def test_parallel_registrations_are_all_kept(file_sessions):
    def register_ten(n: int):
        session = file_sessions()
        try:
            store = CourseStore(KeyValueStorage(session, namespace="test"))
            for i in range(10):
                store.create_user(User(username=f"u{n}-{i}", email=f"u{n}-{i}@example.com", password_hash="x"))
        finally:
            session.close()

    assert run_threads(8, register_ten) == []

    session = file_sessions()
    users = CourseStore(KeyValueStorage(session, namespace="test")).list_users()
    session.close()
    assert len(users) == 80
    assert len({u.email for u in users}) == 80


def test_parallel_ad_watches_count_every_watch(file_sessions):
    returned: list[int] = []
    returned_lock = threading.Lock()

    def watch_ten(n: int):
        session = file_sessions()
        try:
            store = CourseStore(KeyValueStorage(session, namespace="test"))
            for _ in range(10):
                count = store.increment_ad_watch("bob", "c2")
                with returned_lock:
                    returned.append(count)
        finally:
            session.close()

    assert run_threads(4, watch_ten) == []

    session = file_sessions()
    final = CourseStore(KeyValueStorage(session, namespace="test")).get_ad_watch_count("bob", "c2")
    session.close()
    assert final == 40
    assert sorted(returned) == list(range(1, 41))


def test_store_sees_writes_from_other_sessions(file_sessions):
    first, second = file_sessions(), file_sessions()
    a = CourseStore(KeyValueStorage(first, namespace="test"))
    b = CourseStore(KeyValueStorage(second, namespace="test"))

    a.increment_ad_watch("bob", "c1")
    assert b.get_ad_watch_count("bob", "c1") == 1
    a.increment_ad_watch("bob", "c1")
    assert b.increment_ad_watch("bob", "c1") == 3
    first.close()
    second.close()
