"""
Course store: six JSON collections in key-value storage, plus the operations that keep their invariants.
Every operation is a read-modify-write of whole collections. Reads never raise on bad data
(malformed collection → empty list). Writes are all-or-nothing per operation: on failure the
transaction is rolled back and StorageWriteError is raised.
Lookups by unknown id return None.
Mutating operations hold a process-wide lock from first read to commit, so concurrent
requests never overwrite each other's collection writes.
"""
import functools
import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from coursestore.errors import (
    DuplicateEntityError,
    InvalidTransitionError,
    StorageFullError,
    StorageWriteError,
)
from coursestore.models.ad_watch import AdWatch
from coursestore.models.buy_request import BuyRequest, BuyRequestStatus
from coursestore.models.course import Course
from coursestore.models.download import DownloadRecord
from coursestore.models.purchase import Purchase, PurchaseType
from coursestore.models.user import User
from coursestore.repositories.storage import KeyValueStorage

logger = logging.getLogger(__name__)

USERS = "users"
COURSES = "courses"
REQUESTS = "requests"
PURCHASES = "purchases"
AD_WATCHES = "ad_watches"
DOWNLOADS = "downloads"

COLLECTIONS: dict[str, type[BaseModel]] = {
    USERS: User,
    COURSES: Course,
    REQUESTS: BuyRequest,
    PURCHASES: Purchase,
    AD_WATCHES: AdWatch,
    DOWNLOADS: DownloadRecord,
}

M = TypeVar("M", bound=BaseModel)

# One writer at a time across all CourseStore instances in this process
_write_lock = threading.RLock()


def _serialized(method):
    """Run a read-modify-write operation under the write lock, on fresh data."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with _write_lock:
            self._storage.refresh()
            return method(self, *args, **kwargs)
    return wrapper


def _merge(record: M, fields: dict[str, Any]) -> M:
    """Shallow merge of fields into record. The id is never overwritten."""
    data = record.model_dump()
    data.update(fields)
    if "id" in data:
        data["id"] = record.id
    return type(record).model_validate(data)


class CourseStore:
    def __init__(self, storage: KeyValueStorage):
        self._storage = storage

    # ---------- collection I/O ----------

    def _read(self, name: str) -> list:
        raw = self._storage.get_item(name)
        if raw is None:
            return []
        model = COLLECTIONS[name]
        try:
            return TypeAdapter(list[model]).validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning("Malformed %s collection, reading as empty: %s", name, e, exc_info=False)
            return []

    def _save(self, collections: dict[str, list]) -> None:
        """Write one or more collections in a single transaction."""
        try:
            for name, records in collections.items():
                payload = json.dumps([r.model_dump(mode="json") for r in records])
                self._storage.set_item(name, payload)
            self._storage.commit()
        except (StorageFullError, SQLAlchemyError) as e:
            self._storage.rollback()
            logger.warning("Store write failed for %s: %s", ", ".join(collections), e, exc_info=False)
            raise StorageWriteError(
                "Could not save changes: storage is full or unavailable. Nothing was changed."
            ) from e

    # ---------- users ----------

    def list_users(self) -> list[User]:
        return self._read(USERS)

    def get_user(self, user_id: str) -> User | None:
        return next((u for u in self._read(USERS) if u.id == user_id), None)

    def find_user_by_email(self, email: str) -> User | None:
        return next((u for u in self._read(USERS) if u.email == email), None)

    @_serialized
    def create_user(self, user: User) -> User:
        users = self._read(USERS)
        if any(u.email == user.email for u in users):
            raise DuplicateEntityError(f"Email already registered: {user.email}")
        users.append(user)
        self._save({USERS: users})
        return user

    @_serialized
    def update_user(self, user_id: str, **fields: Any) -> User | None:
        users = self._read(USERS)
        for i, u in enumerate(users):
            if u.id == user_id:
                users[i] = _merge(u, fields)
                self._save({USERS: users})
                return users[i]
        return None

    # ---------- courses ----------

    def list_courses(self) -> list[Course]:
        return self._read(COURSES)

    def get_course(self, course_id: str) -> Course | None:
        return next((c for c in self._read(COURSES) if c.id == course_id), None)

    @_serialized
    def create_course(self, course: Course) -> Course:
        courses = self._read(COURSES)
        courses.append(course)
        self._save({COURSES: courses})
        return course

    @_serialized
    def update_course(self, course_id: str, **fields: Any) -> Course | None:
        courses = self._read(COURSES)
        for i, c in enumerate(courses):
            if c.id == course_id:
                courses[i] = _merge(c, fields)
                self._save({COURSES: courses})
                return courses[i]
        return None

    @_serialized
    def delete_course(self, course_id: str) -> bool:
        """Hard delete. Purchases, requests and ad watches that reference the course are kept."""
        courses = self._read(COURSES)
        remaining = [c for c in courses if c.id != course_id]
        self._save({COURSES: remaining})
        return len(remaining) != len(courses)

    # ---------- buy requests ----------

    def list_buy_requests(self) -> list[BuyRequest]:
        return self._read(REQUESTS)

    def get_buy_request(self, request_id: str) -> BuyRequest | None:
        return next((r for r in self._read(REQUESTS) if r.id == request_id), None)

    @_serialized
    def create_buy_request(self, req: BuyRequest) -> BuyRequest:
        req = req.model_copy(update={"status": BuyRequestStatus.PENDING})
        reqs = self._read(REQUESTS)
        reqs.append(req)
        self._save({REQUESTS: reqs})
        return req

    @_serialized
    def set_buy_request_status(self, request_id: str, status: BuyRequestStatus) -> BuyRequest | None:
        """
        pending → approved | rejected. Only a pending request can be reviewed (terminal states stay).
        Approving here does not grant access; use approve_and_grant for that.
        """
        if status == BuyRequestStatus.PENDING:
            raise InvalidTransitionError("A request cannot be moved back to pending.")
        reqs = self._read(REQUESTS)
        for i, r in enumerate(reqs):
            if r.id == request_id:
                if r.status != BuyRequestStatus.PENDING:
                    raise InvalidTransitionError(f"Request {request_id} has already been {r.status.value}.")
                reqs[i] = r.model_copy(update={"status": status})
                self._save({REQUESTS: reqs})
                return reqs[i]
        return None

    @_serialized
    def approve_and_grant(self, request_id: str) -> tuple[BuyRequest, Purchase] | None:
        """Approve a pending request and grant manual access in one transaction."""
        reqs = self._read(REQUESTS)
        idx = next((i for i, r in enumerate(reqs) if r.id == request_id), None)
        if idx is None:
            return None
        req = reqs[idx]
        if req.status != BuyRequestStatus.PENDING:
            raise InvalidTransitionError(f"Request {request_id} has already been {req.status.value}.")
        reqs[idx] = req = req.model_copy(update={"status": BuyRequestStatus.APPROVED})

        purchases = self._read(PURCHASES)
        purchase = self._find_purchase(purchases, req.user_id, req.course_id)
        if purchase is None:
            purchase = Purchase(user_id=req.user_id, course_id=req.course_id, type=PurchaseType.MANUAL)
            purchases.append(purchase)
        self._save({REQUESTS: reqs, PURCHASES: purchases})
        logger.info("Buy request %s approved, user %s has course %s", req.id, req.user_id, req.course_id)
        return req, purchase

    # ---------- purchases ----------

    @staticmethod
    def _find_purchase(purchases: list[Purchase], user_id: str, course_id: str) -> Purchase | None:
        return next((p for p in purchases if p.user_id == user_id and p.course_id == course_id), None)

    def list_purchases(self) -> list[Purchase]:
        return self._read(PURCHASES)

    def user_has_access(self, user_id: str, course_id: str) -> bool:
        return self._find_purchase(self._read(PURCHASES), user_id, course_id) is not None

    @_serialized
    def grant_access(self, purchase: Purchase) -> Purchase:
        """Idempotent: if the pair already has a grant, that grant is returned unchanged."""
        purchases = self._read(PURCHASES)
        existing = self._find_purchase(purchases, purchase.user_id, purchase.course_id)
        if existing is not None:
            return existing
        purchases.append(purchase)
        self._save({PURCHASES: purchases})
        logger.info("Granted %s access: user %s, course %s", purchase.type.value, purchase.user_id, purchase.course_id)
        return purchase

    # ---------- ad watches ----------

    def list_ad_watches(self) -> list[AdWatch]:
        return self._read(AD_WATCHES)

    def get_ad_watch_count(self, user_id: str, course_id: str) -> int:
        watch = next(
            (w for w in self._read(AD_WATCHES) if w.user_id == user_id and w.course_id == course_id),
            None,
        )
        return watch.count if watch else 0

    @_serialized
    def increment_ad_watch(self, user_id: str, course_id: str) -> int:
        watches = self._read(AD_WATCHES)
        now = datetime.now(timezone.utc)
        for i, w in enumerate(watches):
            if w.user_id == user_id and w.course_id == course_id:
                watches[i] = w.model_copy(update={"count": w.count + 1, "last_watched_at": now})
                self._save({AD_WATCHES: watches})
                return watches[i].count
        watches.append(AdWatch(user_id=user_id, course_id=course_id, count=1, last_watched_at=now))
        self._save({AD_WATCHES: watches})
        return 1

    # ---------- downloads ----------

    def list_downloads(self) -> list[DownloadRecord]:
        return self._read(DOWNLOADS)

    @_serialized
    def record_download(self, record: DownloadRecord) -> DownloadRecord:
        downloads = self._read(DOWNLOADS)
        downloads.append(record)
        self._save({DOWNLOADS: downloads})
        return record

    # ---------- seeding ----------

    @_serialized
    def seed_defaults(self, admin: User, courses: list[Course]) -> list[str]:
        """
        Initialise collections that have never been written: admin user, demo courses, empty lists.
        Existing keys are left alone. Returns the collection names that were created.
        """
        initial: dict[str, list] = {}
        for name in COLLECTIONS:
            if self._storage.get_item(name) is not None:
                continue
            if name == USERS:
                initial[name] = [admin]
            elif name == COURSES:
                initial[name] = list(courses)
            else:
                initial[name] = []
        if initial:
            self._save(initial)
        return list(initial)
