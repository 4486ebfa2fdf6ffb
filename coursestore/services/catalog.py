"""Read-side views: course listing, per-user course state, profile history, admin stats."""
from coursestore.models.buy_request import BuyRequestStatus
from coursestore.models.course import Course
from coursestore.models.purchase import PurchaseType
from coursestore.models.user import User
from coursestore.repositories.store import CourseStore
from coursestore.schemas.course import CourseDetail, CourseListItem
from coursestore.schemas.profile import DownloadHistoryItem, ProfileResponse, PurchaseHistoryItem
from coursestore.schemas.admin import StatsResponse
from coursestore.schemas.user import UserResponse

UNKNOWN_COURSE = "Unknown Course"
UNKNOWN_USER = "Unknown User"

# Grants that represent money received
PAID_GRANT_TYPES = (PurchaseType.BUY, PurchaseType.MANUAL)


def owned_course_ids(store: CourseStore, user_id: str) -> list[str]:
    return [p.course_id for p in store.list_purchases() if p.user_id == user_id]


def course_title(courses: list[Course], course_id: str) -> str:
    course = next((c for c in courses if c.id == course_id), None)
    return course.title if course else UNKNOWN_COURSE


def list_courses(
    store: CourseStore,
    user: User | None = None,
    search: str = "",
    owned_only: bool = False,
) -> list[CourseListItem]:
    """Case-insensitive title search. owned_only = the user's library."""
    owned = set(owned_course_ids(store, user.id)) if user else set()
    needle = search.strip().lower()
    items = []
    for c in store.list_courses():
        if owned_only and c.id not in owned:
            continue
        if needle and needle not in c.title.lower():
            continue
        items.append(
            CourseListItem(
                id=c.id,
                title=c.title,
                price=c.price,
                thumbnail=c.thumbnail,
                file_count=len(c.files),
                unlock_ads_required=c.unlock_ads_required,
                owned=c.id in owned,
                created_at=c.created_at,
            )
        )
    return items


def course_detail(store: CourseStore, course: Course, user: User | None = None) -> CourseDetail:
    owned = False
    ads_watched = 0
    pending = False
    if user:
        owned = store.user_has_access(user.id, course.id)
        ads_watched = store.get_ad_watch_count(user.id, course.id)
        pending = any(
            r.user_id == user.id and r.course_id == course.id and r.status == BuyRequestStatus.PENDING
            for r in store.list_buy_requests()
        )
    return CourseDetail(
        id=course.id,
        title=course.title,
        description=course.description,
        price=course.price,
        thumbnail=course.thumbnail,
        banner=course.banner,
        sample_images=course.sample_images,
        unlock_ads_required=course.unlock_ads_required,
        file_count=len(course.files),
        files=course.files if owned else None,
        owned=owned,
        ads_watched=ads_watched,
        pending_request=pending,
        created_at=course.created_at,
    )


def profile(store: CourseStore, user: User) -> ProfileResponse:
    """Purchase and download history, newest first."""
    courses = store.list_courses()
    purchases = [p for p in store.list_purchases() if p.user_id == user.id]
    downloads = [d for d in store.list_downloads() if d.user_id == user.id]
    return ProfileResponse(
        user=UserResponse.from_user(user),
        purchases=[
            PurchaseHistoryItem(
                id=p.id,
                course_id=p.course_id,
                course_title=course_title(courses, p.course_id),
                type=p.type,
                granted_at=p.granted_at,
            )
            for p in reversed(purchases)
        ],
        downloads=[
            DownloadHistoryItem(
                id=d.id,
                file_name=d.file_name,
                course_title=d.course_title,
                downloaded_at=d.downloaded_at,
            )
            for d in reversed(downloads)
        ],
    )


def stats(store: CourseStore) -> StatsResponse:
    """Revenue: current price of each paid grant whose course still exists."""
    prices = {c.id: c.price for c in store.list_courses()}
    purchases = store.list_purchases()
    revenue = sum(prices.get(p.course_id, 0) for p in purchases if p.type in PAID_GRANT_TYPES)
    pending = sum(1 for r in store.list_buy_requests() if r.status == BuyRequestStatus.PENDING)
    return StatsResponse(
        users=len(store.list_users()),
        sales=len(purchases),
        revenue=revenue,
        pending_requests=pending,
    )
