"""
Unlock rules on top of the store.
- Ads: every completed ad adds one view; reaching the course threshold grants ad_unlock once.
- Buy requests: approve grants manual access (same transaction), reject changes nothing else.
"""
import logging

from pydantic import BaseModel

from coursestore.models.buy_request import BuyRequest, BuyRequestStatus
from coursestore.models.course import Course
from coursestore.models.purchase import Purchase, PurchaseType
from coursestore.repositories.store import CourseStore
from coursestore.services.ads import AdOutcome, AdProvider

logger = logging.getLogger(__name__)


class AdWatchResult(BaseModel):
    count: int
    required: int
    owned: bool
    unlocked_now: bool = False


def record_ad_watch(store: CourseStore, user_id: str, course: Course) -> AdWatchResult:
    count = store.increment_ad_watch(user_id, course.id)
    owned = store.user_has_access(user_id, course.id)
    unlocked_now = False
    if not owned and count >= course.unlock_ads_required:
        store.grant_access(Purchase(user_id=user_id, course_id=course.id, type=PurchaseType.AD_UNLOCK))
        owned = unlocked_now = True
        logger.info("User %s unlocked course %s after %d ads", user_id, course.id, count)
    return AdWatchResult(count=count, required=course.unlock_ads_required, owned=owned, unlocked_now=unlocked_now)


async def watch_ad(
    provider: AdProvider,
    store: CourseStore,
    user_id: str,
    course: Course,
) -> tuple[AdOutcome, AdWatchResult]:
    """Play one ad. Only a completed ad counts; otherwise progress is reported unchanged."""
    outcome = await provider.play_ad()
    if not outcome.completed:
        count = store.get_ad_watch_count(user_id, course.id)
        return outcome, AdWatchResult(
            count=count,
            required=course.unlock_ads_required,
            owned=store.user_has_access(user_id, course.id),
        )
    return outcome, record_ad_watch(store, user_id, course)


def review_buy_request(
    store: CourseStore,
    request_id: str,
    status: BuyRequestStatus,
) -> BuyRequest | None:
    if status == BuyRequestStatus.APPROVED:
        result = store.approve_and_grant(request_id)
        return result[0] if result else None
    return store.set_buy_request_status(request_id, status)
