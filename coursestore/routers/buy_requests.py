"""
Buy request: user sends payment proof (Bkash / Nagad screenshot) for a course.
Admin sees all, approve → manual access grant, reject → nothing else changes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from coursestore.auth import get_current_user_admin, require_not_banned
from coursestore.dependencies import get_store
from coursestore.errors import InvalidTransitionError
from coursestore.models.buy_request import BuyRequest, BuyRequestStatus
from coursestore.models.user import User
from coursestore.repositories.store import CourseStore
from coursestore.schemas.buy_request import (
    BuyRequestAdminItem,
    BuyRequestCreate,
    BuyRequestResponse,
    BuyRequestReview,
)
from coursestore.services.catalog import UNKNOWN_USER, course_title
from coursestore.services.unlock import review_buy_request

router = APIRouter(prefix="/api", tags=["buy-requests"])


def _response(req: BuyRequest, title: str) -> BuyRequestResponse:
    return BuyRequestResponse(
        id=req.id,
        user_id=req.user_id,
        course_id=req.course_id,
        course_title=title,
        status=req.status,
        method=req.method,
        created_at=req.created_at,
    )


# ---------- User: submit / list my requests ----------


@router.post(
    "/courses/{course_id}/buy-requests",
    response_model=BuyRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_buy_request(
    course_id: str,
    body: BuyRequestCreate,
    user: User = Depends(require_not_banned),
    store: CourseStore = Depends(get_store),
):
    """
    User: submit payment proof for a course.
    If a pending request for the same course already exists, it is returned as-is.
    """
    course = store.get_course(course_id)
    if not course:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    if not body.screenshot.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payment screenshot is required.")
    if store.user_has_access(user.id, course.id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You already own this course.")
    existing = next(
        (
            r for r in store.list_buy_requests()
            if r.user_id == user.id and r.course_id == course.id and r.status == BuyRequestStatus.PENDING
        ),
        None,
    )
    if existing:
        return _response(existing, course.title)
    req = store.create_buy_request(
        BuyRequest(user_id=user.id, course_id=course.id, screenshot=body.screenshot, method=body.method)
    )
    return _response(req, course.title)


@router.get("/buy-requests/me", response_model=list[BuyRequestResponse])
def list_my_buy_requests(
    user: User = Depends(require_not_banned),
    store: CourseStore = Depends(get_store),
):
    """User: my requests, newest first."""
    courses = store.list_courses()
    mine = [r for r in store.list_buy_requests() if r.user_id == user.id]
    return [_response(r, course_title(courses, r.course_id)) for r in reversed(mine)]


# ---------- Admin: list, approve / reject ----------


@router.get("/buy-requests", response_model=list[BuyRequestAdminItem])
def admin_list_buy_requests(
    status_filter: str | None = None,
    _admin: User = Depends(get_current_user_admin),
    store: CourseStore = Depends(get_store),
):
    """Admin: all requests, newest first. Optional ?status_filter=pending."""
    users = {u.id: u for u in store.list_users()}
    courses = store.list_courses()
    reqs = store.list_buy_requests()
    if status_filter and status_filter.lower() in ("pending", "approved", "rejected"):
        reqs = [r for r in reqs if r.status.value == status_filter.lower()]
    items = []
    for r in reversed(reqs):
        u = users.get(r.user_id)
        items.append(
            BuyRequestAdminItem(
                **_response(r, course_title(courses, r.course_id)).model_dump(),
                user_email=u.email if u else "",
                username=u.username if u else UNKNOWN_USER,
                screenshot=r.screenshot,
            )
        )
    return items


@router.patch("/buy-requests/{request_id}", response_model=BuyRequestResponse)
def admin_review_buy_request(
    request_id: str,
    body: BuyRequestReview,
    _admin: User = Depends(get_current_user_admin),
    store: CourseStore = Depends(get_store),
):
    """
    Admin: set status approved or rejected.
    If approved, the user gets manual access to the course in the same write.
    """
    if body.status not in (BuyRequestStatus.APPROVED, BuyRequestStatus.REJECTED):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="status must be approved or rejected",
        )
    try:
        req = review_buy_request(store, request_id, body.status)
    except InvalidTransitionError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This request has already been reviewed.",
        )
    if not req:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Request not found")
    return _response(req, course_title(store.list_courses(), req.course_id))
