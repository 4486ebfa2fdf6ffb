import asyncio

import httpx
import pytest

from coursestore.errors import InvalidTransitionError
from coursestore.models.buy_request import BuyRequest, BuyRequestStatus, PaymentMethod
from coursestore.models.course import Course
from coursestore.models.purchase import PurchaseType
from coursestore.services.ads import (
    AdOutcome,
    ExternalAdProvider,
    FallbackAdProvider,
    SimulatedAdProvider,
)
from coursestore.services.unlock import record_ad_watch, review_buy_request, watch_ad


class FakeProvider:
    def __init__(self, completed: bool, name: str = "fake"):
        self.name = name
        self.completed = completed
        self.calls = 0

    async def play_ad(self) -> AdOutcome:
        self.calls += 1
        return AdOutcome(completed=self.completed, provider=self.name, reason=None if self.completed else "closed")


# ---------- ad threshold ----------


def test_access_granted_exactly_on_threshold(store):
    course = store.create_course(Course(id="c1", title="PHP", price=1500, unlock_ads_required=5))
    for n in range(1, 5):
        result = record_ad_watch(store, "alice", course)
        assert result.count == n
        assert not result.owned
        assert not store.user_has_access("alice", "c1")
    result = record_ad_watch(store, "alice", course)
    assert result.count == 5
    assert result.owned and result.unlocked_now
    assert store.user_has_access("alice", "c1")


def test_watching_past_threshold_does_not_grant_twice(store):
    course = store.create_course(Course(id="c2", title="React Native", price=2000, unlock_ads_required=3))
    for _ in range(3):
        record_ad_watch(store, "bob", course)
    assert store.get_ad_watch_count("bob", "c2") == 3

    fourth = record_ad_watch(store, "bob", course)
    assert fourth.count == 4
    assert fourth.owned and not fourth.unlocked_now
    purchases = store.list_purchases()
    assert len(purchases) == 1
    assert purchases[0].type == PurchaseType.AD_UNLOCK


def test_ads_on_owned_course_keep_original_grant(store):
    course = store.create_course(Course(id="c1", title="PHP", unlock_ads_required=1))
    req = store.create_buy_request(
        BuyRequest(user_id="alice", course_id="c1", screenshot="img", method=PaymentMethod.NAGAD)
    )
    review_buy_request(store, req.id, BuyRequestStatus.APPROVED)
    result = record_ad_watch(store, "alice", course)
    assert result.owned and not result.unlocked_now
    assert [p.type for p in store.list_purchases()] == [PurchaseType.MANUAL]


def test_watch_ad_counts_only_completed_ads(store):
    course = store.create_course(Course(id="c1", title="PHP", unlock_ads_required=2))
    outcome, result = asyncio.run(watch_ad(FakeProvider(completed=False), store, "alice", course))
    assert not outcome.completed
    assert result.count == 0
    assert store.get_ad_watch_count("alice", "c1") == 0

    for _ in range(2):
        outcome, result = asyncio.run(watch_ad(FakeProvider(completed=True), store, "alice", course))
    assert outcome.completed
    assert result.count == 2 and result.unlocked_now


# ---------- buy request review ----------


def _pending(store) -> BuyRequest:
    return store.create_buy_request(
        BuyRequest(user_id="alice", course_id="c1", screenshot="img", method=PaymentMethod.BKASH)
    )


def test_approve_grants_manual_access(store):
    req = review_buy_request(store, _pending(store).id, BuyRequestStatus.APPROVED)
    assert req.status == BuyRequestStatus.APPROVED
    assert store.user_has_access("alice", "c1")
    assert [p.type for p in store.list_purchases()] == [PurchaseType.MANUAL]


def test_reject_grants_nothing(store):
    req = review_buy_request(store, _pending(store).id, BuyRequestStatus.REJECTED)
    assert req.status == BuyRequestStatus.REJECTED
    assert not store.user_has_access("alice", "c1")


def test_reviewed_request_cannot_be_flipped(store):
    req = _pending(store)
    review_buy_request(store, req.id, BuyRequestStatus.APPROVED)
    with pytest.raises(InvalidTransitionError):
        review_buy_request(store, req.id, BuyRequestStatus.REJECTED)
    assert store.user_has_access("alice", "c1")


def test_review_unknown_request(store):
    assert review_buy_request(store, "missing", BuyRequestStatus.APPROVED) is None


# ---------- ad providers ----------


def test_simulated_provider_waits_configured_time():
    waited = []

    async def fake_sleep(seconds):
        waited.append(seconds)

    outcome = asyncio.run(SimulatedAdProvider(15, sleep=fake_sleep).play_ad())
    assert outcome.completed
    assert outcome.provider == "simulated"
    assert waited == [15]


def test_external_provider_completed():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"completed": True}))
    outcome = asyncio.run(ExternalAdProvider("https://ads.example.com/show", transport=transport).play_ad())
    assert outcome.completed
    assert outcome.provider == "external"


def test_external_provider_closed_ad():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"completed": False}))
    outcome = asyncio.run(ExternalAdProvider("https://ads.example.com/show", transport=transport).play_ad())
    assert not outcome.completed


def test_external_provider_http_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    outcome = asyncio.run(ExternalAdProvider("https://ads.example.com/show", transport=transport).play_ad())
    assert not outcome.completed
    assert outcome.reason


def test_external_provider_not_configured():
    outcome = asyncio.run(ExternalAdProvider("").play_ad())
    assert not outcome.completed


def test_fallback_used_when_primary_fails():
    primary = FakeProvider(completed=False, name="external")
    fallback = FakeProvider(completed=True, name="simulated")
    outcome = asyncio.run(FallbackAdProvider(primary, fallback).play_ad())
    assert outcome.completed
    assert outcome.provider == "simulated"
    assert primary.calls == 1 and fallback.calls == 1


def test_fallback_skipped_when_primary_completes():
    primary = FakeProvider(completed=True, name="external")
    fallback = FakeProvider(completed=True, name="simulated")
    outcome = asyncio.run(FallbackAdProvider(primary, fallback).play_ad())
    assert outcome.provider == "external"
    assert fallback.calls == 0
