"""
Ad playback. Unlock progress only depends on AdProvider.play_ad(); which implementation runs is wiring.
- ExternalAdProvider: asks the ad network whether a view completed.
- SimulatedAdProvider: local countdown, used when the ad network is missing or the ad fails.
- FallbackAdProvider: external first, simulated on any failure.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Protocol

import httpx
from pydantic import BaseModel

from coursestore.config import get_settings

logger = logging.getLogger(__name__)


class AdOutcome(BaseModel):
    completed: bool
    provider: str
    reason: str | None = None


class AdProvider(Protocol):
    name: str

    async def play_ad(self) -> AdOutcome: ...


class ExternalAdProvider:
    name = "external"

    def __init__(self, url: str, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        self._url = url
        self._timeout = timeout
        self._transport = transport

    async def play_ad(self) -> AdOutcome:
        if not self._url:
            return AdOutcome(completed=False, provider=self.name, reason="Ad network not configured")
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                res = await client.post(self._url)
                res.raise_for_status()
                data = res.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Ad network request failed: %s", e, exc_info=False)
            return AdOutcome(completed=False, provider=self.name, reason=str(e) or type(e).__name__)
        if isinstance(data, dict) and data.get("completed") is True:
            return AdOutcome(completed=True, provider=self.name)
        return AdOutcome(completed=False, provider=self.name, reason="Ad closed before completion")


class SimulatedAdProvider:
    name = "simulated"

    def __init__(self, seconds: float = 15.0, sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        self._seconds = seconds
        self._sleep = sleep

    async def play_ad(self) -> AdOutcome:
        await self._sleep(self._seconds)
        return AdOutcome(completed=True, provider=self.name)


class FallbackAdProvider:
    def __init__(self, primary: AdProvider, fallback: AdProvider):
        self._primary = primary
        self._fallback = fallback
        self.name = f"{primary.name}+{fallback.name}"

    async def play_ad(self) -> AdOutcome:
        outcome = await self._primary.play_ad()
        if outcome.completed:
            return outcome
        logger.info("Ad via %s not completed (%s), using %s", self._primary.name, outcome.reason, self._fallback.name)
        return await self._fallback.play_ad()


def get_ad_provider() -> AdProvider:
    settings = get_settings()
    simulated = SimulatedAdProvider(settings.ad_fallback_seconds)
    if not settings.ad_provider_url:
        return simulated
    external = ExternalAdProvider(settings.ad_provider_url, timeout=settings.ad_provider_timeout_seconds)
    return FallbackAdProvider(external, simulated)
