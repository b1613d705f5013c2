"""
Browser-automation index checks against public search engines.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright_stealth import Stealth

from app.config import BrowserSettings
from app.indexing.browser.manager import BrowserProvider
from app.indexing.browser.signals import (
    BING_PROFILE,
    GOOGLE_PROFILE,
    EngineProfile,
    PageSignal,
    PageSignalClassifier,
    capture_snapshot,
)
from app.indexing.logging_utils import log_event
from app.indexing.normalizer import to_site_query
from app.indexing.types import CheckStatus, EngineCheckResult

logger = logging.getLogger(__name__)

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_3) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 13_6) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Safari/605.1.15",
)

VIEWPORTS = (
    {"width": 1366, "height": 768},
    {"width": 1920, "height": 1080},
    {"width": 1536, "height": 864},
    {"width": 1440, "height": 900},
)

class AutomationError(RuntimeError):
    """Raised when the browser cannot service a check."""


def _discard_late_result(task: asyncio.Task) -> None:
    if not task.cancelled():
        task.exception()


class AutomationEngine:
    """
    Runs one isolated browser context per check on the shared browser.

    State per check: navigate, wait for DOM, then classify into defense
    (ERROR plus browser reset), zero results, positive signal or ambiguous.
    """

    def __init__(
        self,
        *,
        browser_provider: BrowserProvider,
        settings: BrowserSettings,
        classifier: PageSignalClassifier | None = None,
        ambiguous_as_indexed: bool = False,
        dwell_ms: tuple[int, int] = (300, 1500),
        pointer_pause_ms: tuple[int, int] = (100, 300),
        rng: random.Random | None = None,
        stealth: Stealth | None = None,
    ) -> None:
        self._browser_provider = browser_provider
        self._settings = settings
        self._classifier = classifier or PageSignalClassifier()
        self._ambiguous_status = CheckStatus.INDEXED if ambiguous_as_indexed else CheckStatus.NOT_INDEXED
        self._dwell_ms = dwell_ms
        self._pointer_pause_ms = pointer_pause_ms
        self._rng = rng or random.Random()
        self._stealth = stealth or Stealth()

    async def check_primary_engine(self, url: str) -> EngineCheckResult:
        return await self._check_with_deadline(GOOGLE_PROFILE, url)

    async def check_secondary_engine(self, url: str) -> EngineCheckResult:
        return await self._check_with_deadline(BING_PROFILE, url)

    async def _check_with_deadline(self, profile: EngineProfile, url: str) -> EngineCheckResult:
        """
        Race the check against the hard timeout without cancelling it.
        """

        deadline = self._settings.hard_timeout_seconds
        task = asyncio.ensure_future(self._check(profile, url))
        done, _ = await asyncio.wait({task}, timeout=deadline)
        if task in done:
            return task.result()

        task.add_done_callback(_discard_late_result)
        log_event(logger, logging.WARNING, "automation_check_timed_out", engine=profile.name, url=url, seconds=deadline)
        return EngineCheckResult(url=url, status=CheckStatus.ERROR, error=f"Timed out after {deadline:g}s")

    async def _check(self, profile: EngineProfile, url: str) -> EngineCheckResult:
        context = None
        site_query = to_site_query(url)
        try:
            try:
                browser = await self._browser_provider.acquire()
            except Exception as exc:
                raise AutomationError(f"Browser unavailable: {exc}") from exc
            viewport = dict(self._rng.choice(VIEWPORTS))
            context = await browser.new_context(
                viewport=viewport,
                user_agent=self._rng.choice(USER_AGENTS),
                locale=self._settings.locale,
                timezone_id=self._settings.timezone_id,
                extra_http_headers={"Accept-Language": "en-US,en;q=0.9"},
            )
            await self._stealth.apply_stealth_async(context)
            page = await context.new_page()

            log_event(logger, logging.INFO, "automation_check_started", engine=profile.name, site_query=site_query)
            await page.goto(
                profile.search_url(site_query),
                wait_until="domcontentloaded",
                timeout=self._settings.navigation_timeout_ms,
            )

            await self._simulate_pointer(page, viewport)
            await self._pause(self._dwell_ms)

            try:
                await page.wait_for_selector(
                    profile.ready_selector,
                    timeout=self._settings.signal_wait_timeout_ms,
                )
            except PlaywrightTimeoutError:
                log_event(logger, logging.WARNING, "automation_wait_timed_out", engine=profile.name, url=url)

            snapshot = await capture_snapshot(page, profile)
            signal = self._classifier.classify(profile, snapshot)

            if signal == PageSignal.DEFENSE:
                log_event(logger, logging.WARNING, "defense_challenge_detected", engine=profile.name, url=url)
                await self._browser_provider.invalidate(reason=f"{profile.name} defense challenge")
                return EngineCheckResult(url=url, status=CheckStatus.ERROR, error="defense-detected")

            if signal == PageSignal.ZERO_RESULTS:
                status = CheckStatus.NOT_INDEXED
            elif signal == PageSignal.POSITIVE:
                status = CheckStatus.INDEXED
            else:
                status = self._ambiguous_status
                log_event(logger, logging.WARNING, "automation_ambiguous_page", engine=profile.name, url=url, status=status)

            log_event(logger, logging.INFO, "automation_check_completed", engine=profile.name, site_query=site_query, status=status)
            return EngineCheckResult(url=url, status=status)
        except Exception as exc:
            log_event(logger, logging.ERROR, "automation_check_failed", engine=profile.name, url=url, error=str(exc))
            return EngineCheckResult(url=url, status=CheckStatus.ERROR, error=str(exc))
        finally:
            if context is not None:
                try:
                    await context.close()
                except Exception as exc:
                    log_event(logger, logging.DEBUG, "context_close_failed", url=url, error=str(exc))

    async def _simulate_pointer(self, page: Any, viewport: dict[str, int]) -> None:
        size = page.viewport_size or viewport
        for _ in range(self._rng.randint(2, 3)):
            x = self._rng.randrange(max(1, size["width"]))
            y = self._rng.randrange(max(1, size["height"]))
            await page.mouse.move(x, y, steps=5)
            await self._pause(self._pointer_pause_ms)

    async def _pause(self, bounds: tuple[int, int]) -> None:
        low, high = bounds
        await asyncio.sleep(self._rng.randint(low, max(low, high)) / 1000)
