"""
Lifecycle owner for the shared headless browser process.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

from playwright.async_api import Browser, Playwright, async_playwright

from app.config import BrowserSettings
from app.indexing.logging_utils import log_event

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-infobars",
    "--disable-dev-shm-usage",
    "--window-size=1280,800",
]


class BrowserProvider(ABC):
    """
    Hands out the shared browser and resets it on demand.
    """

    @abstractmethod
    async def acquire(self) -> Any:
        """
        Return the live shared browser, launching one if needed.
        """

    @abstractmethod
    async def invalidate(self, *, reason: str) -> None:
        """
        Tear down the shared browser so the next acquire starts clean.
        """

    @abstractmethod
    async def close(self) -> None:
        """
        Release every resource on process shutdown.
        """


class PlaywrightBrowserManager(BrowserProvider):
    """
    Lazily launches one chromium instance and recycles it after a reset.

    Invalidation is global: checks still holding a context on the old
    instance will fail and surface ERROR.
    """

    def __init__(self, *, settings: BrowserSettings) -> None:
        self._settings = settings
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> Browser:
        async with self._lock:
            if self._browser is not None and self._browser.is_connected():
                return self._browser

            if self._playwright is None:
                self._playwright = await async_playwright().start()

            self._browser = await self._playwright.chromium.launch(
                headless=self._settings.headless,
                args=LAUNCH_ARGS,
            )
            log_event(logger, logging.INFO, "browser_launched", headless=self._settings.headless)
            return self._browser

    async def invalidate(self, *, reason: str) -> None:
        async with self._lock:
            browser, self._browser = self._browser, None

        if browser is None:
            return
        log_event(logger, logging.WARNING, "browser_invalidated", reason=reason)
        try:
            await browser.close()
        except Exception as exc:
            log_event(logger, logging.DEBUG, "browser_close_failed", error=str(exc))

    async def close(self) -> None:
        await self.invalidate(reason="shutdown")
        async with self._lock:
            playwright, self._playwright = self._playwright, None
        if playwright is not None:
            await playwright.stop()
