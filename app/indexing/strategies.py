"""
Ordered backend strategies for resolving one URL.

A strategy returns None when it has no answer (cache miss), an ERROR result
when its backend failed, or a definitive INDEXED/NOT_INDEXED result.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from app.indexing.browser.engine import AutomationEngine
from app.indexing.cache import ResultCache
from app.indexing.logging_utils import log_event
from app.indexing.primary_api import QuotaExhaustedError, SerperClient
from app.indexing.types import CheckEngine, CheckStatus, EngineCheckResult

logger = logging.getLogger(__name__)


class CheckStrategy(ABC):
    """
    One backend in the fallback chain.
    """

    engine: str

    @abstractmethod
    async def check(self, url: str) -> EngineCheckResult | None:
        """
        Resolve `url`, or return None to defer to the next strategy.
        """


class CacheStrategy(CheckStrategy):
    engine = CheckEngine.CACHE

    def __init__(self, *, cache: ResultCache, freshness_hours: float) -> None:
        self._cache = cache
        self._freshness_hours = freshness_hours

    async def check(self, url: str) -> EngineCheckResult | None:
        try:
            entry = await asyncio.to_thread(self._cache.get, url, self._freshness_hours)
        except Exception as exc:
            log_event(logger, logging.WARNING, "cache_read_failed", url=url, error=str(exc))
            return None

        if entry is None:
            return None
        log_event(logger, logging.INFO, "cache_hit", url=url, status=entry.status)
        return EngineCheckResult(url=url, status=entry.status, checked_at=entry.checked_at)


class PrimaryAPIStrategy(CheckStrategy):
    engine = CheckEngine.PRIMARY_API

    def __init__(self, *, client: SerperClient) -> None:
        self._client = client

    async def check(self, url: str) -> EngineCheckResult | None:
        try:
            status = await self._client.check(url)
        except QuotaExhaustedError as exc:
            log_event(logger, logging.WARNING, "primary_api_quota_exhausted", url=url, status_code=exc.status_code)
            return EngineCheckResult(url=url, status=CheckStatus.ERROR, error=str(exc))
        except Exception as exc:
            log_event(logger, logging.ERROR, "primary_api_failed", url=url, error=str(exc))
            return EngineCheckResult(url=url, status=CheckStatus.ERROR, error=str(exc))
        return EngineCheckResult(url=url, status=status)


class AutomationPrimaryStrategy(CheckStrategy):
    engine = CheckEngine.AUTOMATION_PRIMARY

    def __init__(self, *, automation: AutomationEngine) -> None:
        self._automation = automation

    async def check(self, url: str) -> EngineCheckResult | None:
        return await self._automation.check_primary_engine(url)


class AutomationSecondaryStrategy(CheckStrategy):
    engine = CheckEngine.AUTOMATION_SECONDARY

    def __init__(self, *, automation: AutomationEngine) -> None:
        self._automation = automation

    async def check(self, url: str) -> EngineCheckResult | None:
        return await self._automation.check_secondary_engine(url)
