"""
Concurrency-bounded orchestration of index checks for one batch.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from datetime import datetime, timezone

from app.config import CheckPipelineSettings
from app.indexing.browser.engine import AutomationEngine
from app.indexing.cache import ResultCache
from app.indexing.logging_utils import log_event
from app.indexing.primary_api import SerperClient
from app.indexing.storage.base import CheckStorage
from app.indexing.strategies import (
    AutomationPrimaryStrategy,
    AutomationSecondaryStrategy,
    CacheStrategy,
    CheckStrategy,
    PrimaryAPIStrategy,
)
from app.indexing.types import (
    CheckEngine,
    CheckOptions,
    CheckOutcome,
    CheckProgress,
    CheckStatus,
    EngineCheckResult,
)

logger = logging.getLogger(__name__)


class CheckOrchestrator:
    """
    Resolves every URL through cache, primary API and browser automation.

    Outcomes are yielded in completion order. Each URL occurrence is
    processed independently; duplicates are not merged.
    """

    def __init__(
        self,
        *,
        storage: CheckStorage,
        automation: AutomationEngine,
        settings: CheckPipelineSettings,
        primary_client: SerperClient | None = None,
    ) -> None:
        self._storage = storage
        self._cache = ResultCache(storage)
        self._automation = automation
        self._primary_client = primary_client
        self._settings = settings

    def uses_primary_api(self, options: CheckOptions) -> bool:
        return self._primary_client is not None and not options.economy_mode

    def pool_width(self, options: CheckOptions) -> int:
        if self.uses_primary_api(options):
            return self._settings.api_concurrency
        return self._settings.browser_concurrency

    def build_chain(self, options: CheckOptions) -> list[CheckStrategy]:
        chain: list[CheckStrategy] = [
            CacheStrategy(cache=self._cache, freshness_hours=self._settings.cache_freshness_hours),
        ]
        if self.uses_primary_api(options) and self._primary_client is not None:
            chain.append(PrimaryAPIStrategy(client=self._primary_client))
        chain.append(AutomationPrimaryStrategy(automation=self._automation))
        chain.append(AutomationSecondaryStrategy(automation=self._automation))
        return chain

    async def run(
        self,
        urls: Sequence[str],
        options: CheckOptions | None = None,
    ) -> AsyncIterator[CheckProgress]:
        """
        Yield one CheckProgress per URL as each resolves.
        """

        options = options or CheckOptions()
        total = len(urls)
        if total == 0:
            return

        chain = self.build_chain(options)
        width = min(self.pool_width(options), total)
        pending: asyncio.Queue[str] = asyncio.Queue()
        for url in urls:
            pending.put_nowait(url)
        resolved: asyncio.Queue[CheckOutcome] = asyncio.Queue()

        log_event(
            logger,
            logging.INFO,
            "check_batch_started",
            total=total,
            pool_width=width,
            primary_api=self.uses_primary_api(options),
            economy_mode=options.economy_mode,
        )

        async def worker() -> None:
            while True:
                try:
                    url = pending.get_nowait()
                except asyncio.QueueEmpty:
                    return
                try:
                    outcome = await self.resolve(url, chain=chain, options=options)
                except Exception as exc:
                    log_event(logger, logging.ERROR, "check_url_crashed", url=url, error=str(exc))
                    outcome = CheckOutcome(
                        url=url,
                        status=CheckStatus.ERROR,
                        engine=chain[-1].engine,
                        checked_at=datetime.now(timezone.utc),
                    )
                await resolved.put(outcome)

        workers = [asyncio.create_task(worker()) for _ in range(width)]
        completed = 0
        try:
            while completed < total:
                outcome = await resolved.get()
                completed += 1
                yield CheckProgress(outcome=outcome, completed=completed, total=total)
        finally:
            for task in workers:
                if not task.done():
                    task.cancel()

        log_event(logger, logging.INFO, "check_batch_completed", total=total)

    async def resolve(
        self,
        url: str,
        *,
        chain: Sequence[CheckStrategy],
        options: CheckOptions,
    ) -> CheckOutcome:
        """
        Try each strategy in order until one gives a non-ERROR answer.
        """

        result: EngineCheckResult | None = None
        engine = chain[-1].engine
        for strategy in chain:
            candidate = await strategy.check(url)
            if candidate is None:
                continue
            result, engine = candidate, strategy.engine
            if candidate.status != CheckStatus.ERROR:
                break
            log_event(logger, logging.INFO, "check_failover", url=url, failed_engine=strategy.engine, error=candidate.error)

        status = result.status if result is not None else CheckStatus.ERROR
        if engine != CheckEngine.CACHE and status != CheckStatus.ERROR:
            await self._persist(url, status=status, engine=engine, options=options)

        checked_at = result.checked_at if result is not None and result.checked_at else None
        return CheckOutcome(
            url=url,
            status=status,
            engine=engine,
            checked_at=checked_at or datetime.now(timezone.utc),
        )

    async def _persist(self, url: str, *, status: str, engine: str, options: CheckOptions) -> None:
        try:
            await asyncio.to_thread(self._cache.put, url, status)
        except Exception as exc:
            log_event(logger, logging.WARNING, "persist_failed", target="cache", url=url, error=str(exc))

        if options.batch_id is None:
            return
        try:
            await asyncio.to_thread(
                self._storage.batch_append_result,
                batch_id=options.batch_id,
                url=url,
                status=status,
                engine=engine,
            )
        except Exception as exc:
            log_event(
                logger,
                logging.WARNING,
                "persist_failed",
                target="batch",
                batch_id=options.batch_id,
                url=url,
                error=str(exc),
            )
