"""
app/services/check_service.py

Admission rules and wiring for streaming index checks.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache

from app.auth import SessionPrincipal
from app.config import (
    CheckPipelineSettings,
    get_browser_settings,
    get_check_pipeline_settings,
    get_primary_api_settings,
)
from app.indexing.browser import AutomationEngine, PlaywrightBrowserManager
from app.indexing.logging_utils import log_event
from app.indexing.orchestrator import CheckOrchestrator
from app.indexing.primary_api import SerperClient
from app.indexing.storage import CheckStorage, SQLAlchemyCheckStorage
from app.indexing.streaming import CheckStreamEmitter, EventChannel
from app.indexing.types import CheckOptions
from db.models.app_setting import SettingKey

logger = logging.getLogger(__name__)


class CheckAdmissionError(Exception):
    """
    Request rejected before any URL is dispatched.
    """

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


@dataclass(frozen=True)
class CheckAdmission:
    urls: list[str]
    options: CheckOptions
    guest_ip: str | None = None


class CheckService:
    """
    Applies guest/user limits, opens batches and starts the event stream.
    """

    def __init__(
        self,
        *,
        storage: CheckStorage,
        emitter: CheckStreamEmitter,
        settings: CheckPipelineSettings,
    ) -> None:
        self._storage = storage
        self._emitter = emitter
        self._settings = settings

    def admit(
        self,
        urls: list[str],
        *,
        economy_mode: bool,
        session: SessionPrincipal | None,
        ip: str,
    ) -> CheckAdmission:
        """
        Decide how many of `urls` this caller may check right now.

        Runs blocking storage calls; call it from a worker thread.
        """

        if not urls:
            raise CheckAdmissionError(400, "No URLs provided")

        if session is None:
            guest_mode = self._storage.setting_get(SettingKey.GUEST_MODE, "true")
            if guest_mode != "true":
                raise CheckAdmissionError(403, "Guest checks are disabled. Please sign in.")

            usage = self._storage.ip_usage_get(ip)
            remaining = self._settings.guest_daily_quota - usage
            if remaining <= 0:
                log_event(logger, logging.INFO, "guest_quota_exhausted", ip=ip, usage=usage)
                raise CheckAdmissionError(
                    429,
                    "Daily free limit reached. Sign up for a free account to check more URLs.",
                )

            allowed = urls[: min(self._settings.guest_url_cap, remaining)]
            return CheckAdmission(
                urls=allowed,
                options=CheckOptions(economy_mode=economy_mode),
                guest_ip=ip,
            )

        allowed = urls[: self._settings.user_url_cap]
        batch = self._storage.batch_create(user_id=session.user_id, total_urls=len(allowed))
        log_event(logger, logging.INFO, "batch_created", batch_id=batch.id, user_id=session.user_id, total=len(allowed))
        return CheckAdmission(
            urls=allowed,
            options=CheckOptions(economy_mode=economy_mode, batch_id=batch.id),
        )

    def start(self, admission: CheckAdmission) -> EventChannel:
        on_finished = None
        if admission.guest_ip is not None:
            ip, amount = admission.guest_ip, len(admission.urls)

            async def on_finished() -> None:
                await asyncio.to_thread(self._storage.ip_usage_increment, ip, amount)

        return self._emitter.start(admission.urls, admission.options, on_finished=on_finished)


@lru_cache(maxsize=1)
def get_check_storage() -> CheckStorage:
    return SQLAlchemyCheckStorage()


@lru_cache(maxsize=1)
def get_browser_manager() -> PlaywrightBrowserManager:
    return PlaywrightBrowserManager(settings=get_browser_settings())


@lru_cache(maxsize=1)
def get_primary_client() -> SerperClient | None:
    settings = get_primary_api_settings()
    if not settings.is_configured:
        logger.info("Primary search API key not configured; using browser automation only.")
        return None
    return SerperClient(settings=settings)


@lru_cache(maxsize=1)
def get_check_service() -> CheckService:
    """
    Build and cache the check service and its shared collaborators.
    """

    pipeline_settings = get_check_pipeline_settings()
    storage = get_check_storage()
    automation = AutomationEngine(
        browser_provider=get_browser_manager(),
        settings=get_browser_settings(),
        ambiguous_as_indexed=pipeline_settings.ambiguous_as_indexed,
    )
    orchestrator = CheckOrchestrator(
        storage=storage,
        automation=automation,
        settings=pipeline_settings,
        primary_client=get_primary_client(),
    )
    return CheckService(
        storage=storage,
        emitter=CheckStreamEmitter(orchestrator),
        settings=pipeline_settings,
    )


async def shutdown_check_resources() -> None:
    """
    Close the shared browser and HTTP client if they were ever created.
    """

    if get_browser_manager.cache_info().currsize:
        await get_browser_manager().close()
    if get_primary_client.cache_info().currsize:
        client = get_primary_client()
        if client is not None:
            await client.aclose()
