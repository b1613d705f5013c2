"""
Hosted search API client used as the primary index-check backend.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from app.config import PrimaryAPISettings
from app.indexing.logging_utils import log_event
from app.indexing.normalizer import any_containment_match, to_site_query
from app.indexing.types import CheckStatus

logger = logging.getLogger(__name__)

QUOTA_STATUS_CODES = {402, 429}


class PrimaryAPIError(RuntimeError):
    """
    Raised when the provider cannot be reached or returns an unreadable body.
    """


class QuotaExhaustedError(PrimaryAPIError):
    """
    Raised on credit exhaustion or rate limiting; callers must fail over.
    """

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Primary API quota exhausted (HTTP {status_code}).")
        self.status_code = status_code


def interpret_organic_results(site_query: str, organic: Sequence[Any]) -> str:
    """
    Map organic result entries to INDEXED/NOT_INDEXED for `site_query`.
    """

    links = [
        str(item.get("link") or "")
        for item in organic
        if isinstance(item, dict)
    ]
    if not links:
        return CheckStatus.NOT_INDEXED
    return CheckStatus.INDEXED if any_containment_match(site_query, links) else CheckStatus.NOT_INDEXED


class SerperClient:
    """
    Async client for the Serper search endpoint.
    """

    def __init__(
        self,
        *,
        settings: PrimaryAPISettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not settings.is_configured:
            raise ValueError("SerperClient requires a configured API key.")
        self._settings = settings
        self._client = client or httpx.AsyncClient(timeout=settings.timeout_seconds)
        self._owns_client = client is None

    async def check(self, url: str) -> str:
        """
        Return INDEXED, NOT_INDEXED or ERROR for `url`.

        Raises QuotaExhaustedError on 402/429 and PrimaryAPIError on
        transport or decoding failures.
        """

        site_query = to_site_query(url)
        try:
            response = await self._client.post(
                self._settings.base_url,
                headers={"X-API-KEY": self._settings.api_key or "", "Content-Type": "application/json"},
                json={
                    "q": f"site:{site_query}",
                    "num": self._settings.result_count,
                    "gl": self._settings.gl,
                    "hl": self._settings.hl,
                },
                timeout=self._settings.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            raise PrimaryAPIError(f"Primary API request failed: {exc}") from exc

        if response.status_code in QUOTA_STATUS_CODES:
            raise QuotaExhaustedError(response.status_code)

        if not response.is_success:
            log_event(
                logger,
                logging.ERROR,
                "primary_api_http_error",
                site_query=site_query,
                status_code=response.status_code,
            )
            return CheckStatus.ERROR

        try:
            payload = response.json()
        except ValueError as exc:
            raise PrimaryAPIError("Primary API response was not valid JSON.") from exc

        organic = payload.get("organic") if isinstance(payload, dict) else None
        status = interpret_organic_results(site_query, organic if isinstance(organic, list) else [])
        log_event(logger, logging.INFO, "primary_api_checked", site_query=site_query, status=status)
        return status

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
