"""
Result cache over the storage collaborator.
"""

from __future__ import annotations

import logging

from app.indexing.logging_utils import log_event
from app.indexing.storage.base import CheckStorage
from app.indexing.types import CacheEntry, CheckStatus

logger = logging.getLogger(__name__)


class ResultCache:
    """
    Freshness-bounded lookup of prior verdicts.

    Writes are append-only; only the most recent observation per URL is
    considered, and it is a hit only while younger than the freshness window.
    """

    def __init__(self, storage: CheckStorage) -> None:
        self._storage = storage

    def get(self, url: str, freshness_hours: float) -> CacheEntry | None:
        entry = self._storage.cache_get(url, freshness_hours)
        if entry is None or entry.status not in CheckStatus.CACHEABLE:
            return None
        return entry

    def put(self, url: str, status: str) -> bool:
        """
        Store `status` for `url`; ERROR and unknown statuses are ignored.
        """

        if status not in CheckStatus.CACHEABLE:
            log_event(logger, logging.DEBUG, "cache_put_skipped", url=url, status=status)
            return False
        self._storage.cache_put(url, status)
        return True
