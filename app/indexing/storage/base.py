"""
Storage collaborator interface consumed by the check pipeline.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod

from app.indexing.types import BatchSummary, CacheEntry


class CheckStorage(ABC):
    """
    Persistence operations the check pipeline and its ingress depend on.

    Implementations must be safe to call from worker threads.
    """

    @abstractmethod
    def cache_get(self, url: str, max_age_hours: float) -> CacheEntry | None:
        """
        Return the most recent observation for `url` if it is still fresh.
        """

    @abstractmethod
    def cache_put(self, url: str, status: str) -> None:
        """
        Append one INDEXED/NOT_INDEXED observation for `url`.
        """

    @abstractmethod
    def batch_create(self, *, user_id: uuid.UUID, total_urls: int) -> BatchSummary:
        """
        Create an empty batch for one authenticated submission.
        """

    @abstractmethod
    def batch_get_by_id(self, batch_id: uuid.UUID) -> BatchSummary | None:
        """
        Return one batch or None.
        """

    @abstractmethod
    def batch_append_result(
        self,
        *,
        batch_id: uuid.UUID,
        url: str,
        status: str,
        engine: str | None = None,
    ) -> None:
        """
        Record one result and atomically bump `indexed_count` when INDEXED.
        """

    @abstractmethod
    def ip_usage_get(self, ip: str) -> int:
        """
        Return today's URL count consumed by guest `ip`.
        """

    @abstractmethod
    def ip_usage_increment(self, ip: str, amount: int) -> None:
        """
        Add `amount` to today's guest usage for `ip`.
        """

    @abstractmethod
    def setting_get(self, key: str, default: str) -> str:
        """
        Return an admin-controlled setting value.
        """
