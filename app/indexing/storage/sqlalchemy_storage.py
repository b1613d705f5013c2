"""
SQLAlchemy-backed implementation of the check storage collaborator.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import date

from sqlalchemy.orm import Session

from app.indexing.storage.base import CheckStorage
from app.indexing.types import BatchSummary, CacheEntry
from db.base import utcnow
from db.models.batch import Batch
from db.repositories.batch_repository import BatchRepository
from db.repositories.ip_usage_repository import IPUsageRepository
from db.repositories.scan_repository import ScanRepository
from db.repositories.setting_repository import SettingRepository
from db.session import SessionLocal, session_scope


def _utc_today() -> date:
    return utcnow().date()


def _to_summary(batch: Batch) -> BatchSummary:
    return BatchSummary(
        id=batch.id,
        user_id=batch.user_id,
        total_urls=batch.total_urls,
        indexed_count=batch.indexed_count,
        created_at=batch.created_at,
    )


class SQLAlchemyCheckStorage(CheckStorage):
    """
    Opens one short-lived session per call so worker threads never share one.
    """

    def __init__(self, *, session_factory: Callable[[], Session] | None = None) -> None:
        self._session_factory = session_factory or SessionLocal

    def _session(self) -> AbstractContextManager[Session]:
        return session_scope(self._session_factory)

    def cache_get(self, url: str, max_age_hours: float) -> CacheEntry | None:
        with self._session() as session:
            scan = ScanRepository(session).latest_for_url(url)
            if scan is None:
                return None
            entry = CacheEntry(url=scan.url, status=scan.status, checked_at=scan.checked_at)
        return entry if entry.is_fresh(max_age_hours) else None

    def cache_put(self, url: str, status: str) -> None:
        with self._session() as session:
            ScanRepository(session).add_scan(url=url, status=status)

    def batch_create(self, *, user_id: uuid.UUID, total_urls: int) -> BatchSummary:
        with self._session() as session:
            batch = BatchRepository(session).create_batch(user_id=user_id, total_urls=total_urls)
            return _to_summary(batch)

    def batch_get_by_id(self, batch_id: uuid.UUID) -> BatchSummary | None:
        with self._session() as session:
            batch = BatchRepository(session).get_batch(batch_id)
            return _to_summary(batch) if batch is not None else None

    def batch_append_result(
        self,
        *,
        batch_id: uuid.UUID,
        url: str,
        status: str,
        engine: str | None = None,
    ) -> None:
        with self._session() as session:
            BatchRepository(session).append_result(
                batch_id=batch_id,
                url=url,
                status=status,
                engine=engine,
            )

    def ip_usage_get(self, ip: str) -> int:
        with self._session() as session:
            return IPUsageRepository(session).get_count(ip, today=_utc_today())

    def ip_usage_increment(self, ip: str, amount: int) -> None:
        if amount <= 0:
            return
        with self._session() as session:
            IPUsageRepository(session).increment(ip, amount, today=_utc_today())

    def setting_get(self, key: str, default: str) -> str:
        with self._session() as session:
            value = SettingRepository(session).get(key)
        return value if value is not None else default
