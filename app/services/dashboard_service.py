"""
app/services/dashboard_service.py

Read models for scan history and the per-user dashboard.
"""

from __future__ import annotations

import uuid
from functools import lru_cache

from sqlalchemy.orm import Session

from app.schemas.dashboard import (
    BatchDetailResponse,
    BatchResponse,
    BatchResultResponse,
    DashboardStatsResponse,
    ScanResponse,
)
from db.models.batch import Batch
from db.repositories.batch_repository import BatchRepository
from db.repositories.errors import BatchNotFoundError
from db.repositories.scan_repository import ScanRepository

RECENT_LIMIT = 20


def _batch_response(batch: Batch) -> BatchResponse:
    return BatchResponse(
        id=batch.id,
        total_urls=batch.total_urls,
        indexed_count=batch.indexed_count,
        created_at=batch.created_at,
    )


class DashboardService:
    def recent_scans(self, *, db: Session, limit: int = RECENT_LIMIT) -> list[ScanResponse]:
        return [
            ScanResponse(url=scan.url, status=scan.status, checked_at=scan.checked_at)
            for scan in ScanRepository(db).list_recent(limit=limit)
        ]

    def stats(self, *, db: Session, user_id: uuid.UUID) -> DashboardStatsResponse:
        repository = BatchRepository(db)
        totals = repository.totals_for_user(user_id)
        latest = repository.list_for_user(user_id, limit=1)
        total_checked = totals["total_urls"]
        total_indexed = totals["indexed_count"]
        rate = round(total_indexed / total_checked * 100) if total_checked > 0 else 0
        return DashboardStatsResponse(
            total_checked=total_checked,
            total_indexed=total_indexed,
            avg_index_rate=rate,
            last_checked=latest[0].created_at if latest else None,
            last_batch_size=latest[0].total_urls if latest else 0,
        )

    def list_batches(self, *, db: Session, user_id: uuid.UUID) -> list[BatchResponse]:
        return [_batch_response(batch) for batch in BatchRepository(db).list_for_user(user_id, limit=RECENT_LIMIT)]

    def batch_detail(self, *, db: Session, user_id: uuid.UUID, batch_id: uuid.UUID) -> BatchDetailResponse:
        repository = BatchRepository(db)
        batch = repository.get_batch_for_user(batch_id=batch_id, user_id=user_id)
        if batch is None:
            raise BatchNotFoundError(f"Batch not found: {batch_id}")
        results = [
            BatchResultResponse(
                url=row.url,
                status=row.status,
                engine=row.engine,
                checked_at=row.checked_at,
            )
            for row in repository.list_results(batch.id)
        ]
        return BatchDetailResponse(batch=_batch_response(batch), results=results)


@lru_cache(maxsize=1)
def get_dashboard_service() -> DashboardService:
    return DashboardService()
