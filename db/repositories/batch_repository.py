"""
Repository for user batches and their per-URL results.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from db.models.batch import Batch, BatchResult

_INDEXED = "INDEXED"


class BatchRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_batch(self, *, user_id: uuid.UUID, total_urls: int) -> Batch:
        batch = Batch(user_id=user_id, total_urls=total_urls, indexed_count=0)
        self._session.add(batch)
        self._session.flush()
        self._session.refresh(batch)
        return batch

    def get_batch(self, batch_id: uuid.UUID) -> Batch | None:
        return self._session.get(Batch, batch_id)

    def get_batch_for_user(self, *, batch_id: uuid.UUID, user_id: uuid.UUID) -> Batch | None:
        stmt = select(Batch).where(Batch.id == batch_id, Batch.user_id == user_id)
        return self._session.scalars(stmt).first()

    def append_result(
        self,
        *,
        batch_id: uuid.UUID,
        url: str,
        status: str,
        engine: str | None = None,
    ) -> BatchResult:
        result = BatchResult(batch_id=batch_id, url=url, status=status, engine=engine)
        self._session.add(result)
        if status == _INDEXED:
            self._session.execute(
                update(Batch)
                .where(Batch.id == batch_id)
                .values(indexed_count=Batch.indexed_count + 1)
            )
        self._session.flush()
        return result

    def list_for_user(self, user_id: uuid.UUID, *, limit: int = 20) -> list[Batch]:
        stmt = (
            select(Batch)
            .where(Batch.user_id == user_id)
            .order_by(Batch.created_at.desc())
            .limit(max(1, limit))
        )
        return list(self._session.scalars(stmt).all())

    def list_results(self, batch_id: uuid.UUID) -> list[BatchResult]:
        stmt = select(BatchResult).where(BatchResult.batch_id == batch_id).order_by(BatchResult.id.asc())
        return list(self._session.scalars(stmt).all())

    def totals_for_user(self, user_id: uuid.UUID) -> dict[str, Any]:
        stmt = select(
            func.coalesce(func.sum(Batch.total_urls), 0),
            func.coalesce(func.sum(Batch.indexed_count), 0),
        ).where(Batch.user_id == user_id)
        total_urls, indexed = self._session.execute(stmt).one()
        return {"total_urls": int(total_urls), "indexed_count": int(indexed)}

    def count_batches(self) -> int:
        return int(self._session.scalar(select(func.count(Batch.id))) or 0)
