"""
app/api/routers/dashboard_router.py

Scan history and per-user batch dashboard endpoints.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth import SessionPrincipal, require_session
from app.schemas.dashboard import (
    BatchDetailResponse,
    BatchListResponse,
    DashboardStatsResponse,
    HistoryResponse,
)
from app.services.dashboard_service import DashboardService, get_dashboard_service
from db.repositories.errors import BatchNotFoundError
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])


@router.get("/history", response_model=HistoryResponse)
def get_history(
    db: Session = Depends(get_db),
    dashboard_service: DashboardService = Depends(get_dashboard_service),
) -> HistoryResponse:
    try:
        return HistoryResponse(results=dashboard_service.recent_scans(db=db))
    except SQLAlchemyError:
        logger.exception("Failed to load scan history")
        return HistoryResponse(results=[])


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
def get_dashboard_stats(
    session: SessionPrincipal = Depends(require_session),
    db: Session = Depends(get_db),
    dashboard_service: DashboardService = Depends(get_dashboard_service),
) -> DashboardStatsResponse:
    return dashboard_service.stats(db=db, user_id=session.user_id)


@router.get("/dashboard/batches", response_model=BatchListResponse)
def list_batches(
    session: SessionPrincipal = Depends(require_session),
    db: Session = Depends(get_db),
    dashboard_service: DashboardService = Depends(get_dashboard_service),
) -> BatchListResponse:
    return BatchListResponse(batches=dashboard_service.list_batches(db=db, user_id=session.user_id))


@router.get("/dashboard/batches/{batch_id}", response_model=BatchDetailResponse)
def get_batch(
    batch_id: UUID,
    session: SessionPrincipal = Depends(require_session),
    db: Session = Depends(get_db),
    dashboard_service: DashboardService = Depends(get_dashboard_service),
) -> BatchDetailResponse:
    try:
        return dashboard_service.batch_detail(db=db, user_id=session.user_id, batch_id=batch_id)
    except BatchNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Batch not found") from exc
