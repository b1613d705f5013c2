"""
app/api/routers/admin_router.py

Admin-only statistics, user plan and feature switch endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.auth import SessionPrincipal, require_admin
from app.schemas.admin import (
    AdminConfigResponse,
    AdminConfigUpdateRequest,
    AdminStatsResponse,
    AdminUserListResponse,
    SuccessResponse,
    UpdatePlanRequest,
)
from app.services.admin_service import AdminService, get_admin_service
from db.repositories.errors import UserNotFoundError
from db.session import get_db

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=AdminStatsResponse)
def get_admin_stats(
    _: SessionPrincipal = Depends(require_admin),
    db: Session = Depends(get_db),
    admin_service: AdminService = Depends(get_admin_service),
) -> AdminStatsResponse:
    return admin_service.stats(db=db)


@router.get("/users", response_model=AdminUserListResponse)
def list_users(
    _: SessionPrincipal = Depends(require_admin),
    db: Session = Depends(get_db),
    admin_service: AdminService = Depends(get_admin_service),
) -> AdminUserListResponse:
    return AdminUserListResponse(users=admin_service.list_users(db=db))


@router.post("/users", response_model=SuccessResponse)
def update_user_plan(
    payload: UpdatePlanRequest,
    _: SessionPrincipal = Depends(require_admin),
    db: Session = Depends(get_db),
    admin_service: AdminService = Depends(get_admin_service),
) -> SuccessResponse:
    try:
        admin_service.set_plan(db=db, email=payload.email, plan=payload.plan)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from exc
    return SuccessResponse()


@router.get("/config", response_model=AdminConfigResponse)
def get_admin_config(
    _: SessionPrincipal = Depends(require_admin),
    db: Session = Depends(get_db),
    admin_service: AdminService = Depends(get_admin_service),
) -> AdminConfigResponse:
    return admin_service.get_config(db=db)


@router.post("/config", response_model=AdminConfigResponse)
def update_admin_config(
    payload: AdminConfigUpdateRequest,
    _: SessionPrincipal = Depends(require_admin),
    db: Session = Depends(get_db),
    admin_service: AdminService = Depends(get_admin_service),
) -> AdminConfigResponse:
    return admin_service.update_config(
        db=db,
        guest_mode=payload.guest_mode,
        public_signup=payload.public_signup,
    )
