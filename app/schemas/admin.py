"""
app/schemas/admin.py

Schemas for admin statistics, user plans and feature switches.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.auth import UserResponse
from app.schemas.dashboard import ScanResponse


class GlobalStatsResponse(BaseModel):
    total_users: int = Field(..., ge=0)
    total_scans: int = Field(..., ge=0)
    indexed_scans: int = Field(..., ge=0)
    total_batches: int = Field(..., ge=0)


class AdminStatsResponse(BaseModel):
    stats: GlobalStatsResponse
    recent_checks: list[ScanResponse] = Field(default_factory=list)


class AdminUserListResponse(BaseModel):
    users: list[UserResponse] = Field(default_factory=list)


class UpdatePlanRequest(BaseModel):
    email: str = Field(..., min_length=3)
    plan: Literal["free", "premium"]


class AdminConfigResponse(BaseModel):
    guest_mode: bool
    public_signup: bool


class AdminConfigUpdateRequest(BaseModel):
    guest_mode: bool | None = None
    public_signup: bool | None = None


class SuccessResponse(BaseModel):
    success: bool = True
