"""
app/schemas package marker.
"""

from app.schemas.admin import (
    AdminConfigResponse,
    AdminConfigUpdateRequest,
    AdminStatsResponse,
    AdminUserListResponse,
    GlobalStatsResponse,
    SuccessResponse,
    UpdatePlanRequest,
)
from app.schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest, UserResponse
from app.schemas.check import CheckRequest, SecurityTokenResponse
from app.schemas.dashboard import (
    BatchDetailResponse,
    BatchListResponse,
    BatchResponse,
    BatchResultResponse,
    DashboardStatsResponse,
    HistoryResponse,
    ScanResponse,
)

__all__ = [
    "AdminConfigResponse",
    "AdminConfigUpdateRequest",
    "AdminStatsResponse",
    "AdminUserListResponse",
    "AuthResponse",
    "BatchDetailResponse",
    "BatchListResponse",
    "BatchResponse",
    "BatchResultResponse",
    "CheckRequest",
    "DashboardStatsResponse",
    "GlobalStatsResponse",
    "HistoryResponse",
    "LoginRequest",
    "MeResponse",
    "RegisterRequest",
    "ScanResponse",
    "SecurityTokenResponse",
    "SuccessResponse",
    "UpdatePlanRequest",
    "UserResponse",
]
