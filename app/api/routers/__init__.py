"""
app/api/routers package marker.
"""

from app.api.routers.admin_router import router as admin_router
from app.api.routers.auth_router import router as auth_router
from app.api.routers.check_router import router as check_router
from app.api.routers.dashboard_router import router as dashboard_router

__all__ = [
    "admin_router",
    "auth_router",
    "check_router",
    "dashboard_router",
]
