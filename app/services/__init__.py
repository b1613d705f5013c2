"""
app/services package marker.
"""

from app.services.account_service import AccountService, SignupDisabledError, get_account_service
from app.services.admin_service import AdminService, get_admin_service
from app.services.check_service import (
    CheckAdmission,
    CheckAdmissionError,
    CheckService,
    get_check_service,
)
from app.services.dashboard_service import DashboardService, get_dashboard_service

__all__ = [
    "AccountService",
    "SignupDisabledError",
    "get_account_service",
    "AdminService",
    "get_admin_service",
    "CheckAdmission",
    "CheckAdmissionError",
    "CheckService",
    "get_check_service",
    "DashboardService",
    "get_dashboard_service",
]
