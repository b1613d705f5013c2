"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.app_setting import AppSetting
from db.models.batch import Batch, BatchResult
from db.models.ip_usage import IPUsage
from db.models.scan import Scan
from db.models.user import User

__all__ = [
    "AppSetting",
    "Batch",
    "BatchResult",
    "IPUsage",
    "Scan",
    "User",
]
