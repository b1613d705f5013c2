"""
Repository layer exports.
"""

from db.repositories.batch_repository import BatchRepository
from db.repositories.errors import (
    BatchNotFoundError,
    RepositoryError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from db.repositories.ip_usage_repository import IPUsageRepository
from db.repositories.scan_repository import ScanRepository
from db.repositories.setting_repository import SettingRepository
from db.repositories.user_repository import UserRepository

__all__ = [
    "BatchRepository",
    "IPUsageRepository",
    "ScanRepository",
    "SettingRepository",
    "UserRepository",
    "RepositoryError",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "BatchNotFoundError",
]
