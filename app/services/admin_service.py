"""
app/services/admin_service.py

Administrative statistics, plan management and feature switches.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from sqlalchemy.orm import Session

from app.schemas.admin import AdminConfigResponse, AdminStatsResponse, GlobalStatsResponse
from app.schemas.auth import UserResponse
from app.schemas.dashboard import ScanResponse
from db.models.app_setting import SettingKey
from db.repositories.batch_repository import BatchRepository
from db.repositories.scan_repository import ScanRepository
from db.repositories.setting_repository import SettingRepository
from db.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

RECENT_CHECKS_LIMIT = 10


def _flag(value: str | None, default: bool = True) -> bool:
    if value is None:
        return default
    return value == "true"


class AdminService:
    def stats(self, *, db: Session) -> AdminStatsResponse:
        scans = ScanRepository(db)
        return AdminStatsResponse(
            stats=GlobalStatsResponse(
                total_users=UserRepository(db).count_users(),
                total_scans=scans.count_scans(),
                indexed_scans=scans.count_scans(status="INDEXED"),
                total_batches=BatchRepository(db).count_batches(),
            ),
            recent_checks=[
                ScanResponse(url=scan.url, status=scan.status, checked_at=scan.checked_at)
                for scan in scans.list_recent(limit=RECENT_CHECKS_LIMIT)
            ],
        )

    def list_users(self, *, db: Session) -> list[UserResponse]:
        return [
            UserResponse(id=user.id, email=user.email, name=user.name, plan=user.plan, role=user.role)
            for user in UserRepository(db).list_users()
        ]

    def set_plan(self, *, db: Session, email: str, plan: str) -> None:
        try:
            UserRepository(db).set_plan(email=email, plan=plan)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("Set plan for %s to %s", email, plan)

    def get_config(self, *, db: Session) -> AdminConfigResponse:
        settings = SettingRepository(db)
        return AdminConfigResponse(
            guest_mode=_flag(settings.get(SettingKey.GUEST_MODE)),
            public_signup=_flag(settings.get(SettingKey.PUBLIC_SIGNUP)),
        )

    def update_config(
        self,
        *,
        db: Session,
        guest_mode: bool | None = None,
        public_signup: bool | None = None,
    ) -> AdminConfigResponse:
        settings = SettingRepository(db)
        try:
            if guest_mode is not None:
                settings.upsert(SettingKey.GUEST_MODE, str(guest_mode).lower())
            if public_signup is not None:
                settings.upsert(SettingKey.PUBLIC_SIGNUP, str(public_signup).lower())
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("Updated config guest_mode=%s public_signup=%s", guest_mode, public_signup)
        return self.get_config(db=db)


@lru_cache(maxsize=1)
def get_admin_service() -> AdminService:
    return AdminService()
