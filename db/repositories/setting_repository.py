"""
Repository for admin-controlled application settings.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from db.models.app_setting import AppSetting


class SettingRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, key: str) -> str | None:
        row = self._session.scalars(select(AppSetting).where(AppSetting.key == key)).first()
        return row.value if row is not None else None

    def upsert(self, key: str, value: str) -> None:
        stmt = insert(AppSetting).values(key=key, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[AppSetting.key],
            set_={"value": value},
        )
        self._session.execute(stmt)
