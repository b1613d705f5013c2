"""
db/models/app_setting.py

Admin-controlled key/value switches.
"""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class SettingKey:
    GUEST_MODE = "guest_mode"
    PUBLIC_SIGNUP = "public_signup"


class AppSetting(Base, TimestampMixin):
    __tablename__ = "app_settings"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(String(255), nullable=False)
