"""
db/models/ip_usage.py

Daily guest URL consumption per client IP.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class IPUsage(Base):
    __tablename__ = "ip_usage"

    ip: Mapped[str] = mapped_column(String(64), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    usage_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="UTC day the count applies to; older rows count as zero",
    )
