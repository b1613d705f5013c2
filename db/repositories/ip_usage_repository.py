"""
Repository for per-IP daily guest usage.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import case, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from db.models.ip_usage import IPUsage


class IPUsageRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_count(self, ip: str, *, today: date) -> int:
        row = self._session.scalars(select(IPUsage).where(IPUsage.ip == ip)).first()
        if row is None or row.usage_date != today:
            return 0
        return int(row.count)

    def increment(self, ip: str, amount: int, *, today: date) -> None:
        """
        Add `amount` to today's counter, restarting it when the stored day is stale.
        """

        stmt = insert(IPUsage).values(ip=ip, count=amount, usage_date=today)
        stmt = stmt.on_conflict_do_update(
            index_elements=[IPUsage.ip],
            set_={
                "count": case(
                    (IPUsage.usage_date == today, IPUsage.count + amount),
                    else_=amount,
                ),
                "usage_date": today,
            },
        )
        self._session.execute(stmt)
