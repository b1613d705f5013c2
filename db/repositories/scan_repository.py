"""
Repository for the append-only scan history.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db.models.scan import Scan


class ScanRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def add_scan(self, *, url: str, status: str) -> Scan:
        scan = Scan(url=url, status=status)
        self._session.add(scan)
        self._session.flush()
        return scan

    def latest_for_url(self, url: str) -> Scan | None:
        stmt = (
            select(Scan)
            .where(Scan.url == url)
            .order_by(Scan.checked_at.desc(), Scan.id.desc())
            .limit(1)
        )
        return self._session.scalars(stmt).first()

    def list_recent(self, *, limit: int = 20) -> list[Scan]:
        stmt = select(Scan).order_by(Scan.id.desc()).limit(max(1, limit))
        return list(self._session.scalars(stmt).all())

    def count_scans(self, *, status: str | None = None) -> int:
        stmt = select(func.count(Scan.id))
        if status:
            stmt = stmt.where(Scan.status == status)
        return int(self._session.scalar(stmt) or 0)
