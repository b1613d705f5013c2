"""
Shared data models for the index-check pipeline.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


class CheckStatus:
    INDEXED = "INDEXED"
    NOT_INDEXED = "NOT_INDEXED"
    ERROR = "ERROR"

    CACHEABLE = frozenset({INDEXED, NOT_INDEXED})


class CheckEngine:
    CACHE = "Cache"
    PRIMARY_API = "PrimaryAPI"
    AUTOMATION_PRIMARY = "AutomationPrimary"
    AUTOMATION_SECONDARY = "AutomationSecondary"


@dataclass(frozen=True)
class CacheEntry:
    """
    Most recent cached observation for one URL.
    """

    url: str
    status: str
    checked_at: datetime

    def is_fresh(self, max_age_hours: float, *, now: datetime | None = None) -> bool:
        reference = now or datetime.now(timezone.utc)
        checked_at = self.checked_at
        if checked_at.tzinfo is None:
            checked_at = checked_at.replace(tzinfo=timezone.utc)
        return reference - checked_at <= timedelta(hours=max_age_hours)


@dataclass(frozen=True)
class EngineCheckResult:
    """
    Answer from one backend for one URL.
    """

    url: str
    status: str
    error: str | None = None
    checked_at: datetime | None = None


@dataclass(frozen=True)
class CheckOutcome:
    """
    Final verdict for one URL occurrence in a batch.
    """

    url: str
    status: str
    engine: str
    checked_at: datetime


@dataclass(frozen=True)
class CheckProgress:
    """
    One completed outcome plus running progress counters.
    """

    outcome: CheckOutcome
    completed: int
    total: int


@dataclass(frozen=True)
class CheckOptions:
    """
    Per-batch options chosen at submission time.
    """

    economy_mode: bool = False
    batch_id: uuid.UUID | None = None


@dataclass(frozen=True)
class BatchSummary:
    """
    Storage-agnostic view of a persisted batch.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    total_urls: int
    indexed_count: int
    created_at: datetime
