"""
app/schemas/dashboard.py

Response schemas for history and per-user dashboard endpoints.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ScanResponse(BaseModel):
    url: str
    status: str
    checked_at: datetime


class HistoryResponse(BaseModel):
    results: list[ScanResponse] = Field(default_factory=list)


class DashboardStatsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_checked: int = Field(..., ge=0, alias="totalChecked")
    total_indexed: int = Field(..., ge=0, alias="totalIndexed")
    avg_index_rate: int = Field(..., ge=0, le=100, alias="avgIndexRate")
    last_checked: datetime | None = Field(default=None, alias="lastChecked")
    last_batch_size: int = Field(default=0, ge=0, alias="lastBatchSize")


class BatchResponse(BaseModel):
    id: UUID
    total_urls: int
    indexed_count: int
    created_at: datetime


class BatchListResponse(BaseModel):
    batches: list[BatchResponse] = Field(default_factory=list)


class BatchResultResponse(BaseModel):
    url: str
    status: str
    engine: str | None = None
    checked_at: datetime


class BatchDetailResponse(BaseModel):
    batch: BatchResponse
    results: list[BatchResultResponse] = Field(default_factory=list)
