"""
Canonical schemas for the tour sales pipeline.

All pipeline stages and API envelopes produce and consume these Pydantic v2
models.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_TOUR_NAME = "Не указано"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class SaleRecord(BaseModel):
    """One ticket-category line item of one order."""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    upload_id: str = Field(..., description="Batch the record was ingested with")
    tour_name: Optional[str] = None
    date: Optional[str] = Field(default=None, description="YYYY-MM-DD")
    time: Optional[str] = Field(default=None, description="HH:MM")
    order_id: Optional[str] = None
    participant_name: Optional[str] = None
    ticket_category: Optional[str] = None
    ticket_price: Optional[float] = None
    quantity: Optional[int] = None
    paid_amount: Optional[float] = None
    commission_percent: Optional[float] = None
    guide_amount: Optional[float] = None
    platform_amount: Optional[float] = None
    comment: Optional[str] = None


class StoredRecord(SaleRecord):
    """A record as read back from the store."""
    id: int
    created_at: str


# ---------------------------------------------------------------------------
# Parse results
# ---------------------------------------------------------------------------

class ParseRunSummary(BaseModel):
    total_tickets: int = 0
    total_amount: float = 0.0
    total_commission: float = 0.0
    tours: int = 0


class ParseResult(BaseModel):
    records: list[SaleRecord] = Field(default_factory=list)
    summary: ParseRunSummary = Field(default_factory=ParseRunSummary)
    headers: list[str] = Field(default_factory=list)
    tour_commissions: dict[str, float] = Field(default_factory=dict)


class Statistics(BaseModel):
    total_records: int
    total_paid: float
    total_guide: float
    total_platform: float
    avg_ticket_price: float
    total_tickets: int
    unique_orders: int


# ---------------------------------------------------------------------------
# API request / response envelopes
# ---------------------------------------------------------------------------

class RecordsFilter(BaseModel):
    upload_id: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    tour_name: Optional[str] = None
    search: Optional[str] = None

    def has_filters(self) -> bool:
        return any((self.date_from, self.date_to, self.tour_name, self.search))


class RecordsResponse(BaseModel):
    records: list[StoredRecord] = Field(default_factory=list)
    statistics: Optional[Statistics] = None


class TextUploadRequest(BaseModel):
    text: str


class UploadResponse(BaseModel):
    success: bool = True
    upload_id: str
    record_count: int
    headers: list[str] = Field(default_factory=list)
    summary: ParseRunSummary
    message: str


class UploadInfo(BaseModel):
    upload_id: str
    record_count: int
    created_at: str


class UploadsResponse(BaseModel):
    uploads: list[UploadInfo] = Field(default_factory=list)
