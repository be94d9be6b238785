"""
Records API endpoint.

GET /api/records — stored records (optionally filtered) + statistics
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.sales import store
from app.sales.database import get_db
from app.sales.pipeline import aggregate
from app.sales.schemas import RecordsFilter, RecordsResponse, StoredRecord

logger = logging.getLogger(__name__)
router = APIRouter()


# ── GET /api/records ─────────────────────────────────────────────────────
@router.get("/records", response_model=RecordsResponse)
def list_records(
    upload_id: Optional[str] = Query(None),
    date_from: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    date_to: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    tour_name: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    flt = RecordsFilter(
        upload_id=upload_id,
        date_from=date_from,
        date_to=date_to,
        tour_name=tour_name,
        search=search,
    )
    if flt.has_filters():
        rows = store.query_filtered(db, flt)
    else:
        rows = store.query_all(db, upload_id)
    logger.info("Found %d records (filtered=%s)", len(rows), flt.has_filters())

    return RecordsResponse(
        records=[StoredRecord.model_validate(r) for r in rows],
        statistics=aggregate(rows),
    )
