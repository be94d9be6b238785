"""
Record store: batch insert, queries and whole-batch deletion.

Records are never updated in place; re-ingesting a document creates a new
batch.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.sales.models import SaleRecordModel
from app.sales.schemas import RecordsFilter, SaleRecord, UploadInfo

logger = logging.getLogger(__name__)

# Moscow has stayed on UTC+3 without DST since 2014
MSK = timezone(timedelta(hours=3), "MSK")


def moscow_timestamp() -> str:
    return datetime.now(MSK).strftime("%Y-%m-%d %H:%M:%S")


def _contains(value: str | None, needle: str) -> bool:
    # SQLite LIKE folds ASCII case only; Cyrillic needs casefold()
    return bool(value) and needle in value.casefold()


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def insert_batch(db: Session, records: Iterable[SaleRecord]) -> int:
    created_at = moscow_timestamp()
    rows = [
        SaleRecordModel(**record.model_dump(), created_at=created_at)
        for record in records
    ]
    db.add_all(rows)
    db.commit()
    logger.info("Stored %d records", len(rows))
    return len(rows)


def delete_batch(db: Session, upload_id: str) -> int:
    deleted = (
        db.query(SaleRecordModel)
        .filter(SaleRecordModel.upload_id == upload_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("Deleted upload %s (%d records)", upload_id, deleted)
    return deleted


def delete_all(db: Session) -> int:
    deleted = db.query(SaleRecordModel).delete(synchronize_session=False)
    db.commit()
    logger.info("Deleted all records (%d)", deleted)
    return deleted


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def query_all(db: Session, upload_id: str | None = None) -> list[SaleRecordModel]:
    query = db.query(SaleRecordModel)
    if upload_id:
        return (
            query.filter(SaleRecordModel.upload_id == upload_id)
            .order_by(SaleRecordModel.date.desc(), SaleRecordModel.id)
            .all()
        )
    return query.order_by(SaleRecordModel.created_at.desc(), SaleRecordModel.id).all()


def query_filtered(db: Session, flt: RecordsFilter) -> list[SaleRecordModel]:
    query = db.query(SaleRecordModel)
    if flt.upload_id:
        query = query.filter(SaleRecordModel.upload_id == flt.upload_id)
    if flt.date_from:
        query = query.filter(SaleRecordModel.date >= flt.date_from)
    if flt.date_to:
        query = query.filter(SaleRecordModel.date <= flt.date_to)

    rows = query.order_by(
        SaleRecordModel.date.desc(), SaleRecordModel.time.desc(), SaleRecordModel.id
    ).all()

    if flt.tour_name:
        needle = flt.tour_name.casefold()
        rows = [r for r in rows if _contains(r.tour_name, needle)]
    if flt.search:
        needle = flt.search.casefold()
        rows = [
            r for r in rows
            if _contains(r.tour_name, needle)
            or _contains(r.participant_name, needle)
            or _contains(r.order_id, needle)
        ]
    return rows


def list_uploads(db: Session) -> list[UploadInfo]:
    rows = (
        db.query(
            SaleRecordModel.upload_id,
            func.count(SaleRecordModel.id).label("record_count"),
            func.min(SaleRecordModel.created_at).label("created_at"),
        )
        .group_by(SaleRecordModel.upload_id)
        .order_by(func.min(SaleRecordModel.created_at).desc())
        .all()
    )
    return [
        UploadInfo(upload_id=r.upload_id, record_count=r.record_count, created_at=r.created_at)
        for r in rows
    ]
