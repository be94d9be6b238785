"""
Reconciliation report decoder.

Walks the report grid top to bottom, carrying the current tour and the last
emitted record forward, and turns order / continuation rows into
``SaleRecord`` entries. Footer rows feed the run summary instead.
"""
from __future__ import annotations

import logging
from typing import Any, Sequence

from app.sales.pipeline.classifier import ParseContext, RowKind, classify_row
from app.sales.pipeline.errors import DecodeError
from app.sales.pipeline.scalars import cell_text
from app.sales.schemas import ParseResult, ParseRunSummary, SaleRecord

logger = logging.getLogger(__name__)

MIN_ROWS = 5


def _find_headers(grid: Sequence[Sequence[Any]]) -> list[str]:
    for row in grid:
        cells = [cell_text(c) for c in row]
        if len(cells) >= 2 and cells[0].lower() == "дата" and cells[1].lower() == "время":
            return cells
    return []


def _is_emittable(record: SaleRecord) -> bool:
    return bool(record.ticket_category or record.paid_amount)


def _decode_rows(grid: Sequence[Sequence[Any]], upload_id: str) -> ParseResult:
    context = ParseContext(upload_id=upload_id)
    records: list[SaleRecord] = []
    tour_commissions: dict[str, float] = {}
    summary = ParseRunSummary()

    for line_num, row in enumerate(grid, 1):
        row_class = classify_row(row or [], context)
        kind = row_class.kind

        if kind is RowKind.TERMINAL:
            logger.info("End marker at row %d", line_num)
            break

        if kind is RowKind.TICKETS_FOOTER:
            if row_class.count is not None:
                summary.total_tickets = row_class.count
            if row_class.amount is not None:
                summary.total_amount = row_class.amount
            logger.info(
                "Document totals: %d tickets, %.2f",
                summary.total_tickets, summary.total_amount,
            )
        elif kind is RowKind.COMMISSION_FOOTER:
            if row_class.amount is not None:
                summary.total_commission = row_class.amount
            logger.info("Document commission total: %.2f", summary.total_commission)
        elif kind is RowKind.TOUR_COMMISSION:
            if row_class.tour_name and row_class.amount:
                tour_commissions[row_class.tour_name] = row_class.amount
                logger.info(
                    "Tour commission for %r: %.2f", row_class.tour_name, row_class.amount
                )
        elif kind is RowKind.NEW_TOUR:
            context.current_tour_name = row_class.tour_name or ""
            logger.info("New tour: %s", context.current_tour_name)
        elif kind is RowKind.HEADER:
            logger.debug("Skipped header row %d", line_num)
        elif kind in (RowKind.ORDER, RowKind.CONTINUATION):
            record = row_class.record
            if record is not None and _is_emittable(record):
                records.append(record)
                context.last_record = record
        elif kind is RowKind.UNRECOGNIZED:
            logger.debug("Skipped unrecognized row %d", line_num)

    summary.tours = len({r.tour_name for r in records})
    logger.info("Parsed %d records across %d tours", len(records), summary.tours)

    return ParseResult(
        records=records,
        summary=summary,
        headers=_find_headers(grid),
        tour_commissions=tour_commissions,
    )


def parse_grid(grid: Sequence[Sequence[Any]], upload_id: str) -> ParseResult:
    """Decode a report grid (first sheet, rows of cells) into sale records.

    Raises ``DecodeError`` when the grid is too short to be a report or when
    decoding fails unexpectedly.
    """
    if len(grid) < MIN_ROWS:
        raise DecodeError("Файл не содержит достаточно данных")

    try:
        return _decode_rows(grid, upload_id)
    except DecodeError:
        raise
    except Exception as exc:
        logger.error("Error parsing report grid: %s", exc)
        raise DecodeError(f"Ошибка при парсинге файла: {exc}") from exc
