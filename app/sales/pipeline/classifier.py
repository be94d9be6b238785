"""
Rule-based row classifier for the reconciliation report.

Each grid row is tagged by shape and by the carried-forward parse context.
The rules run in a fixed priority order; the first one that fits wins.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Any, Optional, Sequence

from pydantic import BaseModel

from app.sales.pipeline.scalars import (
    cell_text,
    decode_clock_time,
    decode_decimal,
    decode_int,
    decode_spreadsheet_date,
    is_date_like,
)
from app.sales.schemas import DEFAULT_TOUR_NAME, SaleRecord


class RowKind(str, Enum):
    BLANK = "blank"
    TICKETS_FOOTER = "tickets_footer"
    COMMISSION_FOOTER = "commission_footer"
    TERMINAL = "terminal"
    TOUR_COMMISSION = "tour_commission"
    NEW_TOUR = "new_tour"
    HEADER = "header"
    ORDER = "order"
    CONTINUATION = "continuation"
    UNRECOGNIZED = "unrecognized"


class ClassifiedRow(BaseModel):
    kind: RowKind
    record: Optional[SaleRecord] = None
    tour_name: Optional[str] = None
    count: Optional[int] = None
    amount: Optional[float] = None


class ParseContext(BaseModel):
    """State carried from one row to the next during a single decode."""
    upload_id: str
    current_tour_name: str = ""
    last_record: Optional[SaleRecord] = None


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

TICKETS_TOTAL_MARKER = "всего реализовано"
COMMISSION_TOTAL_MARKER = "суммарная комиссия"
TERMINAL_MARKER = "итого к перечислению"
TOUR_COMMISSION_MARKER = "комиссия за все заказы данной экскурсии"

RESERVED_TOKENS = frozenset({"гиду", "спутнику", "время"})
RESERVED_FRAGMENTS = ("id", "дата")

# "Всего реализовано билетов: 3069 на сумму 7556750.0 RUB"
_TICKETS_TOTAL = re.compile(r"(\d+)\s+на\s+сумму\s+([\d.,]+)")
# "Суммарная комиссия ООО "СПУТНИК" за период: 1603210.0 RUB"
_COMMISSION_TOTAL = re.compile(r"([\d.,]+)\s*rub", re.IGNORECASE)


def _cell(cells: Sequence[str], idx: int) -> str:
    return cells[idx] if idx < len(cells) else ""


def _is_new_tour(first: str, second: str) -> bool:
    if not first or is_date_like(first) or len(first) <= 3:
        return False
    if second in RESERVED_TOKENS:
        return False
    return not any(fragment in second for fragment in RESERVED_FRAGMENTS)


def _is_header(first: str, second: str, third: str) -> bool:
    return (
        (first == "дата" and second == "время")
        or (second == "гиду" and third == "спутнику")
        or second == "время"
        or "id заказа" in first
    )


def _order_record(cells: Sequence[str], context: ParseContext) -> SaleRecord:
    # date, time, order id, participant, category, price, qty, paid,
    # (unused), commission %, guide, platform, comment
    return SaleRecord(
        upload_id=context.upload_id,
        tour_name=context.current_tour_name or DEFAULT_TOUR_NAME,
        date=decode_spreadsheet_date(_cell(cells, 0)) or None,
        time=decode_clock_time(_cell(cells, 1)) or None,
        order_id=_cell(cells, 2) or None,
        participant_name=_cell(cells, 3) or None,
        ticket_category=_cell(cells, 4) or None,
        ticket_price=decode_decimal(_cell(cells, 5)),
        quantity=decode_int(_cell(cells, 6)),
        paid_amount=decode_decimal(_cell(cells, 7)),
        commission_percent=decode_decimal(_cell(cells, 9)) or None,
        guide_amount=decode_decimal(_cell(cells, 10)),
        platform_amount=decode_decimal(_cell(cells, 11)),
        comment=_cell(cells, 12) or None,
    )


def _continuation_record(cells: Sequence[str], last: SaleRecord) -> SaleRecord:
    # Shifted layout: (blank), category, price, qty. The report does not
    # restate paid / payout amounts for extra ticket lines.
    return SaleRecord(
        upload_id=last.upload_id,
        tour_name=last.tour_name,
        date=last.date,
        time=last.time,
        order_id=last.order_id,
        participant_name=last.participant_name,
        ticket_category=_cell(cells, 1),
        ticket_price=decode_decimal(_cell(cells, 2)),
        quantity=decode_int(_cell(cells, 3)),
        commission_percent=last.commission_percent,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def classify_row(row: Sequence[Any], context: ParseContext) -> ClassifiedRow:
    """Tag one grid row. Does not modify *context*."""
    cells = [cell_text(c) for c in row]
    if not any(cells):
        return ClassifiedRow(kind=RowKind.BLANK)

    first = _cell(cells, 0).lower()
    second = _cell(cells, 1).lower()
    third = _cell(cells, 2).lower()

    # ── document footer ──
    if TICKETS_TOTAL_MARKER in first:
        m = _TICKETS_TOTAL.search(first)
        if not m:
            return ClassifiedRow(kind=RowKind.TICKETS_FOOTER)
        return ClassifiedRow(
            kind=RowKind.TICKETS_FOOTER,
            count=decode_int(m.group(1)),
            amount=decode_decimal(m.group(2)),
        )

    if COMMISSION_TOTAL_MARKER in first:
        m = _COMMISSION_TOTAL.search(first)
        return ClassifiedRow(
            kind=RowKind.COMMISSION_FOOTER,
            amount=decode_decimal(m.group(1)) if m else None,
        )

    if TERMINAL_MARKER in first:
        return ClassifiedRow(kind=RowKind.TERMINAL)

    # ── per-tour footer ──
    if TOUR_COMMISSION_MARKER in first:
        last = context.last_record
        return ClassifiedRow(
            kind=RowKind.TOUR_COMMISSION,
            tour_name=last.tour_name if last else None,
            amount=decode_decimal(_cell(cells, 3)),
        )

    if _is_new_tour(first, second):
        return ClassifiedRow(kind=RowKind.NEW_TOUR, tour_name=_cell(cells, 0))

    if _is_header(first, second, third):
        return ClassifiedRow(kind=RowKind.HEADER)

    # ── order data ──
    if is_date_like(first):
        return ClassifiedRow(kind=RowKind.ORDER, record=_order_record(cells, context))

    if not first:
        category = _cell(cells, 1)
        if category.lower() in RESERVED_TOKENS:
            return ClassifiedRow(kind=RowKind.HEADER)
        if not category or context.last_record is None:
            return ClassifiedRow(kind=RowKind.UNRECOGNIZED)
        return ClassifiedRow(
            kind=RowKind.CONTINUATION,
            record=_continuation_record(cells, context.last_record),
        )

    return ClassifiedRow(kind=RowKind.UNRECOGNIZED)
