"""
Summary statistics over any collection of sale records.

Works on pipeline ``SaleRecord`` objects and stored ORM rows alike; only the
attribute names matter. Missing numeric fields count as zero.
"""
from __future__ import annotations

from typing import Any, Iterable, Optional

from app.sales.schemas import Statistics


def _total(records: list[Any], attr: str) -> float:
    return sum(getattr(r, attr) or 0 for r in records)


def aggregate(records: Iterable[Any]) -> Optional[Statistics]:
    """Return statistics for *records*, or None when there are none."""
    records = list(records)
    if not records:
        return None

    count = len(records)
    return Statistics(
        total_records=count,
        total_paid=_total(records, "paid_amount"),
        total_guide=_total(records, "guide_amount"),
        total_platform=_total(records, "platform_amount"),
        avg_ticket_price=_total(records, "ticket_price") / count,
        total_tickets=int(_total(records, "quantity")),
        unique_orders=len({r.order_id for r in records if r.order_id}),
    )
