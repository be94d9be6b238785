"""
Turn a decoded order into sale records.

The pasted text carries one total per order and no per-category prices, so
the total is split evenly per ticket across all categories.
"""
from __future__ import annotations

from typing import Optional

from app.sales.pipeline.orders import ParsedOrder
from app.sales.schemas import SaleRecord


def _contact_comment(order: ParsedOrder) -> Optional[str]:
    if order.phone:
        return f"{order.phone} / {order.email}"
    return order.email or None


def order_to_records(order: ParsedOrder, upload_id: str) -> list[SaleRecord]:
    total_amount = order.prepayment + order.payment_on_spot
    common = dict(
        upload_id=upload_id,
        tour_name=order.tour_name,
        date=order.date or None,
        time=order.time or None,
        order_id=order.order_id,
        participant_name=order.participant_name or None,
        comment=_contact_comment(order),
    )

    if not order.tickets:
        return [
            SaleRecord(
                **common,
                ticket_price=total_amount,
                quantity=1,
                paid_amount=total_amount,
            )
        ]

    ticket_count = sum(t.quantity for t in order.tickets)
    price_per_ticket = total_amount / ticket_count if ticket_count > 0 else 0.0
    return [
        SaleRecord(
            **common,
            ticket_category=ticket.category,
            ticket_price=price_per_ticket,
            quantity=ticket.quantity,
            paid_amount=price_per_ticket * ticket.quantity,
        )
        for ticket in order.tickets
    ]
