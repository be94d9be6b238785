"""
Rule-based decoder for one pasted order.

Expected shape (blank lines already dropped)::

    5113680
    <tour name>
    04 янв 2026 в 12:00
    <status>
    Предоплата: 1200.00 ₽
    Оплата на месте: 3800.00 ₽
    Учтена скидка: —
    <participant>
    +79001234567
    anna@example.com
    2 билета:
    Взрослый 12+ (4 часа) x2

Only the first four lines are positional; everything else is found by shape.
"""
from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, Field

from app.sales.pipeline.scalars import (
    decode_int,
    decode_order_datetime,
    decode_ruble_amount,
)
from app.sales.pipeline.segmenter import ORDER_ID_PATTERN

MIN_ORDER_LINES = 5

PREPAYMENT_MARKER = "Предоплата:"
ON_SPOT_MARKER = "Оплата на месте:"
DISCOUNT_MARKER = "Учтена скидка:"
NO_DISCOUNT = "—"

_PHONE = re.compile(r"^\+?\d{10,12}$")
_EMAIL_SUFFIX = re.compile(r"\.[a-z]{2,}$", re.IGNORECASE)
_TICKETS_HEADER = re.compile(r"^\d+\s+билет", re.IGNORECASE)
# "Взрослый 12+ (4 часа) x2"; Cyrillic "х" and "×" are typed for "x" too
_TICKET_LINE = re.compile(r"^(.+?)\s+[xх×](\d+)$", re.IGNORECASE)


class TicketLine(BaseModel):
    category: str
    quantity: int


class ParsedOrder(BaseModel):
    order_id: str
    tour_name: str
    date: str = ""
    time: str = ""
    status: str = ""
    prepayment: float = 0.0
    payment_on_spot: float = 0.0
    discount: str = NO_DISCOUNT
    participant_name: str = ""
    phone: str = ""
    email: str = ""
    tickets: list[TicketLine] = Field(default_factory=list)


def _find_contacts(lines: list[str]) -> tuple[str, str, str]:
    """Return ``(participant_name, phone, email)``; later matches win."""
    participant_name = phone = email = ""
    for idx, line in enumerate(lines):
        if _PHONE.match(re.sub(r"\s", "", line)):
            phone = line
            # the name sits on the line right above the phone
            prev = lines[idx - 1] if idx > 0 else ""
            if prev and ":" not in prev and "₽" not in prev:
                participant_name = prev
        if "@" in line and _EMAIL_SUFFIX.search(line):
            email = line
    return participant_name, phone, email


def _find_tickets(lines: list[str]) -> list[TicketLine]:
    tickets: list[TicketLine] = []
    started = False
    for line in lines:
        if _TICKETS_HEADER.match(line):
            started = True
            continue
        if not started:
            continue
        m = _TICKET_LINE.match(line)
        if not m:
            continue
        quantity = decode_int(m.group(2))
        if quantity is not None:
            tickets.append(TicketLine(category=m.group(1).strip(), quantity=quantity))
    return tickets


def decode_order(lines: list[str]) -> Optional[ParsedOrder]:
    """Decode one order's lines, or return None if the chunk is not an order."""
    lines = [line.strip() for line in lines if line.strip()]
    if len(lines) < MIN_ORDER_LINES:
        return None
    if not ORDER_ID_PATTERN.match(lines[0]):
        return None

    order_date, order_time = decode_order_datetime(lines[2])

    prepayment = 0.0
    payment_on_spot = 0.0
    discount = NO_DISCOUNT
    for line in lines:
        if line.startswith(PREPAYMENT_MARKER):
            prepayment = decode_ruble_amount(line)
        elif line.startswith(ON_SPOT_MARKER):
            payment_on_spot = decode_ruble_amount(line)
        elif line.startswith(DISCOUNT_MARKER):
            discount = line[len(DISCOUNT_MARKER):].strip()

    participant_name, phone, email = _find_contacts(lines)

    return ParsedOrder(
        order_id=lines[0],
        tour_name=lines[1],
        date=order_date,
        time=order_time,
        status=lines[3],
        prepayment=prepayment,
        payment_on_spot=payment_on_spot,
        discount=discount,
        participant_name=participant_name,
        phone=phone,
        email=email,
        tickets=_find_tickets(lines),
    )
