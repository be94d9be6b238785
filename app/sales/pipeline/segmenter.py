"""
Split pasted order text into one line group per order.
"""
from __future__ import annotations

import re

ORDER_ID_PATTERN = re.compile(r"^\d{5,8}$")


def text_lines(text: str) -> list[str]:
    """Trimmed, non-blank lines of *text*."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def split_into_orders(text: str) -> list[list[str]]:
    """Start a new group at every bare order-id line.

    The first id line opens the first group instead of closing an empty one.
    Groups keep input order; sparse groups are left for the order decoder to
    reject.
    """
    orders: list[list[str]] = []
    current: list[str] = []

    for line in text_lines(text):
        if ORDER_ID_PATTERN.match(line) and current:
            orders.append(current)
            current = [line]
        else:
            current.append(line)

    if current:
        orders.append(current)
    return orders
