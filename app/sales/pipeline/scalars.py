"""
Scalar decoders for report cells and order-text lines.

None of these raise on bad input: an unparseable value comes back as
``None`` (numbers) or unchanged (dates / times) and the caller decides what
an unknown field means.
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta
from typing import Any

# Whitespace that shows up inside formatted numbers, NBSP and narrow NBSP included
SPACE_PATTERN = re.compile(r"[\s\u00A0\u202F]")

_LEADING_NUMBER = re.compile(r"^[-+]?(?:\d+(?:\.\d*)?|\.\d+)")
_LEADING_INT = re.compile(r"^[-+]?\d+")

_DOTTED_DATE = re.compile(r"^(\d{2})\.(\d{2})\.(\d{4})$")
_CLOCK_TIME = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")

# Day-count serials are counted from 1899-12-30 (the 1900 leap-year bug folded in)
SERIAL_EPOCH = date(1899, 12, 30)
SERIAL_MIN = 40000
SERIAL_MAX = 60000

MONTHS: dict[str, str] = {
    "янв": "01", "января": "01",
    "фев": "02", "февраля": "02",
    "мар": "03", "марта": "03",
    "апр": "04", "апреля": "04",
    "май": "05", "мая": "05",
    "июн": "06", "июня": "06",
    "июл": "07", "июля": "07",
    "авг": "08", "августа": "08",
    "сен": "09", "сентября": "09",
    "окт": "10", "октября": "10",
    "ноя": "11", "ноября": "11",
    "дек": "12", "декабря": "12",
}

# "04 янв 2026 в 12:00"
_ORDER_DATETIME = re.compile(r"(\d{1,2})\s+(\S+)\s+(\d{4})\s+в\s+(\d{1,2}):(\d{2})")

# Amount right before the ruble sign; "1 200,00 ₽" and "1200.00 ₽" both count
_RUBLE_AMOUNT = re.compile(
    r"(\d{1,3}(?:[\s\u00A0\u202F]\d{3})+(?:[.,]\d+)?|\d+(?:[.,]\d+)?)\s*₽"
)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def cell_text(value: Any) -> str:
    """Render a grid cell the way the report shows it."""
    if _is_missing(value):
        return ""
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.strftime("%d.%m.%Y")
        return value.strftime("%d.%m.%Y %H:%M")
    if isinstance(value, date):
        return value.strftime("%d.%m.%Y")
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def decode_decimal(raw: Any) -> float | None:
    """Parse ``"1 234,50"`` / ``"1234.50"`` style numbers."""
    if _is_missing(raw) or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return None
        return value if math.isfinite(value) else None

    cleaned = SPACE_PATTERN.sub("", str(raw)).replace(",", ".")
    m = _LEADING_NUMBER.match(cleaned)
    if not m:
        return None
    value = float(m.group(0))
    return value if math.isfinite(value) else None


def decode_int(raw: Any) -> int | None:
    if _is_missing(raw) or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None

    m = _LEADING_INT.match(SPACE_PATTERN.sub("", str(raw)))
    if not m:
        return None
    try:
        return int(m.group(0))
    except ValueError:
        # past the interpreter's int-string conversion limit
        return None


def _serial_day(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return None
    else:
        try:
            value = float(str(raw).strip())
        except ValueError:
            return None
    if not math.isfinite(value) or not SERIAL_MIN <= value < SERIAL_MAX:
        return None
    return int(value)


def is_date_like(raw: Any) -> bool:
    """True for ``DD.MM.YYYY`` text or a spreadsheet day serial."""
    if isinstance(raw, (date, datetime)):
        return True
    if _is_missing(raw):
        return False
    if _DOTTED_DATE.match(str(raw).strip()):
        return True
    return _serial_day(raw) is not None


def decode_spreadsheet_date(raw: Any) -> str:
    """Normalize a report date cell to ``YYYY-MM-DD``.

    Values in neither encoding are returned as-is (stripped).
    """
    if _is_missing(raw):
        return ""
    if isinstance(raw, datetime):
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()

    text = str(raw).strip()
    m = _DOTTED_DATE.match(text)
    if m:
        day, month, year = m.groups()
        return f"{year}-{month}-{day}"

    serial = _serial_day(raw)
    if serial is not None:
        return (SERIAL_EPOCH + timedelta(days=serial)).isoformat()
    return text


def decode_clock_time(raw: Any) -> str:
    if _is_missing(raw):
        return ""
    if isinstance(raw, (datetime, time)):
        return raw.strftime("%H:%M")

    text = str(raw).strip()
    m = _CLOCK_TIME.match(text)
    if m:
        return f"{int(m.group(1)):02d}:{m.group(2)}"
    return text


def decode_order_datetime(line: str) -> tuple[str, str]:
    """Return ``(date, time)`` from an order's date line, or ``("", "")``."""
    m = _ORDER_DATETIME.search(line)
    if not m:
        return "", ""

    day, month_name, year, hour, minute = m.groups()
    month = MONTHS.get(month_name.lower().rstrip("."), "01")
    return f"{year}-{month}-{day.zfill(2)}", f"{hour.zfill(2)}:{minute}"


def decode_ruble_amount(line: str) -> float:
    m = _RUBLE_AMOUNT.search(line)
    if not m:
        return 0.0
    return decode_decimal(m.group(1)) or 0.0
