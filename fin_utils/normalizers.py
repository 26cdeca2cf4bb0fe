from __future__ import annotations

import re
from datetime import date
from typing import Optional


# ---------------- Amounts ----------------

_NON_NUMERIC = re.compile(r"[^\d.]")


def parse_number(token: Optional[str]) -> Optional[float]:
    """
    Turn an OCR number token into a float.
      "1,234.50" -> 1234.5
      "11.83"    -> 11.83
      ","        -> None
    Thousands separators and stray symbols are dropped; a token with more
    than one decimal point keeps only the first.
    """
    if not token:
        return None
    s = _NON_NUMERIC.sub("", str(token))
    if s.count(".") > 1:
        head, _, tail = s.partition(".")
        s = head + "." + tail.replace(".", "")
    if not s or s == ".":
        return None
    try:
        return float(s)
    except ValueError:
        return None


def within_bounds(value: Optional[float], upper: float, lower: float = 0.0) -> bool:
    """True for lower < value < upper."""
    return value is not None and lower < value < upper


# ---------------- Dates ----------------

MONTHS = {
    "JAN": 1,
    "FEB": 2,
    "MAR": 3,
    "APR": 4,
    "MAY": 5,
    "JUN": 6,
    "JUL": 7,
    "AUG": 8,
    "SEP": 9,
    "SEPT": 9,
    "OCT": 10,
    "NOV": 11,
    "DEC": 12,
}

NUMERIC_RX = re.compile(r"^\s*(\d{1,2})[/-](\d{1,2})[/-](\d{2,4})\s*$")
YMD_RX = re.compile(r"^\s*(\d{4})[./-](\d{1,2})[./-](\d{1,2})\s*$")
D_MON_Y_RX = re.compile(r"^\s*(\d{1,2})\s+([A-Za-z]{3,})\.?,?\s+(\d{2,4})\s*$")
MON_D_Y_RX = re.compile(r"^\s*([A-Za-z]{3,})\.?\s+(\d{1,2}),?\s+(\d{2,4})\s*$")


def _clip_year(y: int) -> int:
    if y < 100:
        return 2000 + y if y < 70 else 1900 + y
    return y


def _month_number(name: str) -> Optional[int]:
    key = name.strip().upper()
    return MONTHS.get(key[:4]) or MONTHS.get(key[:3])


def _make(y: int, m: int, d: int) -> Optional[str]:
    try:
        return date(_clip_year(y), m, d).isoformat()
    except ValueError:
        return None


def to_iso_date(raw: Optional[str], *, day_first: bool = False) -> Optional[str]:
    """
    Normalize a date token to ISO "YYYY-MM-DD"; None when it cannot be parsed.

    Numeric forms are read month-first unless day_first is set. A numeric
    form that is impossible month-first (13/02/2024) is retried day-first.
    """
    if not raw:
        return None
    s = raw.strip()

    m = YMD_RX.match(s)
    if m:
        return _make(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = D_MON_Y_RX.match(s)
    if m:
        mon = _month_number(m.group(2))
        return _make(int(m.group(3)), mon, int(m.group(1))) if mon else None

    m = MON_D_Y_RX.match(s)
    if m:
        mon = _month_number(m.group(1))
        return _make(int(m.group(3)), mon, int(m.group(2))) if mon else None

    m = NUMERIC_RX.match(s)
    if m:
        a, b, y = int(m.group(1)), int(m.group(2)), int(m.group(3))
        first, second = (b, a) if day_first else (a, b)
        return _make(y, first, second) or _make(y, second, first)

    return None
