from __future__ import annotations

import re
from datetime import date
from typing import Callable, List, Optional, Tuple

from fin_utils.normalizers import to_iso_date
from parser.strategies import Candidate

Today = Callable[[], date]

_FULL_MONTHS = (
    r"January|February|March|April|May|June|July|August|September|October"
    r"|November|December"
)
_ABBR_MONTHS = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*"

# (pattern, day_first) in the order they are tried.
DATE_PATTERNS: List[Tuple[re.Pattern, bool]] = [
    (re.compile(rf"\b(\d{{1,2}}\s+(?:{_FULL_MONTHS})\s+\d{{4}})\b", re.I), False),
    (re.compile(rf"\b(\d{{1,2}}\s+{_ABBR_MONTHS}\.?\s+\d{{4}})\b", re.I), False),
    (re.compile(r"\b(\d{1,2}/\d{1,2}/\d{2,4})\b"), False),  # MM/DD/YYYY
    (re.compile(r"\b(\d{1,2}-\d{1,2}-\d{2,4})\b"), False),  # MM-DD-YYYY
    (re.compile(r"\b(\d{4}-\d{2}-\d{2})\b"), False),  # YYYY-MM-DD
    (re.compile(r"\b(\d{1,2}/\d{1,2}/\d{4})\b"), True),  # DD/MM/YYYY
    (re.compile(r"DATE[:\s]*(\d{1,2}/\d{1,2}/\d{2,4})", re.I), False),
    (re.compile(rf"DATE[:\s]*(\d{{1,2}}\s+{_ABBR_MONTHS}\.?\s+\d{{4}})", re.I), False),
]


def extract_date(text: str, today: Optional[Today] = None) -> Candidate:
    """
    First pattern whose first match parses wins, normalized to ISO;
    otherwise today's date with zero strength.
    """
    for i, (pattern, day_first) in enumerate(DATE_PATTERNS):
        m = pattern.search(text or "")
        if not m:
            continue
        iso = to_iso_date(m.group(1), day_first=day_first)
        if iso:
            return Candidate(iso, len(DATE_PATTERNS) - i)
    return Candidate((today or date.today)().isoformat(), 0)


# --------- Legacy scan ---------

LEGACY_DATE_PATTERNS = [
    re.compile(rf"(\d{{1,2}}\s+(?:{_FULL_MONTHS})\s+\d{{4}})", re.I),
    re.compile(r"(\d{1,2}/\d{1,2}/\d{2,4})"),
    re.compile(r"(\d{1,2}-\d{1,2}-\d{2,4})"),
    re.compile(r"(\d{4}-\d{2}-\d{2})"),
    re.compile(r"DATE[:\s]*(\d{1,2}/\d{1,2}/\d{2,4})", re.I),
]


def legacy_date(text: str, today: Optional[Today] = None) -> str:
    for pattern in LEGACY_DATE_PATTERNS:
        m = pattern.search(text or "")
        if m:
            iso = to_iso_date(m.group(1))
            if iso:
                return iso
    return (today or date.today)().isoformat()
