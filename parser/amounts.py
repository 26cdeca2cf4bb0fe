from __future__ import annotations

import re
from typing import Iterable, List, Optional

from fin_utils.normalizers import parse_number, within_bounds
from parser.strategies import Candidate, first_candidate

# Values at or beyond this are OCR misreads, not receipt totals.
MAX_AMOUNT = 1_000_000.0

_NUM = r"(\d[\d,]*\.?\d*)"
_CUR_PREFIX = r"(?:\bRs\.?|\$)?"

# Label priority order; the first valid value of the first pattern that
# has one wins. \b keeps "SUBTOTAL" from matching as "TOTAL".
TOTAL_PATTERNS = [
    re.compile(r"\bTOTAL[:\s]*\bRs\.?\s*" + _NUM, re.IGNORECASE),
    re.compile(r"\bTOTAL[:\s]*\$?\s*" + _NUM, re.IGNORECASE),
    re.compile(r"\bGRAND\s+TOTAL[:\s]*" + _CUR_PREFIX + r"\s*" + _NUM, re.IGNORECASE),
    re.compile(r"\bAMOUNT\s+DUE[:\s]*" + _CUR_PREFIX + r"\s*" + _NUM, re.IGNORECASE),
    re.compile(r"\bBALANCE\s+DUE[:\s]*" + _CUR_PREFIX + r"\s*" + _NUM, re.IGNORECASE),
]

# Currency marker immediately before or after the digits.
CURRENCY_PATTERNS = [
    re.compile(r"\bRs\.\s*" + _NUM, re.IGNORECASE),
    re.compile(r"\bRs\s*" + _NUM, re.IGNORECASE),
    re.compile(r"(?:\$|€|£|₹)\s*" + _NUM),
    re.compile(r"\b(?:PKR|USD)\s*" + _NUM, re.IGNORECASE),
    re.compile(_NUM + r"\s*Rs\b", re.IGNORECASE),
    re.compile(_NUM + r"\s*(?:USD|PKR)\b", re.IGNORECASE),
]

NUMBER_TOKEN_RX = re.compile(r"\d[\d,]*(?:\.\d+)?")
TOTAL_CUE_RX = re.compile(r"total|amount|due|balance", re.IGNORECASE)
CONTEXT_CHARS = 20
MIN_CONTEXT_AMOUNT = 0.5


def _valid(value: Optional[float]) -> bool:
    return within_bounds(value, MAX_AMOUNT)


def _values(pattern: re.Pattern, text: str) -> Iterable[float]:
    for m in pattern.finditer(text):
        value = parse_number(m.group(1))
        if _valid(value):
            yield value


def labeled_total(text: str) -> Optional[Candidate]:
    for pattern in TOTAL_PATTERNS:
        for value in _values(pattern, text):
            return Candidate(value, 3)
    return None


def max_currency_amount(text: str) -> Optional[Candidate]:
    found: List[float] = []
    for pattern in CURRENCY_PATTERNS:
        found.extend(_values(pattern, text))
    return Candidate(max(found), 2) if found else None


def _ends_line(text: str, end: int) -> bool:
    nl = text.find("\n", end)
    rest = text[end:] if nl == -1 else text[end:nl]
    return not rest.strip()


def max_contextual_amount(text: str) -> Optional[Candidate]:
    """
    Largest number whose neighbourhood (20 chars each side) mentions a
    total/amount/due/balance cue, or that is the last token on its line.
    """
    best: Optional[float] = None
    for m in NUMBER_TOKEN_RX.finditer(text):
        value = parse_number(m.group(0))
        if not _valid(value) or value <= MIN_CONTEXT_AMOUNT:
            continue
        if best is not None and value <= best:
            continue
        start, end = m.span()
        context = text[max(0, start - CONTEXT_CHARS) : end + CONTEXT_CHARS]
        if TOTAL_CUE_RX.search(context) or _ends_line(text, end):
            best = value
    return Candidate(best, 1) if best is not None else None


AMOUNT_STRATEGIES = [
    ("labeled_total", labeled_total),
    ("currency_max", max_currency_amount),
    ("context_max", max_contextual_amount),
]


def extract_amount(text: str) -> Optional[Candidate]:
    _, cand = first_candidate(AMOUNT_STRATEGIES, text or "")
    return cand


# --------- Legacy scan ---------

LEGACY_MAX_AMOUNT = 100_000.0
LEGACY_AMOUNT_RX = re.compile(
    r"(?:\bRs\.?\s*(\d+(?:\.\d{2})?)|\$(\d+\.\d{2})|\b(\d+\.\d{2})\b)", re.IGNORECASE
)


def legacy_amount(text: str) -> float:
    """Largest currency-ish number under 100,000 anywhere in the text, else 0."""
    best = 0.0
    for m in LEGACY_AMOUNT_RX.finditer(text or ""):
        token = next(g for g in m.groups() if g)
        value = parse_number(token)
        if within_bounds(value, LEGACY_MAX_AMOUNT) and value > best:
            best = value
    return best
