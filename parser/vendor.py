from __future__ import annotations
import re
from typing import List, Optional

from fin_core.models import UNKNOWN_MERCHANT
from parser.strategies import Candidate, first_candidate

NAME_RX = re.compile(r"^[A-Za-z\s&'.-]+$")
CAPS_NAME_RX = re.compile(r"^[A-Z\s&'.-]+$")
DIGIT_RX = re.compile(r"\d")

# Whole words only, so "STORE" is not rejected for containing "to".
NOISE_RX = re.compile(
    r"rs\.|\b(?:total|amount|date|time|powered|by|from|to|thank|welcome|receipt)\b",
    re.IGNORECASE,
)

BUSINESS_PATTERNS = [
    re.compile(
        r"^([A-Za-z\s&'.-]+?)\s*\b(?:STORE|SHOP|MARKET|RESTAURANT|CAFE|PIZZA|BURGER)\b",
        re.I,
    ),
    re.compile(r"^([A-Za-z\s&'.-]+?)\s*\b(?:GAS|FUEL|STATION)\b", re.I),
    re.compile(r"^([A-Za-z\s&'.-]+?)\s*\b(?:SUPERSTORE|SUPERMARKET|GROCERY)\b", re.I),
]

HEADER_LINES = 5


def _is_noise(line: str) -> bool:
    return bool(NOISE_RX.search(line))


def header_name(lines: List[str]) -> Optional[Candidate]:
    """A short letters-only line of 1-4 words near the top."""
    for raw in lines[:HEADER_LINES]:
        line = raw.strip()
        if len(line) < 3 or len(line) > 60:
            continue
        if DIGIT_RX.search(line) or _is_noise(line):
            continue
        if NAME_RX.match(line) and 1 <= len(line.split()) <= 4:
            return Candidate(line, 3)
    return None


def caps_name(lines: List[str]) -> Optional[Candidate]:
    for raw in lines:
        line = raw.strip()
        if 3 < len(line) < 50 and CAPS_NAME_RX.match(line) and not _is_noise(line):
            return Candidate(line, 2)
    return None


def business_keyword_name(lines: List[str]) -> Optional[Candidate]:
    """'<name> STORE', '<name> GAS STATION' and similar."""
    for raw in lines:
        for pattern in BUSINESS_PATTERNS:
            m = pattern.match(raw.strip())
            if m and len(m.group(1).strip()) > 2:
                return Candidate(m.group(1).strip(), 1)
    return None


MERCHANT_STRATEGIES = [
    ("header", header_name),
    ("all_caps", caps_name),
    ("business_keyword", business_keyword_name),
]


def extract_merchant(lines: List[str]) -> Candidate:
    _, cand = first_candidate(MERCHANT_STRATEGIES, lines)
    return cand if cand is not None else Candidate(UNKNOWN_MERCHANT, 0)


# --------- Legacy scan ---------

LEGACY_NAME_RX = re.compile(r"^[A-Za-z\s&]+$")


def legacy_merchant(text: str) -> str:
    """First clean letters-only line of the whole text."""
    for raw in (text or "").splitlines():
        line = raw.strip()
        if len(line) < 3 or len(line) > 50:
            continue
        if DIGIT_RX.search(line) or _is_noise(line):
            continue
        if LEGACY_NAME_RX.match(line):
            return line
    return UNKNOWN_MERCHANT
