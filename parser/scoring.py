from __future__ import annotations

import re
from typing import Sequence

from fin_core.models import UNKNOWN_MERCHANT

AMOUNT_MARKER_RX = re.compile(r"total|amount|rs\.|\$")
DATE_MARKER_RX = re.compile(r"date|time")


def _clamp(score: int) -> int:
    return max(0, min(100, score))


def enhanced_confidence(
    text: str, amount: float, merchant: str, items: Sequence[str]
) -> int:
    """
    0-100 heuristic:
      text length   up to 20
      amount        up to 30
      merchant      up to 20
      items         up to 20
      markers       up to 10
    """
    text = text or ""
    score = 0

    if len(text) > 50:
        score += 10
    if len(text) > 100:
        score += 10

    if amount > 0:
        score += 15
    if 1 < amount < 10000:
        score += 15

    if merchant != UNKNOWN_MERCHANT:
        score += 10
    if 3 < len(merchant) < 50:
        score += 10

    if len(items) > 0:
        score += 10
    if len(items) > 2:
        score += 10

    low = text.lower()
    if AMOUNT_MARKER_RX.search(low):
        score += 5
    if DATE_MARKER_RX.search(low):
        score += 5

    return _clamp(score)


def legacy_confidence(text: str, amount: float, merchant: str) -> int:
    text = text or ""
    score = 0
    if len(text) > 50:
        score += 20
    if len(text) > 100:
        score += 20
    if amount > 0:
        score += 30
    if 1 < amount < 1000:
        score += 20
    if merchant != UNKNOWN_MERCHANT:
        score += 10
    return _clamp(score)
