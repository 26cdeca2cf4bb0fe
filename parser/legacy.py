from __future__ import annotations

from datetime import date
from typing import Callable, Optional

from fin_core.models import ReceiptData
from parser.amounts import legacy_amount
from parser.base import ReceiptExtractor
from parser.category import legacy_category
from parser.dates import legacy_date
from parser.lineitems import legacy_items
from parser.scoring import legacy_confidence
from parser.vendor import legacy_merchant


class LegacyExtractor(ReceiptExtractor):
    """Single-pattern pass; always yields a result, usually a weaker one."""

    name = "legacy"

    def __init__(self, today: Optional[Callable[[], date]] = None):
        self.today = today

    def extract(self, raw_text: str) -> ReceiptData:
        text = raw_text or ""
        amount = legacy_amount(text)
        merchant = legacy_merchant(text)
        return ReceiptData(
            amount=float(amount),
            merchant=merchant,
            date=legacy_date(text, self.today),
            category=legacy_category(merchant),
            items=tuple(legacy_items(text)),
            confidence=legacy_confidence(text, amount, merchant),
            raw_text=text,
        )
