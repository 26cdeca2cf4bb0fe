from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from fin_core.models import ReceiptData
from parser.amounts import extract_amount
from parser.base import ReceiptExtractor
from parser.category import categorize_receipt
from parser.dates import extract_date
from parser.lineitems import MAX_ITEMS, extract_items
from parser.normalizer import receipt_lines
from parser.scoring import enhanced_confidence
from parser.vendor import extract_merchant

LOGGER = logging.getLogger(__name__)


class EnhancedExtractor(ReceiptExtractor):
    """Multi-strategy pass: each field tries several strategies in order."""

    name = "enhanced"

    def __init__(self, today: Optional[Callable[[], date]] = None):
        self.today = today

    def extract(self, raw_text: str) -> ReceiptData:
        text = raw_text or ""
        lines = receipt_lines(text)

        amount_c = extract_amount(text)
        amount = amount_c.value if amount_c else 0.0
        merchant_c = extract_merchant(lines)
        date_c = extract_date(text, self.today)
        category = categorize_receipt(merchant_c.value, text)
        items = extract_items(lines)[:MAX_ITEMS]
        confidence = enhanced_confidence(text, amount, merchant_c.value, items)

        LOGGER.debug(
            "enhanced pass: amount=%s (strength %s) merchant=%r (strength %s) "
            "date=%s (strength %s) items=%d confidence=%d",
            amount,
            amount_c.strength if amount_c else 0,
            merchant_c.value,
            merchant_c.strength,
            date_c.value,
            date_c.strength,
            len(items),
            confidence,
        )
        return ReceiptData(
            amount=float(amount),
            merchant=merchant_c.value,
            date=date_c.value,
            category=category,
            items=tuple(items),
            confidence=confidence,
            raw_text=text,
        )
