"""
Receipt parsing coordinator.

Extractors are tried in order. The first result whose confidence clears the
threshold is returned; otherwise the result of the last extractor that ran
is. The parser never raises: an extractor that fails is skipped, and when
none produce anything a zero-confidence default receipt comes back.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional, Sequence

from config.loader import section
from fin_core.models import OTHER, UNKNOWN_MERCHANT, ReceiptData
from parser.base import ReceiptExtractor
from parser.enhanced import EnhancedExtractor
from parser.legacy import LegacyExtractor

LOGGER = logging.getLogger(__name__)

CONFIDENCE_THRESHOLD = 70


def default_receipt(raw_text: str, today: Optional[Callable[[], date]] = None) -> ReceiptData:
    return ReceiptData(
        amount=0.0,
        merchant=UNKNOWN_MERCHANT,
        date=(today or date.today)().isoformat(),
        category=OTHER,
        items=(),
        confidence=0,
        raw_text=raw_text or "",
    )


class ReceiptParser:
    def __init__(
        self,
        extractors: Optional[Sequence[ReceiptExtractor]] = None,
        *,
        threshold: int = CONFIDENCE_THRESHOLD,
        today: Optional[Callable[[], date]] = None,
    ):
        self.today = today
        self.extractors: List[ReceiptExtractor] = list(
            extractors
            if extractors is not None
            else (EnhancedExtractor(today=today), LegacyExtractor(today=today))
        )
        self.threshold = int(threshold)

    def parse(self, raw_text: str) -> ReceiptData:
        text = raw_text or ""
        last: Optional[ReceiptData] = None
        for extractor in self.extractors:
            try:
                result = extractor.extract(text)
            except Exception:
                LOGGER.exception("%s extractor failed; trying next", extractor.name)
                continue
            if result.confidence > self.threshold:
                LOGGER.debug(
                    "%s extractor accepted (confidence %d)",
                    extractor.name,
                    result.confidence,
                )
                return result
            LOGGER.debug(
                "%s extractor below threshold (%d <= %d)",
                extractor.name,
                result.confidence,
                self.threshold,
            )
            last = result

        return last if last is not None else default_receipt(text, self.today)


def build_parser(cfg=None) -> ReceiptParser:
    threshold = section(cfg, "receipts").get("confidence_threshold", CONFIDENCE_THRESHOLD)
    return ReceiptParser(threshold=int(threshold))


_DEFAULT = ReceiptParser()


def parse_receipt(raw_text: str) -> ReceiptData:
    return _DEFAULT.parse(raw_text)
