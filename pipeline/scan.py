# pipeline/scan.py
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from categorizer.service import Classifier
from fin_core.models import OTHER, CategoryPrediction, ReceiptData
from ocr.gateway import OCRGateway
from parser.extractor import ReceiptParser

LOGGER = logging.getLogger(__name__)

IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff", ".heic"}
TXT_EXTS = {".txt"}


@dataclass
class ScanResult:
    receipt: ReceiptData
    prediction: CategoryPrediction

    def as_dict(self) -> Dict[str, Any]:
        return {
            "receipt": self.receipt.as_dict(),
            "prediction": dataclasses.asdict(self.prediction),
        }


def confirm_category(
    receipt: ReceiptData, classifier: Classifier
) -> ScanResult:
    """
    Re-check the receipt category with the transaction classifier, treating
    the receipt as an expense. The parser's category stands unless it is
    "Other" and the classifier finds something more specific.
    """
    description = " ".join([receipt.merchant, *receipt.items])
    prediction = classifier.classify(description, -abs(receipt.amount))
    if receipt.category == OTHER and prediction.category != OTHER:
        LOGGER.debug("Receipt category Other -> %s", prediction.category)
        receipt = dataclasses.replace(receipt, category=prediction.category)
    return ScanResult(receipt=receipt, prediction=prediction)


def scan_text(
    raw_text: str,
    *,
    parser: Optional[ReceiptParser] = None,
    classifier: Optional[Classifier] = None,
) -> ScanResult:
    receipt = (parser or ReceiptParser()).parse(raw_text)
    return confirm_category(receipt, classifier or Classifier())


def scan_receipt(
    image_bytes: bytes,
    *,
    gateway: OCRGateway,
    parser: Optional[ReceiptParser] = None,
    classifier: Optional[Classifier] = None,
) -> ScanResult:
    """OCR -> parse -> category check. Never raises for upstream failures."""
    raw_text = gateway.extract_text(image_bytes)
    return scan_text(raw_text, parser=parser, classifier=classifier)


def read_source_text(path: Path, gateway: OCRGateway) -> str:
    """
    .txt files are taken as already-recognized text; images go through OCR.
    """
    ext = path.suffix.lower()
    if ext in TXT_EXTS:
        return path.read_text(encoding="utf-8", errors="ignore")
    if ext in IMAGE_EXTS:
        return gateway.extract_text(path.read_bytes())
    raise ValueError(f"Unsupported file type: {ext}")
