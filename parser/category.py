from __future__ import annotations

from typing import Optional

from fin_utils.categories import (
    LEGACY_MERCHANT_TO_CATEGORY,
    OTHER,
    RECEIPT_CATEGORY_TABLE,
)


def categorize_receipt(merchant: Optional[str], text: Optional[str]) -> str:
    """
    Merchant substrings and raw-text keywords, checked one category at a
    time in table order; first hit wins.
    """
    m = (merchant or "").lower()
    t = (text or "").lower()
    for category, merchant_keys, text_keys in RECEIPT_CATEGORY_TABLE:
        if any(k in m for k in merchant_keys) or any(k in t for k in text_keys):
            return category
    return OTHER


def legacy_category(merchant: Optional[str]) -> str:
    m = (merchant or "").lower()
    for key, category in LEGACY_MERCHANT_TO_CATEGORY:
        if key in m:
            return category
    return OTHER
