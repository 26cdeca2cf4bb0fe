from __future__ import annotations

import re
from typing import Callable, List, Optional


# --------- Patterns ---------

_NAME = r"(?P<name>[A-Za-z\s&'.-]+?)"
_PRICE = r"[\d,]+\.?\d*"

# "LATTE GRANDE    Rs. 450" / "LATTE GRANDE Rs450"
ROW_RX_NAME_RS = re.compile(rf"^{_NAME}\s+Rs?\.?\s*{_PRICE}$", re.IGNORECASE)

# "LATTE GRANDE    $4.95"
ROW_RX_NAME_USD = re.compile(rf"^{_NAME}\s+\$\s*{_PRICE}$", re.IGNORECASE)

# "Rs. 450 LATTE GRANDE"
ROW_RX_RS_NAME = re.compile(
    r"Rs?\.?\s*[\d,]+\.?\d*\s+(?P<name>[A-Za-z\s&'.-]+)$", re.IGNORECASE
)

# "$4.95 LATTE GRANDE"
ROW_RX_USD_NAME = re.compile(
    r"\$\s*[\d,]+\.?\d*\s+(?P<name>[A-Za-z\s&'.-]+)$", re.IGNORECASE
)

# Any currency-marked price: keep whatever text precedes it.
ROW_RX_BEFORE_PRICE = re.compile(
    r"^(?P<name>.+?)\s+(?:\bRs\.?|\$)\s*\d[\d,]*\.?\d*", re.IGNORECASE
)

CURRENCY_MARKER_RX = re.compile(r"\bRs|\$")

# Summary and header rows are not items.
SKIP_RX = re.compile(
    r"\b(?:total|subtotal|tax|amount|due|balance|change|date|time|receipt"
    r"|thank|welcome|powered|by)\b",
    re.IGNORECASE,
)

MAX_ITEMS = 8


# --------- Helpers ---------


def _clean_name(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    s = re.sub(r"\s{2,}", " ", name).strip()
    return s if 2 < len(s) < 50 else None


def _unique(items: List[str]) -> List[str]:
    seen = set()
    out = []
    for it in items:
        if it not in seen:
            seen.add(it)
            out.append(it)
    return out


# --------- Matchers ---------


def _matcher(rx: re.Pattern, use_search: bool = False) -> Callable[[str], Optional[str]]:
    def match(line: str) -> Optional[str]:
        m = rx.search(line) if use_search else rx.match(line)
        return _clean_name(m.group("name")) if m else None

    return match


ROW_MATCHERS = (
    _matcher(ROW_RX_NAME_RS),
    _matcher(ROW_RX_NAME_USD),
    _matcher(ROW_RX_RS_NAME, use_search=True),
    _matcher(ROW_RX_USD_NAME, use_search=True),
)


def _match_before_price(line: str) -> Optional[str]:
    m = ROW_RX_BEFORE_PRICE.match(line)
    if not m:
        return None
    name = _clean_name(m.group("name"))
    if name and re.search(r"[A-Za-z]", name):
        return name
    return None


# --------- Public API ---------


def extract_items(lines: List[str]) -> List[str]:
    """
    Item names from receipt rows:
    - skip short lines and total/tax/header rows
    - name + price or price + name, Rs or $ marked
    - else, for any currency-marked row, the text before the price
    Deduplicated in order of appearance, at most 8.
    """
    items: List[str] = []
    for raw in lines:
        line = raw.strip()
        if len(line) < 3 or SKIP_RX.search(line):
            continue

        name = None
        for matcher in ROW_MATCHERS:
            name = matcher(line)
            if name:
                break
        if name is None and CURRENCY_MARKER_RX.search(line):
            name = _match_before_price(line)
        if name:
            items.append(name)

    return _unique(items)[:MAX_ITEMS]


# --------- Legacy scan ---------

LEGACY_ROW_RX = re.compile(r"^(?P<name>[^$]+?)\s+\$?\d+\.\d{2}")
LEGACY_MAX_ITEMS = 5


def legacy_items(text: str) -> List[str]:
    items: List[str] = []
    for raw in (text or "").splitlines():
        low = raw.lower()
        if "$" not in raw or "total" in low:
            continue
        m = LEGACY_ROW_RX.match(raw.strip())
        if m and len(m.group("name").strip()) > 2:
            items.append(m.group("name").strip())
    return items[:LEGACY_MAX_ITEMS]
