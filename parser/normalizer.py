"""
Split raw OCR text into the trimmed, non-empty lines the line-oriented
extraction strategies work on.
"""

from __future__ import annotations
import re
from typing import List

_PAGE_MARKER = re.compile(r"--- Page \d+ ---")


def receipt_lines(text: str) -> List[str]:
    """Trimmed non-empty lines, page markers removed. Inner spacing is kept."""
    text = _PAGE_MARKER.sub("", text or "")
    return [ln.strip() for ln in text.splitlines() if ln.strip()]
