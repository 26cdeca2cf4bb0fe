"""
Keyword rules for transaction categorization.

Rules are kept in an ordered list and evaluated top to bottom; the first
rule whose keywords appear in the description wins. Confidence is a fixed
value per rule, not a measure of match strength.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from fin_core.models import CategoryPrediction
from fin_utils.categories import (
    EXPENSE_DEFAULT_CONFIDENCE,
    EXPENSE_KEYWORDS,
    INCOME_DEFAULT_CONFIDENCE,
    INCOME_KEYWORDS,
    OTHER,
)


@dataclass
class Rule:
    """A single keyword rule with its assignment."""

    name: str
    category: str
    confidence: float = 0.5
    keywords: List[str] = field(default_factory=list)

    def applies(self, text: str) -> bool:
        """Case-insensitive substring test against any keyword."""
        if not self.keywords:
            return False
        low = (text or "").lower()
        return any(k.lower() in low for k in self.keywords)

    def to_prediction(self) -> CategoryPrediction:
        return CategoryPrediction(category=self.category, confidence=self.confidence)


def build_rules(table: Iterable[Tuple[str, float, Sequence[str]]]) -> List[Rule]:
    """Turn a (category, confidence, keywords) table into ordered rules."""
    return [
        Rule(
            name=category.lower().replace(" & ", "_").replace(" ", "_"),
            category=category,
            confidence=float(confidence),
            keywords=list(keywords),
        )
        for category, confidence, keywords in table
    ]


def parse_rule(r: Dict[str, Any]) -> Rule:
    """Parse a rule from a YAML config dict."""
    category = r.get("category") or OTHER
    return Rule(
        name=r.get("name", category.lower()),
        category=category,
        confidence=float(r.get("confidence", 0.5)),
        keywords=[str(k) for k in r.get("keywords", [])],
    )


def compile_rules(entries: Optional[Iterable[Dict[str, Any]]]) -> List[Rule]:
    """Compile YAML rule dicts, keeping file order."""
    return [parse_rule(r) for r in (entries or [])]


def first_match(rules: Sequence[Rule], text: str) -> Optional[Rule]:
    for rule in rules:
        if rule.applies(text):
            return rule
    return None


def apply_rules(
    rules: Sequence[Rule], text: str, default_confidence: float
) -> CategoryPrediction:
    """First matching rule wins; no match falls back to Other."""
    rule = first_match(rules, text)
    if rule is not None:
        return rule.to_prediction()
    return CategoryPrediction(category=OTHER, confidence=default_confidence)


DEFAULT_INCOME_RULES = build_rules(INCOME_KEYWORDS)
DEFAULT_EXPENSE_RULES = build_rules(EXPENSE_KEYWORDS)
DEFAULTS = {
    "income": INCOME_DEFAULT_CONFIDENCE,
    "expense": EXPENSE_DEFAULT_CONFIDENCE,
}
