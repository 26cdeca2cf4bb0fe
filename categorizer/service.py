"""
Classifier service: free-text description + signed amount -> category.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from categorizer.rules import (
    DEFAULT_EXPENSE_RULES,
    DEFAULT_INCOME_RULES,
    DEFAULTS,
    Rule,
    apply_rules,
    compile_rules,
)
from config.loader import section
from fin_core.models import CategoryPrediction, TransactionSignal

LOGGER = logging.getLogger(__name__)


class Classifier:
    """Keyword-heuristic categorizer for income and expense transactions."""

    def __init__(self, rules_path: Optional[str] = None):
        self.income_rules: List[Rule] = list(DEFAULT_INCOME_RULES)
        self.expense_rules: List[Rule] = list(DEFAULT_EXPENSE_RULES)
        self.defaults: Dict[str, float] = dict(DEFAULTS)
        if rules_path:
            p = Path(rules_path)
            if p.exists():
                with open(p, "r", encoding="utf-8") as f:
                    self._load(yaml.safe_load(f) or {})
            else:
                LOGGER.info("Rules file not found at %s; using built-in rules.", p)

    def _load(self, cfg: Dict[str, Any]) -> None:
        if cfg.get("income"):
            self.income_rules = compile_rules(cfg["income"])
        if cfg.get("expense"):
            self.expense_rules = compile_rules(cfg["expense"])
        for kind, value in (cfg.get("defaults") or {}).items():
            if kind in self.defaults:
                self.defaults[kind] = float(value)

    def classify(self, description: Optional[str], amount: float) -> CategoryPrediction:
        """
        amount >= 0 is income, amount < 0 is an expense; each side has its own
        ordered rule list and its own "Other" confidence.
        """
        text = description or ""
        if amount >= 0:
            return apply_rules(self.income_rules, text, self.defaults["income"])
        return apply_rules(self.expense_rules, text, self.defaults["expense"])

    def classify_signal(self, signal: TransactionSignal) -> CategoryPrediction:
        return self.classify(signal.description, signal.amount)

    def rule_count(self) -> int:
        """Return number of rules configured."""
        return len(self.income_rules) + len(self.expense_rules)


def build_classifier(cfg: Optional[Dict[str, Any]] = None) -> Classifier:
    rules_path = section(cfg, "classifier").get("rules_path") or None
    return Classifier(rules_path=rules_path)


_DEFAULT = Classifier()


def classify(description: Optional[str], amount: float) -> CategoryPrediction:
    return _DEFAULT.classify(description, amount)
