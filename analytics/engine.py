"""
Anomaly detection and expense forecasting over numeric series.

Both core functions are simple heuristics:
  - detect_anomaly is a two-sigma rule on the mean and population standard
    deviation of recent values. One very large prior value inflates sigma and
    can hide later outliers. A history of identical values has sigma == 0, so
    any deviation from it is flagged.
  - forecast_next_period is a moving average with a fixed 2% drift, not a
    fitted model.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from categorizer.service import Classifier
from config.loader import section
from fin_core.models import TransactionSignal

MIN_HISTORY = 5
SIGMA = 2.0
FORECAST_WINDOW = 3
GROWTH = 1.02

Converter = Callable[[float, str, str], float]


def detect_anomaly(
    amount: float,
    recent_amounts: Sequence[float],
    *,
    min_history: int = MIN_HISTORY,
    sigma: float = SIGMA,
) -> bool:
    if len(recent_amounts) < min_history:
        return False
    values = np.asarray(recent_amounts, dtype=float)
    mean = values.mean()
    std = values.std()  # population (ddof=0)
    return bool(abs(float(amount) - mean) > sigma * std)


def forecast_next_period(
    history: Sequence[float], window: int = FORECAST_WINDOW, growth: float = GROWTH
) -> float:
    if len(history) == 0:
        return 0.0
    recent = np.asarray(history, dtype=float)[-max(1, int(window)):]
    return float(recent.mean() * growth)


# --------- History helpers ---------


BREAKDOWN_COLUMNS = ["category", "amount", "percentage"]


def _expense_value(
    s: TransactionSignal,
    converter: Optional[Converter] = None,
    currency: Optional[str] = None,
) -> float:
    value = abs(float(s.amount))
    if converter is not None and currency and s.currency != currency:
        value = abs(float(converter(value, s.currency, currency)))
    return value


def _expense_frame(
    signals: Iterable[TransactionSignal],
    converter: Optional[Converter] = None,
    currency: Optional[str] = None,
) -> pd.DataFrame:
    rows = []
    for s in signals:
        if not s.is_expense or s.date is None:
            continue
        rows.append(
            {"date": pd.Timestamp(s.date), "amount": _expense_value(s, converter, currency)}
        )
    return pd.DataFrame(rows, columns=["date", "amount"])


def monthly_expense_totals(
    signals: Iterable[TransactionSignal],
    *,
    converter: Optional[Converter] = None,
    currency: Optional[str] = None,
) -> pd.Series:
    """
    Sum expense magnitudes per calendar month ("YYYY-MM" index, ascending).
    Every month between the first and last expense is present; months with
    no spending are 0. Income and undated signals are ignored. With a
    converter, amounts are first converted into `currency`.
    """
    df = _expense_frame(signals, converter, currency)
    if df.empty:
        return pd.Series(dtype=float, name="amount")
    df["month"] = df["date"].dt.to_period("M")
    totals = df.groupby("month")["amount"].sum()
    months = pd.period_range(totals.index.min(), totals.index.max(), freq="M")
    totals = totals.reindex(months, fill_value=0.0)
    totals.index = totals.index.strftime("%Y-%m")
    totals.index.name = "month"
    return totals.astype(float)


def category_breakdown(
    signals: Iterable[TransactionSignal],
    classifier: Optional[Classifier] = None,
    *,
    converter: Optional[Converter] = None,
    currency: Optional[str] = None,
    month: Optional[str] = None,
) -> pd.DataFrame:
    """
    Expense totals per category, largest first, with each category's share
    of all expenses in percent. Categories come from the transaction
    classifier; `month` ("YYYY-MM") keeps only dated expenses of that month.
    A zero grand total gives 0% everywhere.
    """
    clf = classifier or Classifier()
    rows = []
    for s in signals:
        if not s.is_expense:
            continue
        if month is not None and (s.date is None or s.date.strftime("%Y-%m") != month):
            continue
        rows.append(
            {
                "category": clf.classify_signal(s).category,
                "amount": _expense_value(s, converter, currency),
            }
        )
    if not rows:
        return pd.DataFrame(columns=BREAKDOWN_COLUMNS)

    by_cat = (
        pd.DataFrame(rows)
        .groupby("category")["amount"]
        .sum()
        .abs()
        .sort_values(ascending=False, kind="stable")
    )
    out = by_cat.reset_index()
    total = float(out["amount"].sum())
    out["percentage"] = out["amount"] / total * 100.0 if total else 0.0
    return out[BREAKDOWN_COLUMNS]


def flag_anomalies(
    signals: Iterable[TransactionSignal],
    lookback: int = 30,
    *,
    min_history: int = MIN_HISTORY,
    sigma: float = SIGMA,
) -> List[Tuple[TransactionSignal, bool]]:
    """
    Test each expense against up to `lookback` preceding expenses, in date
    order (undated signals last, input order kept for ties).
    """
    expenses = [s for s in signals if s.is_expense]
    ordered = sorted(
        enumerate(expenses),
        key=lambda t: (t[1].date is None, t[1].date or date.min, t[0]),
    )
    out: List[Tuple[TransactionSignal, bool]] = []
    seen: List[float] = []
    for _, s in ordered:
        value = abs(float(s.amount))
        flagged = detect_anomaly(
            value, seen[-lookback:], min_history=min_history, sigma=sigma
        )
        out.append((s, flagged))
        seen.append(value)
    return out


@dataclass
class AnalyticsEngine:
    min_history: int = MIN_HISTORY
    sigma: float = SIGMA
    window: int = FORECAST_WINDOW
    growth: float = GROWTH

    def detect_anomaly(self, amount: float, recent_amounts: Sequence[float]) -> bool:
        return detect_anomaly(
            amount, recent_amounts, min_history=self.min_history, sigma=self.sigma
        )

    def forecast_next_period(
        self, history: Sequence[float], window: Optional[int] = None
    ) -> float:
        return forecast_next_period(
            history,
            window=self.window if window is None else window,
            growth=self.growth,
        )

    def forecast_from_signals(
        self,
        signals: Iterable[TransactionSignal],
        *,
        converter: Optional[Converter] = None,
        currency: Optional[str] = None,
    ) -> float:
        totals = monthly_expense_totals(signals, converter=converter, currency=currency)
        return self.forecast_next_period(totals.tolist())

    def flag_anomalies(
        self, signals: Iterable[TransactionSignal], lookback: int = 30
    ) -> List[Tuple[TransactionSignal, bool]]:
        return flag_anomalies(
            signals, lookback, min_history=self.min_history, sigma=self.sigma
        )


def build_engine(cfg=None) -> AnalyticsEngine:
    a = section(cfg, "analytics")
    return AnalyticsEngine(
        min_history=int(a.get("min_history", MIN_HISTORY)),
        sigma=float(a.get("sigma", SIGMA)),
        window=int(a.get("forecast_window", FORECAST_WINDOW)),
        growth=float(a.get("growth", GROWTH)),
    )
