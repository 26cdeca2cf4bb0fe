from datetime import date

import pytest

from analytics.engine import (
    AnalyticsEngine,
    build_engine,
    category_breakdown,
    detect_anomaly,
    flag_anomalies,
    forecast_next_period,
    monthly_expense_totals,
)
from categorizer.service import Classifier
from fin_core.models import TransactionSignal


class TestDetectAnomaly:
    @pytest.mark.parametrize("history", [[], [1], [1, 2, 3, 4]])
    @pytest.mark.parametrize("amount", [0, 50, 1e9, -1e9])
    def test_short_history_never_flags(self, history, amount):
        assert detect_anomaly(amount, history) is False

    def test_two_sigma_rule(self):
        history = [10, 12, 11, 9, 13, 10, 11]
        assert detect_anomaly(11, history) is False
        assert detect_anomaly(40, history) is True
        assert detect_anomaly(-20, history) is True

    def test_zero_variance_history_flags_any_deviation(self):
        # sigma == 0, so every deviation from the mean exceeds 2 * sigma
        history = [100, 100, 100, 100, 100]
        assert detect_anomaly(1000, history) is True
        assert detect_anomaly(100.01, history) is True
        assert detect_anomaly(100, history) is False

    def test_large_prior_value_masks_outliers(self):
        history = [10, 10, 10, 10, 10000]
        # mean ~2008, population sigma ~3996: 5000 is within two sigma
        assert detect_anomaly(5000, history) is False

    def test_uses_population_stddev(self):
        history = [0, 0, 0, 0, 10]
        # mean 2, pstdev 4 -> threshold 8; sample stdev would give ~8.94
        assert detect_anomaly(10.5, history) is True
        assert detect_anomaly(9.9, history) is False


class TestForecast:
    def test_empty_history_is_zero(self):
        assert forecast_next_period([]) == 0

    def test_three_period_average_with_drift(self):
        assert forecast_next_period([100, 200, 300]) == pytest.approx(204.0)

    def test_only_last_window_values_used(self):
        assert forecast_next_period([1000, 100, 200, 300]) == pytest.approx(204.0)
        assert forecast_next_period([100, 200, 300], window=1) == pytest.approx(306.0)

    def test_short_history_uses_what_exists(self):
        assert forecast_next_period([50]) == pytest.approx(51.0)


def _sig(desc, amount, d, currency="USD"):
    return TransactionSignal(description=desc, amount=amount, currency=currency, date=d)


def test_monthly_expense_totals_ignores_income_and_undated():
    signals = [
        _sig("rent", -1000, date(2024, 1, 3)),
        _sig("food", -50, date(2024, 1, 20)),
        _sig("salary", 3000, date(2024, 1, 31)),
        _sig("food", -70, date(2024, 2, 2)),
        _sig("mystery", -999, None),
    ]
    totals = monthly_expense_totals(signals)
    assert list(totals.index) == ["2024-01", "2024-02"]
    assert totals.tolist() == [1050.0, 70.0]


def test_monthly_expense_totals_converts_currency():
    signals = [
        _sig("a", -10, date(2024, 1, 1), "USD"),
        _sig("b", -2800, date(2024, 1, 2), "PKR"),
    ]

    def converter(amount, src, dst):
        return amount / 280 if (src, dst) == ("PKR", "USD") else amount

    totals = monthly_expense_totals(signals, converter=converter, currency="USD")
    assert totals.tolist() == [pytest.approx(20.0)]


def test_monthly_expense_totals_empty():
    assert monthly_expense_totals([]).empty


def test_forecast_from_signals():
    signals = [
        _sig("x", -100, date(2024, 1, 5)),
        _sig("x", -200, date(2024, 2, 5)),
        _sig("x", -300, date(2024, 3, 5)),
    ]
    assert AnalyticsEngine().forecast_from_signals(signals) == pytest.approx(204.0)


def test_flag_anomalies_in_date_order():
    days = [date(2024, 1, d) for d in range(1, 8)]
    signals = [_sig("coffee", -5, d) for d in days[:6]]
    signals.append(_sig("laptop", -1500, days[6]))
    signals.append(_sig("salary", 4000, days[6]))
    # shuffled input; output follows dates
    flagged = flag_anomalies(list(reversed(signals)))
    assert [s.description for s, _ in flagged][-1] == "laptop"
    assert [f for _, f in flagged] == [False] * 5 + [False, True]


def test_build_engine_reads_config():
    engine = build_engine(
        {"analytics": {"min_history": 3, "sigma": 1.0, "forecast_window": 2, "growth": 1.0}}
    )
    assert engine.detect_anomaly(12, [10, 10, 11]) is True
    assert engine.forecast_next_period([1, 2, 4]) == pytest.approx(3.0)
    assert build_engine({}) == AnalyticsEngine()


def test_monthly_totals_fill_gap_months_with_zero():
    signals = [
        _sig("rent", -300, date(2024, 1, 10)),
        _sig("rent", -300, date(2024, 3, 10)),
    ]
    totals = monthly_expense_totals(signals)
    assert list(totals.index) == ["2024-01", "2024-02", "2024-03"]
    assert totals.tolist() == [300.0, 0.0, 300.0]
    assert AnalyticsEngine().forecast_from_signals(signals) == pytest.approx(204.0)


def test_explicit_window_is_not_replaced_by_default():
    engine = AnalyticsEngine(window=2, growth=1.0)
    assert engine.forecast_next_period([100, 200, 300]) == pytest.approx(250.0)
    assert engine.forecast_next_period([100, 200, 300], window=3) == pytest.approx(200.0)
    # window 0 still averages at least the latest value
    assert engine.forecast_next_period([100, 200, 300], window=0) == pytest.approx(300.0)


class TestCategoryBreakdown:
    def test_totals_and_shares_sorted_descending(self):
        signals = [
            _sig("Lunch at KFC", -30, date(2024, 3, 2)),
            _sig("Uber home", -50, date(2024, 3, 3)),
            _sig("Dinner pizza", -20, date(2024, 3, 4)),
            _sig("Salary", 5000, date(2024, 3, 1)),
        ]
        out = category_breakdown(signals, Classifier())
        assert list(out.columns) == ["category", "amount", "percentage"]
        assert out["category"].tolist() == ["Food & Dining", "Transportation"]
        assert out["amount"].tolist() == [50.0, 50.0]
        assert out["percentage"].tolist() == [pytest.approx(50.0), pytest.approx(50.0)]

    def test_converts_into_base_currency(self):
        signals = [
            _sig("Netflix", -10, date(2024, 3, 1), "USD"),
            _sig("Chai", -2800, date(2024, 3, 1), "PKR"),
        ]

        def to_usd(amount, src, dst):
            return amount / 280 if src == "PKR" else amount

        out = category_breakdown(signals, converter=to_usd, currency="USD")
        assert out["category"].tolist() == ["Entertainment", "Food & Dining"]
        assert out["percentage"].tolist() == [pytest.approx(50.0), pytest.approx(50.0)]

    def test_month_filter(self):
        signals = [
            _sig("Uber", -10, date(2024, 2, 28)),
            _sig("KFC", -5, date(2024, 3, 1)),
            _sig("KFC", -5, None),
        ]
        out = category_breakdown(signals, month="2024-03")
        assert out["category"].tolist() == ["Food & Dining"]
        assert out["percentage"].tolist() == [pytest.approx(100.0)]

    def test_zero_total_gives_zero_percentages(self):
        signals = [_sig("KFC", -5, date(2024, 3, 1))]
        out = category_breakdown(signals, converter=lambda a, s, d: 0.0, currency="EUR")
        assert out["amount"].tolist() == [0.0]
        assert out["percentage"].tolist() == [0.0]

    def test_no_expenses(self):
        out = category_breakdown([_sig("Salary", 100, date(2024, 3, 1))])
        assert out.empty
        assert list(out.columns) == ["category", "amount", "percentage"]
