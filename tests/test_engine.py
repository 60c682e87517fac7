"""Tests for the engine-facing functions."""

import pytest

from src import engine
from src.analytics import CycleTrend, FinancialAnalyticsEngine
from src.forecasting import InsufficientDataError, Scenario
from src.patterns import PerformanceLevel, RiskLevel


TRANSACTIONS = [
    {"date": f"2024-{month:02d}-15", "amount": amount, "type": tx_type, "category": category}
    for month in range(1, 7)
    for amount, tx_type, category in [
        (50000 + 500 * month, "INCOME", "SALES"),
        (30000, "EXPENSE", "PAYROLL"),
    ]
]


class TestForecastContract:
    def test_transactions_to_forecast(self):
        history = engine.aggregate_historical_periods(TRANSACTIONS)
        result = engine.generate_forecast(history, Scenario(id="base", kind="realistic"), 12, seed=42)

        assert len(history) == 6
        assert len(result) == 12
        assert all(0 < p.confidence <= 1 for p in result)
        assert result.average_confidence > 0.7

    def test_seeded_forecast_is_reproducible(self, steady_history):
        first = engine.generate_forecast(steady_history, "optimistic", 12, seed=1)
        second = engine.generate_forecast(steady_history, "optimistic", 12, seed=1)
        assert first == second

    def test_compare_scenarios(self, steady_history):
        results = engine.compare_scenarios(steady_history, ["optimistic", "pessimistic"], seed=3)
        assert results["optimistic"].ending_balance > results["pessimistic"].ending_balance

    def test_categorize(self):
        summary = engine.categorize_cash_flows(TRANSACTIONS)
        assert summary["PAYROLL"].total == -180000

    def test_stress_contract(self, history_factory, neutral_engine):
        history = history_factory("2024-01", [50000] * 3, [30000] * 3)
        result = engine.run_stress_test(history, {
            "id": "crisis", "kind": "stress",
            "assumptions": {"revenueShock": -0.5, "delayedPaymentDays": 60, "emergencyExpense": 100000}
        }, engine=neutral_engine)

        assert result.minimum_balance < 0
        assert result.recovery_period > 6
        assert result.risk_level == RiskLevel.HIGH

    def test_empty_history(self):
        with pytest.raises(InsufficientDataError):
            engine.generate_forecast([], "realistic", 12)
        with pytest.raises(InsufficientDataError):
            engine.run_stress_test([], "stress")


class TestAnalyticsContract:
    def test_liquidity_reference_cases(self):
        healthy = engine.compute_liquidity({"currentAssets": 150000, "currentLiabilities": 75000, "cash": 50000})
        assert healthy.current_ratio == 2.0
        assert healthy.cash_ratio == pytest.approx(0.667, abs=0.001)
        assert healthy.risk_level == RiskLevel.LOW

        weak = engine.compute_liquidity({"currentAssets": 30000, "currentLiabilities": 50000, "cash": 5000})
        assert weak.current_ratio < 1.0
        assert weak.risk_level == RiskLevel.HIGH
        assert "LOW_CURRENT_RATIO" in weak.warnings

    def test_runway_from_burn_rate(self):
        runway = engine.compute_cash_runway(current_cash=100000, burn_rate=15000)
        assert runway.months == pytest.approx(6.67, abs=0.1)

    def test_runway_from_history(self, history_factory):
        history = history_factory("2024-01", [20000, 10000], [30000, 30000])
        runway = engine.compute_cash_runway(history, current_cash=45000)
        assert runway.months == 3.0

    def test_runway_requires_input(self):
        with pytest.raises(InsufficientDataError):
            engine.compute_cash_runway(current_cash=1000)

    def test_working_capital_and_cycle_with_nested_dict(self, income_statements):
        sheet = {
            "currentAssets": {"cash": 50000, "accountsReceivable": 40000, "inventory": 30000, "other": 10000},
            "currentLiabilities": {"accountsPayable": 25000, "shortTermDebt": 20000, "other": 5000}
        }

        working_capital = engine.compute_working_capital(sheet, income_statements)
        cycle = engine.compute_cash_conversion_cycle(income_statements, sheet)

        assert working_capital.current == 75000
        assert cycle.days == pytest.approx(14.70, abs=0.01)
        assert cycle.trend == CycleTrend.STABLE

    def test_track_variance_reference_pairs(self):
        pairs = [(50000, 52000), (55000, 54000), (48000, 47000)]
        report = engine.track_variance([a for _, a in pairs], [f for f, _ in pairs])

        assert report.accuracy.mae < 3000
        assert report.accuracy.mape < 0.05
        assert report.accuracy.overall_accuracy > 0.95

    def test_benchmark_cycle_result(self, balance_sheet, income_statements):
        cycle = engine.compute_cash_conversion_cycle(income_statements, balance_sheet)
        report = engine.benchmark_performance(cycle)

        assert report.performance("cash_conversion_cycle") == PerformanceLevel.ABOVE_AVERAGE
        assert report.performance("days_payable_outstanding") == PerformanceLevel.BELOW_AVERAGE

    def test_benchmark_mapping(self):
        report = engine.benchmark_performance(
            {"cash_conversion_cycle": 40}, {"cash_conversion_cycle": 40}
        )
        assert report.performance("cash_conversion_cycle") == PerformanceLevel.AVERAGE


class TestFinancialMetrics:
    def test_bundle(self, balance_sheet, income_statements, steady_history, config):
        metrics = FinancialAnalyticsEngine(config).calculate_financial_metrics(
            balance_sheet, income_statements, steady_history,
            forecast_series=[20000, 20000, 20000]
        )

        assert metrics.cash_runway.no_burn
        assert metrics.liquidity.current_ratio == 2.6
        assert metrics.working_capital.optimal == 180000
        assert metrics.cash_conversion_cycle.days == pytest.approx(14.70, abs=0.01)
        assert metrics.variance.accuracy.mae == pytest.approx(233.33, abs=0.01)
        assert set(metrics.to_dict()) == {
            "cash_runway", "liquidity", "working_capital", "cash_conversion_cycle", "variance"
        }

    def test_without_forecast(self, balance_sheet, income_statements, steady_history):
        metrics = engine.calculate_financial_metrics(balance_sheet, income_statements, steady_history)
        assert metrics.variance is None
        assert metrics.to_dict()["variance"] is None
