"""Shared fixtures for the forecasting engine tests."""

import os

os.environ.setdefault("CASHFLOW_ENV", "testing")

import pytest

from config.settings import TestingConfig
from src.analytics import BalanceSheetSnapshot, CurrentAssets, CurrentLiabilities, IncomeStatementPeriod
from src.common.periods import add_months
from src.common.randomness import FixedRandomSource
from src.forecasting import ForecastEngine, HistoricalPeriod


def make_history(start, inflows, outflows):
    """HistoricalPeriods for consecutive months starting at ``start``."""
    return [
        HistoricalPeriod(add_months(start, i), inflow=inflow, outflow=outflow)
        for i, (inflow, outflow) in enumerate(zip(inflows, outflows))
    ]


@pytest.fixture
def config():
    return TestingConfig


@pytest.fixture
def neutral_engine():
    """Engine with zero perturbation."""
    return ForecastEngine(config=TestingConfig, random_source_factory=lambda: FixedRandomSource(0.5))


@pytest.fixture
def steady_history():
    """Three months of near-constant positive net flow."""
    return make_history("2024-01", [50000, 50500, 49800], [30000, 30000, 30000])


@pytest.fixture
def single_month_history():
    return [HistoricalPeriod("2024-01", inflow=50000, outflow=30000)]


@pytest.fixture
def december_spike_history():
    """Two years of flat income with a doubled December."""
    inflows = [100000 if month % 12 == 11 else 50000 for month in range(24)]
    return make_history("2023-01", inflows, [30000] * 24)


@pytest.fixture
def balance_sheet():
    return BalanceSheetSnapshot(
        current_assets=CurrentAssets(cash=50000, accounts_receivable=40000, inventory=30000, other=10000),
        current_liabilities=CurrentLiabilities(accounts_payable=25000, short_term_debt=20000, other=5000)
    )


@pytest.fixture
def income_statements():
    return [
        IncomeStatementPeriod(f"2024-{m:02d}", revenue=100000, cost_of_goods_sold=60000,
                              operating_expenses=25000, net_income=15000)
        for m in range(1, 13)
    ]


@pytest.fixture
def history_factory():
    return make_history
