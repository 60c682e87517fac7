"""
Engine-facing functions for the Cash Flow Forecasting Engine.

Each call is a pure function of its inputs. Balance sheets may be passed as
``BalanceSheetSnapshot`` or as a dict in either of the shapes accepted by
``BalanceSheetSnapshot.from_dict``.

Example:
```python
from src.engine import aggregate_historical_periods, generate_forecast, compute_liquidity

history = aggregate_historical_periods(transactions)
forecast = generate_forecast(history, {"id": "base", "kind": "realistic"}, 12, seed=42)
liquidity = compute_liquidity({"currentAssets": 150000, "currentLiabilities": 75000, "cash": 50000})
```
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from config.settings import get_config
from src.analytics import (
    BalanceSheetSnapshot,
    CashConversionCycleCalculator,
    CashConversionCycleResult,
    CashRunway,
    CashRunwayCalculator,
    FinancialAnalyticsEngine,
    FinancialMetrics,
    LiquidityAnalyzer,
    LiquidityMetrics,
    VarianceReport,
    VarianceTracker,
    WorkingCapitalOptimizer,
    WorkingCapitalResult
)
from src.forecasting import (
    CategorySummary,
    ForecastEngine,
    ForecastResult,
    HistoricalPeriod,
    InsufficientDataError,
    StressTestEngine,
    StressTestResult
)
from src.forecasting import aggregation
from src.forecasting.scenarios import ScenarioInput
from src.patterns.benchmark_engine import BenchmarkReport, create_cash_conversion_benchmarks


BalanceSheetInput = Union[BalanceSheetSnapshot, Mapping[str, Any]]


def _balance_sheet(balance_sheet: BalanceSheetInput) -> BalanceSheetSnapshot:
    if isinstance(balance_sheet, BalanceSheetSnapshot):
        return balance_sheet
    return BalanceSheetSnapshot.from_dict(balance_sheet)


def aggregate_historical_periods(transactions: Iterable[Any]) -> List[HistoricalPeriod]:
    """Monthly HistoricalPeriods from raw transactions."""
    return aggregation.aggregate_historical_periods(transactions)


def categorize_cash_flows(transactions: Iterable[Any]) -> Dict[str, CategorySummary]:
    return aggregation.categorize_cash_flows(transactions)


def generate_forecast(
    history: Sequence[HistoricalPeriod],
    scenario: ScenarioInput,
    horizon_months: int = 12,
    opening_balance: Optional[float] = None,
    seed: Optional[int] = None,
    engine: Optional[ForecastEngine] = None
) -> ForecastResult:
    """
    Project ``horizon_months`` periods for a scenario.

    The same ``seed`` with the same inputs always gives the same result.

    Raises:
        InsufficientDataError: If history is empty
    """
    engine = engine or ForecastEngine(seed=seed)
    return engine.generate_forecast(history, scenario, horizon_months, opening_balance)


def compare_scenarios(
    history: Sequence[HistoricalPeriod],
    scenarios: Sequence[ScenarioInput],
    horizon_months: int = 12,
    opening_balance: Optional[float] = None,
    seed: Optional[int] = None,
    max_workers: Optional[int] = None
) -> Dict[str, ForecastResult]:
    engine = ForecastEngine(seed=seed)
    return engine.compare_scenarios(history, scenarios, horizon_months, opening_balance, max_workers)


def run_stress_test(
    history: Sequence[HistoricalPeriod],
    stress_scenario: ScenarioInput,
    opening_balance: Optional[float] = None,
    seed: Optional[int] = None,
    engine: Optional[ForecastEngine] = None
) -> StressTestResult:
    """
    Raises:
        InsufficientDataError: If history is empty
    """
    stress = StressTestEngine(engine or ForecastEngine(seed=seed))
    return stress.run_stress_test(history, stress_scenario, opening_balance)


def compute_liquidity(balance_sheet: BalanceSheetInput) -> LiquidityMetrics:
    return LiquidityAnalyzer().analyze(_balance_sheet(balance_sheet))


def compute_cash_runway(
    history: Optional[Sequence[Any]] = None,
    current_cash: float = 0.0,
    burn_rate: Optional[float] = None
) -> CashRunway:
    """
    Runway from history, or directly from ``burn_rate`` when given.

    Raises:
        InsufficientDataError: If neither history nor a burn rate is supplied
    """
    calculator = CashRunwayCalculator(get_config())
    if burn_rate is not None:
        return calculator.from_burn_rate(current_cash, burn_rate)
    if not history:
        raise InsufficientDataError("compute_cash_runway", "history or burn_rate is required")
    return calculator.calculate(history, current_cash)


def compute_working_capital(
    balance_sheet: BalanceSheetInput,
    income_statements: Iterable[Any]
) -> WorkingCapitalResult:
    return WorkingCapitalOptimizer().optimize(_balance_sheet(balance_sheet), income_statements)


def compute_cash_conversion_cycle(
    income_statements: Iterable[Any],
    balance_sheet: BalanceSheetInput
) -> CashConversionCycleResult:
    return CashConversionCycleCalculator().calculate(income_statements, _balance_sheet(balance_sheet))


def track_variance(actual_series: Sequence[Any], forecast_series: Sequence[Any]) -> VarianceReport:
    """
    Raises:
        InsufficientDataError: If the actual series is empty
    """
    return VarianceTracker().track(actual_series, forecast_series)


def calculate_financial_metrics(
    balance_sheet: BalanceSheetInput,
    income_statements: Iterable[Any],
    history: Sequence[HistoricalPeriod],
    forecast_series: Optional[Sequence[Any]] = None
) -> FinancialMetrics:
    return FinancialAnalyticsEngine().calculate_financial_metrics(
        _balance_sheet(balance_sheet), income_statements, history, forecast_series
    )


def benchmark_performance(
    company_metrics: Union[CashConversionCycleResult, Mapping[str, float]],
    industry_benchmarks: Optional[Mapping[str, float]] = None
) -> BenchmarkReport:
    """
    Compare cash conversion KPIs with industry averages.

    ``company_metrics`` is a cash conversion cycle result or a mapping keyed
    by KPI id (``cash_conversion_cycle``, ``days_sales_outstanding``,
    ``days_inventory_outstanding``, ``days_payable_outstanding``).
    """
    if isinstance(company_metrics, CashConversionCycleResult):
        company_metrics = company_metrics.kpi_values()
    return create_cash_conversion_benchmarks(industry_benchmarks).analyze(company_metrics)
