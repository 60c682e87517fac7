"""
Financial Analytics Engine

Runs every analytics calculator over one company's data and bundles the
results.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence

from config.settings import get_config
from src.forecasting.models import HistoricalPeriod
from .cash_conversion import CashConversionCycleCalculator, CashConversionCycleResult
from .cash_runway import CashRunway, CashRunwayCalculator
from .liquidity import LiquidityAnalyzer, LiquidityMetrics
from .statements import BalanceSheetSnapshot
from .variance import VarianceReport, VarianceTracker
from .working_capital import WorkingCapitalOptimizer, WorkingCapitalResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinancialMetrics:
    cash_runway: CashRunway
    liquidity: LiquidityMetrics
    working_capital: WorkingCapitalResult
    cash_conversion_cycle: CashConversionCycleResult
    variance: Optional[VarianceReport] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cash_runway": self.cash_runway.to_dict(),
            "liquidity": self.liquidity.to_dict(),
            "working_capital": self.working_capital.to_dict(),
            "cash_conversion_cycle": self.cash_conversion_cycle.to_dict(),
            "variance": self.variance.to_dict() if self.variance else None
        }


class FinancialAnalyticsEngine:
    """
    Example:
    ```python
    engine = FinancialAnalyticsEngine()
    metrics = engine.calculate_financial_metrics(balance_sheet, statements, history)
    print(metrics.liquidity.interpretation)
    ```
    """

    def __init__(self, config=None):
        self.config = config or get_config()
        self.liquidity_analyzer = LiquidityAnalyzer()
        self.runway_calculator = CashRunwayCalculator(self.config)
        self.working_capital_optimizer = WorkingCapitalOptimizer(self.config)
        self.cycle_calculator = CashConversionCycleCalculator(self.config)
        self.variance_tracker = VarianceTracker(self.config)

    def calculate_financial_metrics(
        self,
        balance_sheet: BalanceSheetSnapshot,
        income_statements: Iterable[Any],
        history: Sequence[HistoricalPeriod],
        forecast_series: Optional[Sequence[Any]] = None
    ) -> FinancialMetrics:
        """
        Args:
            balance_sheet: Current balance sheet; its cash funds the runway
            income_statements: Income statement periods, oldest first
            history: Monthly historical periods (actuals for variance)
            forecast_series: Forecast values aligned with ``history``

        Raises:
            InsufficientDataError: If history is empty
        """
        income_statements = list(income_statements)
        logger.info(
            f"Calculating financial metrics from {len(history)} months and "
            f"{len(income_statements)} income statements"
        )

        variance = None
        if forecast_series is not None:
            variance = self.variance_tracker.track(history, forecast_series)

        return FinancialMetrics(
            cash_runway=self.runway_calculator.calculate(history, balance_sheet.current_assets.cash),
            liquidity=self.liquidity_analyzer.analyze(balance_sheet),
            working_capital=self.working_capital_optimizer.optimize(balance_sheet, income_statements),
            cash_conversion_cycle=self.cycle_calculator.calculate(income_statements, balance_sheet),
            variance=variance
        )
