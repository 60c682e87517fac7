"""
Cash Conversion Cycle Calculator

DSO + DIO - DPO, floored at zero. Purchases are approximated by cost of goods
sold when computing DPO.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List

import numpy as np

from config.settings import get_config
from src.common.numeric import safe_divide
from .statements import BalanceSheetSnapshot, IncomeStatementPeriod, annual_totals, coerce_statements

logger = logging.getLogger(__name__)

TREND_WINDOW = 3
TREND_THRESHOLD = 0.10


class CycleTrend(Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


@dataclass(frozen=True)
class CashConversionCycleResult:
    days: float
    days_sales_outstanding: float
    days_inventory_outstanding: float
    days_payable_outstanding: float
    trend: CycleTrend

    def to_dict(self) -> Dict[str, Any]:
        return {
            "days": self.days,
            "components": {
                "days_sales_outstanding": self.days_sales_outstanding,
                "days_inventory_outstanding": self.days_inventory_outstanding,
                "days_payable_outstanding": self.days_payable_outstanding
            },
            "trend": self.trend.value
        }

    def kpi_values(self) -> Dict[str, float]:
        """Values keyed by benchmark KPI id."""
        return {
            "cash_conversion_cycle": self.days,
            "days_sales_outstanding": self.days_sales_outstanding,
            "days_inventory_outstanding": self.days_inventory_outstanding,
            "days_payable_outstanding": self.days_payable_outstanding
        }


class CashConversionCycleCalculator:
    """
    Example:
    ```python
    calculator = CashConversionCycleCalculator()
    result = calculator.calculate(statements, balance_sheet)
    print(f"{result.days:.0f} days, {result.trend.value}")
    ```
    """

    def __init__(self, config=None):
        self.config = config or get_config()

    def calculate(
        self,
        income_statements: Iterable[Any],
        balance_sheet: BalanceSheetSnapshot
    ) -> CashConversionCycleResult:
        statements = sorted(coerce_statements(income_statements), key=lambda s: str(s.period))
        totals = annual_totals(statements)
        days_per_year = self.config.DAYS_PER_YEAR

        revenue = totals["revenue"]
        cogs = totals["cost_of_goods_sold"]
        purchases = cogs

        dso = safe_divide(balance_sheet.current_assets.accounts_receivable, revenue) * days_per_year
        dio = safe_divide(balance_sheet.current_assets.inventory, cogs) * days_per_year
        dpo = safe_divide(balance_sheet.current_liabilities.accounts_payable, purchases) * days_per_year

        cycle = max(0.0, dso + dio - dpo)
        logger.debug(f"Cash conversion cycle: DSO {dso:.1f} + DIO {dio:.1f} - DPO {dpo:.1f}")

        return CashConversionCycleResult(
            days=round(cycle, 2),
            days_sales_outstanding=round(dso, 2),
            days_inventory_outstanding=round(dio, 2),
            days_payable_outstanding=round(dpo, 2),
            trend=self._trend(statements)
        )

    @staticmethod
    def _trend(statements: List[IncomeStatementPeriod]) -> CycleTrend:
        """Recent three periods of revenue against the three before them."""
        if len(statements) < TREND_WINDOW + 1:
            return CycleTrend.STABLE

        recent = float(np.mean([s.revenue for s in statements[-TREND_WINDOW:]]))
        prior = float(np.mean([s.revenue for s in statements[-2 * TREND_WINDOW:-TREND_WINDOW]]))

        if recent > prior * (1 + TREND_THRESHOLD):
            return CycleTrend.IMPROVING
        if recent < prior * (1 - TREND_THRESHOLD):
            return CycleTrend.DECLINING
        return CycleTrend.STABLE
