"""
Working Capital Optimizer
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from config.settings import get_config
from src.common.numeric import safe_divide
from .statements import BalanceSheetSnapshot, annual_totals, coerce_statements

logger = logging.getLogger(__name__)

LOW_EFFICIENCY = 0.8
HIGH_EFFICIENCY = 1.5


@dataclass(frozen=True)
class WorkingCapitalResult:
    current: float
    optimal: float
    efficiency: float
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current,
            "optimal": self.optimal,
            "efficiency": self.efficiency,
            "recommendations": list(self.recommendations)
        }


class WorkingCapitalOptimizer:
    """
    Compares working capital with a revenue-based benchmark.

    ``optimal = annual revenue * WORKING_CAPITAL_BENCHMARK``; efficiency is
    the ratio of actual to optimal (1.0 without revenue).
    """

    def __init__(self, config=None):
        self.config = config or get_config()

    def optimize(
        self,
        balance_sheet: BalanceSheetSnapshot,
        income_statements: Iterable[Any]
    ) -> WorkingCapitalResult:
        assets = balance_sheet.current_assets
        liabilities = balance_sheet.current_liabilities

        current = (
            assets.cash + assets.accounts_receivable + assets.inventory
            - (liabilities.accounts_payable + liabilities.short_term_debt)
        )
        annual_revenue = annual_totals(coerce_statements(income_statements))["revenue"]
        optimal = annual_revenue * self.config.WORKING_CAPITAL_BENCHMARK
        efficiency = safe_divide(current, optimal, default=1.0)

        recommendations = self._recommendations(balance_sheet, efficiency)
        logger.debug(f"Working capital {current:,.2f} vs optimal {optimal:,.2f}")

        return WorkingCapitalResult(
            current=round(current, 2),
            optimal=round(optimal, 2),
            efficiency=round(efficiency, 4),
            recommendations=recommendations
        )

    def _recommendations(
        self,
        balance_sheet: BalanceSheetSnapshot,
        efficiency: float
    ) -> List[str]:
        assets = balance_sheet.current_assets
        recommendations = []

        if efficiency < LOW_EFFICIENCY:
            recommendations.append(
                "Working capital is below optimal. Consider increasing cash reserves or reducing short-term debt."
            )
        elif efficiency > HIGH_EFFICIENCY:
            recommendations.append(
                "Working capital is above optimal. Consider investing excess cash or paying down debt."
            )

        if assets.accounts_receivable > assets.cash * 2:
            recommendations.append(
                "High accounts receivable. Tighten credit policies or improve collection processes."
            )

        if assets.inventory > assets.cash:
            recommendations.append(
                "High inventory levels. Consider inventory optimization or just-in-time purchasing."
            )

        return recommendations
