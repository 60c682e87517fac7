"""
Cash Runway Calculator

How long current cash lasts at the historical burn rate. A business with no
negative months has no burn; its runway is reported as the "no burn" state
rather than an infinite number.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from config.settings import get_config
from src.common.numeric import parse_amount
from src.forecasting.errors import InsufficientDataError
from src.forecasting.models import HistoricalPeriod, net_flows
from src.forecasting.trend_analyzer import TrendDirection
from src.patterns.risk_classification import (
    RiskClassifier,
    RiskLevel,
    create_runway_risk_classifier
)

logger = logging.getLogger(__name__)

FlowHistory = Sequence[Union[HistoricalPeriod, float]]


@dataclass(frozen=True)
class CashRunway:
    """Cash runway estimate"""
    current_cash: float
    burn_rate: float
    gross_burn_rate: float
    months: Optional[float]  # None when there is no burn
    days: Optional[float]
    confidence: float
    burn_trend: TrendDirection
    risk_level: RiskLevel

    @property
    def no_burn(self) -> bool:
        return self.months is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_cash": self.current_cash,
            "burn_rate": self.burn_rate,
            "gross_burn_rate": self.gross_burn_rate,
            "months": self.months,
            "days": self.days,
            "no_burn": self.no_burn,
            "confidence": self.confidence,
            "burn_trend": self.burn_trend.value,
            "risk_level": self.risk_level.value
        }


class CashRunwayCalculator:
    """
    Runway from monthly net flows.

    Example:
    ```python
    calculator = CashRunwayCalculator()
    runway = calculator.calculate(history, current_cash=100000)
    if runway.no_burn:
        print("Cash flow positive")
    else:
        print(f"{runway.months:.1f} months ({runway.risk_level.value})")
    ```
    """

    def __init__(self, config=None, classifier: Optional[RiskClassifier] = None):
        self.config = config or get_config()
        self.classifier = classifier or create_runway_risk_classifier()

    def calculate(self, history: FlowHistory, current_cash: float) -> CashRunway:
        """
        Args:
            history: HistoricalPeriods or plain monthly net flows
            current_cash: Cash on hand

        Raises:
            InsufficientDataError: If history is empty
        """
        if not history:
            raise InsufficientDataError("compute_cash_runway")

        current_cash = parse_amount(current_cash)
        flows = self._monthly_flows(history)
        outflows = [p.outflow for p in history if isinstance(p, HistoricalPeriod)]

        burns = [abs(flow) for flow in flows if flow < 0]
        burn_rate = float(np.mean(burns)) if burns else 0.0
        gross_burn_rate = float(np.mean(outflows)) if outflows else burn_rate

        return self._build(
            current_cash=current_cash,
            burn_rate=burn_rate,
            gross_burn_rate=gross_burn_rate,
            confidence=self._burn_rate_confidence(flows),
            burn_trend=self._burn_trend(flows)
        )

    def from_burn_rate(self, current_cash: float, burn_rate: float) -> CashRunway:
        """Runway for a known burn rate."""
        burn_rate = abs(parse_amount(burn_rate))
        return self._build(
            current_cash=parse_amount(current_cash),
            burn_rate=burn_rate,
            gross_burn_rate=burn_rate,
            confidence=1.0,
            burn_trend=TrendDirection.STABLE
        )

    def _build(
        self,
        current_cash: float,
        burn_rate: float,
        gross_burn_rate: float,
        confidence: float,
        burn_trend: TrendDirection
    ) -> CashRunway:
        if burn_rate > 0:
            months = max(0.0, current_cash / burn_rate)
            days = months * self.config.DAYS_PER_MONTH
            risk_level = self.classifier.classify(months).level
            months, days = round(months, 2), round(days, 1)
        else:
            months = days = None
            risk_level = RiskLevel.LOW

        logger.debug(f"Runway: burn {burn_rate:,.2f}/month, months {months}")

        return CashRunway(
            current_cash=round(current_cash, 2),
            burn_rate=round(burn_rate, 2),
            gross_burn_rate=round(gross_burn_rate, 2),
            months=months,
            days=days,
            confidence=round(confidence, 4),
            burn_trend=burn_trend,
            risk_level=risk_level
        )

    @staticmethod
    def _monthly_flows(history: FlowHistory) -> List[float]:
        periods = [p for p in history if isinstance(p, HistoricalPeriod)]
        if len(periods) == len(history):
            return net_flows(sorted(periods, key=lambda p: p.period_key))
        return [p.net_flow if isinstance(p, HistoricalPeriod) else parse_amount(p) for p in history]

    @staticmethod
    def _burn_rate_confidence(flows: List[float]) -> float:
        """Higher confidence with lower variation of monthly flows."""
        if len(flows) < 3:
            return 0.5

        mean_val = float(np.mean(flows))
        cv = float(np.std(flows)) / abs(mean_val) if mean_val != 0 else 1.0
        return max(0.0, 1.0 - cv)

    @staticmethod
    def _burn_trend(flows: List[float]) -> TrendDirection:
        """Direction of monthly burn (negated net flow) by least squares."""
        if len(flows) < 2:
            return TrendDirection.STABLE

        burn = -np.array(flows, dtype=float)
        slope = float(np.polyfit(np.arange(len(burn), dtype=float), burn, 1)[0])
        scale = abs(float(np.mean(burn))) or 1.0

        if abs(slope) < scale * 0.01:
            return TrendDirection.STABLE
        return TrendDirection.INCREASING if slope > 0 else TrendDirection.DECREASING
