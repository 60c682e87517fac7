"""
Forecasting value types.

Historical input, scenarios and forecast output are immutable; a new
forecast replaces the previous sequence instead of mutating it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from src.common.periods import PeriodKey, parse_period_key


class ScenarioKind(Enum):
    """Scenario types"""
    MAIN = "main"
    REALISTIC = "realistic"
    OPTIMISTIC = "optimistic"
    PESSIMISTIC = "pessimistic"
    CUSTOM = "custom"
    STRESS = "stress"


@dataclass(frozen=True)
class HistoricalPeriod:
    """One month of aggregated cash flow for a company"""
    period_key: PeriodKey
    inflow: float
    outflow: float
    net_flow: Optional[float] = None
    category: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "period_key", parse_period_key(self.period_key))
        if self.inflow < 0 or self.outflow < 0:
            raise ValueError(f"Inflow and outflow must be non-negative ({self.period_key})")
        if self.net_flow is None:
            object.__setattr__(self, "net_flow", self.inflow - self.outflow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period_key": self.period_key,
            "inflow": self.inflow,
            "outflow": self.outflow,
            "net_flow": self.net_flow,
            "category": self.category
        }


@dataclass(frozen=True)
class Scenario:
    """
    A named set of forecast assumptions.

    ``assumptions`` accepts camelCase or snake_case keys: growthRate,
    incomeMultiplier, expenseMultiplier, riskMultiplier, seasonality,
    revenueShock, delayedPaymentDays, emergencyExpense, shockDurationMonths.
    """
    id: str
    name: str = ""
    kind: str = ScenarioKind.MAIN.value
    assumptions: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ForecastFactors:
    """Multipliers that shaped one forecast period"""
    seasonality: float
    growth: float
    risk: float

    def to_dict(self) -> Dict[str, float]:
        return {"seasonality": self.seasonality, "growth": self.growth, "risk": self.risk}


@dataclass(frozen=True)
class ForecastPeriod:
    """Projected cash flow for a single month"""
    period_key: PeriodKey
    predicted_inflow: float
    predicted_outflow: float
    net_cash_flow: float
    cumulative_balance: float
    confidence: float
    scenario_id: str
    factors: ForecastFactors

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be within [0, 1], got {self.confidence}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period_key": self.period_key,
            "predicted_inflow": self.predicted_inflow,
            "predicted_outflow": self.predicted_outflow,
            "net_cash_flow": self.net_cash_flow,
            "cumulative_balance": self.cumulative_balance,
            "confidence": self.confidence,
            "scenario_id": self.scenario_id,
            "factors": self.factors.to_dict()
        }


@dataclass(frozen=True)
class ForecastResult:
    """
    A complete forecast for one scenario and horizon.

    Behaves like the underlying sequence of periods (``len``, iteration,
    indexing) so callers that only need the periods can ignore the rest.
    """
    scenario_id: str
    scenario_name: str
    periods: Tuple[ForecastPeriod, ...]
    opening_balance: float
    trend_growth_rate: float
    volatility: float
    seasonal_factors: Mapping[int, float]
    warnings: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.periods)

    def __iter__(self) -> Iterator[ForecastPeriod]:
        return iter(self.periods)

    def __getitem__(self, index):
        return self.periods[index]

    @property
    def ending_balance(self) -> float:
        return self.periods[-1].cumulative_balance if self.periods else self.opening_balance

    @property
    def minimum_balance(self) -> float:
        return min((p.cumulative_balance for p in self.periods), default=self.opening_balance)

    @property
    def average_confidence(self) -> float:
        if not self.periods:
            return 0.0
        return sum(p.confidence for p in self.periods) / len(self.periods)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario_id": self.scenario_id,
            "scenario_name": self.scenario_name,
            "periods": [p.to_dict() for p in self.periods],
            "opening_balance": self.opening_balance,
            "ending_balance": self.ending_balance,
            "minimum_balance": self.minimum_balance,
            "average_confidence": round(self.average_confidence, 4),
            "trend_growth_rate": self.trend_growth_rate,
            "volatility": self.volatility,
            "seasonal_factors": dict(self.seasonal_factors),
            "warnings": list(self.warnings)
        }


def net_flows(history: List[HistoricalPeriod]) -> List[float]:
    """Net flow series of a history"""
    return [p.net_flow for p in history]
