"""
Benchmark Engine Pattern - Cash Flow Forecasting Engine

Scores working-capital timing KPIs against industry averages and labels
each one above, at or below the industry.

Use cases:
- Cash conversion cycle benchmarking
- DSO / DIO / DPO gap analysis
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
from enum import Enum
import logging

logger = logging.getLogger(__name__)

AVERAGE_BAND = 0.05  # +/-5% of benchmark counts as average


class KPIDirection(Enum):
    """Whether higher or lower values are better."""
    HIGHER_IS_BETTER = "higher_is_better"
    LOWER_IS_BETTER = "lower_is_better"


class PerformanceLevel(Enum):
    """Position relative to the industry average."""
    ABOVE_AVERAGE = "ABOVE_AVERAGE"
    AVERAGE = "AVERAGE"
    BELOW_AVERAGE = "BELOW_AVERAGE"


@dataclass
class KPIDefinition:
    """Definition of a Key Performance Indicator."""
    kpi_id: str
    name: str
    benchmark_value: float
    direction: KPIDirection = KPIDirection.LOWER_IS_BETTER
    unit: str = "days"
    description: str = ""
    weight: float = 1.0


@dataclass
class KPIScore:
    """Score for a single KPI."""
    kpi_id: str
    kpi_name: str
    actual_value: float
    benchmark_value: float
    score: float  # 0-120, 100 = at benchmark
    gap: float
    gap_percent: float
    direction: KPIDirection
    performance: PerformanceLevel
    rating: str
    unit: str = ""
    recommendation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kpi_id": self.kpi_id,
            "kpi_name": self.kpi_name,
            "actual_value": self.actual_value,
            "benchmark_value": self.benchmark_value,
            "score": self.score,
            "gap": self.gap,
            "gap_percent": self.gap_percent,
            "direction": self.direction.value,
            "performance": self.performance.value,
            "rating": self.rating,
            "unit": self.unit,
            "recommendation": self.recommendation
        }


@dataclass
class BenchmarkReport:
    """Complete benchmark analysis report."""
    overall_score: float
    overall_rating: str
    kpi_scores: List[KPIScore]
    recommendations: List[str]
    missing_kpis: List[str] = field(default_factory=list)

    def performance(self, kpi_id: str) -> Optional[PerformanceLevel]:
        for score in self.kpi_scores:
            if score.kpi_id == kpi_id:
                return score.performance
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_score": self.overall_score,
            "overall_rating": self.overall_rating,
            "kpi_scores": [k.to_dict() for k in self.kpi_scores],
            "recommendations": self.recommendations,
            "missing_kpis": self.missing_kpis
        }


class BenchmarkEngine:
    """
    KPI benchmarking engine.

    Example:
    ```python
    engine = BenchmarkEngine([
        KPIDefinition("days_sales_outstanding", "Days Sales Outstanding", 45.0),
        KPIDefinition("days_payable_outstanding", "Days Payable Outstanding", 30.0,
                      KPIDirection.HIGHER_IS_BETTER),
    ])

    report = engine.analyze({"days_sales_outstanding": 52, "days_payable_outstanding": 35})
    print(report.overall_score, report.performance("days_sales_outstanding").value)
    ```
    """

    RATING_THRESHOLDS = {
        90: "Excellent",
        75: "Good",
        60: "Fair",
        40: "Poor",
        0: "Critical"
    }

    def __init__(self, kpis: List[KPIDefinition]):
        self.kpis = {kpi.kpi_id: kpi for kpi in kpis}

    def score_kpi(self, kpi: KPIDefinition, actual_value: float) -> KPIScore:
        """Score a single KPI against its benchmark."""
        benchmark = kpi.benchmark_value
        gap = actual_value - benchmark

        if benchmark != 0:
            gap_percent = (gap / abs(benchmark)) * 100
        else:
            gap_percent = 100 if actual_value > 0 else 0

        score = self._calculate_score(actual_value, benchmark, kpi.direction)
        rating = self._determine_rating(score)

        return KPIScore(
            kpi_id=kpi.kpi_id,
            kpi_name=kpi.name,
            actual_value=round(actual_value, 2),
            benchmark_value=benchmark,
            score=round(score, 1),
            gap=round(gap, 2),
            gap_percent=round(gap_percent, 1),
            direction=kpi.direction,
            performance=self._performance(actual_value, benchmark, kpi.direction),
            rating=rating,
            unit=kpi.unit,
            recommendation=self._generate_recommendation(kpi, actual_value, benchmark, rating)
        )

    def _calculate_score(
        self,
        actual: float,
        benchmark: float,
        direction: KPIDirection
    ) -> float:
        """Score on a 0-120 scale where 100 means at benchmark."""
        if benchmark == 0:
            if direction == KPIDirection.LOWER_IS_BETTER:
                return 100 if actual <= 0 else 0
            return 100 if actual >= 0 else 0

        if direction == KPIDirection.HIGHER_IS_BETTER:
            if actual >= benchmark:
                bonus = min(20, ((actual - benchmark) / benchmark) * 20)
                return min(120, 100 + bonus)
            return max(0, (actual / benchmark) * 100)

        if actual <= benchmark:
            if actual == 0:
                return 120
            bonus = min(20, ((benchmark - actual) / benchmark) * 20)
            return min(120, 100 + bonus)
        excess_ratio = actual / benchmark
        return max(0, 100 - ((excess_ratio - 1) * 100))

    @staticmethod
    def _performance(
        actual: float,
        benchmark: float,
        direction: KPIDirection
    ) -> PerformanceLevel:
        """Direction-aware label with a +/-5% average band."""
        band = abs(benchmark) * AVERAGE_BAND
        if abs(actual - benchmark) <= band:
            return PerformanceLevel.AVERAGE

        better = actual > benchmark if direction == KPIDirection.HIGHER_IS_BETTER else actual < benchmark
        return PerformanceLevel.ABOVE_AVERAGE if better else PerformanceLevel.BELOW_AVERAGE

    def _determine_rating(self, score: float) -> str:
        for threshold, rating in sorted(self.RATING_THRESHOLDS.items(), reverse=True):
            if score >= threshold:
                return rating
        return "Critical"

    def _generate_recommendation(
        self,
        kpi: KPIDefinition,
        actual: float,
        benchmark: float,
        rating: str
    ) -> str:
        if rating in ["Excellent", "Good"]:
            return f"Maintain current performance in {kpi.name}"

        direction_text = "increase" if kpi.direction == KPIDirection.HIGHER_IS_BETTER else "reduce"
        gap = abs(actual - benchmark)

        if rating == "Fair":
            return f"Minor improvement needed: {direction_text} {kpi.name} by {gap:.1f} {kpi.unit}"
        elif rating == "Poor":
            return f"Priority action: {direction_text} {kpi.name} significantly (gap: {gap:.1f} {kpi.unit})"
        else:
            return f"CRITICAL: Immediate intervention required for {kpi.name}"

    def analyze(self, actual_values: Mapping[str, float]) -> BenchmarkReport:
        """Score every configured KPI present in ``actual_values``."""
        kpi_scores = []
        missing = []

        for kpi_id, kpi in self.kpis.items():
            actual = actual_values.get(kpi_id)
            if actual is None:
                logger.warning(f"Missing value for KPI '{kpi_id}'")
                missing.append(kpi_id)
                continue
            kpi_scores.append(self.score_kpi(kpi, float(actual)))

        total_weight = sum(self.kpis[k.kpi_id].weight for k in kpi_scores)
        weighted_sum = sum(k.score * self.kpis[k.kpi_id].weight for k in kpi_scores)
        overall_score = weighted_sum / total_weight if total_weight > 0 else 0

        recommendations = [k.recommendation for k in kpi_scores if k.rating in ["Poor", "Critical"]]

        return BenchmarkReport(
            overall_score=round(overall_score, 1),
            overall_rating=self._determine_rating(overall_score),
            kpi_scores=kpi_scores,
            recommendations=recommendations,
            missing_kpis=missing
        )


# =============================================================================
# Factory Functions
# =============================================================================

DEFAULT_INDUSTRY_BENCHMARKS = {
    "cash_conversion_cycle": 75.0,
    "days_sales_outstanding": 45.0,
    "days_inventory_outstanding": 60.0,
    "days_payable_outstanding": 30.0,
}

BENCHMARK_ALIASES = {
    "avgCashConversionCycle": "cash_conversion_cycle",
    "avgDSO": "days_sales_outstanding",
    "avgDIO": "days_inventory_outstanding",
    "avgDPO": "days_payable_outstanding",
}


def create_cash_conversion_benchmarks(
    industry_benchmarks: Optional[Mapping[str, float]] = None
) -> BenchmarkEngine:
    """Benchmark engine for the cash conversion cycle and its components."""
    values = dict(DEFAULT_INDUSTRY_BENCHMARKS)
    for key, value in (industry_benchmarks or {}).items():
        kpi_id = BENCHMARK_ALIASES.get(key, key)
        if kpi_id not in values:
            logger.warning(f"Ignoring unknown industry benchmark '{key}'")
            continue
        values[kpi_id] = float(value)

    return BenchmarkEngine([
        KPIDefinition("cash_conversion_cycle", "Cash Conversion Cycle",
                      values["cash_conversion_cycle"], KPIDirection.LOWER_IS_BETTER, "days",
                      "DSO + DIO - DPO", weight=1.5),
        KPIDefinition("days_sales_outstanding", "Days Sales Outstanding",
                      values["days_sales_outstanding"], KPIDirection.LOWER_IS_BETTER, "days",
                      "Average days to collect receivables"),
        KPIDefinition("days_inventory_outstanding", "Days Inventory Outstanding",
                      values["days_inventory_outstanding"], KPIDirection.LOWER_IS_BETTER, "days",
                      "Average days inventory held"),
        KPIDefinition("days_payable_outstanding", "Days Payable Outstanding",
                      values["days_payable_outstanding"], KPIDirection.HIGHER_IS_BETTER, "days",
                      "Average days to pay suppliers"),
    ])
