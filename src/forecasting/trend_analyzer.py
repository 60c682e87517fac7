"""
Trend Analyzer for the Cash Flow Forecasting Engine

Growth-rate extraction for the forecast engine, plus a descriptive trend
analysis (direction, fit, anomalies, insights) for category reporting.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from src.common.numeric import safe_divide
from .models import HistoricalPeriod
from .seasonality import calculate_seasonal_factors_by_month
from .aggregation import monthly_category_totals

logger = logging.getLogger(__name__)


def calculate_growth_rate(values: Sequence[float]) -> float:
    """
    Geometric per-period growth rate of a series.

    ``rate = (last / first) ** (1 / (n - 1)) - 1``. Returns 0 for fewer than
    two points, a zero first value, or a sign change between the endpoints.
    """
    if len(values) < 2:
        return 0.0

    first, last = values[0], values[-1]
    ratio = safe_divide(last, first, default=0.0)
    if first == 0 or ratio < 0:
        return 0.0

    return float(ratio ** (1.0 / (len(values) - 1)) - 1.0)


def calculate_trend_growth_rate(history: Sequence[HistoricalPeriod]) -> float:
    """Average of the income and expense geometric growth rates."""
    if len(history) < 2:
        return 0.0

    income_rate = calculate_growth_rate([p.inflow for p in history])
    expense_rate = calculate_growth_rate([p.outflow for p in history])
    return (income_rate + expense_rate) / 2


class TrendDirection(Enum):
    """Direction of trend"""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"
    VOLATILE = "volatile"


@dataclass
class TrendResult:
    """Result of trend analysis"""
    metric_name: str
    direction: TrendDirection
    slope: float
    r_squared: float
    growth_rate: float
    seasonal_factors: Dict[int, float]
    volatility: float
    recent_change: float  # % change recent vs historical
    anomalies: List[Dict[str, Any]]
    insights: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric_name": self.metric_name,
            "direction": self.direction.value,
            "slope": self.slope,
            "r_squared": self.r_squared,
            "growth_rate": self.growth_rate,
            "seasonal_factors": self.seasonal_factors,
            "volatility": self.volatility,
            "recent_change": self.recent_change,
            "anomalies": self.anomalies,
            "insights": self.insights
        }


class TrendAnalyzer:
    """
    Analyzes a monthly financial series for trend, growth and anomalies.

    Example:
    ```python
    analyzer = TrendAnalyzer()

    result = analyzer.analyze(
        values=[45000, 50000, 55000],
        dates=[date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)],
        metric_name="SALES"
    )

    print(f"Trend: {result.direction.value}, growth {result.growth_rate:.1%}")
    ```
    """

    def __init__(
        self,
        anomaly_threshold: float = 2.0,  # Standard deviations
        volatile_threshold: float = 0.3
    ):
        self.anomaly_threshold = anomaly_threshold
        self.volatile_threshold = volatile_threshold

    def analyze(
        self,
        values: List[float],
        dates: List[date],
        metric_name: str = "metric"
    ) -> TrendResult:
        """
        Perform trend analysis on a series.

        Args:
            values: Time series values
            dates: Corresponding dates (first of month is fine)
            metric_name: Name of the metric being analyzed
        """
        if len(values) < 2:
            return self._minimal_result(metric_name)

        direction, slope, r_squared = self._analyze_trend(values)
        growth_rate = calculate_growth_rate(values)
        volatility = self._calculate_volatility(values)
        seasonal_factors = calculate_seasonal_factors_by_month(
            [(d.month, v) for d, v in zip(dates, values)]
        )
        recent_change = self._calculate_recent_change(values)
        anomalies = self._detect_anomalies(values, dates)

        insights = self._generate_insights(
            metric_name, direction, slope, volatility, recent_change, anomalies
        )

        return TrendResult(
            metric_name=metric_name,
            direction=direction,
            slope=round(float(slope), 4),
            r_squared=round(float(r_squared), 4),
            growth_rate=round(growth_rate, 4),
            seasonal_factors=seasonal_factors,
            volatility=round(volatility, 4),
            recent_change=round(recent_change, 2),
            anomalies=anomalies,
            insights=insights
        )

    def _analyze_trend(
        self,
        values: List[float]
    ) -> Tuple[TrendDirection, float, float]:
        """Analyze linear trend using regression"""
        n = len(values)
        x = np.arange(n, dtype=float)
        y = np.array(values, dtype=float)

        x_mean = np.mean(x)
        y_mean = np.mean(y)

        numerator = np.sum((x - x_mean) * (y - y_mean))
        denominator = np.sum((x - x_mean) ** 2)

        if denominator == 0:
            return TrendDirection.STABLE, 0.0, 0.0

        slope = numerator / denominator
        intercept = y_mean - slope * x_mean

        # R-squared
        y_pred = slope * x + intercept
        ss_res = np.sum((y - y_pred) ** 2)
        ss_tot = np.sum((y - y_mean) ** 2)
        r_squared = 1 - (ss_res / ss_tot) if ss_tot > 0 else 0.0

        volatility = self._calculate_volatility(values)

        if volatility > self.volatile_threshold:
            direction = TrendDirection.VOLATILE
        elif abs(slope) < abs(y_mean) * 0.01:  # <1% of mean per period
            direction = TrendDirection.STABLE
        elif slope > 0:
            direction = TrendDirection.INCREASING
        else:
            direction = TrendDirection.DECREASING

        return direction, slope, r_squared

    def _calculate_volatility(self, values: List[float]) -> float:
        """Coefficient of variation"""
        mean_val = np.mean(values)
        if mean_val == 0:
            return 0.0
        return float(np.std(values) / abs(mean_val))

    def _calculate_recent_change(
        self,
        values: List[float],
        recent_periods: int = 3
    ) -> float:
        """% change between recent and earlier average"""
        if len(values) < recent_periods + 3:
            return 0.0

        hist_avg = np.mean(values[:-recent_periods])
        recent_avg = np.mean(values[-recent_periods:])

        if hist_avg == 0:
            return 0.0

        return float((recent_avg - hist_avg) / abs(hist_avg) * 100)

    def _detect_anomalies(
        self,
        values: List[float],
        dates: List[date]
    ) -> List[Dict[str, Any]]:
        """Detect anomalous values using z-score"""
        mean_val = np.mean(values)
        std_val = np.std(values)

        if std_val == 0:
            return []

        anomalies = []
        for i, (value, when) in enumerate(zip(values, dates)):
            z_score = (value - mean_val) / std_val
            if abs(z_score) > self.anomaly_threshold:
                anomalies.append({
                    "index": i,
                    "date": when.isoformat(),
                    "value": value,
                    "z_score": round(float(z_score), 2),
                    "type": "high" if z_score > 0 else "low"
                })

        return anomalies

    def _generate_insights(
        self,
        metric_name: str,
        direction: TrendDirection,
        slope: float,
        volatility: float,
        recent_change: float,
        anomalies: List[Dict]
    ) -> List[str]:
        """Generate human-readable insights"""
        insights = []

        if direction == TrendDirection.INCREASING:
            insights.append(f"{metric_name} shows an upward trend (+{abs(slope):.1f} per period)")
        elif direction == TrendDirection.DECREASING:
            insights.append(f"{metric_name} shows a downward trend (-{abs(slope):.1f} per period)")
        elif direction == TrendDirection.VOLATILE:
            insights.append(f"{metric_name} shows high volatility - consider stabilization measures")
        else:
            insights.append(f"{metric_name} is relatively stable")

        if volatility > self.volatile_threshold:
            insights.append(f"High volatility ({volatility:.0%}) indicates unpredictability - build larger cash buffers")
        elif volatility < 0.1:
            insights.append(f"Low volatility ({volatility:.0%}) indicates predictable {metric_name}")

        if abs(recent_change) > 10:
            direction_word = "increased" if recent_change > 0 else "decreased"
            insights.append(f"Recent {metric_name} has {direction_word} {abs(recent_change):.0f}% vs historical average")

        if anomalies:
            insights.append(f"Detected {len(anomalies)} unusual data point(s) - investigate for data quality or exceptional events")

        return insights

    def _minimal_result(self, metric_name: str) -> TrendResult:
        """Return minimal result for insufficient data"""
        return TrendResult(
            metric_name=metric_name,
            direction=TrendDirection.STABLE,
            slope=0.0,
            r_squared=0.0,
            growth_rate=0.0,
            seasonal_factors={},
            volatility=0.0,
            recent_change=0.0,
            anomalies=[],
            insights=["Insufficient data for trend analysis"]
        )


def analyze_category_trends(
    transactions: Iterable[Any],
    category: str,
    analyzer: Optional[TrendAnalyzer] = None
) -> TrendResult:
    """Trend analysis of one category's monthly totals."""
    analyzer = analyzer or TrendAnalyzer()
    monthly = monthly_category_totals(transactions, category)

    dates = [date(int(key[:4]), int(key[5:7]), 1) for key, _ in monthly]
    values = [total for _, total in monthly]

    logger.debug(f"Analyzing {len(values)} months of {category}")
    return analyzer.analyze(values, dates, metric_name=category)
