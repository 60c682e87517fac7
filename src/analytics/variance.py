"""
Variance Tracker

Compares actual results with forecast values period by period and scores
overall forecast accuracy (MAE, MAPE, RMSE, r-squared).
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Tuple

import numpy as np

from config.settings import get_config
from src.common.numeric import clamp, parse_amount, safe_divide
from src.forecasting.errors import InsufficientDataError
from src.forecasting.models import ForecastPeriod, HistoricalPeriod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VarianceRecord:
    period: str
    actual: float
    forecast: float
    variance: float
    variance_percent: float
    significant: bool
    matched: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "actual": self.actual,
            "forecast": self.forecast,
            "variance": self.variance,
            "variance_percent": self.variance_percent,
            "significant": self.significant,
            "matched": self.matched
        }


@dataclass(frozen=True)
class ForecastAccuracy:
    mae: float
    mape: float
    overall_accuracy: float
    rmse: float
    r_squared: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "mae": self.mae,
            "mape": self.mape,
            "overall_accuracy": self.overall_accuracy,
            "rmse": self.rmse,
            "r_squared": self.r_squared
        }


@dataclass(frozen=True)
class VarianceReport:
    records: List[VarianceRecord]
    accuracy: ForecastAccuracy
    warnings: List[str] = field(default_factory=list)

    @property
    def significant_records(self) -> List[VarianceRecord]:
        return [r for r in self.records if r.significant]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "records": [r.to_dict() for r in self.records],
            "significant_records": [r.to_dict() for r in self.significant_records],
            "accuracy": self.accuracy.to_dict(),
            "warnings": list(self.warnings)
        }


def _series_point(item: Any, index: int) -> Tuple[str, float]:
    """(period label, amount) for one series element."""
    default_label = f"Period {index + 1}"

    if isinstance(item, ForecastPeriod):
        return item.period_key, item.net_cash_flow
    if isinstance(item, HistoricalPeriod):
        return item.period_key, item.net_flow
    if isinstance(item, Mapping):
        label = item.get("period") or item.get("date") or default_label
        return str(label), parse_amount(item.get("amount"))
    return default_label, parse_amount(item)


class VarianceTracker:
    """
    Example:
    ```python
    tracker = VarianceTracker()
    report = tracker.track(actual_series=[52000, 54000, 47000],
                           forecast_series=[50000, 55000, 48000])
    print(report.accuracy.mape)  # 0.0263
    ```
    """

    def __init__(self, config=None):
        self.config = config or get_config()

    def track(
        self,
        actual_series: Sequence[Any],
        forecast_series: Sequence[Any]
    ) -> VarianceReport:
        """
        Raises:
            InsufficientDataError: If the actual series is empty
        """
        if not actual_series:
            raise InsufficientDataError("track_variance")

        warnings = []
        if len(forecast_series) != len(actual_series):
            message = (
                f"Series length mismatch: {len(actual_series)} actual vs "
                f"{len(forecast_series)} forecast values"
            )
            logger.warning(message)
            warnings.append(message)

        records = []
        for i, item in enumerate(actual_series):
            period, actual = _series_point(item, i)
            if i < len(forecast_series):
                records.append(self.record(period, actual, _series_point(forecast_series[i], i)[1]))
            else:
                records.append(self.record(period, actual, 0.0, matched=False))

        return VarianceReport(
            records=records,
            accuracy=self.accuracy(records),
            warnings=warnings
        )

    def record(self, period: str, actual: float, forecast: float, matched: bool = True) -> VarianceRecord:
        """
        A record with ``matched=False`` stands for an actual value that has
        no forecast at all. It is always significant and counts as a 100%
        error when scoring accuracy.
        """
        variance = actual - forecast
        variance_percent = safe_divide(variance, forecast) * 100

        significant = (
            not matched
            or abs(variance_percent) > self.config.SIGNIFICANT_VARIANCE_PERCENT
            or abs(variance) > self.config.SIGNIFICANT_VARIANCE_AMOUNT
        )

        return VarianceRecord(
            period=period,
            actual=round(actual, 2),
            forecast=round(forecast, 2),
            variance=round(variance, 2),
            variance_percent=round(variance_percent, 4),
            significant=significant,
            matched=matched
        )

    @staticmethod
    def accuracy(records: List[VarianceRecord]) -> ForecastAccuracy:
        if not records:
            return ForecastAccuracy(mae=0.0, mape=0.0, overall_accuracy=1.0, rmse=0.0, r_squared=0.0)

        variances = np.array([r.variance for r in records], dtype=float)
        percents = np.array(
            [r.variance_percent if r.matched else 100.0 for r in records], dtype=float
        )
        actuals = np.array([r.actual for r in records], dtype=float)

        mae = float(np.mean(np.abs(variances)))
        mape = float(np.mean(np.abs(percents))) / 100
        rmse = float(np.sqrt(np.mean(variances ** 2)))

        ss_res = float(np.sum(variances ** 2))
        ss_tot = float(np.sum((actuals - actuals.mean()) ** 2))
        r_squared = 1 - ss_res / ss_tot if ss_tot > 0 else 0.0

        return ForecastAccuracy(
            mae=round(mae, 2),
            mape=round(mape, 4),
            overall_accuracy=round(clamp(1 - mape, 0.0, 1.0), 4),
            rmse=round(rmse, 2),
            r_squared=round(r_squared, 4)
        )
