"""
Seasonality factors.

A month's factor is the average of the metric in that calendar month divided
by the overall average. Months absent from the history get 1.0.
"""

import logging
from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np

from src.common.periods import month_of
from .models import HistoricalPeriod

logger = logging.getLogger(__name__)

NEUTRAL_FACTORS = {month: 1.0 for month in range(1, 13)}


def calculate_seasonal_factors_by_month(
    observations: Iterable[Tuple[int, float]]
) -> Dict[int, float]:
    """
    Per-calendar-month factors from (month, value) observations.

    Returns:
        Dict of month (1-12) to multiplicative factor
    """
    months_data: Dict[int, List[float]] = {}
    for month, value in observations:
        months_data.setdefault(month, []).append(value)

    all_values = [v for values in months_data.values() for v in values]
    if not all_values:
        return dict(NEUTRAL_FACTORS)

    overall = float(np.mean(all_values))
    if overall == 0:
        logger.debug("Overall average is zero, seasonality disabled")
        return dict(NEUTRAL_FACTORS)

    factors = dict(NEUTRAL_FACTORS)
    for month, values in months_data.items():
        factors[month] = float(np.mean(values)) / overall

    return factors


def calculate_seasonal_factors(history: Sequence[HistoricalPeriod]) -> Dict[int, float]:
    """Seasonal factors of historical income."""
    return calculate_seasonal_factors_by_month(
        (month_of(p.period_key), p.inflow) for p in history
    )
