"""
Net cash flow volatility.
"""

import logging
from typing import Sequence

import numpy as np

from .models import HistoricalPeriod

logger = logging.getLogger(__name__)

DEFAULT_VOLATILITY = 0.1
MIN_POINTS = 3


def calculate_volatility(
    values: Sequence[float],
    default: float = DEFAULT_VOLATILITY
) -> float:
    """
    Coefficient of variation ``std / |mean|`` clamped to [0, 1].

    Fewer than three points yield ``default``. A zero mean with any spread
    is maximally volatile; a zero mean with no spread is not volatile.
    """
    if len(values) < MIN_POINTS:
        return default

    mean_val = float(np.mean(values))
    std_val = float(np.std(values))

    if mean_val == 0:
        return 1.0 if std_val > 0 else 0.0

    return min(1.0, max(0.0, std_val / abs(mean_val)))


def calculate_net_flow_volatility(
    history: Sequence[HistoricalPeriod],
    default: float = DEFAULT_VOLATILITY
) -> float:
    """Volatility of historical net cash flow."""
    volatility = calculate_volatility([p.net_flow for p in history], default=default)
    logger.debug(f"Net flow volatility over {len(history)} periods: {volatility:.4f}")
    return volatility
