"""
Common Module for the Cash Flow Forecasting Engine

Shared numeric parsing, period arithmetic and randomness sources.
"""

from .numeric import (
    parse_amount,
    safe_divide,
    clamp
)
from .periods import (
    PeriodKey,
    parse_period_key,
    add_months,
    month_of
)
from .randomness import (
    RandomSource,
    SeededRandomSource,
    FixedRandomSource,
    SequenceRandomSource
)

__all__ = [
    'parse_amount',
    'safe_divide',
    'clamp',
    'PeriodKey',
    'parse_period_key',
    'add_months',
    'month_of',
    'RandomSource',
    'SeededRandomSource',
    'FixedRandomSource',
    'SequenceRandomSource',
]
