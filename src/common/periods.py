"""
Year-month period keys.

Periods are identified by ``"YYYY-MM"`` strings throughout the engine.
"""

import re
from datetime import date, datetime
from typing import Tuple, Union

PeriodKey = str

_PERIOD_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})")


def parse_period_key(value: Union[str, date, datetime]) -> PeriodKey:
    """
    Normalize a date, datetime or date-like string to a ``YYYY-MM`` key.

    Raises:
        ValueError: If the value cannot be read as a year-month
    """
    if isinstance(value, (date, datetime)):
        return f"{value.year:04d}-{value.month:02d}"

    if isinstance(value, str):
        match = _PERIOD_PATTERN.match(value.strip())
        if match:
            year, month = int(match.group(1)), int(match.group(2))
            if 1 <= month <= 12:
                return f"{year:04d}-{month:02d}"

    raise ValueError(f"Invalid period key: {value!r}")


def split_period_key(period_key: PeriodKey) -> Tuple[int, int]:
    """Return (year, month) for a period key."""
    normalized = parse_period_key(period_key)
    year, month = normalized.split("-")
    return int(year), int(month)


def add_months(period_key: PeriodKey, months: int) -> PeriodKey:
    """Shift a period key by a number of months (may be negative)."""
    year, month = split_period_key(period_key)
    index = year * 12 + (month - 1) + months
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def month_of(period_key: PeriodKey) -> int:
    """Calendar month (1-12) of a period key."""
    return split_period_key(period_key)[1]
