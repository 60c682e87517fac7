"""
Time Series Aggregation

Groups raw transaction records into monthly income/expense buckets that the
forecast engine consumes.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from src.common.numeric import parse_amount
from src.common.periods import parse_period_key
from .models import HistoricalPeriod

logger = logging.getLogger(__name__)

INFLOW_TYPES = {"INCOME", "INFLOW", "REVENUE", "CREDIT"}
OUTFLOW_TYPES = {"EXPENSE", "OUTFLOW", "COST", "DEBIT"}

UNCATEGORIZED = "UNCATEGORIZED"


@dataclass(frozen=True)
class CategorySummary:
    """Signed total of one cash flow category"""
    category: str
    total: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "total": self.total, "count": self.count}


def _field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def _signed_amount(record: Any) -> float:
    """Inflows positive, outflows negative."""
    amount = parse_amount(_field(record, "amount"))
    tx_type = str(_field(record, "type", "") or "").upper()

    if tx_type in INFLOW_TYPES:
        return abs(amount)
    if tx_type in OUTFLOW_TYPES:
        return -abs(amount)
    if tx_type:
        logger.warning(f"Unknown transaction type '{tx_type}', using amount sign")
    return amount


def _period_of(record: Any) -> str:
    raw_date = _field(record, "date") or _field(record, "month")
    if isinstance(raw_date, (date, datetime, str)):
        return parse_period_key(raw_date)
    raise ValueError(f"Transaction without a usable date: {record!r}")


def aggregate_historical_periods(transactions: Iterable[Any]) -> List[HistoricalPeriod]:
    """
    Aggregate transactions into monthly historical periods.

    Each transaction is a mapping or object with ``date`` and ``amount`` and
    optionally ``type`` and ``category``. Without a type the amount sign
    decides the direction.

    Returns:
        HistoricalPeriods ordered by period key
    """
    buckets: Dict[str, Dict[str, Any]] = {}

    for record in transactions:
        period = _period_of(record)
        amount = _signed_amount(record)
        bucket = buckets.setdefault(period, {"inflow": 0.0, "outflow": 0.0, "categories": set()})

        if amount >= 0:
            bucket["inflow"] += amount
        else:
            bucket["outflow"] += -amount
        bucket["categories"].add(_field(record, "category"))

    periods = []
    for period in sorted(buckets):
        bucket = buckets[period]
        categories = bucket["categories"]
        category = next(iter(categories)) if len(categories) == 1 else None
        periods.append(HistoricalPeriod(
            period_key=period,
            inflow=round(bucket["inflow"], 2),
            outflow=round(bucket["outflow"], 2),
            category=category
        ))

    logger.debug(f"Aggregated transactions into {len(periods)} monthly periods")
    return periods


def categorize_cash_flows(transactions: Iterable[Any]) -> Dict[str, CategorySummary]:
    """Signed totals and counts per category."""
    totals: Dict[str, Tuple[float, int]] = {}

    for record in transactions:
        category = _field(record, "category") or UNCATEGORIZED
        total, count = totals.get(category, (0.0, 0))
        totals[category] = (total + _signed_amount(record), count + 1)

    return {
        category: CategorySummary(category=category, total=round(total, 2), count=count)
        for category, (total, count) in totals.items()
    }


def monthly_category_totals(
    transactions: Iterable[Any],
    category: Optional[str] = None
) -> List[Tuple[str, float]]:
    """
    Monthly signed totals, optionally restricted to one category.

    Returns:
        (period_key, total) tuples ordered by period
    """
    totals: Dict[str, float] = {}
    for record in transactions:
        if category is not None and _field(record, "category") != category:
            continue
        period = _period_of(record)
        totals[period] = totals.get(period, 0.0) + _signed_amount(record)

    return [(period, round(totals[period], 2)) for period in sorted(totals)]
