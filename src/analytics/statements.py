"""
Financial statement snapshots supplied by the caller.

Amounts are parsed through ``parse_amount`` when built from dicts and must
be non-negative.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, List, Mapping

from src.common.numeric import parse_amount


def _check_non_negative(instance) -> None:
    for f in fields(instance):
        value = getattr(instance, f.name)
        if isinstance(value, (int, float)) and value < 0:
            raise ValueError(f"{type(instance).__name__}.{f.name} must be non-negative, got {value}")


@dataclass(frozen=True)
class CurrentAssets:
    cash: float = 0.0
    accounts_receivable: float = 0.0
    inventory: float = 0.0
    other: float = 0.0

    def __post_init__(self):
        _check_non_negative(self)

    @property
    def total(self) -> float:
        return self.cash + self.accounts_receivable + self.inventory + self.other


@dataclass(frozen=True)
class CurrentLiabilities:
    accounts_payable: float = 0.0
    short_term_debt: float = 0.0
    other: float = 0.0

    def __post_init__(self):
        _check_non_negative(self)

    @property
    def total(self) -> float:
        return self.accounts_payable + self.short_term_debt + self.other


@dataclass(frozen=True)
class BalanceSheetSnapshot:
    """Point-in-time current assets and liabilities"""
    current_assets: CurrentAssets = field(default_factory=CurrentAssets)
    current_liabilities: CurrentLiabilities = field(default_factory=CurrentLiabilities)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BalanceSheetSnapshot":
        """
        Build from either the nested shape::

            {"currentAssets": {"cash": ..., "accountsReceivable": ..., ...},
             "currentLiabilities": {"accountsPayable": ..., ...}}

        or a flat summary ``{"currentAssets": 150000, "currentLiabilities":
        75000, "cash": 50000}`` where non-cash assets are booked as other.
        """
        assets = data.get("currentAssets", data.get("current_assets"))
        liabilities = data.get("currentLiabilities", data.get("current_liabilities"))

        if isinstance(assets, Mapping):
            current_assets = CurrentAssets(
                cash=parse_amount(assets.get("cash")),
                accounts_receivable=parse_amount(assets.get("accountsReceivable", assets.get("accounts_receivable"))),
                inventory=parse_amount(assets.get("inventory")),
                other=parse_amount(assets.get("other"))
            )
        else:
            total_assets = parse_amount(assets)
            cash = parse_amount(data.get("cash"))
            receivables = parse_amount(data.get("accountsReceivable", data.get("accounts_receivable")))
            inventory = parse_amount(data.get("inventory"))
            current_assets = CurrentAssets(
                cash=cash,
                accounts_receivable=receivables,
                inventory=inventory,
                other=max(0.0, total_assets - cash - receivables - inventory)
            )

        if isinstance(liabilities, Mapping):
            current_liabilities = CurrentLiabilities(
                accounts_payable=parse_amount(liabilities.get("accountsPayable", liabilities.get("accounts_payable"))),
                short_term_debt=parse_amount(liabilities.get("shortTermDebt", liabilities.get("short_term_debt"))),
                other=parse_amount(liabilities.get("other"))
            )
        else:
            current_liabilities = CurrentLiabilities(other=parse_amount(liabilities))

        return cls(current_assets=current_assets, current_liabilities=current_liabilities)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_assets": {
                "cash": self.current_assets.cash,
                "accounts_receivable": self.current_assets.accounts_receivable,
                "inventory": self.current_assets.inventory,
                "other": self.current_assets.other,
                "total": self.current_assets.total
            },
            "current_liabilities": {
                "accounts_payable": self.current_liabilities.accounts_payable,
                "short_term_debt": self.current_liabilities.short_term_debt,
                "other": self.current_liabilities.other,
                "total": self.current_liabilities.total
            }
        }


@dataclass(frozen=True)
class IncomeStatementPeriod:
    """Income statement for one period"""
    period: str
    revenue: float = 0.0
    cost_of_goods_sold: float = 0.0
    operating_expenses: float = 0.0
    net_income: float = 0.0  # may be negative

    def __post_init__(self):
        for name in ("revenue", "cost_of_goods_sold", "operating_expenses"):
            if getattr(self, name) < 0:
                raise ValueError(f"IncomeStatementPeriod.{name} must be non-negative")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IncomeStatementPeriod":
        return cls(
            period=str(data.get("period", "")),
            revenue=parse_amount(data.get("revenue")),
            cost_of_goods_sold=parse_amount(data.get("costOfGoodsSold", data.get("cost_of_goods_sold"))),
            operating_expenses=parse_amount(data.get("operatingExpenses", data.get("operating_expenses"))),
            net_income=parse_amount(data.get("netIncome", data.get("net_income")))
        )


def annual_totals(statements: Iterable[IncomeStatementPeriod]) -> Dict[str, float]:
    """Summed revenue and COGS over the supplied periods."""
    statements = list(statements)
    return {
        "revenue": sum(s.revenue for s in statements),
        "cost_of_goods_sold": sum(s.cost_of_goods_sold for s in statements),
    }


def coerce_statements(statements: Iterable[Any]) -> List[IncomeStatementPeriod]:
    """Accept IncomeStatementPeriods or dicts."""
    return [
        s if isinstance(s, IncomeStatementPeriod) else IncomeStatementPeriod.from_dict(s)
        for s in statements
    ]
