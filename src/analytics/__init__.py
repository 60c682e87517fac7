"""
Analytics Module for the Cash Flow Forecasting Engine

Liquidity, runway, working capital, cash conversion and variance metrics.
"""

from .statements import (
    BalanceSheetSnapshot,
    CurrentAssets,
    CurrentLiabilities,
    IncomeStatementPeriod
)
from .liquidity import LiquidityAnalyzer, LiquidityMetrics
from .cash_runway import CashRunway, CashRunwayCalculator
from .working_capital import WorkingCapitalOptimizer, WorkingCapitalResult
from .cash_conversion import (
    CashConversionCycleCalculator,
    CashConversionCycleResult,
    CycleTrend
)
from .variance import (
    ForecastAccuracy,
    VarianceRecord,
    VarianceReport,
    VarianceTracker
)
from .financial_metrics import FinancialAnalyticsEngine, FinancialMetrics

__all__ = [
    # Statements
    'BalanceSheetSnapshot',
    'CurrentAssets',
    'CurrentLiabilities',
    'IncomeStatementPeriod',
    # Calculators
    'LiquidityAnalyzer',
    'LiquidityMetrics',
    'CashRunway',
    'CashRunwayCalculator',
    'WorkingCapitalOptimizer',
    'WorkingCapitalResult',
    'CashConversionCycleCalculator',
    'CashConversionCycleResult',
    'CycleTrend',
    # Variance
    'ForecastAccuracy',
    'VarianceRecord',
    'VarianceReport',
    'VarianceTracker',
    # Combined
    'FinancialAnalyticsEngine',
    'FinancialMetrics',
]
