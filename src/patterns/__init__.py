"""
Patterns Module for the Cash Flow Forecasting Engine

Reusable analytical patterns: threshold-based risk classification and KPI
benchmarking.
"""

from .risk_classification import (
    RiskClassifier,
    RiskLevel,
    RiskThreshold,
    RiskClassification,
    create_liquidity_risk_classifier,
    create_runway_risk_classifier
)

from .benchmark_engine import (
    BenchmarkEngine,
    BenchmarkReport,
    KPIDefinition,
    KPIDirection,
    KPIScore,
    PerformanceLevel,
    DEFAULT_INDUSTRY_BENCHMARKS,
    create_cash_conversion_benchmarks
)

__all__ = [
    # Risk Classification
    'RiskClassifier',
    'RiskLevel',
    'RiskThreshold',
    'RiskClassification',
    'create_liquidity_risk_classifier',
    'create_runway_risk_classifier',
    # Benchmarking
    'BenchmarkEngine',
    'BenchmarkReport',
    'KPIDefinition',
    'KPIDirection',
    'KPIScore',
    'PerformanceLevel',
    'DEFAULT_INDUSTRY_BENCHMARKS',
    'create_cash_conversion_benchmarks',
]
