"""
Forecasting Module for the Cash Flow Forecasting Engine

Historical aggregation, trend/seasonality/volatility analysis, scenario
forecasting and stress testing.
"""

from .errors import InsufficientDataError
from .models import (
    ForecastFactors,
    ForecastPeriod,
    ForecastResult,
    HistoricalPeriod,
    Scenario,
    ScenarioKind
)
from .aggregation import (
    CategorySummary,
    aggregate_historical_periods,
    categorize_cash_flows,
    monthly_category_totals
)
from .trend_analyzer import (
    TrendAnalyzer,
    TrendDirection,
    TrendResult,
    analyze_category_trends,
    calculate_growth_rate,
    calculate_trend_growth_rate
)
from .seasonality import calculate_seasonal_factors
from .risk_analyzer import calculate_net_flow_volatility, calculate_volatility
from .scenarios import (
    SCENARIO_PRESETS,
    ResolvedScenario,
    ScenarioPreset,
    ScenarioResolver,
    StressParameters
)
from .forecast_engine import ForecastEngine
from .stress_test import StressTestEngine, StressTestResult

__all__ = [
    'InsufficientDataError',
    # Models
    'ForecastFactors',
    'ForecastPeriod',
    'ForecastResult',
    'HistoricalPeriod',
    'Scenario',
    'ScenarioKind',
    # Aggregation
    'CategorySummary',
    'aggregate_historical_periods',
    'categorize_cash_flows',
    'monthly_category_totals',
    # Analysis
    'TrendAnalyzer',
    'TrendDirection',
    'TrendResult',
    'analyze_category_trends',
    'calculate_growth_rate',
    'calculate_trend_growth_rate',
    'calculate_seasonal_factors',
    'calculate_net_flow_volatility',
    'calculate_volatility',
    # Scenarios
    'SCENARIO_PRESETS',
    'ResolvedScenario',
    'ScenarioPreset',
    'ScenarioResolver',
    'StressParameters',
    # Engines
    'ForecastEngine',
    'StressTestEngine',
    'StressTestResult',
]
