"""
Forecast Engine

Period-by-period cash flow projection combining historical trend,
seasonality and volatility with scenario adjustments. Confidence decays with
the horizon and with historical volatility.

The only non-deterministic term is the perturbation in ``_perturb``; it
draws from an injectable ``RandomSource`` so runs can be reproduced.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence

from config.settings import get_config
from src.common.numeric import clamp
from src.common.periods import add_months, month_of
from src.common.randomness import RandomSource, SeededRandomSource
from .errors import InsufficientDataError
from .models import ForecastFactors, ForecastPeriod, ForecastResult, HistoricalPeriod
from .risk_analyzer import calculate_net_flow_volatility
from .scenarios import ResolvedScenario, ScenarioInput, ScenarioResolver
from .seasonality import NEUTRAL_FACTORS, calculate_seasonal_factors
from .trend_analyzer import calculate_trend_growth_rate

logger = logging.getLogger(__name__)

RandomSourceFactory = Callable[[], RandomSource]


class ForecastEngine:
    """
    Cash flow forecasting engine.

    Example:
    ```python
    engine = ForecastEngine(seed=42)

    history = [
        HistoricalPeriod("2024-01", inflow=50000, outflow=30000),
        HistoricalPeriod("2024-02", inflow=55000, outflow=32000),
        HistoricalPeriod("2024-03", inflow=48000, outflow=35000),
    ]

    result = engine.generate_forecast(history, Scenario(id="base"), horizon_months=12)
    print(f"Ending balance: {result.ending_balance}")
    ```
    """

    def __init__(
        self,
        config=None,
        seed: Optional[int] = None,
        random_source_factory: Optional[RandomSourceFactory] = None,
        resolver: Optional[ScenarioResolver] = None
    ):
        """
        Initialize engine.

        Args:
            config: Configuration class (defaults to the environment's)
            seed: Seed for the perturbation stream; every forecast call
                starts a fresh stream from this seed
            random_source_factory: Builds the random source for each call;
                takes precedence over ``seed``
            resolver: Scenario resolver (defaults to the built-in presets)
        """
        self.config = config or get_config()
        self.resolver = resolver or ScenarioResolver(
            default_shock_duration_months=self.config.STRESS_SHOCK_DURATION_MONTHS
        )

        if random_source_factory is not None:
            self._random_source_factory = random_source_factory
        else:
            effective_seed = seed if seed is not None else self.config.FORECAST_RANDOM_SEED
            self._random_source_factory = lambda: SeededRandomSource(effective_seed)
            if effective_seed is None:
                logger.info("Forecast perturbation is unseeded; results will vary between runs")

    def generate_forecast(
        self,
        history: Sequence[HistoricalPeriod],
        scenario: ScenarioInput,
        horizon_months: int = 12,
        opening_balance: Optional[float] = None
    ) -> ForecastResult:
        """
        Generate a forecast.

        Args:
            history: Historical periods (at least one)
            scenario: Scenario, scenario mapping or preset name
            horizon_months: Number of months to project
            opening_balance: Last known actual balance; defaults to the
                cumulative historical net flow

        Returns:
            ForecastResult with exactly ``horizon_months`` periods

        Raises:
            InsufficientDataError: If history is empty
        """
        resolved = self.resolver.resolve(scenario)
        return self.generate_resolved_forecast(history, resolved, horizon_months, opening_balance)

    def generate_resolved_forecast(
        self,
        history: Sequence[HistoricalPeriod],
        resolved: ResolvedScenario,
        horizon_months: int = 12,
        opening_balance: Optional[float] = None
    ) -> ForecastResult:
        """Generate a forecast for an already resolved scenario."""
        if not history:
            raise InsufficientDataError("generate_forecast")
        if horizon_months < 1:
            raise ValueError(f"Horizon must be at least one month, got {horizon_months}")

        ordered = sorted(history, key=lambda p: p.period_key)
        cfg = self.config

        trend_rate = calculate_trend_growth_rate(ordered)
        seasonal_factors = calculate_seasonal_factors(ordered) if resolved.seasonality else dict(NEUTRAL_FACTORS)
        volatility = calculate_net_flow_volatility(ordered, default=cfg.DEFAULT_VOLATILITY)
        limited_history = len(ordered) < 2

        if opening_balance is None:
            opening_balance = sum(p.net_flow for p in ordered)

        last = ordered[-1]
        growth_base = max(0.0, 1.0 + trend_rate + resolved.growth_rate)
        random_source = self._random_source_factory()

        periods: List[ForecastPeriod] = []
        balance = opening_balance

        for i in range(1, horizon_months + 1):
            period_key = add_months(last.period_key, i)

            growth_factor = growth_base ** (i / 12)
            seasonal_factor = seasonal_factors.get(month_of(period_key), 1.0)

            base_income = last.inflow * growth_factor * seasonal_factor * resolved.income_multiplier
            base_expense = last.outflow * growth_factor * seasonal_factor * resolved.expense_multiplier

            predicted_income = round(self._perturb(base_income, volatility, random_source), 2)
            predicted_expense = round(self._perturb(base_expense, volatility, random_source), 2)

            net = round(predicted_income - predicted_expense, 2)
            balance = round(balance + net, 2)

            risk_factor = max(cfg.MIN_RISK_FACTOR, 1 - volatility * i / 12)
            confidence = self._confidence(i, risk_factor, resolved.risk_multiplier, limited_history)

            periods.append(ForecastPeriod(
                period_key=period_key,
                predicted_inflow=predicted_income,
                predicted_outflow=predicted_expense,
                net_cash_flow=net,
                cumulative_balance=balance,
                confidence=confidence,
                scenario_id=resolved.scenario_id,
                factors=ForecastFactors(
                    seasonality=round(seasonal_factor, 4),
                    growth=round(growth_factor, 4),
                    risk=round(risk_factor, 4)
                )
            ))

        logger.info(
            f"Generated {horizon_months}-month forecast for scenario '{resolved.scenario_id}' "
            f"from {len(ordered)} historical periods"
        )

        return ForecastResult(
            scenario_id=resolved.scenario_id,
            scenario_name=resolved.name,
            periods=tuple(periods),
            opening_balance=round(opening_balance, 2),
            trend_growth_rate=round(trend_rate, 6),
            volatility=round(volatility, 6),
            seasonal_factors={m: round(f, 4) for m, f in seasonal_factors.items()},
            warnings=resolved.warnings
        )

    def _perturb(self, base: float, volatility: float, random_source: RandomSource) -> float:
        """Add the stochastic variation term to a base amount."""
        variation = (random_source.random() - 0.5) * volatility * base * self.config.VARIATION_SCALE
        return max(0.0, base + variation)

    def _confidence(
        self,
        step: int,
        risk_factor: float,
        risk_multiplier: float,
        limited_history: bool
    ) -> float:
        """
        Confidence for the ``step``-th projected month.

        The first projected month carries no horizon decay; each further
        month loses ``CONFIDENCE_DECAY_PER_MONTH`` down to the floor.
        """
        cfg = self.config
        decay = max(cfg.CONFIDENCE_FLOOR, 1 - (step - 1) * cfg.CONFIDENCE_DECAY_PER_MONTH)
        confidence = decay * risk_factor * risk_multiplier
        if limited_history:
            confidence = min(confidence, cfg.LIMITED_HISTORY_CONFIDENCE_CAP)
        return round(clamp(confidence, cfg.CONFIDENCE_FLOOR, 1.0), 4)

    def compare_scenarios(
        self,
        history: Sequence[HistoricalPeriod],
        scenarios: Sequence[ScenarioInput],
        horizon_months: int = 12,
        opening_balance: Optional[float] = None,
        max_workers: Optional[int] = None
    ) -> Dict[str, ForecastResult]:
        """
        Generate forecasts for several independent scenarios.

        Args:
            history: Historical periods
            scenarios: Scenarios to compare
            horizon_months: Forecast periods
            opening_balance: Shared opening balance
            max_workers: Run on a thread pool of this size when > 1

        Returns:
            Dict mapping scenario ids to ForecastResults
        """
        if not history:
            raise InsufficientDataError("compare_scenarios")

        resolved = [self.resolver.resolve(s) for s in scenarios]

        def run(scenario: ResolvedScenario) -> ForecastResult:
            return self.generate_resolved_forecast(history, scenario, horizon_months, opening_balance)

        results: Dict[str, ForecastResult] = {}

        if max_workers and max_workers > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                futures = {s.scenario_id: pool.submit(run, s) for s in resolved}
            for scenario_id, future in futures.items():
                try:
                    results[scenario_id] = future.result()
                except ValueError as e:
                    logger.error(f"Error forecasting {scenario_id}: {e}")
        else:
            for scenario in resolved:
                try:
                    results[scenario.scenario_id] = run(scenario)
                except ValueError as e:
                    logger.error(f"Error forecasting {scenario.scenario_id}: {e}")

        return results
