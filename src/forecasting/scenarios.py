"""
Scenario Resolution

Maps a named or custom scenario to the multiplicative adjustments and stress
parameters the forecast engine applies. Presets live in a lookup table so new
scenarios can be added without touching forecast math.

Resolution never fails: malformed input falls back to the realistic preset
and the fallback is reported in ``ResolvedScenario.warnings``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from src.common.numeric import parse_amount
from .models import Scenario, ScenarioKind

logger = logging.getLogger(__name__)

WARNING_UNKNOWN_KIND = "UNKNOWN_SCENARIO_KIND"
WARNING_MISSING_ASSUMPTIONS = "MISSING_ASSUMPTIONS"
WARNING_MISSING_SCENARIO = "MISSING_SCENARIO"
WARNING_INVALID_ASSUMPTION = "INVALID_ASSUMPTION"
WARNING_UNKNOWN_ASSUMPTION = "UNKNOWN_ASSUMPTION"


@dataclass(frozen=True)
class ScenarioPreset:
    """Multipliers for a named scenario"""
    income_multiplier: float = 1.0
    expense_multiplier: float = 1.0
    risk_multiplier: float = 1.0
    growth_rate: float = 0.0  # Annual, added to the historical trend
    description: str = ""


SCENARIO_PRESETS: Dict[str, ScenarioPreset] = {
    "realistic": ScenarioPreset(1.0, 1.0, 1.0, 0.0, "Status quo projection"),
    "optimistic": ScenarioPreset(1.2, 0.9, 0.7, 0.15, "+20% revenue, -10% expenses"),
    "pessimistic": ScenarioPreset(0.85, 1.15, 1.3, -0.05, "-15% revenue, +15% expenses"),
}

# Scenario kinds that resolve to another preset name
PRESET_ALIASES = {
    ScenarioKind.MAIN.value: "realistic",
    ScenarioKind.CUSTOM.value: "realistic",
    ScenarioKind.STRESS.value: "realistic",
}

# Accepted assumption keys -> canonical field
ASSUMPTION_KEYS = {
    "growthRate": "growth_rate",
    "growth_rate": "growth_rate",
    "incomeMultiplier": "income_multiplier",
    "revenueMultiplier": "income_multiplier",
    "revenue_multiplier": "income_multiplier",
    "income_multiplier": "income_multiplier",
    "expenseMultiplier": "expense_multiplier",
    "expense_multiplier": "expense_multiplier",
    "riskMultiplier": "risk_multiplier",
    "risk_multiplier": "risk_multiplier",
    "seasonality": "seasonality",
    "revenueShock": "revenue_shock",
    "revenue_shock": "revenue_shock",
    "delayedPaymentDays": "delayed_payment_days",
    "delayed_payment_days": "delayed_payment_days",
    "delayedPayments": "delayed_payment_days",
    "emergencyExpense": "emergency_expense",
    "emergency_expense": "emergency_expense",
    "emergencyExpenses": "emergency_expense",
    "shockDurationMonths": "shock_duration_months",
    "shock_duration_months": "shock_duration_months",
}

STRESS_FIELDS = ("revenue_shock", "delayed_payment_days", "emergency_expense", "shock_duration_months")

# Relative cost changes, turned into an expense multiplier of 1 + sign * value
COST_ADJUSTMENT_KEYS = {
    "costReduction": -1,
    "cost_reduction": -1,
    "costIncrease": 1,
    "cost_increase": 1,
}

# Lower bounds (inclusive unless listed in _EXCLUSIVE_BOUNDS)
_BOUNDS = {
    "income_multiplier": 0.0,
    "expense_multiplier": 0.0,
    "risk_multiplier": 0.0,
    "growth_rate": -1.0,
    "revenue_shock": -1.0,
    "delayed_payment_days": 0.0,
    "emergency_expense": 0.0,
    "shock_duration_months": 1.0,
}
_EXCLUSIVE_BOUNDS = {"risk_multiplier", "growth_rate"}


@dataclass(frozen=True)
class StressParameters:
    """Shock parameters of a stress scenario"""
    revenue_shock: float = 0.0
    delayed_payment_days: float = 0.0
    emergency_expense: float = 0.0
    shock_duration_months: int = 6

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revenue_shock": self.revenue_shock,
            "delayed_payment_days": self.delayed_payment_days,
            "emergency_expense": self.emergency_expense,
            "shock_duration_months": self.shock_duration_months
        }


@dataclass(frozen=True)
class ResolvedScenario:
    """Fully resolved scenario adjustments"""
    scenario_id: str
    name: str
    kind: str
    income_multiplier: float
    expense_multiplier: float
    risk_multiplier: float
    growth_rate: float
    seasonality: bool = True
    stress: StressParameters = field(default_factory=StressParameters)
    warnings: Tuple[str, ...] = ()

    @property
    def is_fallback(self) -> bool:
        return bool(self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario_id": self.scenario_id,
            "name": self.name,
            "kind": self.kind,
            "income_multiplier": self.income_multiplier,
            "expense_multiplier": self.expense_multiplier,
            "risk_multiplier": self.risk_multiplier,
            "growth_rate": self.growth_rate,
            "seasonality": self.seasonality,
            "stress": self.stress.to_dict(),
            "warnings": list(self.warnings)
        }


ScenarioInput = Union[Scenario, Mapping[str, Any], str, None]


class ScenarioResolver:
    """
    Resolves scenarios against a preset table.

    Example:
    ```python
    resolver = ScenarioResolver()
    resolved = resolver.resolve(Scenario(id="s1", kind="optimistic"))
    print(resolved.income_multiplier)  # 1.2
    ```
    """

    def __init__(
        self,
        presets: Optional[Mapping[str, ScenarioPreset]] = None,
        default_shock_duration_months: int = 6
    ):
        self.presets = dict(presets if presets is not None else SCENARIO_PRESETS)
        if "realistic" not in self.presets:
            self.presets["realistic"] = SCENARIO_PRESETS["realistic"]
        self.default_shock_duration_months = default_shock_duration_months

    def resolve(self, scenario: ScenarioInput) -> ResolvedScenario:
        """Resolve a Scenario, a scenario mapping or a preset name."""
        scenario = self._coerce(scenario)
        warnings = []

        if scenario is None:
            warnings.append(WARNING_MISSING_SCENARIO)
            scenario = Scenario(id="realistic", name="Realistic", kind="realistic")

        kind = str(scenario.kind or "").strip().lower()
        preset_name = PRESET_ALIASES.get(kind, kind)
        preset = self.presets.get(preset_name)

        if preset is None:
            warnings.append(f"{WARNING_UNKNOWN_KIND}:{kind or 'none'}")
            preset = self.presets["realistic"]
            kind = "realistic"

        assumptions = self._canonical_assumptions(scenario.assumptions, warnings)

        if kind == ScenarioKind.CUSTOM.value and not any(
            k in assumptions for k in ("income_multiplier", "expense_multiplier", "risk_multiplier", "growth_rate")
        ):
            warnings.append(WARNING_MISSING_ASSUMPTIONS)
        if kind == ScenarioKind.STRESS.value and not any(k in assumptions for k in STRESS_FIELDS):
            warnings.append(WARNING_MISSING_ASSUMPTIONS)

        values: Dict[str, Any] = {
            "income_multiplier": preset.income_multiplier,
            "expense_multiplier": preset.expense_multiplier,
            "risk_multiplier": preset.risk_multiplier,
            "growth_rate": preset.growth_rate,
            "revenue_shock": 0.0,
            "delayed_payment_days": 0.0,
            "emergency_expense": 0.0,
            "shock_duration_months": self.default_shock_duration_months,
        }

        for key, raw in assumptions.items():
            if key == "seasonality":
                continue
            number = self._validate(key, raw)
            if number is None:
                warnings.append(f"{WARNING_INVALID_ASSUMPTION}:{key}")
                continue
            values[key] = number

        seasonality = assumptions.get("seasonality", True)
        if not isinstance(seasonality, bool):
            warnings.append(f"{WARNING_INVALID_ASSUMPTION}:seasonality")
            seasonality = True

        resolved = ResolvedScenario(
            scenario_id=scenario.id,
            name=scenario.name or scenario.id,
            kind=kind,
            income_multiplier=values["income_multiplier"],
            expense_multiplier=values["expense_multiplier"],
            risk_multiplier=values["risk_multiplier"],
            growth_rate=values["growth_rate"],
            seasonality=seasonality,
            stress=StressParameters(
                revenue_shock=values["revenue_shock"],
                delayed_payment_days=values["delayed_payment_days"],
                emergency_expense=values["emergency_expense"],
                shock_duration_months=int(values["shock_duration_months"])
            ),
            warnings=tuple(warnings)
        )

        if resolved.warnings:
            logger.warning(
                f"Scenario '{resolved.scenario_id}' resolved with fallbacks: {', '.join(resolved.warnings)}"
            )
        return resolved

    def _coerce(self, scenario: ScenarioInput) -> Optional[Scenario]:
        if scenario is None or isinstance(scenario, Scenario):
            return scenario
        if isinstance(scenario, str):
            return Scenario(id=scenario, name=scenario.title(), kind=scenario)
        if isinstance(scenario, Mapping):
            return Scenario(
                id=str(scenario.get("id") or scenario.get("kind") or "scenario"),
                name=str(scenario.get("name") or ""),
                kind=str(scenario.get("kind") or scenario.get("type") or ""),
                assumptions=scenario.get("assumptions") or {}
            )
        logger.warning(f"Unsupported scenario type {type(scenario).__name__}")
        return None

    def _canonical_assumptions(self, assumptions: Any, warnings: list) -> Dict[str, Any]:
        if not isinstance(assumptions, Mapping):
            return {}
        canonical = {}
        cost_adjustment = None
        for key, value in assumptions.items():
            if value is None:
                continue
            if key in COST_ADJUSTMENT_KEYS:
                change = parse_amount(value, default=None)
                cost_adjustment = value if change is None else 1 + COST_ADJUSTMENT_KEYS[key] * change
                continue
            name = ASSUMPTION_KEYS.get(key)
            if name is None:
                warnings.append(f"{WARNING_UNKNOWN_ASSUMPTION}:{key}")
                continue
            canonical[name] = value

        # An explicit expense multiplier wins over a relative cost change
        if cost_adjustment is not None:
            canonical.setdefault("expense_multiplier", cost_adjustment)
        return canonical

    def _validate(self, key: str, raw: Any) -> Optional[float]:
        if isinstance(raw, bool):
            return None
        number = parse_amount(raw, default=None)
        if number is None:
            return None
        bound = _BOUNDS[key]
        if key in _EXCLUSIVE_BOUNDS:
            return number if number > bound else None
        return number if number >= bound else None

