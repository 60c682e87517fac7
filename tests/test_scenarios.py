"""Tests for scenario resolution and fallback warnings."""

import pytest

from src.forecasting import SCENARIO_PRESETS, Scenario, ScenarioPreset, ScenarioResolver


@pytest.fixture
def resolver():
    return ScenarioResolver()


class TestPresets:
    @pytest.mark.parametrize("kind", ["realistic", "optimistic", "pessimistic"])
    def test_presets_resolve_without_warnings(self, resolver, kind):
        resolved = resolver.resolve(Scenario(id=kind, kind=kind))
        preset = SCENARIO_PRESETS[kind]

        assert resolved.income_multiplier == preset.income_multiplier
        assert resolved.expense_multiplier == preset.expense_multiplier
        assert resolved.risk_multiplier == preset.risk_multiplier
        assert resolved.growth_rate == preset.growth_rate
        assert resolved.warnings == ()
        assert not resolved.is_fallback

    @pytest.mark.parametrize("kind", ["main", "custom", "stress"])
    def test_aliases_use_realistic_values(self, resolver, kind):
        resolved = resolver.resolve(Scenario(id="s", kind=kind, assumptions={"incomeMultiplier": 1.0,
                                                                             "revenueShock": 0.0}))
        assert resolved.kind == kind
        assert resolved.income_multiplier == 1.0
        assert resolved.risk_multiplier == 1.0

    def test_preset_name_string(self, resolver):
        resolved = resolver.resolve("optimistic")
        assert resolved.scenario_id == "optimistic"
        assert resolved.income_multiplier == 1.2

    def test_custom_preset_table(self):
        resolver = ScenarioResolver(presets={"boom": ScenarioPreset(2.0, 1.0, 0.5, 0.3)})
        resolved = resolver.resolve(Scenario(id="b", kind="boom"))
        assert resolved.income_multiplier == 2.0
        assert resolver.resolve(Scenario(id="r", kind="realistic")).warnings == ()


class TestAssumptions:
    def test_overrides_apply_on_top_of_preset(self, resolver):
        resolved = resolver.resolve(Scenario(
            id="custom-1", kind="custom",
            assumptions={"incomeMultiplier": 1.1, "expense_multiplier": "0.95", "seasonality": False}
        ))
        assert resolved.income_multiplier == 1.1
        assert resolved.expense_multiplier == 0.95
        assert resolved.seasonality is False
        assert resolved.warnings == ()

    def test_stress_parameters(self, resolver):
        resolved = resolver.resolve({
            "id": "crisis", "kind": "stress",
            "assumptions": {"revenueShock": -0.5, "delayedPaymentDays": 60, "emergencyExpenses": 100000}
        })
        assert resolved.stress.revenue_shock == -0.5
        assert resolved.stress.delayed_payment_days == 60
        assert resolved.stress.emergency_expense == 100000
        assert resolved.stress.shock_duration_months == 6

    def test_invalid_assumption_falls_back(self, resolver):
        resolved = resolver.resolve(Scenario(
            id="bad", kind="optimistic", assumptions={"riskMultiplier": -1, "incomeMultiplier": "lots"}
        ))
        assert resolved.risk_multiplier == SCENARIO_PRESETS["optimistic"].risk_multiplier
        assert resolved.income_multiplier == SCENARIO_PRESETS["optimistic"].income_multiplier
        assert "INVALID_ASSUMPTION:risk_multiplier" in resolved.warnings
        assert "INVALID_ASSUMPTION:income_multiplier" in resolved.warnings

    def test_unknown_keys_reported(self, resolver, caplog):
        resolved = resolver.resolve(Scenario(id="x", kind="realistic", assumptions={"growthRat": 0.2}))

        assert resolved.growth_rate == 0.0
        assert resolved.warnings == ("UNKNOWN_ASSUMPTION:growthRat",)
        assert "UNKNOWN_ASSUMPTION:growthRat" in caplog.text

    def test_revenue_multiplier_and_cost_reduction(self, resolver):
        resolved = resolver.resolve(Scenario(id="c", kind="custom", assumptions={
            "growthRate": 0.15, "revenueMultiplier": 1.2, "costReduction": 0.1
        }))

        assert resolved.income_multiplier == 1.2
        assert resolved.expense_multiplier == pytest.approx(0.9)
        assert resolved.growth_rate == 0.15
        assert resolved.warnings == ()

    def test_cost_increase(self, resolver):
        resolved = resolver.resolve(Scenario(id="c", kind="custom", assumptions={"costIncrease": 0.15}))
        assert resolved.expense_multiplier == pytest.approx(1.15)
        assert resolved.warnings == ()

    def test_explicit_expense_multiplier_wins(self, resolver):
        resolved = resolver.resolve(Scenario(id="c", kind="custom", assumptions={
            "expenseMultiplier": 1.1, "costReduction": 0.2
        }))
        assert resolved.expense_multiplier == 1.1

    def test_unparsable_cost_change(self, resolver):
        resolved = resolver.resolve(Scenario(id="c", kind="custom", assumptions={"costReduction": "some"}))
        assert resolved.expense_multiplier == 1.0
        assert "INVALID_ASSUMPTION:expense_multiplier" in resolved.warnings


class TestFallbacks:
    def test_unknown_kind_falls_back_to_realistic(self, resolver, caplog):
        resolved = resolver.resolve(Scenario(id="odd", kind="apocalyptic"))

        assert resolved.kind == "realistic"
        assert resolved.income_multiplier == 1.0
        assert resolved.warnings == ("UNKNOWN_SCENARIO_KIND:apocalyptic",)
        assert resolved.is_fallback
        assert "resolved with fallbacks" in caplog.text

    def test_missing_scenario(self, resolver):
        resolved = resolver.resolve(None)
        assert resolved.scenario_id == "realistic"
        assert resolved.warnings == ("MISSING_SCENARIO",)

    def test_custom_without_assumptions(self, resolver):
        resolved = resolver.resolve(Scenario(id="c", kind="custom"))
        assert resolved.warnings == ("MISSING_ASSUMPTIONS",)

    def test_stress_without_shocks(self, resolver):
        resolved = resolver.resolve(Scenario(id="s", kind="stress"))
        assert "MISSING_ASSUMPTIONS" in resolved.warnings
        assert resolved.stress.revenue_shock == 0.0
