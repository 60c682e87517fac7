"""Tests for amount parsing, period keys and random sources."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.common.numeric import clamp, parse_amount, safe_divide
from src.common.periods import add_months, month_of, parse_period_key
from src.common.randomness import FixedRandomSource, SeededRandomSource, SequenceRandomSource


class TestParseAmount:
    def test_numbers_pass_through(self):
        assert parse_amount(1500) == 1500.0
        assert parse_amount(12.5) == 12.5
        assert parse_amount(Decimal("99.99")) == pytest.approx(99.99)

    def test_currency_strings(self):
        assert parse_amount("$1,234.50") == pytest.approx(1234.50)
        assert parse_amount("€ 1.234,50") == pytest.approx(1234.50)
        assert parse_amount("1,234") == 1234.0
        assert parse_amount("12,5") == pytest.approx(12.5)

    def test_missing_values_use_default(self):
        assert parse_amount(None) == 0.0
        assert parse_amount("") == 0.0
        assert parse_amount(float("nan")) == 0.0
        assert parse_amount(float("inf"), default=-1.0) == -1.0

    def test_unparsable_value_logs_and_defaults(self, caplog):
        assert parse_amount("abc") == 0.0
        assert "Unparsable amount" in caplog.text

    def test_default_none_signals_failure(self):
        assert parse_amount("n/a", default=None) is None


class TestGuardedArithmetic:
    def test_safe_divide_zero_denominator(self):
        assert safe_divide(10, 0) == 0.0
        assert safe_divide(10, 0, default=1.0) == 1.0
        assert safe_divide(10, 4) == 2.5

    def test_clamp(self):
        assert clamp(1.4, 0.0, 1.0) == 1.0
        assert clamp(-0.2, 0.0, 1.0) == 0.0
        assert clamp(-5, 0.0) == 0.0
        assert clamp(0.5, 0.3, 1.0) == 0.5


class TestPeriods:
    def test_parse_period_key_variants(self):
        assert parse_period_key("2024-3") == "2024-03"
        assert parse_period_key("2024-03-15") == "2024-03"
        assert parse_period_key(date(2024, 11, 2)) == "2024-11"
        assert parse_period_key(datetime(2023, 1, 31, 12, 0)) == "2023-01"

    @pytest.mark.parametrize("value", ["2024-13", "March 2024", "", 202403])
    def test_invalid_period_key(self, value):
        with pytest.raises(ValueError):
            parse_period_key(value)

    def test_add_months_crosses_year(self):
        assert add_months("2024-11", 3) == "2025-02"
        assert add_months("2024-01", -1) == "2023-12"
        assert add_months("2024-06", 0) == "2024-06"

    def test_month_of(self):
        assert month_of("2024-12") == 12


class TestRandomSources:
    def test_seeded_sources_repeat(self):
        a = SeededRandomSource(7)
        b = SeededRandomSource(7)
        assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]

    def test_seeded_values_in_unit_interval(self):
        source = SeededRandomSource(1)
        assert all(0.0 <= source.random() < 1.0 for _ in range(100))

    def test_fixed_source(self):
        assert FixedRandomSource().random() == 0.5
        with pytest.raises(ValueError):
            FixedRandomSource(1.0)

    def test_sequence_source_cycles(self):
        source = SequenceRandomSource([0.1, 0.9])
        assert [source.random() for _ in range(3)] == [0.1, 0.9, 0.1]
