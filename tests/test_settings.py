"""Tests for environment-driven configuration."""

import logging

from config.settings import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    configure_logging,
    get_config
)


class TestGetConfig:
    def test_testing_environment(self):
        config = get_config()
        assert config is TestingConfig
        assert config.FORECAST_RANDOM_SEED == 42

    def test_production_environment(self, monkeypatch):
        monkeypatch.setenv("CASHFLOW_ENV", "production")
        assert get_config() is ProductionConfig

    def test_unknown_environment_falls_back(self, monkeypatch):
        monkeypatch.setenv("CASHFLOW_ENV", "staging")
        assert get_config() is DevelopmentConfig

    def test_engine_constants(self):
        assert TestingConfig.STRESS_HORIZON_MONTHS == 36
        assert TestingConfig.DAYS_PER_MONTH == 30.44
        assert TestingConfig.WORKING_CAPITAL_BENCHMARK == 0.15


class TestConfigureLogging:
    def test_level_from_config(self):
        class VerboseConfig(TestingConfig):
            LOG_LEVEL = "debug"

        assert configure_logging(VerboseConfig) == logging.DEBUG

    def test_unknown_level_defaults_to_info(self):
        class OddConfig(TestingConfig):
            LOG_LEVEL = "chatty"

        assert configure_logging(OddConfig) == logging.INFO
