"""
Configuration settings for the Cash Flow Forecasting Engine
"""

import os
import logging


def _env_int(name, default=None):
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    return int(value)


class Config:
    """Base configuration"""
    # App
    APP_NAME = "Cash Flow Forecasting Engine"
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Forecast confidence
    CONFIDENCE_FLOOR = 0.3
    CONFIDENCE_DECAY_PER_MONTH = 0.05
    LIMITED_HISTORY_CONFIDENCE_CAP = 0.5
    MIN_RISK_FACTOR = 0.5

    # Volatility / perturbation
    DEFAULT_VOLATILITY = 0.1
    VARIATION_SCALE = 0.1
    FORECAST_RANDOM_SEED = _env_int('FORECAST_RANDOM_SEED')

    # Stress testing
    STRESS_HORIZON_MONTHS = 36
    STRESS_SHOCK_DURATION_MONTHS = 6

    # Calendar
    DAYS_PER_MONTH = 30.44
    DAYS_PER_YEAR = 365

    # Working capital
    WORKING_CAPITAL_BENCHMARK = 0.15  # 15% of annual revenue

    # Variance tracking
    SIGNIFICANT_VARIANCE_PERCENT = 10.0
    SIGNIFICANT_VARIANCE_AMOUNT = 10000.0


class DevelopmentConfig(Config):
    """Development configuration"""
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration"""
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'WARNING')


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    FORECAST_RANDOM_SEED = 42


# Config mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get config based on environment"""
    env = os.environ.get('CASHFLOW_ENV', 'development')
    return config.get(env, config['default'])


def configure_logging(config_class=None):
    """Apply the configured log level to the root logger"""
    if config_class is None:
        config_class = get_config()
    level = getattr(logging, str(config_class.LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    return level
