"""
Configuration module for GeoIndex.
"""

from .environments import (
    EnvironmentConfig,
    Environment,
    get_environment_config,
    get_current_environment,
    set_current_environment,
    TEST_ENV,
    PROD_ENV,
)
from .settings import GeoIndexSettings, load_settings

__all__ = [
    "EnvironmentConfig",
    "Environment",
    "get_environment_config",
    "get_current_environment",
    "set_current_environment",
    "TEST_ENV",
    "PROD_ENV",
    "GeoIndexSettings",
    "load_settings",
]
