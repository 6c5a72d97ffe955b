"""
Environment Configuration
=========================

Test/prod separation of the location index: each environment has its own
index table and may point at its own database.

Database URL lookup for an environment:
1. GEOINDEX_<ENV>_DATABASE_URL (e.g. GEOINDEX_PROD_DATABASE_URL)
2. GEOINDEX_DATABASE_URL
3. sqlite+aiosqlite:///geoindex.db

Usage:
    from geoindex.config import get_environment_config, PROD_ENV
    from geoindex.storage.columns import SQLStoreConfig

    config = SQLStoreConfig.from_environment(get_environment_config(PROD_ENV))
    print(config.table_name)  # "location_index_prod"
"""

import os
from dataclasses import dataclass
from enum import Enum

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///geoindex.db"


class Environment(Enum):
    """Available environments."""
    TEST = "test"
    PROD = "prod"


TEST_ENV = Environment.TEST
PROD_ENV = Environment.PROD


@dataclass(frozen=True)
class EnvironmentConfig:
    """
    Attributes:
        name: Environment name ("test" or "prod")
        index_table: Table holding the location index columns
    """
    name: str
    index_table: str

    @property
    def url_variable(self) -> str:
        return f"GEOINDEX_{self.name.upper()}_DATABASE_URL"

    @property
    def database_url(self) -> str:
        """SQLAlchemy async URL, resolved from the environment at call time."""
        return (
            os.environ.get(self.url_variable)
            or os.environ.get("GEOINDEX_DATABASE_URL")
            or DEFAULT_DATABASE_URL
        )


_ENVIRONMENTS = {
    Environment.TEST: EnvironmentConfig(name="test", index_table="location_index_test"),
    Environment.PROD: EnvironmentConfig(name="prod", index_table="location_index_prod"),
}

# Test by default so nothing touches the production table by accident
_current_environment: Environment = Environment.TEST


def get_environment_config(env: Environment) -> EnvironmentConfig:
    return _ENVIRONMENTS[env]


def get_current_environment() -> EnvironmentConfig:
    """
    Configuration of the active environment.

    GEOINDEX_ENV ("test" or "prod") takes precedence over
    set_current_environment().
    """
    env_var = os.environ.get("GEOINDEX_ENV", "").lower()
    for env in Environment:
        if env.value == env_var:
            return _ENVIRONMENTS[env]

    return _ENVIRONMENTS[_current_environment]


def set_current_environment(env: Environment) -> None:
    global _current_environment
    _current_environment = env
