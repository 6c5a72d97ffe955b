"""
Test Settings and Environments
==============================
"""

import os
from unittest.mock import patch

import pytest
from structlog.testing import capture_logs

from geoindex.config import (
    GeoIndexSettings,
    get_current_environment,
    get_environment_config,
    load_settings,
    set_current_environment,
    PROD_ENV,
    TEST_ENV,
)
from geoindex.config.environments import DEFAULT_DATABASE_URL
from geoindex.core.errors import ConfigurationError


class TestGeoIndexSettings:
    def test_defaults(self):
        settings = GeoIndexSettings()
        assert settings.max_resolution == 8
        assert settings.write_retry_count == 5
        assert settings.query_limit == 100
        assert settings.read_concurrency == 4
        assert settings.namespace == "locations"
        assert settings.retry_delay == pytest.approx(0.05)

    @pytest.mark.parametrize("field,value", [
        ("max_resolution", 0),
        ("max_resolution", 13),
        ("write_retry_count", 0),
        ("query_limit", 0),
        ("read_concurrency", 0),
    ])
    def test_validation(self, field, value):
        with pytest.raises(ValueError):
            GeoIndexSettings(**{field: value})


class TestLoadSettings:
    def test_packaged_yaml(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings()
        assert settings == GeoIndexSettings()

    def test_custom_file(self, tmp_path):
        path = tmp_path / "geo.yaml"
        path.write_text("geoindex:\n  max_resolution: 6\n  read_concurrency: 1\n")
        settings = load_settings(path)
        assert settings.max_resolution == 6
        assert settings.read_concurrency == 1
        assert settings.write_retry_count == 5

    def test_env_var_path(self, tmp_path):
        path = tmp_path / "env.yaml"
        path.write_text("query_limit: 25\n")
        with patch.dict(os.environ, {"GEOINDEX_CONFIG": str(path)}):
            settings = load_settings()
        assert settings.query_limit == 25

    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        with capture_logs() as logs:
            settings = load_settings(tmp_path / "missing.yaml")
        assert settings == GeoIndexSettings()
        assert any(entry["log_level"] == "warning" for entry in logs)

    def test_invalid_values_raise(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("geoindex:\n  max_resolution: 40\n")
        with pytest.raises(ConfigurationError, match="Invalid settings"):
            load_settings(path)

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("geoindex: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_settings(path)


class TestEnvironments:
    def teardown_method(self):
        set_current_environment(TEST_ENV)

    def test_default_is_test(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_current_environment().name == "test"

    def test_set_current_environment(self):
        set_current_environment(PROD_ENV)
        with patch.dict(os.environ, {}, clear=True):
            assert get_current_environment().index_table == "location_index_prod"

    def test_env_var_override(self):
        with patch.dict(os.environ, {"GEOINDEX_ENV": "PROD"}):
            assert get_current_environment().name == "prod"

    def test_database_url_defaults_to_sqlite(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_environment_config(PROD_ENV).database_url == DEFAULT_DATABASE_URL

    def test_database_url_per_environment(self):
        env = {
            "GEOINDEX_DATABASE_URL": "postgresql+asyncpg://u:p@shared/db",
            "GEOINDEX_PROD_DATABASE_URL": "postgresql+asyncpg://u:p@prod/db",
        }
        with patch.dict(os.environ, env, clear=True):
            assert get_environment_config(PROD_ENV).database_url == "postgresql+asyncpg://u:p@prod/db"
            assert get_environment_config(TEST_ENV).database_url == "postgresql+asyncpg://u:p@shared/db"
