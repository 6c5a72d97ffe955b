"""
Index Settings
==============

Tunables of the location index, loaded from YAML with pydantic validation.

Loading order:
1. Explicit path passed to load_settings()
2. GEOINDEX_CONFIG environment variable
3. geoindex/config/geoindex.yaml shipped with the package

A missing file falls back to the defaults below.
"""

import os
from pathlib import Path
from typing import Optional, Union

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError

from geoindex.core.errors import ConfigurationError

log = structlog.get_logger()

# Longest geohash the 64-bit interleaving supports
MAX_GEOHASH_RESOLUTION = 12


class GeoIndexSettings(BaseModel):
    """
    Attributes:
        max_resolution: Finest geocell resolution written and searched
        write_retry_count: Attempts per batch write before WriteFailure
        retry_delay_ms: Pause between write attempts
        query_limit: Columns read per geocell row
        read_concurrency: Geocell rows read in parallel (1 = sequential)
        namespace: Row key tag separating location rows from other indexes
    """
    max_resolution: int = Field(default=8, ge=1, le=MAX_GEOHASH_RESOLUTION)
    write_retry_count: int = Field(default=5, ge=1, le=100)
    retry_delay_ms: int = Field(default=50, ge=0)
    query_limit: int = Field(default=100, ge=1)
    read_concurrency: int = Field(default=4, ge=1)
    namespace: str = Field(default="locations", min_length=1)

    @property
    def retry_delay(self) -> float:
        return self.retry_delay_ms / 1000.0


def default_settings_path() -> Path:
    return Path(__file__).parent / "geoindex.yaml"


def load_settings(path: Optional[Union[str, Path]] = None) -> GeoIndexSettings:
    """
    Load settings from YAML.

    Raises:
        ConfigurationError: if the file exists but is not valid
    """
    if path is None:
        path = os.environ.get("GEOINDEX_CONFIG") or default_settings_path()
    path = Path(path)

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        log.warning("Settings file not found, using defaults", path=str(path))
        return GeoIndexSettings()
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    section = data.get("geoindex", data) if isinstance(data, dict) else None
    if not isinstance(section, dict):
        raise ConfigurationError(f"Expected a mapping in {path}")

    try:
        settings = GeoIndexSettings(**section)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {path}: {e}") from e

    log.debug("Loaded settings", path=str(path), max_resolution=settings.max_resolution)
    return settings
