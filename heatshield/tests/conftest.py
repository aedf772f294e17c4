"""Shared test fixtures."""

import sqlite3
from pathlib import Path

import pytest
import yaml

from heatshield.config.defaults import DEFAULT_COOL_ZONES
from heatshield.config.schema import HeatShieldConfig
from heatshield.storage.database import open_db


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    """A migrated SQLite database in a temp directory."""
    conn = open_db(tmp_path / "test.db")
    yield conn
    conn.close()


@pytest.fixture
def default_config() -> HeatShieldConfig:
    """Default config with the curated Monterrey cool zones."""
    return HeatShieldConfig(cool_zones=DEFAULT_COOL_ZONES)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "location": {"name": "Centro", "latitude": 25.67, "longitude": -100.31},
        "zones": {"search_radius_m": 1500},
        "ops": {"request_delay_ms": 0},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
