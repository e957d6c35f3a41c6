"""Shared test fixtures."""

import sqlite3
from pathlib import Path

import pytest
import yaml

from weathersync.config.defaults import DEFAULT_LOCATION
from weathersync.config.schema import SyncConfig
from weathersync.storage.database import connect, run_migrations

FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def default_config() -> SyncConfig:
    """Return default SyncConfig with the default location."""
    return SyncConfig(location=DEFAULT_LOCATION)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "units": "imperial",
        "provider": {"timeout_seconds": 5, "forecast_days": 7},
        "notifications": {"min_interval_hours": 12},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def seven_day_text() -> str:
    return (FIXTURE_DIR / "owm_daily_7.json").read_text()


@pytest.fixture
def error_text() -> str:
    return (FIXTURE_DIR / "owm_error_404.json").read_text()
