"""Tests for config loading, snapshot persistence, and get/set."""

import sqlite3
from pathlib import Path

import pytest
import yaml

from weathersync.config.defaults import DEFAULT_LOCATION
from weathersync.config.loader import (
    config_hash,
    get_config_value,
    load_config,
    save_config,
    set_config_value,
    snapshot_config,
)
from weathersync.config.schema import LocationMode, SyncConfig
from weathersync.models.common import UnitSystem


class TestLoadConfig:
    def test_load_from_yaml(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.units == UnitSystem.IMPERIAL
        assert config.provider.forecast_days == 7
        assert config.notifications.min_interval_hours == 12

    def test_default_location_injected(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.location == DEFAULT_LOCATION

    def test_explicit_location_not_overridden(self, tmp_path: Path):
        data = {
            "location": {"mode": "coords", "latitude": 48.85, "longitude": 2.35}
        }
        path = tmp_path / "custom.yaml"
        with open(path, "w") as f:
            yaml.dump(data, f)
        config = load_config(path)
        assert config.location.mode == LocationMode.COORDS
        assert config.location.latitude == 48.85

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        config = load_config(path)
        assert config.units == UnitSystem.METRIC
        assert config.location.place == "94043,USA"

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "nope.yaml")
        assert config.location == DEFAULT_LOCATION

    def test_invalid_yaml_value(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("provider:\n  forecast_days: 99\n")
        with pytest.raises(ValueError):
            load_config(path)


class TestConfigHash:
    def test_deterministic(self):
        assert config_hash(SyncConfig()) == config_hash(SyncConfig())

    def test_different_config_different_hash(self):
        assert config_hash(SyncConfig()) != config_hash(SyncConfig(units="imperial"))


class TestSnapshotConfig:
    def test_persists_to_db(self, default_config: SyncConfig, db: sqlite3.Connection):
        h = snapshot_config(default_config, db)
        row = db.execute(
            "SELECT config_json FROM config_snapshots WHERE config_hash = ?", (h,)
        ).fetchone()
        assert row is not None

    def test_idempotent(self, default_config: SyncConfig, db: sqlite3.Connection):
        h1 = snapshot_config(default_config, db)
        h2 = snapshot_config(default_config, db)
        assert h1 == h2
        count = db.execute("SELECT COUNT(*) FROM config_snapshots").fetchone()[0]
        assert count == 1


class TestGetConfigValue:
    def test_dotted_key(self, default_config: SyncConfig):
        assert get_config_value(default_config, "provider.forecast_days") == 14

    def test_top_level(self, default_config: SyncConfig):
        assert get_config_value(default_config, "units") == UnitSystem.METRIC

    def test_invalid_key(self, default_config: SyncConfig):
        with pytest.raises((KeyError, AttributeError)):
            get_config_value(default_config, "nonexistent.key")


class TestSetConfigValue:
    def test_int_coercion(self, default_config: SyncConfig):
        new = set_config_value(default_config, "provider.forecast_days", "7")
        assert new.provider.forecast_days == 7
        assert default_config.provider.forecast_days == 14

    def test_bool_coercion(self, default_config: SyncConfig):
        new = set_config_value(default_config, "companion.enabled", "true")
        assert new.companion.enabled is True

    def test_revalidates(self, default_config: SyncConfig):
        with pytest.raises(ValueError):
            set_config_value(default_config, "provider.forecast_days", "40")

    def test_unknown_key(self, default_config: SyncConfig):
        with pytest.raises(KeyError):
            set_config_value(default_config, "provider.nope", "1")


class TestSaveConfig:
    def test_round_trip(self, tmp_path: Path):
        path = tmp_path / "saved.yaml"
        config = SyncConfig(units="imperial", location=DEFAULT_LOCATION)
        save_config(config, path)
        assert load_config(path) == config
