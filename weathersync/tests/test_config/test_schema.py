"""Tests for config schema validation."""

import pytest
from pydantic import ValidationError

from weathersync.config.schema import (
    LocationConfig,
    LocationMode,
    NotificationSink,
    OpsConfig,
    OverlapPolicy,
    ProviderConfig,
    SyncConfig,
)
from weathersync.models.common import UnitSystem


class TestSyncConfig:
    def test_defaults(self):
        config = SyncConfig()
        assert config.units == UnitSystem.METRIC
        assert config.provider.forecast_days == 14
        assert config.notifications.min_interval_hours == 24.0
        assert config.notifications.sink == NotificationSink.CONSOLE
        assert config.companion.enabled is False
        assert config.ops.overlap_policy == OverlapPolicy.WAIT

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            SyncConfig(unknown_section={})

    def test_units_from_string(self):
        assert SyncConfig(units="imperial").units == UnitSystem.IMPERIAL

    def test_invalid_units(self):
        with pytest.raises(ValidationError):
            SyncConfig(units="kelvin")


class TestProviderConfig:
    def test_forecast_days_bounds(self):
        with pytest.raises(ValidationError):
            ProviderConfig(forecast_days=0)
        with pytest.raises(ValidationError):
            ProviderConfig(forecast_days=17)

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            ProviderConfig(timeout_seconds=0)


class TestLocationConfig:
    def test_valid_coordinates(self):
        loc = LocationConfig(mode=LocationMode.COORDS, latitude=51.5, longitude=-0.12)
        assert loc.has_valid_coordinates()

    def test_missing_coordinates(self):
        loc = LocationConfig(mode=LocationMode.COORDS, latitude=51.5)
        assert not loc.has_valid_coordinates()

    def test_out_of_range_coordinates(self):
        loc = LocationConfig(mode=LocationMode.COORDS, latitude=91.0, longitude=0.0)
        assert not loc.has_valid_coordinates()
        loc = LocationConfig(mode=LocationMode.COORDS, latitude=0.0, longitude=-181.0)
        assert not loc.has_valid_coordinates()


class TestOpsConfig:
    def test_interval_minimum(self):
        with pytest.raises(ValidationError):
            OpsConfig(sync_interval_minutes=0)

    def test_skip_policy(self):
        assert OpsConfig(overlap_policy="skip").overlap_policy == OverlapPolicy.SKIP
