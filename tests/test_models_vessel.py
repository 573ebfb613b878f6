"""Tests for vessel models and the vessel catalog."""

import pytest

from voyage_weather.models.vessel import (
    DEFAULT_VESSEL_CATALOG,
    VesselCatalog,
    VesselConfig,
    VesselProfile,
    VesselType,
)


class TestVesselCatalog:
    """Tests for vessel lookups."""

    def test_every_type_has_a_profile(self):
        for vessel_type in VesselType:
            assert DEFAULT_VESSEL_CATALOG.get(vessel_type) is not None

    @pytest.mark.parametrize(
        "vessel_type,speed",
        [
            (VesselType.CARGO, 15),
            (VesselType.CONTAINER, 22),
            (VesselType.YACHT, 12),
            (VesselType.NAVAL, 25),
            (None, 15),
        ],
    )
    def test_speed(self, vessel_type, speed):
        assert DEFAULT_VESSEL_CATALOG.speed_for(vessel_type) == speed

    def test_profiles_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_VESSEL_CATALOG.profiles[VesselType.CARGO] = None

    def test_custom_catalog(self):
        """Test that a new vessel profile is a data change."""
        catalog = VesselCatalog(
            {
                VesselType.FISHING: VesselProfile(
                    cruise_speed_kn=8, max_wind_speed_kn=18, max_wave_height_m=2
                ),
            }
        )
        assert catalog.speed_for(VesselType.FISHING) == 8
        assert catalog.speed_for(VesselType.CARGO) == 15
        # No cargo profile to fall back on: generic defaults
        assert catalog.default_limits(None).max_wind_speed_kn == 35


class TestResolveLimits:
    """Tests for resolving a request's operating limits."""

    def test_type_defaults(self):
        limits = DEFAULT_VESSEL_CATALOG.resolve_limits(
            VesselConfig(vessel_type=VesselType.PASSENGER)
        )
        assert limits.max_wind_speed_kn == 25
        assert limits.max_wave_height_m == 3
        assert limits.vessel_type == VesselType.PASSENGER

    def test_explicit_limits_win(self):
        limits = DEFAULT_VESSEL_CATALOG.resolve_limits(
            VesselConfig(vessel_type=VesselType.TANKER, max_wave_height_m=2.5)
        )
        assert limits.max_wind_speed_kn == 30
        assert limits.max_wave_height_m == 2.5

    def test_generic_defaults(self):
        limits = DEFAULT_VESSEL_CATALOG.resolve_limits(None)
        assert limits.max_wind_speed_kn == 35
        assert limits.max_wave_height_m == 4

    def test_default_limits_fall_back_to_cargo(self):
        """Test that optimization limits use cargo for unknown types."""
        limits = DEFAULT_VESSEL_CATALOG.default_limits(None)
        assert limits.max_wind_speed_kn == 35
        assert limits.max_wave_height_m == 5

    def test_fuel_rate(self):
        assert DEFAULT_VESSEL_CATALOG.fuel_rate_for(VesselType.TANKER) == 0.35
        assert DEFAULT_VESSEL_CATALOG.fuel_rate_for(None) == 0.3

    def test_vessel_type_from_string(self):
        assert VesselConfig(vessel_type="yacht").vessel_type == VesselType.YACHT
