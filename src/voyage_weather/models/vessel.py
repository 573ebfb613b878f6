"""Vessel models and the default vessel catalog.

Vessel speeds, operating limits and fuel rates are configuration data, not
code: `VesselCatalog` is an immutable mapping from `VesselType` to
`VesselProfile` that is injected into the planner. Adding a vessel type is a
data change.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field


class VesselType(str, Enum):
    """Closed set of supported vessel types."""

    CARGO = "cargo"
    TANKER = "tanker"
    CONTAINER = "container"
    PASSENGER = "passenger"
    YACHT = "yacht"
    FISHING = "fishing"
    NAVAL = "naval"
    BULK = "bulk"
    CRUISE = "cruise"


# Used when neither explicit limits nor a known vessel type are supplied
DEFAULT_MAX_WIND_SPEED_KN = 35.0
DEFAULT_MAX_WAVE_HEIGHT_M = 4.0
DEFAULT_VESSEL_SPEED_KN = 15.0
DEFAULT_FUEL_RATE_TONS_PER_NM = 0.3


class VesselLimits(BaseModel):
    """Maximum conditions a vessel is deemed safe to operate in."""

    model_config = ConfigDict(frozen=True)

    max_wind_speed_kn: float = Field(
        default=DEFAULT_MAX_WIND_SPEED_KN, gt=0, description="Maximum wind (knots)"
    )
    max_wave_height_m: float = Field(
        default=DEFAULT_MAX_WAVE_HEIGHT_M, gt=0, description="Maximum wave height (m)"
    )
    vessel_type: VesselType | None = None


class VesselProfile(BaseModel):
    """Static characteristics of a vessel type."""

    model_config = ConfigDict(frozen=True)

    cruise_speed_kn: float = Field(..., gt=0)
    max_wind_speed_kn: float = Field(..., gt=0)
    max_wave_height_m: float = Field(..., gt=0)
    fuel_rate_tons_per_nm: float = Field(default=DEFAULT_FUEL_RATE_TONS_PER_NM, ge=0)


class VesselConfig(BaseModel):
    """Vessel parameters supplied with a planning request.

    Explicit limits win over the defaults of the vessel type.
    """

    vessel_type: VesselType | None = None
    max_wind_speed_kn: float | None = Field(default=None, gt=0)
    max_wave_height_m: float | None = Field(default=None, gt=0)


class VesselCatalog:
    """Immutable lookup of vessel profiles keyed by vessel type."""

    def __init__(self, profiles: Mapping[VesselType, VesselProfile]):
        self._profiles: Mapping[VesselType, VesselProfile] = MappingProxyType(dict(profiles))

    @property
    def profiles(self) -> Mapping[VesselType, VesselProfile]:
        return self._profiles

    def get(self, vessel_type: VesselType | None) -> VesselProfile | None:
        """Get the profile for a vessel type, or None if unknown."""
        if vessel_type is None:
            return None
        return self._profiles.get(vessel_type)

    def speed_for(self, vessel_type: VesselType | None) -> float:
        """Cruise speed in knots, defaulting to 15 kn."""
        profile = self.get(vessel_type)
        return profile.cruise_speed_kn if profile else DEFAULT_VESSEL_SPEED_KN

    def fuel_rate_for(self, vessel_type: VesselType | None) -> float:
        """Base fuel consumption in tons per nautical mile."""
        profile = self.get(vessel_type)
        return profile.fuel_rate_tons_per_nm if profile else DEFAULT_FUEL_RATE_TONS_PER_NM

    def default_limits(self, vessel_type: VesselType | None) -> VesselLimits:
        """Default limits for a vessel type.

        Unknown or missing types fall back to the cargo profile, matching
        how candidate routes are scored.
        """
        profile = self.get(vessel_type) or self._profiles.get(VesselType.CARGO)
        if profile is None:
            return VesselLimits(vessel_type=vessel_type)
        return VesselLimits(
            max_wind_speed_kn=profile.max_wind_speed_kn,
            max_wave_height_m=profile.max_wave_height_m,
            vessel_type=vessel_type,
        )

    def resolve_limits(self, config: VesselConfig | None) -> VesselLimits:
        """Resolve the limits for a request.

        Explicit limits are used as given. Missing values come from the
        vessel type's profile when the type is known, otherwise from the
        generic defaults (35 kn, 4 m).
        """
        config = config or VesselConfig()
        profile = self.get(config.vessel_type)

        if config.max_wind_speed_kn is not None:
            max_wind = config.max_wind_speed_kn
        elif profile:
            max_wind = profile.max_wind_speed_kn
        else:
            max_wind = DEFAULT_MAX_WIND_SPEED_KN

        if config.max_wave_height_m is not None:
            max_wave = config.max_wave_height_m
        elif profile:
            max_wave = profile.max_wave_height_m
        else:
            max_wave = DEFAULT_MAX_WAVE_HEIGHT_M

        return VesselLimits(
            max_wind_speed_kn=max_wind,
            max_wave_height_m=max_wave,
            vessel_type=config.vessel_type,
        )


DEFAULT_VESSEL_CATALOG = VesselCatalog(
    {
        VesselType.CARGO: VesselProfile(
            cruise_speed_kn=15, max_wind_speed_kn=35, max_wave_height_m=5,
            fuel_rate_tons_per_nm=0.3,
        ),
        VesselType.TANKER: VesselProfile(
            cruise_speed_kn=14, max_wind_speed_kn=30, max_wave_height_m=4,
            fuel_rate_tons_per_nm=0.35,
        ),
        VesselType.CONTAINER: VesselProfile(
            cruise_speed_kn=22, max_wind_speed_kn=40, max_wave_height_m=6,
            fuel_rate_tons_per_nm=0.4,
        ),
        VesselType.PASSENGER: VesselProfile(
            cruise_speed_kn=20, max_wind_speed_kn=25, max_wave_height_m=3,
            fuel_rate_tons_per_nm=0.25,
        ),
        VesselType.YACHT: VesselProfile(
            cruise_speed_kn=12, max_wind_speed_kn=20, max_wave_height_m=2.5,
            fuel_rate_tons_per_nm=0.1,
        ),
        VesselType.FISHING: VesselProfile(
            cruise_speed_kn=10, max_wind_speed_kn=25, max_wave_height_m=3.5,
        ),
        VesselType.NAVAL: VesselProfile(
            cruise_speed_kn=25, max_wind_speed_kn=45, max_wave_height_m=7,
        ),
        VesselType.BULK: VesselProfile(
            cruise_speed_kn=14, max_wind_speed_kn=35, max_wave_height_m=5,
        ),
        VesselType.CRUISE: VesselProfile(
            cruise_speed_kn=18, max_wind_speed_kn=22, max_wave_height_m=3,
        ),
    }
)
