"""
Soil and terrain taxonomy.

Three closed tag sets describe every terrain:
  - ``SoilType``    : the soil category (normalized from field-survey names).
  - ``SlopeClass``  : qualitative slope band (FLAT / MODERATE / STEEP).
  - ``AltitudeBand``: qualitative altitude band.

``SOIL_PROFILES`` is the canonical soil table. It is exhaustive over
``SoilType``: the ``UNKNOWN`` member is an explicit arm carrying the default
values, so an unrecognized survey label never silently borrows another
soil's numbers.

Run ``tests/test_taxonomy/test_soil_taxonomy.py`` to verify this contract.

This module has NO imports from any other ``tractor_advisor`` package.
"""

from dataclasses import dataclass
from enum import StrEnum


class SoilType(StrEnum):
    """Soil category used by every physical-model and scoring table."""

    SANDY = "sandy"
    """Light, loose soil; low draft, low rolling support."""

    LOAM = "loam"
    """Balanced agricultural soil; the reference soil (factor 1.0)."""

    CLAY = "clay"
    """Heavy cohesive soil; high draft, favours tracks on slopes."""

    ROCKY = "rocky"
    """Stony ground; highest draft, calls for reinforced tires."""

    WET_CLAY = "wet_clay"
    """Saturated clay; extreme sinkage, tracks strongly preferred."""

    UNKNOWN = "unknown"
    """Unrecognized or missing survey label; resolves to table defaults."""


class SlopeClass(StrEnum):
    """Qualitative slope band derived from ``slope_percentage``."""

    FLAT = "FLAT"
    MODERATE = "MODERATE"
    STEEP = "STEEP"


class AltitudeBand(StrEnum):
    """Qualitative altitude band derived from ``altitude_meters``."""

    LOWLAND = "LOWLAND"
    MIDLAND = "MIDLAND"
    HIGHLAND = "HIGHLAND"


class RunningGear(StrEnum):
    """Running gear best suited to a soil."""

    STANDARD = "standard"
    REINFORCED = "reinforced"
    TRACK = "track"


@dataclass(frozen=True)
class SoilProfile:
    """Physical and qualitative parameters of one soil category.

    Attributes:
        cone_index:      ASABE cone index (Cn). ``None`` means "use the
                         configured default" (only for ``UNKNOWN``).
        draft_factor:    Multiplier applied to implement base power.
        difficulty:      0–100 trafficability difficulty (higher = harder).
        label:           Human-readable difficulty label.
        preferred_gear:  Running gear best suited to this soil.
    """

    cone_index:     float | None
    draft_factor:   float
    difficulty:     float
    label:          str
    preferred_gear: RunningGear


SOIL_PROFILES: dict[SoilType, SoilProfile] = {
    SoilType.SANDY:    SoilProfile(25.0, 0.8, 20.0, "Easy",           RunningGear.STANDARD),
    SoilType.LOAM:     SoilProfile(35.0, 1.0, 40.0, "Moderate",       RunningGear.STANDARD),
    SoilType.CLAY:     SoilProfile(45.0, 1.3, 70.0, "Difficult",      RunningGear.TRACK),
    SoilType.ROCKY:    SoilProfile(50.0, 1.5, 85.0, "Very difficult", RunningGear.REINFORCED),
    SoilType.WET_CLAY: SoilProfile(20.0, 1.4, 95.0, "Extreme",        RunningGear.TRACK),
    SoilType.UNKNOWN:  SoilProfile(None, 1.0, 40.0, "Unclassified",   RunningGear.STANDARD),
}

# Field surveys arrive in Spanish or English, with mixed case.
SOIL_SYNONYMS: dict[str, SoilType] = {
    "arena":          SoilType.SANDY,
    "arenoso":        SoilType.SANDY,
    "sand":           SoilType.SANDY,
    "sandy":          SoilType.SANDY,
    "franco":         SoilType.LOAM,
    "loam":           SoilType.LOAM,
    "arcilla":        SoilType.CLAY,
    "arcilloso":      SoilType.CLAY,
    "clay":           SoilType.CLAY,
    "rocoso":         SoilType.ROCKY,
    "pedregoso":      SoilType.ROCKY,
    "rocky":          SoilType.ROCKY,
    "arcilla_humeda": SoilType.WET_CLAY,
    "arcilla húmeda": SoilType.WET_CLAY,
    "wet_clay":       SoilType.WET_CLAY,
    "wet clay":       SoilType.WET_CLAY,
}


def normalize_soil_type(value: str | SoilType | None) -> SoilType:
    """Map a raw soil label to a ``SoilType``.

    Matching is case-insensitive and whitespace-tolerant. ``None``, empty
    strings and unrecognized labels map to ``SoilType.UNKNOWN``.
    """
    if isinstance(value, SoilType):
        return value
    if not value:
        return SoilType.UNKNOWN
    return SOIL_SYNONYMS.get(str(value).strip().lower(), SoilType.UNKNOWN)
