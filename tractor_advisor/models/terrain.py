"""
Terrain input record and terrain analysis output.

``Terrain`` is what the catalog supplies. ``TerrainAnalysis`` is what
``tractor_advisor.terrain.analyzer.analyze_terrain`` derives from it: slope,
soil and altitude classifications, numeric metrics, and the requirement
factors reused by the scoring engine and the minimum-power calculation.

Both models are frozen. A ``TerrainAnalysis`` is computed once per
recommendation request and shared by every candidate.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tractor_advisor.taxonomy.soil_taxonomy import (
    AltitudeBand,
    RunningGear,
    SlopeClass,
    SoilType,
    normalize_soil_type,
)


class Terrain(BaseModel):
    """A field or plot to be worked.

    Attributes:
        terrain_id: Catalog PK, or ``None``.
        name: Display name.
        soil_type: Normalized soil category (``UNKNOWN`` when unrecognized).
        slope_percentage: Slope grade in percent; non-negative and finite.
        altitude_meters: Altitude above sea level; non-negative and finite.
        temperature_celsius: Ambient temperature, or ``None`` when unknown.
    """

    model_config = ConfigDict(frozen=True)

    terrain_id: Optional[int] = None
    name: Optional[str] = None
    soil_type: SoilType = SoilType.UNKNOWN
    slope_percentage: float = Field(default=0.0, ge=0.0, allow_inf_nan=False)
    altitude_meters: float = Field(default=0.0, ge=0.0, allow_inf_nan=False)
    temperature_celsius: Optional[float] = Field(default=None, allow_inf_nan=False)

    @field_validator("soil_type", mode="before")
    @classmethod
    def normalize_soil(cls, v: Any) -> SoilType:
        return normalize_soil_type(v)

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        if self.terrain_id is not None:
            return f"terrain #{self.terrain_id}"
        return f"{self.soil_type} terrain"


class TerrainClassification(BaseModel):
    """Qualitative bands for one terrain."""

    model_config = ConfigDict(frozen=True)

    slope_class: SlopeClass
    slope_description: str
    soil_type: SoilType
    soil_label: str
    preferred_gear: RunningGear
    altitude_band: AltitudeBand


class TerrainMetrics(BaseModel):
    """Numeric metrics for one terrain, defaults already applied."""

    model_config = ConfigDict(frozen=True)

    slope_percentage: float
    slope_degrees: float
    altitude_meters: float
    temperature_celsius: float
    cone_index: float
    rolling_coefficient: float
    soil_difficulty: float
    combined_difficulty: float


class TerrainRequirements(BaseModel):
    """Derived requirement factors for one terrain.

    Attributes:
        soil_factor: Draft multiplier applied to implement base power.
        slope_factor: Slope multiplier applied to implement base power.
        altitude_derate_percent: Engine power lost to altitude, in percent.
        requires_four_wheel_drive: True on STEEP terrain.
        requires_tracks: True on wet clay, or on clay when STEEP.
    """

    model_config = ConfigDict(frozen=True)

    soil_factor: float
    slope_factor: float
    altitude_derate_percent: float
    requires_four_wheel_drive: bool
    requires_tracks: bool


class TerrainAnalysis(BaseModel):
    """Complete terrain analysis: classification, metrics and requirements."""

    model_config = ConfigDict(frozen=True)

    classification: TerrainClassification
    metrics: TerrainMetrics
    requirements: TerrainRequirements

    @property
    def slope_class(self) -> SlopeClass:
        return self.classification.slope_class

    @property
    def is_steep(self) -> bool:
        return self.classification.slope_class == SlopeClass.STEEP
