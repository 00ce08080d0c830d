"""
Machinery models: tractors and implements.

Both models are the ingestion boundary for catalog records. Raw traction and
status labels are normalized into enum members here, so downstream code
never string-matches "4x4" vs "4WD". Numeric fields arriving as strings
(e.g. ``"95.00"`` from a NUMERIC column) are coerced by pydantic.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from tractor_advisor.taxonomy.machinery_taxonomy import (
    TractionType,
    TractorStatus,
    normalize_status,
    normalize_traction_type,
)


class Tractor(BaseModel):
    """A candidate tractor from the fleet catalog.

    Attributes:
        tractor_id: Catalog PK, or ``None`` for ad-hoc candidates.
        name: Display name.
        brand: Manufacturer.
        model: Model designation.
        engine_power_hp: Rated engine power in HP; must be > 0.
        traction_type: Normalized drive train.
        weight_kg: Operating weight in kg, if known.
        status: Normalized availability state.
        fuel_consumption_lph: Rated fuel consumption in L/h, if known.
        tire_type: Free-text tire description (e.g. ``"reinforced radial"``).
    """

    model_config = ConfigDict(frozen=True)

    tractor_id: Optional[int] = None
    name: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    engine_power_hp: float = Field(gt=0.0, allow_inf_nan=False)
    traction_type: TractionType = TractionType.TWO_WHEEL_DRIVE
    weight_kg: Optional[float] = Field(default=None, ge=0.0, allow_inf_nan=False)
    status: TractorStatus = TractorStatus.AVAILABLE
    fuel_consumption_lph: Optional[float] = Field(default=None, gt=0.0, allow_inf_nan=False)
    tire_type: Optional[str] = None

    @field_validator("traction_type", mode="before")
    @classmethod
    def normalize_traction(cls, v: Any) -> TractionType:
        return normalize_traction_type(v)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_availability(cls, v: Any) -> TractorStatus:
        return normalize_status(v)

    @property
    def display_name(self) -> str:
        """Best available human-readable label."""
        if self.name:
            return self.name
        parts = [p for p in (self.brand, self.model) if p]
        if parts:
            return " ".join(parts)
        if self.tractor_id is not None:
            return f"tractor #{self.tractor_id}"
        return f"{self.engine_power_hp:g} HP tractor"


class Implement(BaseModel):
    """An agricultural implement to be pulled or driven.

    ``working_depth_cm`` (as stored by the catalog) is accepted and converted
    to metres when ``working_depth_m`` is absent.

    Attributes:
        implement_id: Catalog PK, or ``None``.
        name: Display name (``implement_name`` is accepted as an alias).
        implement_type: Free-text category, e.g. ``"plow"``.
        power_requirement_hp: Base drawbar power requirement; must be > 0.
        working_depth_m: Working depth in metres, or ``None`` for the
            configured standard depth.
    """

    model_config = ConfigDict(frozen=True)

    implement_id: Optional[int] = None
    name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("name", "implement_name")
    )
    implement_type: Optional[str] = None
    power_requirement_hp: float = Field(gt=0.0, allow_inf_nan=False)
    working_depth_m: Optional[float] = Field(default=None, gt=0.0, allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def convert_depth_cm(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("working_depth_m"):
            depth_cm = data.get("working_depth_cm")
            if depth_cm not in (None, ""):
                data = {**data, "working_depth_m": float(depth_cm) / 100.0}
        return data
