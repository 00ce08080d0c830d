"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      : committed static defaults
  2. ``config/local.toml``        : optional local overrides (gitignored)
  3. ``.env``                     : local secrets and env overrides (gitignored)
  4. Environment variables        : ``TRACTOR_ADVISOR_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The calculation core never reads this file or the environment. Every core
entry point takes an ``EngineConfig`` argument (``None`` means the built-in
defaults), so parameter sets can be swapped per call and tested in isolation.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from tractor_advisor.taxonomy.machinery_taxonomy import TractionType, TractorStatus

# ── Engine sub-configs ────────────────────────────────────────────────────────


class PowerModelConfig(BaseModel):
    """Constants of the power-loss formulas."""

    model_config = ConfigDict(frozen=True)

    hp_divisor: float = 273.0              # kgf * km/h -> HP
    altitude_loss_fraction: float = 0.03   # lost per altitude step
    altitude_step_m: float = 300.0
    default_cone_index: float = 35.0       # Cn for unrecognized soils
    rolling_cn_numerator: float = 1.2      # mu_r = 1.2 / Cn + 0.04
    rolling_base_coefficient: float = 0.04
    base_temperature_celsius: float = 15.0     # no temperature loss at or below
    temperature_loss_percent: float = 1.0      # lost per temperature step above base
    temperature_step_c: float = 5.0
    transmission_loss_fraction: float = 0.13   # drivetrain loss on the derated engine power
    default_slippage_percent: dict[TractionType, float] = {
        TractionType.FOUR_WHEEL_DRIVE: 8.0,
        TractionType.TWO_WHEEL_DRIVE: 15.0,
        TractionType.TRACKED: 5.0,
    }

    @field_validator("default_slippage_percent")
    @classmethod
    def validate_slippage_table(cls, v: dict[TractionType, float]) -> dict[TractionType, float]:
        missing = set(TractionType) - set(v)
        if missing:
            raise ValueError(f"default_slippage_percent missing traction types: {sorted(missing)}.")
        return v

    @field_validator("default_cone_index", "hp_divisor", "altitude_step_m", "temperature_step_c")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"must be > 0, got {v}.")
        return v

    @field_validator("transmission_loss_fraction")
    @classmethod
    def validate_fraction(cls, v: float) -> float:
        if not 0.0 <= v < 1.0:
            raise ValueError(f"transmission_loss_fraction must be in [0, 1), got {v}.")
        return v


class MinimumPowerConfig(BaseModel):
    """Parameters of the minimum-required-power formula."""

    model_config = ConfigDict(frozen=True)

    safety_margin: float = 0.15
    standard_depth_m: float = 0.25
    slope_factor_coefficient: float = 0.5  # F_slope = 1 + slope/100 * coeff


class TerrainConfig(BaseModel):
    """Slope and altitude band boundaries."""

    model_config = ConfigDict(frozen=True)

    flat_max_slope: float = 5.0
    steep_min_slope: float = 15.0
    lowland_max_altitude: float = 1000.0
    highland_min_altitude: float = 2500.0
    default_temperature_celsius: float = 15.0

    @model_validator(mode="after")
    def validate_bands(self) -> "TerrainConfig":
        if not 0.0 <= self.flat_max_slope <= self.steep_min_slope:
            raise ValueError(
                f"Need 0 <= flat_max_slope ({self.flat_max_slope}) "
                f"<= steep_min_slope ({self.steep_min_slope})."
            )
        if self.lowland_max_altitude > self.highland_min_altitude:
            raise ValueError("lowland_max_altitude must be <= highland_min_altitude.")
        return self


class ScoringWeights(BaseModel):
    """Maximum points per criterion; must sum to 100."""

    model_config = ConfigDict(frozen=True)

    efficiency: float = 30.0
    traction: float = 25.0
    soil: float = 20.0
    economic: float = 15.0
    availability: float = 10.0

    @model_validator(mode="after")
    def validate_sum(self) -> "ScoringWeights":
        total = self.efficiency + self.traction + self.soil + self.economic + self.availability
        if abs(total - 100.0) > 1e-9:
            raise ValueError(f"Scoring weights must sum to 100, got {total}.")
        return self


class ScoringConfig(BaseModel):
    """Weights and policy parameters of the tractor scoring engine."""

    model_config = ConfigDict(frozen=True)

    weights: ScoringWeights = ScoringWeights()

    # Efficiency: power multiple = tractor_hp / required_hp
    optimal_band_min: float = 1.0
    optimal_band_max: float = 1.25
    undersize_penalty_rate: float = 2.0    # x weight per unit of shortfall
    oversize_penalty_rate: float = 0.8     # x weight per unit beyond the band

    # Traction
    traction_base: dict[TractionType, float] = {
        TractionType.FOUR_WHEEL_DRIVE: 18.0,
        TractionType.TRACKED: 18.0,
        TractionType.TWO_WHEEL_DRIVE: 12.0,
    }
    moderate_slope_bonus: dict[TractionType, float] = {
        TractionType.FOUR_WHEEL_DRIVE: 4.0,
        TractionType.TRACKED: 5.0,
        TractionType.TWO_WHEEL_DRIVE: -2.0,
    }
    steep_slope_bonus: dict[TractionType, float] = {
        TractionType.FOUR_WHEEL_DRIVE: 7.0,
        TractionType.TRACKED: 7.0,
        TractionType.TWO_WHEEL_DRIVE: -12.0,
    }

    # Soil
    difficult_soil_threshold: float = 70.0
    difficult_soil_multiplier: float = 0.7
    soft_soil_max_cone_index: float = 30.0
    heavy_tractor_kg: float = 5000.0
    heavy_tractor_bonus: float = 0.1       # fraction of the soil weight

    # Economic
    fuel_reference_lph: float = 5.0
    fuel_range_lph: float = 20.0

    # Availability: fraction of the availability weight; other statuses -> 0
    availability_fractions: dict[TractorStatus, float] = {
        TractorStatus.AVAILABLE: 1.0,
        TractorStatus.IN_USE: 0.5,
    }

    @field_validator("traction_base", "moderate_slope_bonus", "steep_slope_bonus")
    @classmethod
    def validate_traction_table(cls, v: dict[TractionType, float]) -> dict[TractionType, float]:
        missing = set(TractionType) - set(v)
        if missing:
            raise ValueError(f"traction table missing entries for: {sorted(missing)}.")
        return v

    @model_validator(mode="after")
    def validate_band(self) -> "ScoringConfig":
        if not 0.0 < self.optimal_band_min <= self.optimal_band_max:
            raise ValueError(
                f"Need 0 < optimal_band_min ({self.optimal_band_min}) "
                f"<= optimal_band_max ({self.optimal_band_max})."
            )
        return self


class ClassificationConfig(BaseModel):
    """Band boundaries for the two utilization classification schemes.

    ``fit_*`` thresholds drive the 4-band OPTIMAL/GOOD/OVERPOWERED/EXCESSIVE
    scheme attached to recommendations (lower bounds, utilization percent).
    ``suitability_optimal_max_multiple`` drives the 3-band
    INSUFFICIENT/OPTIMAL/OVERPOWERED scheme of the minimum-power matcher.
    """

    model_config = ConfigDict(frozen=True)

    fit_optimal_min: float = 85.0
    fit_good_min: float = 70.0
    fit_overpowered_min: float = 50.0
    suitability_optimal_max_multiple: float = 1.25

    @model_validator(mode="after")
    def validate_order(self) -> "ClassificationConfig":
        if not self.fit_optimal_min > self.fit_good_min > self.fit_overpowered_min:
            raise ValueError("fit thresholds must be strictly decreasing: optimal > good > overpowered.")
        if self.suitability_optimal_max_multiple < 1.0:
            raise ValueError("suitability_optimal_max_multiple must be >= 1.0.")
        return self


class MatcherConfig(BaseModel):
    """Minimum-power matcher settings."""

    model_config = ConfigDict(frozen=True)

    top_n: int = 5


class EngineConfig(BaseModel):
    """Every tunable constant of the calculation core, in one structure."""

    model_config = ConfigDict(frozen=True)

    power_model: PowerModelConfig = PowerModelConfig()
    minimum_power: MinimumPowerConfig = MinimumPowerConfig()
    terrain: TerrainConfig = TerrainConfig()
    scoring: ScoringConfig = ScoringConfig()
    classification: ClassificationConfig = ClassificationConfig()
    matcher: MatcherConfig = MatcherConfig()


DEFAULT_ENGINE_CONFIG = EngineConfig()
"""Built-in engine parameters; used when a core entry point gets ``config=None``."""


# ── Application sub-configs ───────────────────────────────────────────────────


class DataConfig(BaseModel):
    """Filesystem paths for catalogs and report output."""

    model_config = ConfigDict(frozen=True)

    catalog_dir: str = "config/catalog"
    tractors_file: str = "tractors.json"
    terrains_file: str = "terrains.json"
    implements_file: str = "implements.json"
    output_dir: str = "data/outputs"


class RecommendationConfig(BaseModel):
    """CLI defaults for recommendation and calculation commands."""

    model_config = ConfigDict(frozen=True)

    default_limit: Optional[int] = None
    available_only: bool = False
    default_speed_kmh: float = 6.0

    @field_validator("default_limit")
    @classmethod
    def validate_limit(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError(f"default_limit must be >= 1 or unset, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration.

    Constructed by ``load_config()`` which merges TOML + .env. CLI commands
    pass ``config.engine`` into the calculation core.
    """

    model_config = ConfigDict(frozen=True)

    data: DataConfig = DataConfig()
    logging: LoggingConfig = LoggingConfig()
    recommendation: RecommendationConfig = RecommendationConfig()
    engine: EngineConfig = EngineConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Pass --config or create config/default.toml first."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply TRACTOR_ADVISOR_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply TRACTOR_ADVISOR_* env vars to the raw config dict.

    Supported overrides:
      TRACTOR_ADVISOR_CATALOG_DIR → raw["data"]["catalog_dir"]
      TRACTOR_ADVISOR_LOG_LEVEL   → raw["logging"]["level"]
      TRACTOR_ADVISOR_DEBUG       → raw["debug"]
    """
    if catalog_dir := os.environ.get("TRACTOR_ADVISOR_CATALOG_DIR"):
        raw.setdefault("data", {})["catalog_dir"] = catalog_dir

    if log_level := os.environ.get("TRACTOR_ADVISOR_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("TRACTOR_ADVISOR_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        data=DataConfig(**raw.get("data", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        recommendation=RecommendationConfig(**raw.get("recommendation", {})),
        engine=EngineConfig(**raw.get("engine", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
