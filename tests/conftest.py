"""
Shared pytest fixtures for the Tractor Advisor test suite.

Provides:
  - Terrain fixtures for the common slope/soil situations.
  - ``make_tractor``: factory fixture building a ``Tractor`` with overrides.
  - ``catalog_dir``: a temporary catalog directory with small JSON files.
  - ``app_config_path``: a temporary TOML config pointing at that catalog,
    logging at WARNING so CLI output stays parseable.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from tractor_advisor.models.machinery import Implement, Tractor
from tractor_advisor.models.terrain import Terrain


# ── Terrain fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def flat_loam() -> Terrain:
    """Flat loam field at low altitude (the reference terrain)."""
    return Terrain(
        terrain_id=1, name="Flat loam", soil_type="loam",
        slope_percentage=2.0, altitude_meters=500.0, temperature_celsius=20.0,
    )


@pytest.fixture
def steep_clay() -> Terrain:
    """Clay hillside above the steep-slope cutoff."""
    return Terrain(
        terrain_id=2, name="Steep clay", soil_type="clay",
        slope_percentage=18.0, altitude_meters=1200.0,
    )


@pytest.fixture
def moderate_loam() -> Terrain:
    return Terrain(terrain_id=3, soil_type="loam", slope_percentage=10.0)


# ── Machinery factories ───────────────────────────────────────────────────────

@pytest.fixture
def make_tractor() -> Callable[..., Tractor]:
    """Return a factory that builds a ``Tractor`` with keyword overrides."""

    def _make(**overrides: Any) -> Tractor:
        fields: dict[str, Any] = {
            "tractor_id": 1,
            "name": "Test tractor",
            "engine_power_hp": 100.0,
            "traction_type": "4wd",
            "weight_kg": 4000.0,
            "status": "available",
        }
        fields.update(overrides)
        return Tractor(**fields)

    return _make


@pytest.fixture
def plow() -> Implement:
    return Implement(implement_id=1, name="Plow", power_requirement_hp=50.0, working_depth_m=0.3)


# ── Catalog + config on disk ──────────────────────────────────────────────────

_TRACTORS = [
    {"tractor_id": 1, "name": "Small 4x4", "engine_power_hp": 75, "traction_type": "4x4",
     "weight_kg": 3100, "status": "available", "fuel_consumption_lph": 9.5},
    {"tractor_id": 2, "name": "Small 2WD", "engine_power_hp": 75, "traction_type": "4x2",
     "weight_kg": 2900, "status": "available"},
    {"tractor_id": 3, "name": "Big tracked", "engine_power_hp": 300, "traction_type": "oruga",
     "weight_kg": 15000, "status": "available", "fuel_consumption_lph": 40},
    {"tractor_id": 4, "name": "Busy 4WD", "engine_power_hp": 120, "traction_type": "4WD",
     "weight_kg": 5200, "status": "in_use"},
]

_TERRAINS = [
    {"terrain_id": 1, "name": "Valle", "soil_type": "franco", "slope_percentage": 3,
     "altitude_meters": 450, "temperature_celsius": 22},
    {"terrain_id": 2, "name": "Ladera", "soil_type": "arcilla", "slope_percentage": 18,
     "altitude_meters": 2600},
]

_IMPLEMENTS = [
    {"implement_id": 1, "implement_name": "Plow", "power_requirement_hp": 45,
     "working_depth_cm": 30},
    {"implement_id": 2, "implement_name": "Giant subsoiler", "power_requirement_hp": 400},
]


@pytest.fixture
def catalog_dir(tmp_path: Path) -> Path:
    """A temporary catalog directory with tractors/terrains/implements JSON."""
    directory = tmp_path / "catalog"
    directory.mkdir()
    (directory / "tractors.json").write_text(json.dumps(_TRACTORS), encoding="utf-8")
    (directory / "terrains.json").write_text(json.dumps(_TERRAINS), encoding="utf-8")
    (directory / "implements.json").write_text(json.dumps(_IMPLEMENTS), encoding="utf-8")
    return directory


@pytest.fixture
def app_config_path(tmp_path: Path, catalog_dir: Path) -> Path:
    """A TOML config using ``catalog_dir`` and a temporary output dir."""
    path = tmp_path / "test.toml"
    path.write_text(
        "\n".join([
            "[data]",
            f"catalog_dir = {json.dumps(str(catalog_dir))}",
            f"output_dir = {json.dumps(str(tmp_path / 'outputs'))}",
            "",
            "[logging]",
            'level = "WARNING"',
        ]),
        encoding="utf-8",
    )
    return path
