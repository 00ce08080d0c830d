"""
Catalog loader for tractors, terrains and implements.

Format is chosen by file suffix:
  ``.json`` : a top-level array of objects
  ``.csv``  : comma delimited, with a header row

Empty CSV cells and JSON ``null`` values are dropped so model defaults apply
(e.g. a missing ``status`` means ``available``).

Required fields per record type:
  tractors   → engine_power_hp
  terrains   → soil_type
  implements → power_requirement_hp

Field synonyms (traction labels, Spanish soil names, ``working_depth_cm``)
are resolved by the models themselves.

All rows are validated before any are returned. If any row fails, a single
``ValueError`` lists the first 10 failures.
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from tractor_advisor.config import DataConfig
from tractor_advisor.models.machinery import Implement, Tractor
from tractor_advisor.models.terrain import Terrain

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

REQUIRED_FIELDS: dict[type[BaseModel], frozenset[str]] = {
    Tractor:   frozenset({"engine_power_hp"}),
    Terrain:   frozenset({"soil_type"}),
    Implement: frozenset({"power_requirement_hp"}),
}

_MAX_ERRORS_SHOWN = 10


@dataclass
class Catalog:
    """Everything the CLI needs from disk, already validated."""

    tractors:   list[Tractor] = field(default_factory=list)
    terrains:   list[Terrain] = field(default_factory=list)
    implements: list[Implement] = field(default_factory=list)

    def get_tractor(self, tractor_id: int) -> Optional[Tractor]:
        return next((t for t in self.tractors if t.tractor_id == tractor_id), None)

    def get_terrain(self, terrain_id: int) -> Optional[Terrain]:
        return next((t for t in self.terrains if t.terrain_id == terrain_id), None)

    def get_implement(self, implement_id: int) -> Optional[Implement]:
        return next((i for i in self.implements if i.implement_id == implement_id), None)


def load_tractors(path: Path) -> list[Tractor]:
    return _load_records(path, Tractor)


def load_terrains(path: Path) -> list[Terrain]:
    return _load_records(path, Terrain)


def load_implements(path: Path) -> list[Implement]:
    return _load_records(path, Implement)


def load_catalog(data: DataConfig, base_dir: Optional[Path] = None) -> Catalog:
    """Load all three catalog files named in ``DataConfig``.

    Args:
        data:     Data section of ``AppConfig``.
        base_dir: Directory that a relative ``catalog_dir`` resolves against.
                  Defaults to the current working directory.

    Raises:
        FileNotFoundError: If any catalog file is missing.
        ValueError: If any file is malformed or a row fails validation.
    """
    catalog_dir = Path(data.catalog_dir)
    if base_dir is not None and not catalog_dir.is_absolute():
        catalog_dir = base_dir / catalog_dir

    catalog = Catalog(
        tractors=load_tractors(catalog_dir / data.tractors_file),
        terrains=load_terrains(catalog_dir / data.terrains_file),
        implements=load_implements(catalog_dir / data.implements_file),
    )
    logger.info(
        "Catalog loaded from %s: %d tractors, %d terrains, %d implements",
        catalog_dir, len(catalog.tractors), len(catalog.terrains), len(catalog.implements),
    )
    return catalog


# ── Private helpers ────────────────────────────────────────────────────────────


def _load_records(path: Path, model: type[ModelT]) -> list[ModelT]:
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        rows = _read_json_rows(path)
    elif suffix == ".csv":
        rows = _read_csv_rows(path, REQUIRED_FIELDS[model])
    else:
        raise ValueError(f"Unsupported catalog format '{suffix}' for {path.name}; use .json or .csv.")

    if not rows:
        logger.warning("Catalog file is empty: %s", path)
        return []

    records: list[ModelT] = []
    errors: list[tuple[int, str]] = []
    required = REQUIRED_FIELDS[model]

    for i, row in enumerate(rows):
        try:
            cleaned = _clean_row(row)
            missing = required - set(cleaned)
            if missing:
                raise ValueError(f"Required field(s) empty: {sorted(missing)}")
            records.append(model.model_validate(cleaned))
        except (ValueError, ValidationError) as exc:
            errors.append((i + 1, str(exc)))

    if errors:
        detail = "\n".join(f"  Record {n}: {msg}" for n, msg in errors[:_MAX_ERRORS_SHOWN])
        extra = len(errors) - _MAX_ERRORS_SHOWN
        suffix_msg = f"\n  ... and {extra} more" if extra > 0 else ""
        raise ValueError(
            f"{len(errors)} record(s) failed validation in {path.name}:\n{detail}{suffix_msg}"
        )

    logger.debug("Loaded %d %s records from %s", len(records), model.__name__, path.name)
    return records


def _read_json_rows(path: Path) -> list[Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path.name}: {exc}") from exc
    if not isinstance(data, list):
        raise ValueError(f"{path.name} must contain a JSON array of records.")
    return data


def _read_csv_rows(path: Path, required: frozenset[str]) -> list[dict[str, str]]:
    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {path}")
        missing = required - set(reader.fieldnames)
        if missing:
            raise ValueError(
                f"CSV missing required columns: {sorted(missing)}\n"
                f"Found columns: {sorted(reader.fieldnames)}"
            )
        return list(reader)


def _clean_row(row: Any) -> dict[str, Any]:
    """Drop empty values; strip whitespace from strings."""
    if not isinstance(row, dict):
        raise ValueError(f"Expected an object, got {type(row).__name__}.")
    cleaned: dict[str, Any] = {}
    for key, val in row.items():
        if key is None:
            continue
        if isinstance(val, str):
            val = val.strip()
        if val is None or val == "":
            continue
        cleaned[key.strip()] = val
    return cleaned
