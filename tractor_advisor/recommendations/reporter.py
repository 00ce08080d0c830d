"""
Recommendation report writer: CSV and JSON output for ranked tractor
recommendations.

Pure file output. The functions consume an in-memory ``RecommendationResult``
and write one machine-readable and one spreadsheet-friendly file.

Output files
------------
  data/outputs/recommendations/
    recommendations_{terrain}_{date}.json  -- full result, structured JSON
    recommendations_{terrain}_{date}.csv   -- one row per ranked tractor
"""

from __future__ import annotations

import csv
import json
import logging
import re
from datetime import date
from pathlib import Path

from tractor_advisor.models.recommendation import RecommendationResult

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "v1"

CSV_FIELDNAMES = [
    "rank", "tractor_id", "tractor", "traction_type", "engine_power_hp",
    "required_power_hp", "surplus_hp", "utilization_pct",
    "score_total", "efficiency", "traction", "soil", "economic", "availability",
    "classification", "explanation",
]


def _slug(label: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", label.lower()).strip("-")
    return slug or "terrain"


def write_recommendation_json(
    result: RecommendationResult,
    output_dir: Path,
    terrain_label: str,
    run_date: date | None = None,
) -> Path:
    """Write a recommendation result to a structured JSON file.

    Args:
        result:        Output of ``generate_recommendation``.
        output_dir:    Target directory (created if missing).
        terrain_label: Terrain name, slugified into the filename.
        run_date:      Date label. Defaults to today.

    Returns:
        Path to the written JSON file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / f"recommendations_{_slug(terrain_label)}_{run_date}.json"

    payload: dict = {
        "schema_version": SCHEMA_VERSION,
        "terrain":        terrain_label,
        "generated_at":   run_date.isoformat(),
        **result.to_dict(),
    }

    json_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Recommendation JSON written: %s", json_path)
    return json_path


def write_recommendation_csv(
    result: RecommendationResult,
    output_dir: Path,
    terrain_label: str,
    run_date: date | None = None,
) -> Path:
    """Write ranked recommendations to a CSV file (header only when empty)."""
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = output_dir / f"recommendations_{_slug(terrain_label)}_{run_date}.csv"

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDNAMES)
        writer.writeheader()
        for entry in result.recommendations:
            breakdown = entry.score.breakdown
            writer.writerow(
                {
                    "rank":              entry.rank,
                    "tractor_id":        entry.tractor.tractor_id,
                    "tractor":           entry.tractor.display_name,
                    "traction_type":     entry.tractor.traction_type.value,
                    "engine_power_hp":   entry.tractor.engine_power_hp,
                    "required_power_hp": entry.compatibility.required_power,
                    "surplus_hp":        entry.compatibility.surplus_hp,
                    "utilization_pct":   entry.compatibility.utilization_percent,
                    "score_total":       entry.score.total,
                    "efficiency":        breakdown.efficiency,
                    "traction":          breakdown.traction,
                    "soil":              breakdown.soil,
                    "economic":          breakdown.economic,
                    "availability":      breakdown.availability,
                    "classification":    entry.classification.label,
                    "explanation":       entry.explanation,
                }
            )

    logger.info("Recommendation CSV written: %s (%d rows)", csv_path, len(result.recommendations))
    return csv_path
