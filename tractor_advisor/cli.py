"""
Tractor Advisor CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load the catalog and resolve the requested records.
  4. Call the calculation core with ``config.engine``.
  5. Report the result to stdout (ASCII table, or JSON with ``--json``).

Install and run::

    pip install -e .
    tractor-advisor --help
    tractor-advisor validate-config
    tractor-advisor analyze-terrain --terrain-id 2
    tractor-advisor power-loss --tractor-id 1 --terrain-id 2 --speed 7 --drivetrain
    tractor-advisor minimum-power --implement-id 1 --terrain-id 2
    tractor-advisor recommend --terrain-id 2 --implement-id 1 --limit 3
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="tractor-advisor",
    help="Tractor Advisor: terrain-aware tractor selection and power calculations.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from tractor_advisor.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from tractor_advisor.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_catalog_or_exit(config, catalog_dir: Optional[str]):
    """Load the catalog, honouring a ``--catalog-dir`` override."""
    from tractor_advisor.ingestion.catalog import load_catalog

    data = config.data
    if catalog_dir:
        data = data.model_copy(update={"catalog_dir": catalog_dir})
    try:
        return load_catalog(data)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _require(record, kind: str, record_id: int):
    if record is None:
        typer.echo(f"[ERROR] {kind} {record_id} not found in catalog.", err=True)
        raise typer.Exit(code=1)
    return record


def _echo_json(payload: dict) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)
    weights = config.engine.scoring.weights

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Catalog dir:      {config.data.catalog_dir}")
    typer.echo(f"  Output dir:       {config.data.output_dir}")
    typer.echo(f"  Steep slope from: {config.engine.terrain.steep_min_slope:g}%")
    typer.echo(
        f"  Score weights:    efficiency {weights.efficiency:g}, traction {weights.traction:g}, "
        f"soil {weights.soil:g}, economic {weights.economic:g}, "
        f"availability {weights.availability:g}"
    )
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(mode="json"), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("analyze-terrain")
def analyze_terrain_cmd(
    terrain_id: int = typer.Option(..., "--terrain-id", help="Terrain ID from the catalog."),
    catalog_dir: Optional[str] = typer.Option(None, "--catalog-dir", help="Override catalog directory."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Classify a terrain and print its metrics and requirements."""
    from tractor_advisor.reporting.formatters import format_terrain_analysis
    from tractor_advisor.terrain.analyzer import analyze_terrain

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    catalog = _load_catalog_or_exit(config, catalog_dir)
    terrain = _require(catalog.get_terrain(terrain_id), "Terrain", terrain_id)

    analysis = analyze_terrain(terrain, config.engine)

    if as_json:
        _echo_json(analysis.model_dump(mode="json"))
    else:
        typer.echo(format_terrain_analysis(analysis, terrain.display_name))


@app.command("power-loss")
def power_loss_cmd(
    tractor_id: int = typer.Option(..., "--tractor-id", help="Tractor ID from the catalog."),
    terrain_id: int = typer.Option(..., "--terrain-id", help="Terrain ID from the catalog."),
    speed_kmh: Optional[float] = typer.Option(
        None, "--speed", help="Working speed in km/h (default from config)."
    ),
    load_kg: float = typer.Option(0.0, "--load-kg", help="Carried weight in kg (implement, ballast)."),
    slippage: Optional[float] = typer.Option(
        None, "--slippage", help="Slippage percent override (default by traction type)."
    ),
    drivetrain: bool = typer.Option(
        False, "--drivetrain", help="Include temperature and transmission losses in the total."
    ),
    catalog_dir: Optional[str] = typer.Option(None, "--catalog-dir", help="Override catalog directory."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Break down the power a tractor loses on a terrain."""
    from tractor_advisor.physics.power_loss import calculate_power_loss
    from tractor_advisor.reporting.formatters import format_power_loss

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    catalog = _load_catalog_or_exit(config, catalog_dir)
    tractor = _require(catalog.get_tractor(tractor_id), "Tractor", tractor_id)
    terrain = _require(catalog.get_terrain(terrain_id), "Terrain", terrain_id)

    speed = speed_kmh if speed_kmh is not None else config.recommendation.default_speed_kmh
    try:
        result = calculate_power_loss(
            tractor,
            terrain,
            speed_kmh=speed,
            carried_weight_kg=load_kg,
            slippage_percent=slippage,
            config=config.engine,
            include_drivetrain_losses=drivetrain,
        )
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        _echo_json(result.model_dump(mode="json"))
    else:
        typer.echo(format_power_loss(result, tractor.display_name))


@app.command("minimum-power")
def minimum_power_cmd(
    implement_id: int = typer.Option(..., "--implement-id", help="Implement ID from the catalog."),
    terrain_id: int = typer.Option(..., "--terrain-id", help="Terrain ID from the catalog."),
    depth_m: Optional[float] = typer.Option(
        None, "--depth-m", help="Working depth override in metres."
    ),
    catalog_dir: Optional[str] = typer.Option(None, "--catalog-dir", help="Override catalog directory."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Compute the minimum power for an implement and match available tractors."""
    from tractor_advisor.recommendations.matcher import match_minimum_power
    from tractor_advisor.reporting.formatters import format_minimum_power_match

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    catalog = _load_catalog_or_exit(config, catalog_dir)
    implement = _require(catalog.get_implement(implement_id), "Implement", implement_id)
    terrain = _require(catalog.get_terrain(terrain_id), "Terrain", terrain_id)

    try:
        match = match_minimum_power(
            implement, terrain, catalog.tractors, config=config.engine, working_depth_m=depth_m
        )
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        _echo_json(match.to_dict())
    else:
        typer.echo(format_minimum_power_match(match))


@app.command("recommend")
def recommend(
    terrain_id: int = typer.Option(..., "--terrain-id", help="Terrain ID from the catalog."),
    implement_id: Optional[int] = typer.Option(
        None, "--implement-id", help="Implement ID; its minimum power becomes the requirement."
    ),
    required_power: Optional[float] = typer.Option(
        None, "--required-power", help="Required power in HP (overrides the implement's)."
    ),
    limit: Optional[int] = typer.Option(
        None, "--limit", help="Maximum recommendations (default from config: no cap)."
    ),
    available_only: Optional[bool] = typer.Option(
        None, "--available-only/--include-unavailable",
        help="Exclude tractors that are not currently available.",
    ),
    write_report: bool = typer.Option(
        False, "--write-report", help="Also write JSON + CSV reports to the output dir."
    ),
    catalog_dir: Optional[str] = typer.Option(None, "--catalog-dir", help="Override catalog directory."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Rank the catalog's tractors for a terrain and power requirement.

    The requirement is ``--required-power`` when given, otherwise the minimum
    power of ``--implement-id`` on the terrain.
    """
    from tractor_advisor.physics.minimum_power import calculate_minimum_power
    from tractor_advisor.recommendations.ranker import generate_recommendation
    from tractor_advisor.recommendations.reporter import (
        write_recommendation_csv,
        write_recommendation_json,
    )
    from tractor_advisor.reporting.formatters import format_recommendations

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    catalog = _load_catalog_or_exit(config, catalog_dir)
    terrain = _require(catalog.get_terrain(terrain_id), "Terrain", terrain_id)

    implement = None
    if implement_id is not None:
        implement = _require(catalog.get_implement(implement_id), "Implement", implement_id)

    if required_power is None:
        if implement is None:
            typer.echo("[ERROR] Pass --implement-id or --required-power.", err=True)
            raise typer.Exit(code=1)
        required_power = calculate_minimum_power(implement, terrain, config.engine).minimum_power_hp

    options = {
        "limit": limit if limit is not None else config.recommendation.default_limit,
        "available_only": (
            available_only if available_only is not None
            else config.recommendation.available_only
        ),
    }

    try:
        result = generate_recommendation(
            terrain=terrain,
            implement=implement,
            tractors=catalog.tractors,
            required_power=required_power,
            options=options,
            config=config.engine,
        )
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        _echo_json(result.to_dict())
    else:
        typer.echo(format_recommendations(result, terrain.display_name))

    if write_report:
        out_dir = Path(config.data.output_dir) / "recommendations"
        json_path = write_recommendation_json(result, out_dir, terrain.display_name)
        csv_path = write_recommendation_csv(result, out_dir, terrain.display_name)
        typer.echo(f"[OK] Reports written: {json_path}, {csv_path}", err=as_json)


if __name__ == "__main__":
    app()
