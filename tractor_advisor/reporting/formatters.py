"""
ASCII terminal formatters for CLI commands.

All formatters accept result models and return plain multi-line strings
suitable for ``typer.echo()``. No third-party dependencies (no ``rich``,
no ``colorama``).
"""

from __future__ import annotations

from tractor_advisor.models.power import MinimumPowerResult, PowerLossResult
from tractor_advisor.models.recommendation import MinimumPowerMatch, RecommendationResult
from tractor_advisor.models.terrain import TerrainAnalysis


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


# ── Terrain ───────────────────────────────────────────────────────────────────


def format_terrain_analysis(analysis: TerrainAnalysis, terrain_label: str = "") -> str:
    """Format a terrain analysis as a labelled block."""
    c, m, r = analysis.classification, analysis.metrics, analysis.requirements
    lines: list[str] = []
    lines.append("")
    lines.append("=== Terrain Analysis ===")
    if terrain_label:
        lines.append(f"  Terrain:             {terrain_label}")
    lines.append(f"  Slope:               {m.slope_percentage:.1f}% ({m.slope_degrees:.1f} deg) -> {c.slope_class}")
    lines.append(f"  Soil:                {c.soil_type} ({c.soil_label}, difficulty {m.soil_difficulty:.0f})")
    lines.append(f"  Altitude:            {m.altitude_meters:.0f} m -> {c.altitude_band}")
    lines.append(f"  Temperature:         {m.temperature_celsius:.1f} C")
    lines.append(f"  Cone index (Cn):     {m.cone_index:.0f}")
    lines.append(f"  Rolling coefficient: {m.rolling_coefficient:.4f}")
    lines.append(f"  Combined difficulty: {m.combined_difficulty:.1f} / 100")
    lines.append("")
    lines.append("  Requirements")
    lines.append(f"    Soil factor:       {r.soil_factor:.2f}")
    lines.append(f"    Slope factor:      {r.slope_factor:.3f}")
    lines.append(f"    Altitude derate:   {r.altitude_derate_percent:.1f}%")
    lines.append(f"    Preferred gear:    {c.preferred_gear}")
    lines.append(f"    4WD required:      {_yes_no(r.requires_four_wheel_drive)}")
    lines.append(f"    Tracks required:   {_yes_no(r.requires_tracks)}")
    return "\n".join(lines)


# ── Power ─────────────────────────────────────────────────────────────────────


def format_power_loss(result: PowerLossResult, tractor_label: str = "") -> str:
    """Format a power-loss breakdown as a two-column table."""
    losses = result.losses
    lines: list[str] = []
    lines.append("")
    lines.append("=== Power Loss ===")
    if tractor_label:
        lines.append(f"  Tractor:        {tractor_label}")
    lines.append(f"  Engine power:   {result.engine_power_hp:>8.2f} HP")
    lines.append(f"  Total weight:   {result.total_weight_kg:>8.0f} kg   Speed: {result.speed_kmh:g} km/h")
    lines.append(f"  Slippage used:  {result.slippage_percent:>8.1f} %")
    lines.append(f"  Temperature:    {result.temperature_celsius:>8.1f} C")
    lines.append("")
    lines.append(f"    {'Loss':<20}  {'HP':>8}")
    lines.append("    " + "-" * 30)
    for label, value in (
        ("Slope", losses.slope),
        ("Altitude", losses.altitude),
        ("Rolling resistance", losses.rolling_resistance),
        ("Slippage", losses.slippage),
    ):
        lines.append(f"    {label:<20}  {value:>8.2f}")
    drivetrain_note = "" if losses.drivetrain_included else "  (not in total)"
    lines.append(f"    {'Temperature':<20}  {losses.temperature:>8.2f}{drivetrain_note}")
    lines.append(f"    {'Transmission':<20}  {losses.transmission:>8.2f}{drivetrain_note}")
    lines.append("    " + "-" * 30)
    lines.append(f"    {'Total':<20}  {losses.total:>8.2f}")
    lines.append("")
    lines.append(f"  Net power:      {result.net_power_hp:>8.2f} HP  ({result.efficiency_percent:.1f}% efficiency)")
    return "\n".join(lines)


def format_minimum_power(result: MinimumPowerResult) -> str:
    f = result.factors
    lines: list[str] = []
    lines.append("")
    lines.append("=== Minimum Required Power ===")
    lines.append(f"  Base requirement:  {f.base_power_hp:>8.2f} HP")
    lines.append(f"  Soil factor:       {f.soil_factor:>8.3f}  ({result.soil_type}, Cn {f.cone_index:g})")
    lines.append(f"  Slope factor:      {f.slope_factor:>8.3f}  ({result.slope_percentage:g}%)")
    lines.append(f"  Depth factor:      {f.depth_factor:>8.3f}  ({result.working_depth_m:g} m)")
    lines.append(f"  Safety margin:     {f.safety_margin:>8.0%}")
    lines.append(f"  Calculated:        {result.calculated_power_hp:>8.2f} HP")
    lines.append(f"  Minimum required:  {result.minimum_power_hp:>8.2f} HP")
    lines.append(f"  4WD required:      {_yes_no(result.requires_four_wheel_drive)}")
    return "\n".join(lines)


def format_minimum_power_match(match: MinimumPowerMatch) -> str:
    """Format the minimum-power requirement plus the suitability top list."""
    lines = [format_minimum_power(match.power_requirement)]
    lines.append("")
    lines.append(
        f"  Available tractors: {match.total_evaluated}  "
        f"(optimal {match.optimal_count}, overpowered {match.overpowered_count}, "
        f"insufficient {match.insufficient_count}, "
        f"excluded for traction {match.traction_excluded_count})"
    )
    if not match.recommendations:
        lines.append("")
        lines.append("  (no available tractor meets the requirement)")
        return "\n".join(lines)

    lines.append("")
    header = f"    {'Rank':>4}  {'Tractor':<28}  {'HP':>7}  {'Util%':>7}  {'Surplus':>8}  {'Band':<12}"
    lines.append(header)
    lines.append("    " + "-" * (len(header) - 4))
    for entry in match.recommendations:
        lines.append(
            f"    {entry.rank or '':>4}  {entry.tractor.display_name[:28]:<28}  "
            f"{entry.tractor.engine_power_hp:>7.1f}  {entry.utilization_percent:>7.2f}  "
            f"{entry.surplus_hp:>+8.2f}  {entry.classification.label:<12}"
        )
    return "\n".join(lines)


# ── Recommendations ───────────────────────────────────────────────────────────


def format_recommendations(result: RecommendationResult, terrain_label: str = "") -> str:
    """Format ranked recommendations as an ASCII table::

        Rank  Tractor                  HP  Score   Eff  Trac  Soil  Econ  Avail  Fit
        ---------------------------------------------------------------------------
           1  Valtra A104           100.0  78.20  30.0  22.0  16.0   4.2   10.0  GOOD
    """
    summary = result.summary
    lines: list[str] = []
    lines.append("")
    lines.append("=== Tractor Recommendations ===")
    if terrain_label:
        lines.append(f"  Terrain:      {terrain_label} ({result.terrain_analysis.slope_class})")
    lines.append(
        f"  Evaluated:    {summary.total_evaluated}  "
        f"compatible: {summary.compatible_count}  filtered out: {summary.filtered_out}"
    )

    if not result.success:
        lines.append("")
        lines.append(f"  [NO MATCH] {summary.reason}")
        return "\n".join(lines)

    lines.append("")
    header = (
        f"    {'Rank':>4}  {'Tractor':<24}  {'HP':>6}  {'Score':>6}  "
        f"{'Eff':>5}  {'Trac':>5}  {'Soil':>5}  {'Econ':>5}  {'Avail':>5}  {'Fit':<12}"
    )
    lines.append(header)
    lines.append("    " + "-" * (len(header) - 4))
    for entry in result.recommendations:
        b = entry.score.breakdown
        lines.append(
            f"    {entry.rank:>4}  {entry.tractor.display_name[:24]:<24}  "
            f"{entry.tractor.engine_power_hp:>6.1f}  {entry.score.total:>6.2f}  "
            f"{b.efficiency:>5.1f}  {b.traction:>5.1f}  {b.soil:>5.1f}  "
            f"{b.economic:>5.1f}  {b.availability:>5.1f}  {entry.classification.label:<12}"
        )

    top = result.recommendations[0]
    lines.append("")
    lines.append(f"  Best match: {top.tractor.display_name}. {top.explanation}")
    return "\n".join(lines)
