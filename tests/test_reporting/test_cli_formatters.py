"""Tests for tractor_advisor.reporting.formatters."""

from __future__ import annotations

from tractor_advisor.models.machinery import Implement
from tractor_advisor.models.terrain import Terrain
from tractor_advisor.physics.minimum_power import calculate_minimum_power
from tractor_advisor.physics.power_loss import calculate_power_loss
from tractor_advisor.recommendations.matcher import match_minimum_power
from tractor_advisor.recommendations.ranker import generate_recommendation
from tractor_advisor.reporting.formatters import (
    format_minimum_power,
    format_minimum_power_match,
    format_power_loss,
    format_recommendations,
    format_terrain_analysis,
)
from tractor_advisor.terrain.analyzer import analyze_terrain


def test_terrain_analysis_block(steep_clay) -> None:
    text = format_terrain_analysis(analyze_terrain(steep_clay), "Steep clay")
    assert "=== Terrain Analysis ===" in text
    assert "Steep clay" in text
    assert "STEEP" in text
    assert "4WD required:      yes" in text
    assert "Tracks required:   yes" in text


def test_power_loss_table(make_tractor, flat_loam) -> None:
    result = calculate_power_loss(make_tractor(), flat_loam, speed_kmh=6)
    text = format_power_loss(result, "Test tractor")
    assert "Rolling resistance" in text
    assert f"{result.losses.total:>8.2f}" in text
    assert "Net power" in text
    assert "Transmission" in text
    assert "(not in total)" in text


def test_power_loss_table_with_drivetrain(make_tractor, flat_loam) -> None:
    result = calculate_power_loss(make_tractor(), flat_loam, include_drivetrain_losses=True)
    text = format_power_loss(result)
    assert "(not in total)" not in text
    assert "Temperature:        20.0 C" in text


def test_minimum_power_block(plow, steep_clay) -> None:
    text = format_minimum_power(calculate_minimum_power(plow, steep_clay))
    assert "Minimum required" in text
    assert "Cn 45" in text
    assert "(18%)" in text


def test_minimum_power_match_lists_tractors(make_tractor) -> None:
    match = match_minimum_power(
        Implement(power_requirement_hp=40), Terrain(soil_type="loam"),
        [make_tractor(name="Fifty", engine_power_hp=50)],
    )
    text = format_minimum_power_match(match)
    assert "Fifty" in text
    assert "OPTIMAL" in text


def test_minimum_power_match_empty(make_tractor) -> None:
    match = match_minimum_power(
        Implement(power_requirement_hp=40), Terrain(soil_type="loam"),
        [make_tractor(engine_power_hp=10)],
    )
    assert "no available tractor" in format_minimum_power_match(match)


def test_recommendations_table(make_tractor, flat_loam) -> None:
    result = generate_recommendation(
        terrain=flat_loam,
        tractors=[make_tractor(name="Alpha"), make_tractor(tractor_id=2, name="Bravo", engine_power_hp=300)],
        required_power=90,
    )
    text = format_recommendations(result, "Flat loam")
    assert text.index("Alpha") < text.index("Bravo")
    assert "Best match: Alpha." in text


def test_recommendations_no_match(make_tractor, flat_loam) -> None:
    result = generate_recommendation(
        terrain=flat_loam, tractors=[make_tractor(engine_power_hp=10)], required_power=90
    )
    text = format_recommendations(result)
    assert "[NO MATCH]" in text
    assert result.summary.reason in text
