"""
Machinery taxonomy: traction types and availability states.

Catalog data spells traction types many ways ("4x4", "4WD", "Doble
tracción", "oruga", ...). ``normalize_traction_type`` collapses them into
one ``TractionType`` at the ingestion boundary so that filters and scoring
compare enum members, never strings.

This module has NO imports from any other ``tractor_advisor`` package.
"""

from enum import StrEnum


class TractionType(StrEnum):
    """Canonical drive-train category of a tractor."""

    FOUR_WHEEL_DRIVE = "4wd"
    """Front and rear axles driven (4x4 / 4WD / MFWD)."""

    TWO_WHEEL_DRIVE = "2wd"
    """Rear axle driven only (4x2 / 2WD)."""

    TRACKED = "tracked"
    """Rubber or steel tracks."""


class TractorStatus(StrEnum):
    """Fleet availability state of a tractor."""

    AVAILABLE = "available"
    IN_USE = "in_use"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"
    OTHER = "other"


# Traction types that satisfy the steep-slope traction requirement.
HIGH_TRACTION_TYPES: frozenset[TractionType] = frozenset({
    TractionType.FOUR_WHEEL_DRIVE,
    TractionType.TRACKED,
})

TRACTION_SYNONYMS: dict[str, TractionType] = {
    "4wd":               TractionType.FOUR_WHEEL_DRIVE,
    "4x4":               TractionType.FOUR_WHEEL_DRIVE,
    "mfwd":              TractionType.FOUR_WHEEL_DRIVE,
    "awd":               TractionType.FOUR_WHEEL_DRIVE,
    "four-wheel-drive":  TractionType.FOUR_WHEEL_DRIVE,
    "four_wheel_drive":  TractionType.FOUR_WHEEL_DRIVE,
    "doble traccion":    TractionType.FOUR_WHEEL_DRIVE,
    "doble tracción":    TractionType.FOUR_WHEEL_DRIVE,
    "2wd":               TractionType.TWO_WHEEL_DRIVE,
    "4x2":               TractionType.TWO_WHEEL_DRIVE,
    "two-wheel-drive":   TractionType.TWO_WHEEL_DRIVE,
    "two_wheel_drive":   TractionType.TWO_WHEEL_DRIVE,
    "simple":            TractionType.TWO_WHEEL_DRIVE,
    "track":             TractionType.TRACKED,
    "tracks":            TractionType.TRACKED,
    "tracked":           TractionType.TRACKED,
    "crawler":           TractionType.TRACKED,
    "oruga":             TractionType.TRACKED,
    "orugas":            TractionType.TRACKED,
}

STATUS_SYNONYMS: dict[str, TractorStatus] = {
    "available":    TractorStatus.AVAILABLE,
    "active":       TractorStatus.AVAILABLE,
    "disponible":   TractorStatus.AVAILABLE,
    "in_use":       TractorStatus.IN_USE,
    "in use":       TractorStatus.IN_USE,
    "en_uso":       TractorStatus.IN_USE,
    "maintenance":  TractorStatus.MAINTENANCE,
    "mantenimiento": TractorStatus.MAINTENANCE,
    "inactive":     TractorStatus.INACTIVE,
    "unavailable":  TractorStatus.INACTIVE,
    "inactivo":     TractorStatus.INACTIVE,
}


def normalize_traction_type(value: str | TractionType | None) -> TractionType:
    """Map a raw traction label to a ``TractionType``.

    Unknown or missing labels map to ``TWO_WHEEL_DRIVE``: a tractor whose
    drive train cannot be confirmed never passes the steep-slope filter.
    """
    if isinstance(value, TractionType):
        return value
    if not value:
        return TractionType.TWO_WHEEL_DRIVE
    return TRACTION_SYNONYMS.get(str(value).strip().lower(), TractionType.TWO_WHEEL_DRIVE)


def normalize_status(value: str | TractorStatus | None) -> TractorStatus:
    """Map a raw status label to a ``TractorStatus``.

    Missing status means ``AVAILABLE``; unrecognized labels map to ``OTHER``.
    """
    if isinstance(value, TractorStatus):
        return value
    if not value:
        return TractorStatus.AVAILABLE
    return STATUS_SYNONYMS.get(str(value).strip().lower(), TractorStatus.OTHER)
