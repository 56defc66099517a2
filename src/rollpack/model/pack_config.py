"""
Pack Configuration (Data Model)
===============================
This module defines the parameters describing one pack of rolls.

Why is this file needed?
------------------------
1. Validation: The input surface hands over raw strings and numbers. They are
   turned into a fully populated, immutable PackConfig here, substituting a
   documented fallback for every missing or invalid field.
2. Units: Parameters are entered in millimeters; the derived properties
   expose them in scene units (see rollpack.config.MM_TO_UNITS).

Classes:
    GapMode: Which grid axes the gap parameter spreads.
    PackConfig: The immutable parameter record.
Functions:
    parse_pack_config: Raw mapping -> PackConfig, never fails.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, fields
from enum import StrEnum
import logging
import math
import numbers
import sys
from typing import Any, Callable, Mapping, Optional

from rollpack.config import (
    MM_TO_UNITS,
    CORE_CLAMP_FRACTION,
    CORE_INNER_MIN_FRACTION,
    DEFAULT_LANE_COUNT,
    DEFAULT_CHANNEL_COUNT,
    DEFAULT_LAYER_COUNT,
    DEFAULT_ROLL_OUTER_DIAMETER_MM,
    DEFAULT_CORE_OUTER_DIAMETER_MM,
    DEFAULT_ROLL_LENGTH_MM,
    DEFAULT_GAP_MM,
)

logger = logging.getLogger(__name__)


class GapMode(StrEnum):
    """Axes the gap is added to."""
    LANE = "lane"  # along the roll length only, rolls touch side by side
    ALL = "all"


class PackConfigError(ValueError):
    """Raised when a PackConfig is constructed directly with invalid values."""

    pass


@dataclass(frozen=True)
class PackConfig:
    """
    Grid counts along the three pack axes and roll dimensions in millimeters.

    Axes: lane = X (roll axis), layer = Y (up), channel = Z.
    """
    lane_count: int = DEFAULT_LANE_COUNT
    channel_count: int = DEFAULT_CHANNEL_COUNT
    layer_count: int = DEFAULT_LAYER_COUNT

    roll_outer_diameter_mm: float = DEFAULT_ROLL_OUTER_DIAMETER_MM
    core_outer_diameter_mm: float = DEFAULT_CORE_OUTER_DIAMETER_MM
    roll_length_mm: float = DEFAULT_ROLL_LENGTH_MM
    gap_mm: float = DEFAULT_GAP_MM

    gap_mode: GapMode = GapMode.LANE

    def __post_init__(self) -> None:
        errors = []
        for name in ("lane_count", "channel_count", "layer_count"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
                errors.append(f"{name}: expected integer > 0, got {value!r}")
        for name in ("roll_outer_diameter_mm", "core_outer_diameter_mm"):
            value = getattr(self, name)
            if not _is_finite_number(value) or not _is_usable_diameter(value):
                errors.append(f"{name}: expected number > 0, got {value!r}")
        for name in ("roll_length_mm", "gap_mm"):
            value = getattr(self, name)
            if not _is_finite_number(value) or value < 0:
                errors.append(f"{name}: expected number >= 0, got {value!r}")
        if not isinstance(self.gap_mode, GapMode):
            errors.append(f"gap_mode: expected GapMode, got {self.gap_mode!r}")
        if errors:
            raise PackConfigError("\n".join(errors))

    # --- Derived values (scene units) ---

    @property
    def outer_radius(self) -> float:
        return self.roll_outer_diameter_mm / 2 * MM_TO_UNITS

    @property
    def core_outer_radius(self) -> float:
        return self.core_outer_diameter_mm / 2 * MM_TO_UNITS

    @property
    def roll_length(self) -> float:
        return self.roll_length_mm * MM_TO_UNITS

    @property
    def gap(self) -> float:
        return self.gap_mm * MM_TO_UNITS

    @property
    def total_roll_count(self) -> int:
        return self.lane_count * self.channel_count * self.layer_count

    @property
    def dimensions(self) -> tuple[float, float, float]:
        """The (outer radius, core radius, length) triple a roll geometry depends on."""
        return self.outer_radius, self.core_outer_radius, self.roll_length

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


# ------------------------------------------------------------------------------
# Parsing raw input
# ------------------------------------------------------------------------------

# Field name -> keys accepted from the input surface, in lookup order.
# camelCase keys are the external contract, the rest are older form names.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "lane_count": ("lane_count", "laneCount", "rollsPerLane", "rollsPerRow"),
    "channel_count": ("channel_count", "channelCount", "rollsPerChannel", "rowsPerLayer"),
    "layer_count": ("layer_count", "layerCount", "rollsPerLayer", "layers"),
    "roll_outer_diameter_mm": ("roll_outer_diameter_mm", "rollOuterDiameterMm", "rollDiameterMm"),
    "core_outer_diameter_mm": ("core_outer_diameter_mm", "coreOuterDiameterMm", "coreDiameterMm"),
    "roll_length_mm": ("roll_length_mm", "rollLengthMm", "rollHeightMm"),
    "gap_mm": ("gap_mm", "gapMm", "rollGapMm"),
    "gap_mode": ("gap_mode", "gapMode"),
}


def parse_pack_config(raw: Optional[Mapping[str, Any]] = None) -> PackConfig:
    """
    Build a PackConfig from raw input values.

    Every field falls back to its default when the raw value is missing,
    non-numeric, non-finite or out of range. Counts must be integers > 0
    (decimals are truncated), diameters > 0, length and gap >= 0. Diameters
    so small that the derived radii underflow to zero count as invalid, as do
    integers beyond the float range.

    Args:
        raw: Mapping of field names (or their aliases, see FIELD_ALIASES) to
             numbers or strings. None means "use all defaults".

    Returns:
        A valid PackConfig. This function never raises for bad values.
    """
    raw = raw or {}
    defaults = {f.name: f.default for f in fields(PackConfig)}

    parsers: dict[str, Callable[[Any], Any]] = {
        "lane_count": _parse_count,
        "channel_count": _parse_count,
        "layer_count": _parse_count,
        "roll_outer_diameter_mm": _parse_diameter,
        "core_outer_diameter_mm": _parse_diameter,
        "roll_length_mm": _parse_non_negative,
        "gap_mm": _parse_non_negative,
        "gap_mode": _parse_gap_mode,
    }

    values: dict[str, Any] = {}
    for name, parser in parsers.items():
        key, raw_value = _lookup(raw, FIELD_ALIASES[name])
        parsed = parser(raw_value) if key is not None else None
        if parsed is None:
            if key is not None:
                logger.debug(f"Invalid value {raw_value!r} for '{key}', using default {defaults[name]!r}.")
            parsed = defaults[name]
        values[name] = parsed

    return PackConfig(**values)


def _lookup(raw: Mapping[str, Any], keys: tuple[str, ...]) -> tuple[Optional[str], Any]:
    for key in keys:
        if key in raw:
            return key, raw[key]
    return None, None


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int beyond the float range
        return False


def _is_usable_diameter(diameter_mm: float) -> bool:
    """
    True if the smallest radius derived from the diameter (a clamped core's
    bore) is still a normal positive float in scene units.
    """
    radius = diameter_mm / 2 * MM_TO_UNITS
    return radius * CORE_CLAMP_FRACTION * CORE_INNER_MIN_FRACTION >= sys.float_info.min


def _to_float(value: Any) -> Optional[float]:
    """Raw value -> finite float, or None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not _is_finite_number(value):
        return None
    return float(value)


def _parse_count(value: Any) -> Optional[int]:
    number = _to_float(value)
    if number is None:
        return None
    count = math.trunc(number)
    return count if count > 0 else None


def _parse_diameter(value: Any) -> Optional[float]:
    number = _to_float(value)
    return number if number is not None and _is_usable_diameter(number) else None


def _parse_non_negative(value: Any) -> Optional[float]:
    number = _to_float(value)
    return number if number is not None and number >= 0 else None


def _parse_gap_mode(value: Any) -> Optional[GapMode]:
    if isinstance(value, GapMode):
        return value
    if isinstance(value, str):
        try:
            return GapMode(value.strip().lower())
        except ValueError:
            return None
    return None
