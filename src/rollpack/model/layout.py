"""Pack layout: grid counts and roll dimensions -> centered roll placements."""
from __future__ import annotations

from dataclasses import dataclass
import itertools as it
import logging

from rollpack.config import EPSILON
from rollpack.model.geometry_primitives import GridPosition, Placement, Vector
from rollpack.model.pack_config import GapMode, PackConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridSpacing:
    """Center-to-center distance of neighbouring rolls along each pack axis."""
    lane: float
    channel: float
    layer: float


def compute_spacing(config: PackConfig) -> GridSpacing:
    """
    Spacing in scene units.

    Rolls lie along the lane axis, so the lane spacing is the roll length plus
    the gap. Across the rolls they touch at their diameter. EPSILON keeps
    neighbouring surfaces from coinciding.
    """
    diameter = 2.0 * config.outer_radius
    side_gap = config.gap if config.gap_mode == GapMode.ALL else 0.0
    return GridSpacing(
        lane=config.roll_length + config.gap + EPSILON,
        channel=diameter + side_gap + EPSILON,
        layer=diameter + side_gap + EPSILON,
    )


def axis_offset(count: int, spacing: float) -> float:
    """Coordinate of index 0 so that `count` cells are centered on the origin."""
    return -(count - 1) * spacing / 2.0


def compute_layout(config: PackConfig) -> list[Placement]:
    """
    Resolve every grid cell of the pack to a translation.

    Order: lane (outermost) -> channel -> layer (innermost).
    Axes: lane -> X, layer -> Y, channel -> Z.

    Returns:
        lane_count * channel_count * layer_count placements.
    """
    spacing = compute_spacing(config)
    origin = Vector(
        axis_offset(config.lane_count, spacing.lane),
        axis_offset(config.layer_count, spacing.layer),
        axis_offset(config.channel_count, spacing.channel),
    )

    placements = []
    for lane, channel, layer in it.product(
        range(config.lane_count),
        range(config.channel_count),
        range(config.layer_count),
    ):
        step = Vector(lane * spacing.lane, layer * spacing.layer, channel * spacing.channel)
        placements.append(
            Placement(
                position=GridPosition(lane=lane, channel=channel, layer=layer),
                translation=origin + step,
            )
        )

    logger.debug(f"Computed {len(placements)} placements with spacing {spacing}.")
    return placements
