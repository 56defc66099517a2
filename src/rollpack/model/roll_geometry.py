"""
Roll Geometry Builder
=====================
Procedural construction of one paper roll as a set of surfaces of revolution.

A roll is centered on the origin with its axis along X. It consists of:
    - the paper side (outer shell) with a short bevel band at each end,
    - the two paper end rings (from the core to the outer radius),
    - the cardboard core: outer shell, inner shell (the bore, facing the axis)
      and two end rings, slightly shorter than the roll so it sits recessed.

The core is a genuinely hollow tube, so the bore looks right from any angle,
including straight down the roll axis.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
import logging
import math
from typing import Iterator, TYPE_CHECKING

import numpy as np
import pyvista as pv

from rollpack.config import (
    BEVEL_DEPTH,
    BEVEL_SEGMENTS,
    CORE_CLAMP_FRACTION,
    CORE_INNER_MIN_FRACTION,
    CORE_LENGTH_FRACTION,
    CORE_SEGMENTS,
    CORE_WALL_THICKNESS,
    END_SEGMENTS,
    MAX_BEVEL_FRACTION,
    SIDE_SEGMENTS,
)
from rollpack.model.geometry_utils import quads_to_polydata, revolve_profile

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------------------
class PatchRole(StrEnum):
    """What a patch represents; the renderer picks a material per role."""
    PAPER_SIDE = "paper side"
    PAPER_END = "paper end"
    CORE_SIDE = "core side"
    CORE_BORE = "core bore"
    CORE_END = "core end"


class PatchKind(StrEnum):
    SHELL = "shell"  # constant radius, spans an axial range
    ANNULUS = "annulus"  # constant x, spans a radial range


# ------------------------------------------------------------------------------
# Data Structures
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class SurfacePatch:
    """
    One surface of revolution about the X axis.

    The meridian profile is a sequence of (x, r) points. The walking direction
    of the profile decides the normal orientation (see revolve_profile).
    """
    name: str
    role: PatchRole
    kind: PatchKind
    profile: tuple[tuple[float, float], ...]
    n_segments: int

    @property
    def x_min(self) -> float:
        return min(x for x, _ in self.profile)

    @property
    def x_max(self) -> float:
        return max(x for x, _ in self.profile)

    @property
    def length(self) -> float:
        """Axial extent (zero for a flat ring)."""
        return self.x_max - self.x_min

    @property
    def inner_radius(self) -> float:
        return min(r for _, r in self.profile)

    @property
    def outer_radius(self) -> float:
        return max(r for _, r in self.profile)

    @property
    def faces_axis(self) -> bool:
        """True for a shell whose normals point towards the roll axis."""
        (x0, _), (x1, _) = self.profile[0], self.profile[-1]
        return self.kind == PatchKind.SHELL and x1 < x0

    @property
    def facing(self) -> int:
        """+1 / -1 for an annulus facing +X / -X, 0 for a shell."""
        if self.kind != PatchKind.ANNULUS:
            return 0
        (_, r0), (_, r1) = self.profile[0], self.profile[-1]
        return 1 if r1 < r0 else -1

    def arrays(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.int_]]:
        """(points, quads) of the discretized surface."""
        return revolve_profile(self.profile, self.n_segments)

    def to_polydata(self) -> pv.PolyData:
        points, quads = self.arrays()
        return quads_to_polydata(points, quads)


@dataclass
class RollGeometry:
    """
    All surface patches of one roll plus the radii they were derived from.

    One instance is shared by every roll of a pack. Meshes are created on demand
    and cached until `release()` is called.
    """
    outer_radius: float
    core_outer_radius: float
    core_inner_radius: float
    length: float
    bevel_depth: float
    core_length: float
    patches: dict[str, SurfacePatch] = field(default_factory=dict)
    # Requested (outer radius, core radius, length), before clamping
    shape_key: tuple[float, float, float] = (0.0, 0.0, 0.0)

    _meshes: dict[str, pv.PolyData] = field(default_factory=dict, init=False, repr=False, compare=False)
    _released: bool = field(default=False, init=False, repr=False, compare=False)

    def __getitem__(self, name: str) -> SurfacePatch:
        return self.patches[name]

    def __iter__(self) -> Iterator[SurfacePatch]:
        return iter(self.patches.values())

    def __len__(self) -> int:
        return len(self.patches)

    @property
    def released(self) -> bool:
        return self._released

    def mesh(self, name: str) -> pv.PolyData:
        """PolyData of one patch (cached)."""
        if self._released:
            raise RuntimeError("Roll geometry has been released.")
        if name not in self._meshes:
            self._meshes[name] = self.patches[name].to_polydata()
        return self._meshes[name]

    def merged(self) -> pv.PolyData:
        """All patches as one PolyData (not cached)."""
        return pv.merge([self.mesh(name) for name in self.patches])

    def release(self) -> None:
        """Drop the cached meshes. The geometry must not be rendered afterwards."""
        if self._released:
            return
        logger.debug(f"Releasing roll geometry {self.shape_key} ({len(self._meshes)} cached meshes).")
        self._meshes.clear()
        self._released = True


# ------------------------------------------------------------------------------
# Builder
# ------------------------------------------------------------------------------
def resolve_core_radii(outer_radius: float, core_outer_radius: float) -> tuple[float, float]:
    """
    Clamp the core into the roll and derive the bore radius.

    Returns:
        (core outer radius, core inner radius) with
        0 < core inner < core outer < outer radius.
    """
    if not (0.0 < core_outer_radius < outer_radius):
        clamped = CORE_CLAMP_FRACTION * outer_radius
        logger.warning(
            f"Core radius {core_outer_radius:g} does not fit into roll radius "
            f"{outer_radius:g}, clamping to {clamped:g}."
        )
        core_outer_radius = clamped

    core_inner_radius = max(
        core_outer_radius - CORE_WALL_THICKNESS,
        core_outer_radius * CORE_INNER_MIN_FRACTION,
    )
    return core_outer_radius, core_inner_radius


def build_roll_geometry(outer_radius: float, core_outer_radius: float, length: float) -> RollGeometry:
    """
    Build the patches of one roll.

    Args:
        outer_radius: Paper radius in scene units (> 0).
        core_outer_radius: Cardboard core radius. Clamped to 0.99 * outer_radius
            when it does not fit, never an error.
        length: Roll length along X (>= 0).

    Raises:
        ValueError: If outer_radius is not a positive finite number or length is
            negative. The configuration model never produces such values.
    """
    if not (math.isfinite(outer_radius) and outer_radius > 0.0):
        raise ValueError(f"Roll radius must be positive, got {outer_radius!r}.")
    if not (math.isfinite(length) and length >= 0.0):
        raise ValueError(f"Roll length must be non-negative, got {length!r}.")

    requested = (outer_radius, core_outer_radius, length)
    core_outer, core_inner = resolve_core_radii(outer_radius, core_outer_radius)

    half = length / 2.0
    bevel = min(BEVEL_DEPTH, length * MAX_BEVEL_FRACTION)
    core_length = length * CORE_LENGTH_FRACTION
    core_half = core_length / 2.0

    patches = [
        # Paper
        _shell("outer_shell", PatchRole.PAPER_SIDE, outer_radius, -half + bevel, half - bevel, SIDE_SEGMENTS),
        _shell("bevel_front", PatchRole.PAPER_SIDE, outer_radius, half - bevel, half, BEVEL_SEGMENTS),
        _shell("bevel_back", PatchRole.PAPER_SIDE, outer_radius, -half, -half + bevel, BEVEL_SEGMENTS),
        _annulus("end_front", PatchRole.PAPER_END, half, core_outer, outer_radius, END_SEGMENTS, facing=1),
        _annulus("end_back", PatchRole.PAPER_END, -half, core_outer, outer_radius, END_SEGMENTS, facing=-1),
        # Cardboard core
        _shell("core_outer", PatchRole.CORE_SIDE, core_outer, -core_half, core_half, CORE_SEGMENTS),
        _shell("core_inner", PatchRole.CORE_BORE, core_inner, -core_half, core_half, CORE_SEGMENTS, faces_axis=True),
        _annulus("core_end_front", PatchRole.CORE_END, core_half, core_inner, core_outer, CORE_SEGMENTS, facing=1),
        _annulus("core_end_back", PatchRole.CORE_END, -core_half, core_inner, core_outer, CORE_SEGMENTS, facing=-1),
    ]

    geometry = RollGeometry(
        outer_radius=outer_radius,
        core_outer_radius=core_outer,
        core_inner_radius=core_inner,
        length=length,
        bevel_depth=bevel,
        core_length=core_length,
        patches={patch.name: patch for patch in patches},
        shape_key=requested,
    )
    logger.debug(
        f"Built roll geometry: R={outer_radius:g}, core={core_outer:g}/{core_inner:g}, L={length:g}."
    )
    return geometry


def _shell(
    name: str,
    role: PatchRole,
    radius: float,
    x_start: float,
    x_end: float,
    n_segments: int,
    faces_axis: bool = False
) -> SurfacePatch:
    """Open cylinder of constant radius between x_start < x_end."""
    profile = ((x_start, radius), (x_end, radius))
    if faces_axis:
        profile = profile[::-1]
    return SurfacePatch(name=name, role=role, kind=PatchKind.SHELL, profile=profile, n_segments=n_segments)


def _annulus(
    name: str,
    role: PatchRole,
    x: float,
    inner_radius: float,
    outer_radius: float,
    n_segments: int,
    facing: int
) -> SurfacePatch:
    """Flat ring at x, facing +X (facing=1) or -X (facing=-1)."""
    profile = ((x, outer_radius), (x, inner_radius))
    if facing < 0:
        profile = profile[::-1]
    return SurfacePatch(name=name, role=role, kind=PatchKind.ANNULUS, profile=profile, n_segments=n_segments)
