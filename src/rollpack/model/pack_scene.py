"""
Pack Scene (Assembler)
======================
Combines the layout and the roll geometry into the scene handed to a renderer.

Why is this file needed?
------------------------
1. Sharing: One RollGeometry is built per set of roll dimensions and
   referenced by every placement of the pack.
2. Lifetime: Each regeneration produces a new PackScene that fully replaces
   the previous one. PackAssembler owns the current scene and releases the
   old one explicitly, so repeated regenerations do not accumulate meshes.

Classes:
    RollInstance: One roll (shared geometry + placement).
    PackScene: The immutable result of one regeneration.
    PackAssembler: Holds the current scene, replace-and-release.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Callable, Iterator, Optional

from rollpack.model.geometry_primitives import Placement
from rollpack.model.layout import compute_layout
from rollpack.model.pack_config import PackConfig
from rollpack.model.roll_geometry import RollGeometry, build_roll_geometry

logger = logging.getLogger(__name__)

SceneListener = Callable[["PackScene"], None]


@dataclass(frozen=True)
class RollInstance:
    """A placed roll. The geometry is shared, not copied."""
    geometry: RollGeometry
    placement: Placement


@dataclass(frozen=True)
class PackScene:
    config: PackConfig
    geometry: RollGeometry
    instances: tuple[RollInstance, ...]
    total_roll_count: int

    def __iter__(self) -> Iterator[RollInstance]:
        return iter(self.instances)

    def __len__(self) -> int:
        return len(self.instances)

    @property
    def placements(self) -> list[Placement]:
        return [instance.placement for instance in self.instances]

    def bounds(self) -> tuple[float, float, float, float, float, float]:
        """(x_min, x_max, y_min, y_max, z_min, z_max) of all rolls."""
        g = self.geometry
        half_length = g.length / 2.0
        xs = [p.translation.x for p in self.placements]
        ys = [p.translation.y for p in self.placements]
        zs = [p.translation.z for p in self.placements]
        return (
            min(xs) - half_length, max(xs) + half_length,
            min(ys) - g.outer_radius, max(ys) + g.outer_radius,
            min(zs) - g.outer_radius, max(zs) + g.outer_radius,
        )


def _same_dimensions(geometry: RollGeometry, config: PackConfig) -> bool:
    return all(math.isclose(a, b) for a, b in zip(geometry.shape_key, config.dimensions))


def assemble_pack(config: PackConfig, geometry: Optional[RollGeometry] = None) -> PackScene:
    """
    Build the scene for a configuration.

    Args:
        config: Pack parameters.
        geometry: A previously built geometry to reuse if it was built for the
                  same roll dimensions and has not been released.

    Returns:
        A new PackScene with one instance per grid cell.
    """
    if geometry is None or geometry.released or not _same_dimensions(geometry, config):
        geometry = build_roll_geometry(*config.dimensions)

    placements = compute_layout(config)
    instances = tuple(RollInstance(geometry=geometry, placement=p) for p in placements)
    total = config.lane_count * config.channel_count * config.layer_count

    # A mismatch here is a bug in the layout, not a runtime condition
    assert len(instances) == total, f"Layout produced {len(instances)} placements, expected {total}."

    return PackScene(config=config, geometry=geometry, instances=instances, total_roll_count=total)


class PackAssembler:
    """
    Owns the current PackScene.

    Release listeners are called with the outgoing scene before the new one is
    installed; install listeners receive the new scene.
    """

    def __init__(self) -> None:
        self._scene: Optional[PackScene] = None
        self._release_listeners: list[SceneListener] = []
        self._install_listeners: list[SceneListener] = []

    @property
    def scene(self) -> Optional[PackScene]:
        return self._scene

    def on_release(self, listener: SceneListener) -> None:
        self._release_listeners.append(listener)

    def on_install(self, listener: SceneListener) -> None:
        self._install_listeners.append(listener)

    def regenerate(self, config: PackConfig) -> PackScene:
        """Replace the current scene with one built from `config`."""
        previous = self._scene
        reuse = previous.geometry if previous is not None else None
        scene = assemble_pack(config, geometry=reuse)

        if previous is not None:
            self._release(previous, keep_geometry=scene.geometry is previous.geometry)

        self._scene = scene
        logger.info(f"Installed pack scene with {scene.total_roll_count} rolls.")
        for listener in self._install_listeners:
            listener(scene)
        return scene

    def clear(self) -> None:
        """Release the current scene, if any."""
        if self._scene is None:
            return
        self._release(self._scene, keep_geometry=False)
        self._scene = None

    def _release(self, scene: PackScene, keep_geometry: bool) -> None:
        for listener in self._release_listeners:
            listener(scene)
        if not keep_geometry:
            scene.geometry.release()
