"""
3D Pack Renderer (PyVista Wrapper)
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Optional, TYPE_CHECKING

import pyvista as pv

from rollpack.config import EXPORT_FILENAME_TEMPLATE
from rollpack.model.pack_config import PackConfig
from rollpack.model.pack_scene import PackScene
from rollpack.model.roll_geometry import PatchRole
from rollpack.view.vtk_utils import VtkUtils

if TYPE_CHECKING:
    from rollpack.model.pack_scene import PackAssembler

logger = logging.getLogger(__name__)

# --- DATA CLASSES FOR VISUALIZATION ---

@dataclass(frozen=True)
class PatchStyle:
    """Surface appearance of one patch role."""
    color: str
    roughness: float
    metallic: float = 0.0


@dataclass(frozen=True)
class SceneLight:
    position: tuple[float, float, float]
    intensity: float


PATCH_STYLES: dict[PatchRole, PatchStyle] = {
    PatchRole.PAPER_SIDE: PatchStyle(color="#f7f7ff", roughness=0.55),
    PatchRole.PAPER_END: PatchStyle(color="#ffffff", roughness=0.65),
    PatchRole.CORE_SIDE: PatchStyle(color="#b8925d", roughness=0.75),
    PatchRole.CORE_BORE: PatchStyle(color="#7a7a7a", roughness=0.85),
    PatchRole.CORE_END: PatchStyle(color="#b8925d", roughness=0.75),
}

# Key, fill and rim light
SCENE_LIGHTS: tuple[SceneLight, ...] = (
    SceneLight(position=(90.0, 120.0, 70.0), intensity=2.1),
    SceneLight(position=(-120.0, 60.0, -50.0), intensity=1.0),
    SceneLight(position=(0.0, 160.0, -120.0), intensity=0.9),
)
AMBIENT = 0.08

BACKGROUND_COLOR = "#e8e4da"
DEFAULT_CAMERA_POSITION = [(115.0, 46.0, -81.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0)]
DEFAULT_WINDOW_SIZE = (1600, 1000)


def export_filename(config: PackConfig) -> str:
    """Default PNG name: roll_pack_<channels>_<lanes>_<layers>.png"""
    return EXPORT_FILENAME_TEMPLATE.format(
        channels=config.channel_count,
        lanes=config.lane_count,
        layers=config.layer_count,
    )


class PackPlotter:
    """
    Renders one PackScene at a time.

    `show_scene` removes the actors of the previous scene before adding the new
    ones. Connect it to a PackAssembler with `attach` to follow regenerations.
    """

    def __init__(
        self,
        off_screen: bool = True,
        window_size: tuple[int, int] = DEFAULT_WINDOW_SIZE,
        plotter: Optional[pv.Plotter] = None
    ) -> None:
        self.plotter: pv.Plotter = plotter or pv.Plotter(
            off_screen=off_screen,
            window_size=list(window_size),
            lighting="none",
        )
        self._vtk_utils = VtkUtils()

        # --- Actors state ---
        self._scene_actors: list[pv.Actor] = []
        self._scene: Optional[PackScene] = None
        self._closed: bool = False

        self._init_plotter()

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def scene(self) -> Optional[PackScene]:
        return self._scene

    def attach(self, assembler: PackAssembler) -> None:
        """Follow the scenes installed by an assembler."""
        assembler.on_release(lambda _scene: self.clear_scene())
        assembler.on_install(self.show_scene)

    def show_scene(self, scene: PackScene, reset_camera: bool = True) -> None:
        """Replace the displayed pack with `scene`."""
        logger.info(f"Rendering pack of {scene.total_roll_count} rolls.")
        self.clear_scene()

        for role, mesh in self._vtk_utils.role_meshes(scene).items():
            style = PATCH_STYLES[role]
            actor = self.plotter.add_mesh(
                mesh,
                color=style.color,
                pbr=True,
                roughness=style.roughness,
                metallic=style.metallic,
                ambient=AMBIENT,
                smooth_shading=True,
                pickable=False,
                show_scalar_bar=False,
                name=f"rolls-{role.value}",
            )
            self._scene_actors.append(actor)

        self._scene = scene
        if reset_camera:
            self.set_default_camera()
        self.plotter.render()

    def clear_scene(self) -> None:
        """Remove the actors of the displayed scene."""
        if not self._closed:
            for actor in self._scene_actors:
                self.plotter.remove_actor(actor, render=False)
        self._scene_actors.clear()
        self._scene = None

    def set_default_camera(self) -> None:
        self.plotter.camera_position = DEFAULT_CAMERA_POSITION

    def export_png(self, filepath: Optional[str] = None) -> str:
        """
        Save the current frame as PNG.

        Args:
            filepath: Target path. Defaults to export_filename() of the shown
                      scene in the working directory.

        Returns:
            The path written.

        Raises:
            RuntimeError: If no scene is displayed.
        """
        if self._scene is None:
            raise RuntimeError("Nothing to export, no pack scene is displayed.")

        filepath = filepath or export_filename(self._scene.config)
        directory = os.path.dirname(os.path.abspath(filepath))
        os.makedirs(directory, exist_ok=True)

        self.plotter.screenshot(filepath)
        logger.info(f"Exported pack image to: {filepath}")
        return filepath

    def show(self, screenshot: Optional[str] = None) -> None:
        """Open the interactive window (blocks until it is closed)."""
        self.plotter.show(screenshot=screenshot)
        self._closed = True

    def close(self) -> None:
        self.clear_scene()
        if not self._closed:
            self.plotter.close()
            self._closed = True

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _init_plotter(self) -> None:
        self.plotter.set_background(BACKGROUND_COLOR)
        for scene_light in SCENE_LIGHTS:
            light = pv.Light(
                position=scene_light.position,
                focal_point=(0.0, 0.0, 0.0),
                intensity=scene_light.intensity,
                light_type="scene light",
            )
            self.plotter.add_light(light)
