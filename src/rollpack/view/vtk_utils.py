"""
VTK and Geometry Utilities
Helper functions for instancing the shared roll geometry into renderable meshes.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Sequence

import numpy as np
import numpy.typing as npt
import pyvista as pv

from rollpack.model.geometry_primitives import Vector
from rollpack.model.pack_scene import PackScene
from rollpack.model.roll_geometry import PatchRole

logger = logging.getLogger(__name__)


class VtkUtils:
    @staticmethod
    def polydata_quads(mesh: pv.PolyData) -> npt.NDArray[np.int_]:
        """
        Extract the (N, 4) quad connectivity of an all-quad PolyData.

        Raises:
            ValueError: If the mesh contains faces that are not quads.
        """
        faces = np.asarray(mesh.faces, dtype=np.int_)
        if faces.size == 0:
            return np.empty((0, 4), dtype=np.int_)
        if faces.size % 5 != 0 or np.any(faces.reshape(-1, 5)[:, 0] != 4):
            raise ValueError("Expected a mesh made of quads only.")
        return faces.reshape(-1, 5)[:, 1:]

    @staticmethod
    def instance_arrays(
        points: npt.NDArray[np.float64],
        quads: npt.NDArray[np.int_],
        translations: Sequence[Vector]
    ) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.int_]]:
        """
        Copy one quad mesh to every translation.

        Returns:
            (points, quads) of all copies, in translation order.
        """
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        quads = np.asarray(quads, dtype=np.int_).reshape(-1, 4)
        if not translations:
            return np.empty((0, 3), dtype=np.float64), np.empty((0, 4), dtype=np.int_)

        offsets = np.array([t.to_array() for t in translations], dtype=np.float64)  # (K, 3)
        n_points = points.shape[0]

        all_points = (points[None, :, :] + offsets[:, None, :]).reshape(-1, 3)
        shifts = np.arange(len(translations), dtype=np.int_)[:, None, None] * n_points
        all_quads = (quads[None, :, :] + shifts).reshape(-1, 4)
        return all_points, all_quads

    def role_meshes(self, scene: PackScene) -> dict[PatchRole, pv.PolyData]:
        """
        Merge every patch of every roll into one mesh per patch role.

        The shared roll geometry is read once; each patch is copied to all
        placements of the scene.
        """
        translations = [instance.placement.translation for instance in scene]
        parts: dict[PatchRole, list[tuple[npt.NDArray[np.float64], npt.NDArray[np.int_]]]] = defaultdict(list)

        for patch in scene.geometry:
            mesh = scene.geometry.mesh(patch.name)
            pts, quads = self.instance_arrays(
                np.asarray(mesh.points), self.polydata_quads(mesh), translations
            )
            parts[patch.role].append((pts, quads))

        meshes: dict[PatchRole, pv.PolyData] = {}
        for role, chunks in parts.items():
            offset = 0
            pts_list, quad_list = [], []
            for pts, quads in chunks:
                pts_list.append(pts)
                quad_list.append(quads + offset)
                offset += pts.shape[0]
            points = np.vstack(pts_list)
            quads = np.vstack(quad_list)
            faces = np.hstack([np.full((quads.shape[0], 1), 4, dtype=np.int_), quads]).ravel()
            meshes[role] = pv.PolyData(points, faces)

        logger.debug(f"Built {len(meshes)} role meshes for {len(translations)} rolls.")
        return meshes
