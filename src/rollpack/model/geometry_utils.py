from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pyvista as pv

if TYPE_CHECKING:
    from numpy import typing as npt


def ring_angles(n_segments: int) -> npt.NDArray[np.float64]:
    """Evenly spaced angles of an open ring (the seam point is not repeated)."""
    if n_segments < 3:
        raise ValueError(f"A ring needs at least 3 segments, got {n_segments}.")
    return np.linspace(0.0, 2.0 * np.pi, n_segments, endpoint=False)


def revolve_profile(
    profile: npt.ArrayLike,
    n_segments: int
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.int_]]:
    """
    Revolve a meridian profile around the X axis into a quad surface.

    The profile is a polyline of (x, r) pairs: axial position and distance from
    the axis. Every profile vertex becomes a ring of `n_segments` points and
    every profile segment a band of quads.

    Quads are wound so that the face normal is `tangent x (p_next - p_prev)`,
    where `tangent` is the direction of increasing angle. Walking the profile
    towards +X along a constant radius therefore gives outward normals,
    walking it towards -X gives normals facing the axis. For a flat ring,
    walking from the outer to the inner radius faces +X.

    Args:
        profile: (M, 2) array-like of (x, r), M >= 2, r >= 0.
        n_segments: Number of angular segments (>= 3).

    Returns:
        points: (M * n_segments, 3) array of XYZ coordinates.
        quads: (n_segments * (M - 1), 4) array of point indices.

    Raises:
        ValueError: If the profile is not of shape (M, 2) with M >= 2.
    """
    prof = np.asarray(profile, dtype=np.float64)
    if prof.ndim != 2 or prof.shape[1] != 2 or prof.shape[0] < 2:
        raise ValueError(f"Expected profile of shape (M >= 2, 2), got {prof.shape}.")

    theta = ring_angles(n_segments)
    n_rings = prof.shape[0]

    x = np.repeat(prof[:, 0], n_segments)
    r = np.repeat(prof[:, 1], n_segments)
    angles = np.tile(theta, n_rings)
    points = np.c_[x, r * np.cos(angles), r * np.sin(angles)]

    ring = np.arange(n_segments, dtype=np.int_)
    ring_next = (ring + 1) % n_segments
    band = np.arange(n_rings - 1, dtype=np.int_)[:, None] * n_segments

    a = band + ring
    b = band + ring_next
    c = band + n_segments + ring_next
    d = band + n_segments + ring
    quads = np.stack([a, b, c, d], axis=-1).reshape(-1, 4)

    return points, quads


def quad_normals(
    points: npt.NDArray[np.float64],
    quads: npt.NDArray[np.int_]
) -> npt.NDArray[np.float64]:
    """Unit normals of each quad, from the diagonals (robust for collapsed edges)."""
    p0, p1, p2, p3 = (points[quads[:, k]] for k in range(4))
    normals = np.cross(p2 - p0, p3 - p1)
    norms = np.linalg.norm(normals, axis=1)
    norms[norms == 0.0] = 1.0
    return normals / norms[:, None]


def quads_to_polydata(
    points: npt.NDArray[np.float64],
    quads: npt.NDArray[np.int_]
) -> pv.PolyData:
    """Wrap a quad mesh into PolyData (VTK face layout: [4, i0, i1, i2, i3, ...])."""
    faces = np.hstack([np.full((quads.shape[0], 1), 4, dtype=np.int_), quads]).ravel()
    return pv.PolyData(np.asarray(points, dtype=np.float64), faces)
