"""
Geometric Primitives for the pack layout.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import numpy as np
import math

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Vector:
    """
    A vector in 3D scene space. Used for placement translations.
    """
    x: float
    y: float
    z: float = 0.0

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def is_close(self, other: Vector, tol: float = 1e-9) -> bool:
        return (self - other).magnitude <= tol

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z])


@dataclass(frozen=True, order=True)
class GridPosition:
    """Zero-based cell indices of one roll in the pack grid."""
    lane: int
    channel: int
    layer: int


@dataclass(frozen=True)
class Placement:
    """A grid cell resolved to a translation of the roll center."""
    position: GridPosition
    translation: Vector
