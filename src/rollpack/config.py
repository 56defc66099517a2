"""
Configuration & Constants
=========================
This module serves as the central registry for scene units and global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (scale factors, tube thicknesses)
   scattered throughout the layout and geometry code.
2. Defaults: It holds the fallback values the input surface substitutes for
   missing or invalid parameters.

Exports:
    MM_TO_UNITS (float): Scene units per millimeter (10 mm = 1 unit).
    EPSILON (float): Extra spacing between neighbouring rolls, in scene units.
    DEFAULT_*: Fallback values for every pack parameter.
"""
from typing import Final

# Global Constants
MM_TO_UNITS: Final[float] = 0.1
EPSILON: Final[float] = 0.01  # ~0.1 mm, keeps touching surfaces from z-fighting

# Roll construction (scene units unless stated otherwise)
CORE_WALL_THICKNESS: Final[float] = 1.2 * MM_TO_UNITS
CORE_INNER_MIN_FRACTION: Final[float] = 0.5
CORE_CLAMP_FRACTION: Final[float] = 0.99
CORE_LENGTH_FRACTION: Final[float] = 0.97
BEVEL_DEPTH: Final[float] = 1.0 * MM_TO_UNITS
MAX_BEVEL_FRACTION: Final[float] = 0.25

# Angular resolution of the surfaces of revolution
SIDE_SEGMENTS: Final[int] = 64
BEVEL_SEGMENTS: Final[int] = 48
END_SEGMENTS: Final[int] = 64
CORE_SEGMENTS: Final[int] = 48

# Input fallbacks (millimeters for dimensions)
DEFAULT_LANE_COUNT: Final[int] = 4
DEFAULT_CHANNEL_COUNT: Final[int] = 3
DEFAULT_LAYER_COUNT: Final[int] = 2
DEFAULT_ROLL_OUTER_DIAMETER_MM: Final[float] = 120.0
DEFAULT_CORE_OUTER_DIAMETER_MM: Final[float] = 45.0
DEFAULT_ROLL_LENGTH_MM: Final[float] = 100.0
DEFAULT_GAP_MM: Final[float] = 7.0

# Export
EXPORT_FILENAME_TEMPLATE: Final[str] = "roll_pack_{channels}_{lanes}_{layers}.png"
