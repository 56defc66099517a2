"""
Pytest configuration for rollpack tests.

Sets up Python path to allow importing from src/ without installation.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path for imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from rollpack.model.pack_config import PackConfig  # noqa: E402


@pytest.fixture
def default_config():
    """The pack used throughout the examples: 4 x 3 x 2 rolls, 1 mm gap."""
    return PackConfig(
        lane_count=4,
        channel_count=3,
        layer_count=2,
        roll_outer_diameter_mm=120.0,
        core_outer_diameter_mm=45.0,
        roll_length_mm=100.0,
        gap_mm=1.0,
    )
