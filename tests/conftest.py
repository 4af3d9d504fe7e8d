"""Pytest fixtures for knight search tests."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))

from geometry import Point
from polygon import Polygon


@pytest.fixture
def square() -> Polygon:
    """Return the 4x4 square used by the slicing tests."""
    return Polygon((Point(0, 0), Point(4, 0), Point(4, 4), Point(0, 4)))


@pytest.fixture
def board_8x8() -> Polygon:
    """Return the initial bisection region of an 8x8 board."""
    return Polygon.rectangle(0.0, 0.0, 8.0, 8.0)


@pytest.fixture
def u_shape() -> Polygon:
    """Return a non-convex U-shaped polygon."""
    return Polygon([
        (0, 0), (6, 0), (6, 4), (4, 4),
        (4, 2), (2, 2), (2, 4), (0, 4),
    ])


@pytest.fixture
def game_input() -> str:
    """Return a startup block followed by one clue."""
    return "8 8\n10\n0 0\nUNKNOWN\nWARMER\n"
