"""Two-point input handling shared by the coordinate-geometry calculators."""
from __future__ import annotations

from typing import Mapping, Tuple

from getcalculation.calculators.base import format_point, require_numbers

POINT_SECTION = "point-coordinates"
POINT_FIELDS = ("x1", "y1", "x2", "y2")
INVALID_POINTS = "All coordinates (x₁, y₁, x₂, y₂) must be valid numbers."


def read_points(values: Mapping) -> Tuple[float, float, float, float]:
    x1, y1, x2, y2 = require_numbers(values, POINT_FIELDS, INVALID_POINTS)
    return x1, y1, x2, y2


def points_display(x1: float, y1: float, x2: float, y2: float) -> str:
    return f"{format_point(x1, y1)} to {format_point(x2, y2)}"
