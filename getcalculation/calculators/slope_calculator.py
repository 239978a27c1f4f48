"""
SLOPE_CALCULATOR: rise over run between two points.

A vertical line (run = 0) has no slope; it is reported with ``slope=None``
rather than as an error.
"""
from __future__ import annotations

import math
from fractions import Fraction
from typing import Any, Dict, List, Optional

from getcalculation.calculators.base import BaseCalculator, clean_number, clean_optional
from getcalculation.calculators.coordinate_utils import (
    POINT_SECTION,
    points_display,
    read_points,
)


def _exact(value: float) -> Fraction:
    # Decimal text of the float, so 0.1 reduces as 1/10 rather than its binary expansion
    return Fraction(repr(value))


def slope_as_ratio(x1: float, y1: float, x2: float, y2: float) -> str:
    """Rise/run reduced to lowest terms, sign on the numerator."""
    rise = _exact(y2) - _exact(y1)
    run = _exact(x2) - _exact(x1)
    if run == 0:
        return "undefined (vertical line)"
    if rise == 0:
        return "0/1 (horizontal line)"
    ratio = rise / run
    return f"{ratio.numerator}/{ratio.denominator}"


def line_type(slope: Optional[float]) -> str:
    if slope is None:
        return "vertical"
    if slope == 0:
        return "horizontal"
    return "increasing" if slope > 0 else "decreasing"


class SlopeCalculator(BaseCalculator):
    key = "SLOPE_CALCULATOR"
    name = "Slope Calculator"

    def preferred_sections(self, flat: Dict[str, Any]) -> List[str]:
        return [POINT_SECTION]

    def compute(self, values: Dict[str, Any]) -> Dict[str, Any]:
        x1, y1, x2, y2 = read_points(values)

        rise = y2 - y1
        run = x2 - x1

        slope = rise / run if run != 0 else None
        radians = math.atan(slope) if slope is not None else None
        degrees = math.degrees(radians) if radians is not None else None

        return {
            "slope": clean_optional(slope),
            "slopeAsRatio": slope_as_ratio(x1, y1, x2, y2),
            "angleInDegrees": clean_optional(degrees),
            "angleInRadians": clean_optional(radians),
            "rise": clean_number(rise),
            "run": clean_number(run),
            "lineType": line_type(slope),
            "pointsDisplay": points_display(x1, y1, x2, y2),
            "formula": "m = (y₂ - y₁) / (x₂ - x₁)",
        }


def calculate(inputs: Dict[str, Any], manifest: Any = None) -> Dict[str, Any]:
    return SlopeCalculator.run(inputs, manifest)
