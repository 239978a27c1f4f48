"""MIDPOINT: the point halfway between (x1, y1) and (x2, y2)."""
from __future__ import annotations

import math
from typing import Any, Dict, List

from getcalculation.calculators.base import BaseCalculator, clean_number, format_point
from getcalculation.calculators.coordinate_utils import POINT_SECTION, read_points


class MidpointCalculator(BaseCalculator):
    key = "MIDPOINT"
    name = "Midpoint Calculator"

    def preferred_sections(self, flat: Dict[str, Any]) -> List[str]:
        return [POINT_SECTION]

    def compute(self, values: Dict[str, Any]) -> Dict[str, Any]:
        x1, y1, x2, y2 = read_points(values)

        mid_x = (x1 + x2) / 2
        mid_y = (y1 + y2) / 2
        distance = math.hypot(x2 - x1, y2 - y1)

        return {
            "midpointX": clean_number(mid_x),
            "midpointY": clean_number(mid_y),
            "midpointCoordinates": format_point(mid_x, mid_y),
            "distanceBetweenPoints": clean_number(distance),
            "formula": "M = ((x₁ + x₂) / 2, (y₁ + y₂) / 2)",
        }


def calculate(inputs: Dict[str, Any], manifest: Any = None) -> Dict[str, Any]:
    return MidpointCalculator.run(inputs, manifest)
