"""LENGTH_OF_A_LINE_SEGMENT: Euclidean distance between two points."""
from __future__ import annotations

import math
from typing import Any, Dict, List

from getcalculation.calculators.base import BaseCalculator, clean_number
from getcalculation.calculators.coordinate_utils import (
    POINT_SECTION,
    points_display,
    read_points,
)


class LineSegmentLengthCalculator(BaseCalculator):
    key = "LENGTH_OF_A_LINE_SEGMENT"
    name = "Length of Line Segment Calculator"

    def preferred_sections(self, flat: Dict[str, Any]) -> List[str]:
        return [POINT_SECTION]

    def compute(self, values: Dict[str, Any]) -> Dict[str, Any]:
        x1, y1, x2, y2 = read_points(values)
        dx = abs(x2 - x1)
        dy = abs(y2 - y1)
        return {
            "lineSegmentLength": clean_number(math.hypot(dx, dy)),
            "horizontalDistance": clean_number(dx),
            "verticalDistance": clean_number(dy),
            "coordinateDisplay": points_display(x1, y1, x2, y2),
            "formula": "d = √((x₂ - x₁)² + (y₂ - y₁)²)",
        }


def calculate(inputs: Dict[str, Any], manifest: Any = None) -> Dict[str, Any]:
    return LineSegmentLengthCalculator.run(inputs, manifest)
