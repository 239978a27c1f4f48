import pytest

from getcalculation.calculators import (
    length_of_a_line_segment,
    midpoint,
    slope_calculator,
    standard_form_to_slope_intercept,
)
from getcalculation.calculators.coordinate_utils import INVALID_POINTS


def points(x1, y1, x2, y2):
    return {"x1": x1, "y1": y1, "x2": x2, "y2": y2}


# ── MIDPOINT ─────────────────────────────────────────────────────────────────

class TestMidpoint:
    def test_midpoint(self):
        result = midpoint.calculate(points(-2, 3, 4, 7))
        assert (result["midpointX"], result["midpointY"]) == (1, 5)
        assert result["midpointCoordinates"] == "(1, 5)"

    def test_symmetric(self):
        forward = midpoint.calculate(points(1.5, -2, 7, 9))
        backward = midpoint.calculate(points(7, 9, 1.5, -2))
        for key in ("midpointX", "midpointY", "distanceBetweenPoints"):
            assert forward[key] == backward[key]

    def test_fractional(self):
        assert midpoint.calculate(points(0, 0, 1, 0))["midpointCoordinates"] == "(0.5, 0)"

    def test_malformed_manifest_returns_error(self):
        result = midpoint.calculate(points(0, 0, 4, 6), {"sections": "oops"})
        assert result == {"error": "Invalid manifest: sections: Input should be a valid list"}

    @pytest.mark.parametrize("inputs", [
        points(0, 0, 1, None),
        points(0, "north", 1, 1),
        {"x1": 0, "y1": 0},
    ])
    def test_invalid_coordinates(self, inputs):
        assert midpoint.calculate(inputs) == {"error": INVALID_POINTS}


# ── SLOPE_CALCULATOR ─────────────────────────────────────────────────────────

class TestSlope:
    def test_slope(self):
        result = slope_calculator.calculate(points(1, 2, 5, 8))
        assert result["slope"] == 1.5
        assert result["slopeAsRatio"] == "3/2"
        assert result["rise"] == 6
        assert result["run"] == 4
        assert result["lineType"] == "increasing"
        assert result["angleInDegrees"] == pytest.approx(56.309932)
        assert result["pointsDisplay"] == "(1, 2) to (5, 8)"

    def test_point_order_does_not_matter(self):
        forward = slope_calculator.calculate(points(1, 2, 5, 8))
        backward = slope_calculator.calculate(points(5, 8, 1, 2))
        assert backward["slope"] == forward["slope"]
        assert backward["slopeAsRatio"] == forward["slopeAsRatio"]

    def test_vertical_line(self):
        result = slope_calculator.calculate(points(2, 1, 2, 5))
        assert result["slope"] is None
        assert result["angleInDegrees"] is None
        assert result["slopeAsRatio"] == "undefined (vertical line)"
        assert result["lineType"] == "vertical"
        assert "error" not in result

    def test_horizontal_line(self):
        result = slope_calculator.calculate(points(1, 3, 4, 3))
        assert result["slope"] == 0
        assert result["slopeAsRatio"] == "0/1 (horizontal line)"
        assert result["lineType"] == "horizontal"

    @pytest.mark.parametrize("pts,ratio,kind", [
        ((0, 0, 0.3, 0.1), "1/3", "increasing"),
        ((0, 0, 2, -4), "-2/1", "decreasing"),
        ((0, 0, -4, 2), "-1/2", "decreasing"),
        ((0.5, 0, 1, 0.25), "1/2", "increasing"),
    ])
    def test_ratio(self, pts, ratio, kind):
        result = slope_calculator.calculate(points(*pts))
        assert result["slopeAsRatio"] == ratio
        assert result["lineType"] == kind

    def test_invalid(self):
        assert slope_calculator.calculate(points(0, 0, 1, "")) == {"error": INVALID_POINTS}


# ── LENGTH_OF_A_LINE_SEGMENT ─────────────────────────────────────────────────

class TestLineSegment:
    def test_length(self):
        result = length_of_a_line_segment.calculate(points(0, 0, 3, 4))
        assert result["lineSegmentLength"] == 5
        assert result["horizontalDistance"] == 3
        assert result["verticalDistance"] == 4
        assert result["coordinateDisplay"] == "(0, 0) to (3, 4)"

    def test_symmetric(self):
        forward = length_of_a_line_segment.calculate(points(-1, 2, 4, -6))
        backward = length_of_a_line_segment.calculate(points(4, -6, -1, 2))
        assert forward["lineSegmentLength"] == backward["lineSegmentLength"] == 9.433981

    def test_zero_length(self):
        assert length_of_a_line_segment.calculate(points(2, 2, 2, 2))["lineSegmentLength"] == 0


# ── STANDARD_FORM_TO_SLOPE_INTERCEPT ─────────────────────────────────────────

class TestStandardForm:
    def test_conversion(self):
        result = standard_form_to_slope_intercept.calculate({"A": 2, "B": -3, "C": 6})
        assert result["standardFormEquation"] == "2x - 3y = 6"
        assert result["slopeInterceptEquation"] == "y = 0.666667x - 2"
        assert result["xIntercept"] == 3
        assert result["isVerticalLine"] is False
        assert result["isHorizontalLine"] is False

    def test_horizontal_line(self):
        result = standard_form_to_slope_intercept.calculate({"A": 0, "B": 4, "C": 8})
        assert result["slope"] == 0
        assert result["slopeInterceptEquation"] == "y = 2"
        assert result["standardFormEquation"] == "4y = 8"
        assert result["xIntercept"] is None
        assert result["isHorizontalLine"] is True

    def test_lowercase_coefficients(self):
        result = standard_form_to_slope_intercept.calculate({"a": 1, "b": 2, "c": -4})
        assert result["slopeInterceptEquation"] == "y = -0.5x - 2"
        assert result["standardFormEquation"] == "x + 2y = -4"

    def test_unit_slope(self):
        result = standard_form_to_slope_intercept.calculate({"A": -1, "B": 1, "C": 0})
        assert result["slopeInterceptEquation"] == "y = x"

    def test_sectioned(self):
        result = standard_form_to_slope_intercept.calculate(
            {"equation-coefficients": {"A": 2, "B": -3, "C": 6}})
        assert result["slope"] == 0.666667

    def test_vertical_line_rejected(self):
        assert standard_form_to_slope_intercept.calculate({"A": 1, "B": 0, "C": 5}) == \
            {"error": "Coefficient B cannot be zero (equation would be vertical line)"}

    def test_missing_coefficient(self):
        assert standard_form_to_slope_intercept.calculate({"A": 1, "B": 2}) == \
            {"error": "All coefficients (A, B, C) must be valid numbers"}
