"""
STANDARD_FORM_TO_SLOPE_INTERCEPT: rewrite Ax + By = C as y = mx + b.

    m = -A / B,  b = C / B,  x-intercept = C / A (None when A = 0)

B = 0 is a vertical line and has no slope-intercept form.
"""
from __future__ import annotations

from typing import Any, Dict, List

from getcalculation.calculators.base import (
    BaseCalculator,
    CalculationError,
    clean_number,
    clean_optional,
    first_present,
    format_number,
    to_number,
)


def _term(coef: float, symbol: str, leading: bool) -> str:
    magnitude = abs(coef)
    body = symbol if magnitude == 1 else f"{format_number(magnitude)}{symbol}"
    if leading:
        return ("-" if coef < 0 else "") + body
    return (" - " if coef < 0 else " + ") + body


def format_standard_form(a: float, b: float, c: float) -> str:
    lhs = ""
    for coef, symbol in ((a, "x"), (b, "y")):
        if coef != 0:
            lhs += _term(coef, symbol, leading=not lhs)
    return f"{lhs} = {format_number(c)}"


def format_slope_intercept(slope: float, y_intercept: float) -> str:
    m = clean_number(slope)
    b = clean_number(y_intercept)
    if m == 0:
        return f"y = {format_number(b)}"
    equation = "y = " + _term(m, "x", leading=True)
    if b != 0:
        equation += f" {'-' if b < 0 else '+'} {format_number(abs(b))}"
    return equation


class StandardFormCalculator(BaseCalculator):
    key = "STANDARD_FORM_TO_SLOPE_INTERCEPT"
    name = "Standard Form to Slope Intercept Calculator"

    def preferred_sections(self, flat: Dict[str, Any]) -> List[str]:
        return ["equation-coefficients"]

    def compute(self, values: Dict[str, Any]) -> Dict[str, Any]:
        a, b, c = (to_number(first_present(values, name, name.lower())) for name in "ABC")
        if a is None or b is None or c is None:
            raise CalculationError("All coefficients (A, B, C) must be valid numbers")
        if b == 0:
            raise CalculationError("Coefficient B cannot be zero (equation would be vertical line)")

        slope = -a / b
        y_intercept = c / b
        x_intercept = c / a if a != 0 else None

        return {
            "slope": clean_number(slope),
            "yIntercept": clean_number(y_intercept),
            "xIntercept": clean_optional(x_intercept),
            "standardFormEquation": format_standard_form(a, b, c),
            "slopeInterceptEquation": format_slope_intercept(slope, y_intercept),
            "isVerticalLine": False,
            "isHorizontalLine": a == 0,
        }


def calculate(inputs: Dict[str, Any], manifest: Any = None) -> Dict[str, Any]:
    return StandardFormCalculator.run(inputs, manifest)
