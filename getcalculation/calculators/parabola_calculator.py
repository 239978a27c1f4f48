"""
PARABOLA_CALCULATOR: properties of y = ax² + bx + c.

Every input variant is first reduced to (a, b, c):

    standard-form     a, b, c
    vertex-form       y = a(x - h)² + k          b = -2ah,      c = ah² + k
    intercept-form    y = a(x - p)(x - q)        b = -a(p + q), c = apq
    focus-directrix   focus (fx, fy), line y = d vertex (fx, (fy + d) / 2), a = 1 / (2(fy - d))

Then:
    vertex     (-b/2a, c - b²/4a)
    focus      vertex + (0, 1/4a)
    directrix  y = vertexY - 1/4a
"""
from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, List, Mapping, Tuple

from getcalculation.calculators.base import (
    BaseCalculator,
    CalculationError,
    clean_number,
    first_present,
    format_number,
    format_point,
    require_numbers,
)

logger = logging.getLogger(__name__)

COEFFICIENT_SECTION = "parabola-coefficients"
DEFAULT_FORM = "standard-form"

Coefficients = Tuple[float, float, float]


# ── Input variants ───────────────────────────────────────────────────────────

def _from_standard(values: Mapping) -> Coefficients:
    a, b, c = require_numbers(values, ("a", "b", "c"),
                              "All coefficients (a, b, c) must be valid numbers")
    return a, b, c


def _from_vertex(values: Mapping) -> Coefficients:
    a, h, k = require_numbers(values, ("a", "h", "k"),
                              "Vertex form requires numeric a, h and k")
    return a, -2 * a * h, a * h * h + k


def _from_intercepts(values: Mapping) -> Coefficients:
    a, p, q = require_numbers(values, ("a", "p", "q"),
                              "Intercept form requires numeric a, p and q")
    return a, -a * (p + q), a * p * q


def _from_focus_directrix(values: Mapping) -> Coefficients:
    fx, fy, d = require_numbers(values, ("focusX", "focusY", "directrix"),
                                "Focus-directrix form requires numeric focusX, focusY and directrix")
    if fy == d:
        raise CalculationError("The focus cannot lie on the directrix")
    a = 1 / (2 * (fy - d))
    h, k = fx, (fy + d) / 2
    return a, -2 * a * h, a * h * h + k


FORMS: Dict[str, Callable[[Mapping], Coefficients]] = {
    "standard-form": _from_standard,
    "vertex-form": _from_vertex,
    "intercept-form": _from_intercepts,
    "focus-directrix": _from_focus_directrix,
}


# ── Display ──────────────────────────────────────────────────────────────────

def _coefficient(value: float, symbol: str) -> str:
    if value == 1:
        return symbol
    if value == -1:
        return f"-{symbol}"
    return f"{format_number(value)}{symbol}"


def _signed(value: float, body: str) -> str:
    return f" {'-' if value < 0 else '+'} {body}"


def format_standard_form(a: float, b: float, c: float) -> str:
    equation = "y = " + _coefficient(clean_number(a), "x²")
    b, c = clean_number(b), clean_number(c)
    if b != 0:
        equation += _signed(b, _coefficient(abs(b), "x"))
    if c != 0:
        equation += _signed(c, format_number(abs(c)))
    return equation


def format_vertex_form(a: float, h: float, k: float) -> str:
    h, k = clean_number(h), clean_number(k)
    if h == 0:
        square = "x²"
    else:
        square = f"(x {'-' if h > 0 else '+'} {format_number(abs(h))})²"
    equation = "y = " + _coefficient(clean_number(a), square)
    if k != 0:
        equation += _signed(k, format_number(abs(k)))
    return equation


def x_intercepts(a: float, b: float, discriminant: float) -> List[float]:
    if discriminant < 0:
        return []
    if discriminant == 0:
        return [clean_number(-b / (2 * a))]
    root = math.sqrt(discriminant)
    return sorted({clean_number((-b - root) / (2 * a)), clean_number((-b + root) / (2 * a))})


# ── Calculator ───────────────────────────────────────────────────────────────

class ParabolaCalculator(BaseCalculator):
    key = "PARABOLA_CALCULATOR"
    name = "Parabola Calculator"

    def form(self, values: Mapping) -> str:
        return str(first_present(values, "calculationType", "shapeType") or DEFAULT_FORM)

    def preferred_sections(self, flat: Dict[str, Any]) -> List[str]:
        return [COEFFICIENT_SECTION, self.form(flat)]

    def compute(self, values: Dict[str, Any]) -> Dict[str, Any]:
        form = self.form(values)
        reduce = FORMS.get(form)
        if reduce is None:
            raise CalculationError(
                f"Unsupported calculation type '{form}'. Use one of: {', '.join(FORMS)}."
            )

        a, b, c = reduce(values)
        if a == 0:
            raise CalculationError("Coefficient a cannot be zero (would not be a parabola)")
        logger.debug(f"{form} reduced to a={a}, b={b}, c={c}")

        vertex_x = -b / (2 * a)
        vertex_y = c - (b * b) / (4 * a)
        focal = 1 / (4 * a)
        focus_y = vertex_y + focal
        directrix_y = vertex_y - focal
        discriminant = b * b - 4 * a * c

        return {
            "vertexX": clean_number(vertex_x),
            "vertexY": clean_number(vertex_y),
            "vertex": format_point(vertex_x, vertex_y),
            "axisOfSymmetry": f"x = {format_number(vertex_x)}",
            "focusX": clean_number(vertex_x),
            "focusY": clean_number(focus_y),
            "focus": format_point(vertex_x, focus_y),
            "directrix": f"y = {format_number(directrix_y)}",
            "discriminant": clean_number(discriminant),
            "yIntercept": clean_number(c),
            "xIntercepts": x_intercepts(a, b, discriminant),
            "opens": "upward" if a > 0 else "downward",
            "direction": "up" if a > 0 else "down",
            "standardForm": format_standard_form(a, b, c),
            "vertexForm": format_vertex_form(a, vertex_x, vertex_y),
            "calculationType": form,
        }


def calculate(inputs: Dict[str, Any], manifest: Any = None) -> Dict[str, Any]:
    return ParabolaCalculator.run(inputs, manifest)
