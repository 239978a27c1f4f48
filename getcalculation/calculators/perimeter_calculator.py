"""PERIMETER_CALCULATOR: perimeter of common 2D shapes, selected by ``shapeType``."""
from __future__ import annotations

import math
from typing import Any, Callable, Dict, List, Mapping

from getcalculation.calculators.base import (
    BaseCalculator,
    CalculationError,
    clean_number,
    first_present,
    format_number as fmt,
    number_in_words,
    positive_or_none,
    require_positive,
)

# Dimension sections that don't follow the "<shapeType>-dimensions" pattern.
SECTION_ALIASES = {"regular-polygon": "polygon-dimensions"}


def _rectangle(v: Mapping) -> Dict[str, Any]:
    length, width = require_positive(v, ("length", "width"),
                                     "Rectangle requires positive length and width values")
    p = 2 * (length + width)
    return {
        "perimeter": p,
        "formula": "P = 2(l + w)",
        "calculation": f"P = 2({fmt(length)} + {fmt(width)}) = 2({fmt(length + width)}) = {fmt(p)}",
        "shapeInfo": f"Rectangle with length {fmt(length)} and width {fmt(width)}",
    }


def _square(v: Mapping) -> Dict[str, Any]:
    side, = require_positive(v, ("side",), "Square requires a positive side length value")
    p = 4 * side
    return {
        "perimeter": p,
        "formula": "P = 4s",
        "calculation": f"P = 4 × {fmt(side)} = {fmt(p)}",
        "shapeInfo": f"Square with side length {fmt(side)}",
    }


def _circle(v: Mapping) -> Dict[str, Any]:
    radius = positive_or_none(v.get("radius"))
    diameter = positive_or_none(v.get("diameter"))
    if radius is None and diameter is None:
        raise CalculationError("Circle requires either a positive radius or diameter value")

    if radius is not None:
        p = 2 * math.pi * radius
        formula = "P = 2πr"
        calculation = f"P = 2 × π × {fmt(radius)} ≈ {fmt(p)}"
    else:
        radius = diameter / 2
        p = math.pi * diameter
        formula = "P = πd"
        calculation = f"P = π × {fmt(diameter)} ≈ {fmt(p)}"
    return {
        "perimeter": p,
        "formula": formula,
        "calculation": calculation,
        "shapeInfo": f"Circle with radius {fmt(radius)}",
    }


def _triangle(v: Mapping) -> Dict[str, Any]:
    sides = [positive_or_none(first_present(v, f"side{letter}", f"side{digit}"))
             for letter, digit in zip("ABC", "123")]
    if any(s is None for s in sides):
        raise CalculationError("Triangle requires three positive side length values")
    a, b, c = sides
    if a + b <= c or a + c <= b or b + c <= a:
        raise CalculationError(
            "Invalid triangle: the sum of any two sides must be greater than the third side"
        )
    p = a + b + c
    return {
        "perimeter": p,
        "formula": "P = a + b + c",
        "calculation": f"P = {fmt(a)} + {fmt(b)} + {fmt(c)} = {fmt(p)}",
        "shapeInfo": f"Triangle with sides {fmt(a)}, {fmt(b)}, and {fmt(c)}",
    }


def _regular_polygon(v: Mapping) -> Dict[str, Any]:
    n, side = require_positive(v, ("numberOfSides", "sideLength"),
                               "Regular polygon requires positive number of sides and side length")
    if n < 3 or not n.is_integer():
        raise CalculationError("Number of sides must be an integer greater than or equal to 3")
    n = int(n)
    p = n * side
    return {
        "perimeter": p,
        "formula": "P = n × s",
        "calculation": f"P = {n} × {fmt(side)} = {fmt(p)}",
        "shapeInfo": f"Regular {n}-sided polygon with side length {fmt(side)}",
    }


def _parallelogram(v: Mapping) -> Dict[str, Any]:
    base, side = require_positive(v, ("base", "side"),
                                  "Parallelogram requires positive base and side values")
    p = 2 * (base + side)
    return {
        "perimeter": p,
        "formula": "P = 2(a + b)",
        "calculation": f"P = 2({fmt(base)} + {fmt(side)}) = {fmt(p)}",
        "shapeInfo": f"Parallelogram with base {fmt(base)} and side {fmt(side)}",
    }


def _rhombus(v: Mapping) -> Dict[str, Any]:
    side, = require_positive(v, ("side",), "Rhombus requires a positive side length value")
    p = 4 * side
    return {
        "perimeter": p,
        "formula": "P = 4s",
        "calculation": f"P = 4 × {fmt(side)} = {fmt(p)}",
        "shapeInfo": f"Rhombus with side length {fmt(side)}",
    }


def _trapezoid(v: Mapping) -> Dict[str, Any]:
    b1, b2, l1, l2 = require_positive(
        v, ("base1", "base2", "leg1", "leg2"),
        "Trapezoid requires positive base1, base2, leg1 and leg2 values",
    )
    # The legs and the base difference form a triangle when the bases differ.
    gap = abs(b1 - b2)
    if gap > 0 and (l1 + l2 <= gap or l1 + gap <= l2 or l2 + gap <= l1):
        raise CalculationError("Invalid trapezoid: the legs cannot connect bases of these lengths")
    p = b1 + b2 + l1 + l2
    return {
        "perimeter": p,
        "formula": "P = a + b + c + d",
        "calculation": f"P = {fmt(b1)} + {fmt(b2)} + {fmt(l1)} + {fmt(l2)} = {fmt(p)}",
        "shapeInfo": f"Trapezoid with bases {fmt(b1)} and {fmt(b2)}, legs {fmt(l1)} and {fmt(l2)}",
    }


SHAPES: Dict[str, Callable[[Mapping], Dict[str, Any]]] = {
    "rectangle": _rectangle,
    "square": _square,
    "circle": _circle,
    "triangle": _triangle,
    "regular-polygon": _regular_polygon,
    "parallelogram": _parallelogram,
    "rhombus": _rhombus,
    "trapezoid": _trapezoid,
}


class PerimeterCalculator(BaseCalculator):
    key = "PERIMETER_CALCULATOR"
    name = "Perimeter Calculator"

    def preferred_sections(self, flat: Dict[str, Any]) -> List[str]:
        shape = str(flat.get("shapeType") or "")
        return [f"{shape}-dimensions", SECTION_ALIASES.get(shape, "")]

    def compute(self, values: Dict[str, Any]) -> Dict[str, Any]:
        shape = values.get("shapeType")
        if not shape:
            raise CalculationError("Shape type must be specified")
        handler = SHAPES.get(shape)
        if handler is None:
            raise CalculationError(f"Unsupported shape type: {shape}")

        result = handler(values)
        perimeter = result["perimeter"]
        result["perimeter"] = clean_number(perimeter)
        result["perimeterInWords"] = number_in_words(perimeter)
        result["shapeType"] = shape
        return result


def calculate(inputs: Dict[str, Any], manifest: Any = None) -> Dict[str, Any]:
    return PerimeterCalculator.run(inputs, manifest)
