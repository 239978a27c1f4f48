"""VOLUME_CALCULATOR: volume of common solids, selected by ``shapeType``."""
from __future__ import annotations

import math
from typing import Any, Callable, Dict, List, Mapping

from getcalculation.calculators.base import (
    BaseCalculator,
    CalculationError,
    clean_number,
    format_number as fmt,
    number_in_words,
    require_positive,
)


def _cube(v: Mapping) -> Dict[str, Any]:
    side, = require_positive(v, ("side",), "Cube requires a positive side length value")
    volume = side ** 3
    return {
        "volume": volume,
        "formula": "V = s³",
        "calculation": f"V = {fmt(side)}³ = {fmt(volume)}",
        "shapeInfo": f"Cube with side length {fmt(side)}",
    }


def _rectangular_prism(v: Mapping) -> Dict[str, Any]:
    length, width, height = require_positive(
        v, ("length", "width", "height"),
        "Rectangular prism requires positive length, width, and height values",
    )
    volume = length * width * height
    return {
        "volume": volume,
        "formula": "V = l × w × h",
        "calculation": f"V = {fmt(length)} × {fmt(width)} × {fmt(height)} = {fmt(volume)}",
        "shapeInfo": (f"Rectangular prism with length {fmt(length)}, width {fmt(width)}, "
                      f"and height {fmt(height)}"),
    }


def _cylinder(v: Mapping) -> Dict[str, Any]:
    radius, height = require_positive(v, ("radius", "height"),
                                      "Cylinder requires positive radius and height values")
    volume = math.pi * radius ** 2 * height
    return {
        "volume": volume,
        "formula": "V = πr²h",
        "calculation": f"V = π × {fmt(radius)}² × {fmt(height)} ≈ {fmt(volume)}",
        "shapeInfo": f"Cylinder with radius {fmt(radius)} and height {fmt(height)}",
    }


def _sphere(v: Mapping) -> Dict[str, Any]:
    radius, = require_positive(v, ("radius",), "Sphere requires a positive radius value")
    volume = (4 / 3) * math.pi * radius ** 3
    return {
        "volume": volume,
        "formula": "V = (4/3)πr³",
        "calculation": f"V = (4/3) × π × {fmt(radius)}³ ≈ {fmt(volume)}",
        "shapeInfo": f"Sphere with radius {fmt(radius)}",
    }


def _cone(v: Mapping) -> Dict[str, Any]:
    radius, height = require_positive(v, ("radius", "height"),
                                      "Cone requires positive radius and height values")
    volume = (1 / 3) * math.pi * radius ** 2 * height
    return {
        "volume": volume,
        "formula": "V = (1/3)πr²h",
        "calculation": f"V = (1/3) × π × {fmt(radius)}² × {fmt(height)} ≈ {fmt(volume)}",
        "shapeInfo": f"Cone with radius {fmt(radius)} and height {fmt(height)}",
    }


def _pyramid(v: Mapping) -> Dict[str, Any]:
    length, width, height = require_positive(
        v, ("baseLength", "baseWidth", "height"),
        "Pyramid requires positive base length, base width, and height values",
    )
    volume = (1 / 3) * length * width * height
    return {
        "volume": volume,
        "formula": "V = (1/3)lwh",
        "calculation": (f"V = (1/3) × {fmt(length)} × {fmt(width)} × {fmt(height)} "
                        f"= {fmt(volume)}"),
        "shapeInfo": (f"Pyramid with base length {fmt(length)}, base width {fmt(width)}, "
                      f"and height {fmt(height)}"),
    }


def _triangular_pyramid(v: Mapping) -> Dict[str, Any]:
    base, base_height, height = require_positive(
        v, ("baseLength", "baseHeight", "pyramidHeight"),
        "Triangular pyramid requires positive base length, base height, and pyramid height values",
    )
    base_area = 0.5 * base * base_height
    volume = (1 / 3) * base_area * height
    return {
        "volume": volume,
        "formula": "V = (1/3) × (1/2 × b × h) × H",
        "calculation": (f"V = (1/3) × (1/2 × {fmt(base)} × {fmt(base_height)}) × {fmt(height)} "
                        f"= (1/3) × {fmt(base_area)} × {fmt(height)} = {fmt(volume)}"),
        "shapeInfo": (f"Triangular pyramid with base length {fmt(base)}, base height "
                      f"{fmt(base_height)}, and pyramid height {fmt(height)}"),
    }


SHAPES: Dict[str, Callable[[Mapping], Dict[str, Any]]] = {
    "cube": _cube,
    "rectangular-prism": _rectangular_prism,
    "cylinder": _cylinder,
    "sphere": _sphere,
    "cone": _cone,
    "pyramid": _pyramid,
    "triangular-pyramid": _triangular_pyramid,
}


class VolumeCalculator(BaseCalculator):
    key = "VOLUME_CALCULATOR"
    name = "Volume Calculator"

    def preferred_sections(self, flat: Dict[str, Any]) -> List[str]:
        return [f"{flat.get('shapeType') or ''}-dimensions"]

    def compute(self, values: Dict[str, Any]) -> Dict[str, Any]:
        shape = values.get("shapeType")
        if not shape:
            raise CalculationError("Shape type must be specified")
        handler = SHAPES.get(shape)
        if handler is None:
            raise CalculationError(f"Unsupported shape type: {shape}")

        result = handler(values)
        volume = result["volume"]
        result["volume"] = clean_number(volume)
        result["volumeInWords"] = number_in_words(volume)
        result["shapeType"] = shape
        return result


def calculate(inputs: Dict[str, Any], manifest: Any = None) -> Dict[str, Any]:
    return VolumeCalculator.run(inputs, manifest)
