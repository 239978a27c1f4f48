"""
SIMILAR_TRIANGLES_CALCULATOR

Triangle one is given as side1..side3, triangle two as correspondingSide1..3,
where correspondingSideN pairs with sideN. Three modes, chosen by
``calculationType``:

    find-missing-side    scale from pairs 1 and 2, then correspondingSide3 = side3 * scale
    find-scale-factor    one scale factor per provided pair
    verify-similarity    all three pairs must share one scale factor

Inconsistent ratios are reported as results (find-missing-side returns an
error, the other modes report ``isSimilar = False``), never raised past
``execute()``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Tuple

from getcalculation.calculators.base import (
    BaseCalculator,
    CalculationError,
    clean_number,
    format_number as fmt,
    is_empty,
    positive_or_none,
    require_positive,
)

# find-missing-side cross-checks its two scale factors more loosely.
MISSING_SIDE_TOLERANCE = 0.001
SIMILARITY_TOLERANCE = 0.0001

Pair = Tuple[float, float]


def _proportion(pairs: List[Pair], factors: List[float]) -> str:
    return "\n".join(f"{fmt(c)}/{fmt(s)} = {fmt(f)}" for (s, c), f in zip(pairs, factors))


def _all_close(factors: List[float], tolerance: float) -> bool:
    return all(abs(f - factors[0]) < tolerance for f in factors)


def _provided_pairs(values: Mapping) -> List[Pair]:
    pairs = []
    for i in (1, 2, 3):
        side, corresponding = values.get(f"side{i}"), values.get(f"correspondingSide{i}")
        for raw in (side, corresponding):
            if not is_empty(raw) and positive_or_none(raw) is None:
                raise CalculationError("Side lengths must be positive numbers (greater than 0)")
        if not is_empty(side) and not is_empty(corresponding):
            pairs.append((positive_or_none(side), positive_or_none(corresponding)))
    return pairs


def find_missing_side(values: Mapping) -> Dict[str, Any]:
    s1, s2, s3 = require_positive(values, ("side1", "side2", "side3"),
                                  "First triangle must have all three sides provided")
    c1, c2 = require_positive(values, ("correspondingSide1", "correspondingSide2"),
                              "Second triangle must have at least two corresponding sides provided")

    scale = c1 / s1
    if abs(scale - c2 / s2) > MISSING_SIDE_TOLERANCE:
        raise CalculationError("Triangles are not similar - scale factors are inconsistent")

    missing = s3 * scale
    return {
        "missingSide": clean_number(missing),
        "scaleFactor": clean_number(scale),
        "proportion": f"{fmt(c1)}/{fmt(s1)} = {fmt(c2)}/{fmt(s2)} = {fmt(missing)}/{fmt(s3)}",
        "similarityStatus": "Triangles are similar (scale factor consistent)",
        "isSimilar": True,
    }


def find_scale_factor(values: Mapping) -> Dict[str, Any]:
    pairs = _provided_pairs(values)
    if not pairs:
        raise CalculationError("At least one pair of corresponding sides must be provided")

    factors = [c / s for s, c in pairs]
    similar = _all_close(factors, SIMILARITY_TOLERANCE)
    result: Dict[str, Any] = {
        "scaleFactor": clean_number(factors[0]),
        "proportion": _proportion(pairs, factors),
        "similarityStatus": ("Triangles are similar" if similar
                             else "Triangles are not similar (scale factors differ)"),
        "isSimilar": similar,
    }
    for i, factor in enumerate(factors, start=1):
        result[f"scaleFactor{i}"] = clean_number(factor)
    return result


def verify_similarity(values: Mapping) -> Dict[str, Any]:
    sides = require_positive(values, ("side1", "side2", "side3"),
                             "First triangle must have all three sides provided")
    corresponding = require_positive(
        values, ("correspondingSide1", "correspondingSide2", "correspondingSide3"),
        "Second triangle must have all three corresponding sides provided",
    )

    pairs = list(zip(sides, corresponding))
    factors = [c / s for s, c in pairs]
    similar = _all_close(factors, SIMILARITY_TOLERANCE)
    return {
        "result": 1 if similar else 0,
        "isSimilar": similar,
        "proportion": _proportion(pairs, factors),
        "scaleFactor": clean_number(factors[0]),
        "similarityStatus": "Triangles are similar" if similar else "Triangles are not similar",
    }


HANDLERS = {
    "find-missing-side": find_missing_side,
    "find-scale-factor": find_scale_factor,
    "verify-similarity": verify_similarity,
}


class SimilarTrianglesCalculator(BaseCalculator):
    key = "SIMILAR_TRIANGLES_CALCULATOR"
    name = "Similar Triangles Calculator"

    def preferred_sections(self, flat: Dict[str, Any]) -> List[str]:
        return ["triangle-type", "triangle-1", "triangle-2"]

    def compute(self, values: Dict[str, Any]) -> Dict[str, Any]:
        mode = values.get("calculationType")
        if not mode:
            raise CalculationError("Calculation type must be specified")
        handler = HANDLERS.get(mode)
        if handler is None:
            raise CalculationError(f"Unsupported calculation type: {mode}")

        result = handler(values)
        result["calculationType"] = mode
        return result


def calculate(inputs: Dict[str, Any], manifest: Any = None) -> Dict[str, Any]:
    return SimilarTrianglesCalculator.run(inputs, manifest)
