"""Shared fixtures: a freshly scanned registry, a service over it, sample manifests."""
from typing import Any, Dict

import pytest

from getcalculation.registry import CalculatorRegistry
from getcalculation.service import CalculationService
from getcalculation.units import UnitConverter


@pytest.fixture
def registry() -> CalculatorRegistry:
    reg = CalculatorRegistry()
    reg.initialize()
    return reg


@pytest.fixture
def service(registry) -> CalculationService:
    return CalculationService(registry, UnitConverter())


@pytest.fixture
def midpoint_manifest() -> Dict[str, Any]:
    return {
        "toolName": "Midpoint Calculator",
        "toolSlug": "midpoint",
        "categorySlug": "math",
        "description": "Find the midpoint between two points.",
        "calculationLogic": "MIDPOINT",
        "sections": [
            {
                "id": "point-coordinates",
                "title": "Point Coordinates",
                "required": True,
                "order": 1,
                "fields": [
                    {"name": "x1", "label": "x₁", "type": "number", "required": True},
                    {"name": "y1", "label": "y₁", "type": "number", "required": True},
                    {"name": "x2", "label": "x₂", "type": "number", "required": True},
                    {"name": "y2", "label": "y₂", "type": "number", "required": True},
                ],
            }
        ],
        "outputs": [
            {"name": "midpointX", "label": "Midpoint x", "precision": 2, "section": "primary"},
            {"name": "midpointY", "label": "Midpoint y", "precision": 2, "section": "primary"},
            {"name": "distanceBetweenPoints", "label": "Distance", "precision": 3,
             "units": {"category": "length", "available": ["m", "cm", "ft"], "default": "m"}},
        ],
    }


@pytest.fixture
def measured_manifest() -> Dict[str, Any]:
    """Manifest with a required section, numeric bounds, a unit field and unit outputs."""
    return {
        "toolName": "Echo Tool",
        "toolSlug": "echo-tool",
        "categorySlug": "test",
        "description": "Echoes its inputs.",
        "calculationLogic": "ECHO",
        "sections": [
            {
                "id": "details",
                "title": "Details",
                "required": True,
                "fields": [
                    {"name": "amount", "label": "Amount", "type": "number",
                     "required": True, "min": 0, "max": 100},
                    {"name": "distance", "label": "Distance", "type": "number",
                     "units": {"category": "length", "available": ["m", "cm", "ft"],
                               "default": "m"}},
                    {"name": "mode", "label": "Mode", "type": "select",
                     "options": [{"value": "fast", "label": "Fast"},
                                 {"value": "slow", "label": "Slow"}]},
                    {"name": "code", "label": "Code", "type": "text",
                     "validation": {"pattern": "[A-Z]{3}", "message": "Code must be three capitals"}},
                ],
            }
        ],
        "outputs": [
            {"name": "total", "label": "Total", "precision": 2,
             "units": {"category": "length", "available": ["m", "cm"], "default": "m"}},
        ],
    }
