"""
Calculation service: the ``calculate(logic_key, inputs, manifest=None)`` entry point.

Registry errors (unknown key, failed load) propagate so the caller can report
the tool as unavailable. Everything that goes wrong inside a calculation comes
back as an ``{"error": ...}`` result.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from getcalculation import config
from getcalculation.models import Manifest, validation_summary
from getcalculation.registry import CalculatorRegistry
from getcalculation.units import UnitConverter, unit_converter

logger = logging.getLogger(__name__)


def _err(message: str) -> Dict[str, Any]:
    return {"error": message}


class CalculationService:
    """Runs calculators resolved through an injected registry."""

    def __init__(self, registry: CalculatorRegistry, converter: Optional[UnitConverter] = None):
        self.registry = registry
        self.converter = converter or unit_converter

    def list_calculators(self) -> List[str]:
        return self.registry.get_available_calculators()

    def has_calculator(self, logic_key: str) -> bool:
        return self.registry.has_calculator(logic_key)

    def convert(self, value: float, from_unit: str, to_unit: str, category: str) -> float:
        return self.converter.convert(value, from_unit, to_unit, category)

    def execute(self, logic_key: str, inputs: Any,
                manifest: Any = None) -> Dict[str, Any]:
        """
        Run the calculator bound to ``logic_key``.

        Parameters
        ----------
        logic_key : registry key, e.g. ``MIDPOINT``
        inputs    : flat ``{field: value}`` or sectioned ``{section: {field: value}}``
        manifest  : Manifest, manifest dict, or None

        Returns
        -------
        result dict: outputs plus ``metadata`` on success, ``{"error": ...}`` on failure
        """
        func = self.registry.get_calculator(logic_key)

        if inputs is None:
            inputs = {}
        if not isinstance(inputs, Mapping):
            return _err(f"Inputs must be an object, got {type(inputs).__name__}")

        if manifest is not None and not isinstance(manifest, Manifest):
            try:
                manifest = Manifest.model_validate(manifest)
            except ValidationError as exc:
                logger.warning(f"{logic_key}: rejected manifest: {exc.error_count()} errors")
                return _err(f"Invalid manifest: {validation_summary(exc)}")

        if manifest is not None and manifest.calculation_logic \
                and manifest.calculation_logic != logic_key:
            logger.warning(
                f"Manifest {manifest.tool_slug or manifest.tool_name!r} is bound to "
                f"{manifest.calculation_logic}, running {logic_key}"
            )

        logger.debug(f"Calculating {logic_key} with inputs {sorted(inputs)}")
        try:
            result = func(dict(inputs), manifest)
        except Exception as exc:
            logger.exception(f"{logic_key}: calculator raised")
            return _err(f"Calculation failed: {exc}")

        if not isinstance(result, dict):
            return _err(f"Calculation failed: {logic_key} returned {type(result).__name__}")
        return result


@lru_cache(maxsize=None)
def get_default_service() -> CalculationService:
    """Process-wide service over a freshly scanned registry."""
    registry = CalculatorRegistry()
    registry.initialize(eager=config.EAGER_LOAD)
    return CalculationService(registry, unit_converter)


def calculate(logic_key: str, inputs: Any, manifest: Any = None) -> Dict[str, Any]:
    return get_default_service().execute(logic_key, inputs, manifest)
