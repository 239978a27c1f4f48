"""DECIMAL_TO_PERCENT: percent = decimal * 100."""
from __future__ import annotations

from typing import Any, Dict

from getcalculation.calculators.base import (
    BaseCalculator,
    CalculationError,
    clean_number,
    format_number,
    is_empty,
    require_number,
)


class DecimalToPercentCalculator(BaseCalculator):
    key = "DECIMAL_TO_PERCENT"
    name = "Decimal to Percent Calculator"

    def compute(self, values: Dict[str, Any]) -> Dict[str, Any]:
        if is_empty(values.get("decimal")):
            raise CalculationError("Decimal number is required.")
        decimal = require_number(values["decimal"], "Please enter a valid decimal number.")

        # 0.07 * 100 is 7.000000000000001 in binary floating point
        percent = clean_number(decimal * 100, 10)
        return {
            "decimal": decimal,
            "percent": percent,
            "formula": "Percent = Decimal × 100",
            "calculation": f"{format_number(decimal, 10)} × 100 = {format_number(percent, 10)}%",
        }


def calculate(inputs: Dict[str, Any], manifest: Any = None) -> Dict[str, Any]:
    return DecimalToPercentCalculator.run(inputs, manifest)
