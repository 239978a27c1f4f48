"""
BMI_CALCULATOR: body mass index, weight (kg) / height (m)².

``weightUnit`` and ``heightUnit`` may name any weight or length unit; values
are converted to kilograms and metres before the formula is applied.
"""
from __future__ import annotations

from typing import Any, Dict, List

from getcalculation.calculators.base import (
    BaseCalculator,
    CalculationError,
    clean_number,
    format_number,
    is_empty,
    positive_or_none,
)

# (upper bound, label); WHO adult categories
CATEGORIES = [
    (18.5, "Underweight"),
    (25.0, "Normal weight"),
    (30.0, "Overweight"),
]


def bmi_category(bmi: float) -> str:
    for upper, label in CATEGORIES:
        if bmi < upper:
            return label
    return "Obese"


class BMICalculator(BaseCalculator):
    key = "BMI_CALCULATOR"
    name = "BMI Calculator"

    def preferred_sections(self, flat: Dict[str, Any]) -> List[str]:
        return ["body-measurements"]

    def compute(self, values: Dict[str, Any]) -> Dict[str, Any]:
        if is_empty(values.get("weight")) or is_empty(values.get("height")):
            raise CalculationError("Weight and height are required.")
        weight = positive_or_none(values["weight"])
        height = positive_or_none(values["height"])
        if weight is None or height is None:
            raise CalculationError("Weight and height must be positive numbers.")

        weight_kg = self.converter.convert(weight, values.get("weightUnit") or "kg", "kg", "weight")
        height_m = self.converter.convert(height, values.get("heightUnit") or "m", "m", "length")

        bmi = weight_kg / (height_m * height_m)
        return {
            "bmi": clean_number(bmi, 2),
            "result": bmi,
            "category": bmi_category(bmi),
            "weightKg": clean_number(weight_kg, 2),
            "heightM": clean_number(height_m, 4),
            "formula": "BMI = weight (kg) / height (m)²",
            "calculation": (f"BMI = {format_number(weight_kg, 2)} / {format_number(height_m, 4)}² "
                            f"= {format_number(bmi, 2)}"),
        }


def calculate(inputs: Dict[str, Any], manifest: Any = None) -> Dict[str, Any]:
    return BMICalculator.run(inputs, manifest)
