"""SIMPLE_INTEREST: interest = principal * (rate / 100) * time in years."""
from __future__ import annotations

from typing import Any, Dict, List

from getcalculation.calculators.base import (
    BaseCalculator,
    CalculationError,
    format_number,
    is_empty,
    to_number,
)
from getcalculation.config import CURRENCY_PRECISION

# Periods per year. Days use 365.25 to account for leap years.
PERIODS_PER_YEAR = {
    "year": 1,
    "month": 12,
    "week": 52,
    "day": 365.25,
}


def _time_unit(raw: Any) -> str:
    unit = str(raw or "year").strip().lower()
    if unit.endswith("s") and unit[:-1] in PERIODS_PER_YEAR:
        unit = unit[:-1]
    if unit not in PERIODS_PER_YEAR:
        raise CalculationError(
            f"Unsupported time unit '{raw}'. Use one of: {', '.join(PERIODS_PER_YEAR)}."
        )
    return unit


class SimpleInterestCalculator(BaseCalculator):
    key = "SIMPLE_INTEREST"
    name = "Simple Interest Calculator"
    self_converted_fields = ("time",)

    def preferred_sections(self, flat: Dict[str, Any]) -> List[str]:
        return ["loan-details"]

    def compute(self, values: Dict[str, Any]) -> Dict[str, Any]:
        if any(is_empty(values.get(k)) for k in ("principal", "rate", "time")):
            raise CalculationError("Principal, rate, and time are required.")

        principal, rate, time = (to_number(values.get(k)) for k in ("principal", "rate", "time"))
        if principal is None or rate is None or time is None:
            raise CalculationError("Please enter valid numbers for all fields.")
        if principal <= 0 or rate < 0 or time <= 0:
            raise CalculationError("Principal and time must be positive, rate must be non-negative.")

        time_unit = _time_unit(values.get("timeUnit"))
        time_in_years = time / PERIODS_PER_YEAR[time_unit]

        interest = principal * (rate / 100) * time_in_years
        total_amount = principal + interest

        p, r, t = format_number(principal), format_number(rate), format_number(time_in_years)
        i = format_number(interest, CURRENCY_PRECISION)
        total = format_number(total_amount, CURRENCY_PRECISION)
        return {
            "principal": principal,
            "rate": rate,
            "time": time,
            "timeUnit": time_unit,
            "timeInYears": time_in_years,
            "interest": interest,
            "totalAmount": total_amount,
            "formula": "Interest = Principal × (Rate / 100) × Time",
            "calculation": f"Interest = {p} × ({r} / 100) × {t} = {i}",
            "totalCalculation": (
                f"Total Amount = {p} + {i} = {total}"
            ),
        }


def calculate(inputs: Dict[str, Any], manifest: Any = None) -> Dict[str, Any]:
    return SimpleInterestCalculator.run(inputs, manifest)
