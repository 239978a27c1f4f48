"""
Unit conversion tables and the converter used for calculator inputs/outputs.

Every category has one standard unit (factor 1, offset 0). Linear categories
convert as ``value * (to.factor / from.factor)``; temperature pivots through
Celsius because its units differ by an offset as well as a scale.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from getcalculation.models import UnitInfo

logger = logging.getLogger(__name__)


class UnknownUnitError(ValueError):
    """Raised when a unit or category is not in the conversion tables."""


def _u(factor: float, label: str, symbol: str, precision: int, step: float,
       offset: float = 0.0) -> UnitInfo:
    return UnitInfo(factor=factor, offset=offset, label=label, symbol=symbol,
                    precision=precision, step=step)


# ── Conversion tables ────────────────────────────────────────────────────────
# factor = how many of this unit make one standard unit

CONVERSION_TABLES: Dict[str, Dict[str, UnitInfo]] = {
    "length": {                                                  # base: metre
        "m":  _u(1,           "Meters",      "m",  2, 0.01),
        "cm": _u(100,         "Centimeters", "cm", 0, 1),
        "mm": _u(1000,        "Millimeters", "mm", 0, 1),
        "km": _u(0.001,       "Kilometers",  "km", 3, 0.001),
        "ft": _u(3.28084,     "Feet",        "ft", 2, 0.01),
        "in": _u(39.3701,     "Inches",      "in", 1, 0.1),
        "yd": _u(1.09361,     "Yards",       "yd", 2, 0.01),
        "mi": _u(0.000621371, "Miles",       "mi", 4, 0.0001),
    },
    "weight": {                                                  # base: kilogram
        "kg":  _u(1,       "Kilograms",   "kg", 2, 0.01),
        "g":   _u(1000,    "Grams",       "g",  0, 1),
        "lb":  _u(2.20462, "Pounds",      "lb", 2, 0.01),
        "oz":  _u(35.274,  "Ounces",      "oz", 1, 0.1),
        "ton": _u(0.001,   "Metric Tons", "t",  3, 0.001),
    },
    "temperature": {                                             # base: Celsius
        "c": _u(1,     "Celsius",    "°C", 1, 0.1),
        "f": _u(9 / 5, "Fahrenheit", "°F", 1, 0.1, offset=32),
        "k": _u(1,     "Kelvin",     "K",  1, 0.1, offset=273.15),
    },
    "area": {                                                    # base: square metre
        "m2":   _u(1,           "Square Meters",      "m²",   2, 0.01),
        "cm2":  _u(10000,       "Square Centimeters", "cm²",  0, 1),
        "ft2":  _u(10.7639,     "Square Feet",        "ft²",  2, 0.01),
        "in2":  _u(1550,        "Square Inches",      "in²",  1, 0.1),
        "acre": _u(0.000247105, "Acres",              "acre", 4, 0.0001),
    },
    "volume": {                                                  # base: litre
        "l":   _u(1,        "Liters",       "L",   2, 0.01),
        "ml":  _u(1000,     "Milliliters",  "mL",  0, 1),
        "gal": _u(0.264172, "Gallons (US)", "gal", 3, 0.001),
        "qt":  _u(1.05669,  "Quarts (US)",  "qt",  3, 0.001),
        "cup": _u(4.22675,  "Cups (US)",    "cup", 2, 0.01),
    },
    "time": {                                                    # base: year
        "year":  _u(1,        "Years",   "years",  2, 0.01),
        "month": _u(12,       "Months",  "months", 1, 0.1),
        "week":  _u(52,       "Weeks",   "weeks",  1, 0.1),
        "day":   _u(365,      "Days",    "days",   0, 1),
        "s":     _u(31556952, "Seconds", "s",      0, 1),
        "min":   _u(525949.2, "Minutes", "min",    0, 1),
        "h":     _u(8765.82,  "Hours",   "h",      1, 0.1),
    },
    "currency": {                                                # base: US dollar
        # static rates
        "usd": _u(1,    "US Dollar",     "$", 2, 0.01),
        "eur": _u(0.85, "Euro",          "€", 2, 0.01),
        "gbp": _u(0.73, "British Pound", "£", 2, 0.01),
        "jpy": _u(110,  "Japanese Yen",  "¥", 0, 1),
    },
}

# Categories whose units differ by an offset as well as a scale.
_OFFSET_CATEGORIES = {"temperature"}


class UnitConverter:
    """Converts values between units of the same category."""

    def __init__(self, tables: Optional[Dict[str, Dict[str, UnitInfo]]] = None):
        self.tables = tables if tables is not None else CONVERSION_TABLES

    # ── lookups ──────────────────────────────────────────────────────────────

    def _table(self, category: str) -> Dict[str, UnitInfo]:
        table = self.tables.get(category)
        if table is None:
            raise UnknownUnitError(f"Unknown unit category: {category}")
        return table

    def _info(self, unit: str, category: str) -> UnitInfo:
        info = self._table(category).get(unit)
        if info is None:
            raise UnknownUnitError(f"Invalid unit '{unit}' in category {category}")
        return info

    def get_categories(self) -> List[str]:
        return list(self.tables)

    def get_available_units(self, category: str) -> List[str]:
        return list(self.tables.get(category, {}))

    def get_unit_info(self, unit: str, category: str = "length") -> Optional[UnitInfo]:
        """Label, symbol, precision and step for a unit, or None if unknown."""
        return self.tables.get(category, {}).get(unit)

    def is_valid_unit(self, unit: str, category: str) -> bool:
        return unit in self.tables.get(category, {})

    def get_standard_unit(self, category: str) -> str:
        """The category's base unit: factor 1 and no offset."""
        for unit, info in self._table(category).items():
            if info.factor == 1 and info.offset == 0:
                return unit
        raise UnknownUnitError(f"Category {category} has no standard unit")

    # ── conversion ───────────────────────────────────────────────────────────

    def convert(self, value: float, from_unit: str, to_unit: str,
                category: str = "length") -> float:
        """
        Convert ``value`` from ``from_unit`` to ``to_unit`` within ``category``.

        Raises UnknownUnitError if the category or either unit is unknown.
        """
        from_info = self._info(from_unit, category)
        to_info = self._info(to_unit, category)

        if from_unit == to_unit:
            return value

        if category in _OFFSET_CATEGORIES:
            return self.convert_temperature(value, from_info, to_info)

        return value * (to_info.factor / from_info.factor)

    @staticmethod
    def convert_temperature(value: float, from_info: UnitInfo, to_info: UnitInfo) -> float:
        # to Celsius, then Celsius to the target
        celsius = (value - from_info.offset) / from_info.factor
        return celsius * to_info.factor + to_info.offset

    def convert_multiple(self, values: Dict[str, Dict[str, Any]], category: str,
                         target_unit: str) -> Dict[str, Dict[str, Any]]:
        """
        Convert a set of named ``{"value": ..., "unit": ...}`` entries to one unit.

        Entries with a null value or no unit are skipped.
        """
        results: Dict[str, Dict[str, Any]] = {}
        for key, data in values.items():
            if data.get("value") is None or not data.get("unit"):
                logger.debug(f"convert_multiple: skipping {key}")
                continue
            results[key] = {
                "value": self.convert(data["value"], data["unit"], target_unit, category),
                "unit": target_unit,
                "original": data,
            }
        return results

    def get_conversion_factors(self, category: str, base_unit: str) -> Dict[str, Dict[str, Any]]:
        """Factor, symbol and label of every other unit relative to ``base_unit``."""
        base = self._info(base_unit, category)
        return {
            unit: {
                "factor": info.factor / base.factor,
                "symbol": info.symbol,
                "label": info.label,
            }
            for unit, info in self._table(category).items()
            if unit != base_unit
        }


# Shared default instance; services may construct and inject their own.
unit_converter = UnitConverter()
