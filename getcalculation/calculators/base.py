"""
Shared lifecycle for calculator strategies.

A strategy subclasses BaseCalculator, implements ``compute()`` and exposes a
module-level ``calculate(inputs, manifest=None)``. Everything else lives here:

    canonicalize inputs -> validate -> normalize units -> compute -> format

Strategies signal bad input or a broken domain constraint by raising
CalculationError; ``execute()`` turns that into an ``{"error": ...}`` result.
Nothing raised inside a calculation escapes ``execute()``.
"""
from __future__ import annotations

import logging
import math
import numbers
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError

from getcalculation.config import DEFAULT_PRECISION, WORDS_PRECISION
from getcalculation.models import (
    FieldValidation,
    Manifest,
    ManifestField,
    Section,
    UnitConfig,
    validation_summary,
)
from getcalculation.units import UnitConverter, UnknownUnitError, unit_converter

logger = logging.getLogger(__name__)

Number = Union[int, float]


class CalculationError(ValueError):
    """Invalid input or violated domain constraint; reported as a result, not raised."""


# ── Numeric helpers ──────────────────────────────────────────────────────────

def round_half_away(value: float, places: int = DEFAULT_PRECISION) -> float:
    """Round to ``places`` decimals, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    if not math.isfinite(value):
        return value
    d = Decimal(repr(float(value)))
    ctx = Context(prec=max(28, d.adjusted() + places + 2))
    return float(d.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP, context=ctx))


def clean_number(value: float, places: int = DEFAULT_PRECISION) -> Number:
    """Rounded value; integral results come back as int."""
    rounded = round_half_away(value, places)
    if math.isfinite(rounded) and rounded.is_integer():
        return int(rounded)
    return rounded


def clean_optional(value: Optional[float], places: int = DEFAULT_PRECISION) -> Optional[Number]:
    return None if value is None else clean_number(value, places)


def format_number(value: float, places: int = DEFAULT_PRECISION) -> str:
    """Display form: integers without a decimal point, no trailing zeros."""
    cleaned = clean_number(value, places)
    if isinstance(cleaned, int):
        return str(cleaned)
    return f"{cleaned:.{places}f}".rstrip("0").rstrip(".")


def format_point(x: float, y: float) -> str:
    return f"({format_number(x)}, {format_number(y)})"


def number_in_words(value: float) -> str:
    if value == 0:
        return "zero"
    rounded = clean_number(value, WORDS_PRECISION)
    if isinstance(rounded, int):
        return str(rounded)
    return f"approximately {format_number(rounded, WORDS_PRECISION)}"


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def to_number(value: Any) -> Optional[float]:
    """Parse a finite real number; None for anything else (bools included)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        num = float(value)
    elif isinstance(value, (str, Decimal)):
        try:
            num = float(value)
        except ValueError:
            return None
    else:
        return None
    return num if math.isfinite(num) else None


def first_present(values: Mapping, *names: str) -> Any:
    """Value of the first name that is set; lets strategies accept aliases."""
    for name in names:
        if not is_empty(values.get(name)):
            return values[name]
    return None


def require_number(value: Any, message: str) -> float:
    num = to_number(value)
    if num is None:
        raise CalculationError(message)
    return num


def optional_number(value: Any, message: str, default: Optional[float] = None) -> Optional[float]:
    """``default`` when the value is unset; CalculationError when it is set but not numeric."""
    if is_empty(value):
        return default
    return require_number(value, message)


def require_numbers(values: Mapping, names: Iterable[str], message: str) -> List[float]:
    parsed = [to_number(values.get(name)) for name in names]
    if any(num is None for num in parsed):
        raise CalculationError(message)
    return parsed  # type: ignore[return-value]


def positive_or_none(value: Any) -> Optional[float]:
    num = to_number(value)
    return num if num is not None and num > 0 else None


def require_positive(values: Mapping, names: Iterable[str], message: str) -> List[float]:
    parsed = [positive_or_none(values.get(name)) for name in names]
    if any(num is None for num in parsed):
        raise CalculationError(message)
    return parsed  # type: ignore[return-value]


def _option_values(options: Iterable[Any]) -> List[str]:
    return [str(o.get("value")) if isinstance(o, Mapping) else str(o) for o in options]


def _coerce_manifest(manifest: Any) -> Optional[Manifest]:
    if manifest is None or isinstance(manifest, Manifest):
        return manifest
    return Manifest.model_validate(manifest)


# ── Base class ───────────────────────────────────────────────────────────────

class BaseCalculator:
    """
    Lifecycle every calculator follows.

    Attributes
    ----------
    key       : logic key the strategy is registered under
    name      : human readable name, used in metadata when no manifest is given
    inputs    : canonical flat inputs (after section flattening)
    errors    : accumulated validation/calculation errors
    warnings  : non-fatal notes attached to the result
    """

    key: str = ""
    name: str = "Calculator"
    # Fields the strategy converts itself; normalize_inputs() leaves them alone.
    self_converted_fields: Tuple[str, ...] = ()

    def __init__(self, inputs: Optional[Mapping] = None, manifest: Any = None,
                 converter: Optional[UnitConverter] = None):
        self.raw_inputs: Dict[str, Any] = dict(inputs or {})
        self.manifest_source = manifest
        self.manifest: Optional[Manifest] = manifest if isinstance(manifest, Manifest) else None
        self.converter = converter or unit_converter
        self.inputs: Dict[str, Any] = {}
        self.normalized_inputs: Dict[str, Any] = {}
        self.results: Dict[str, Any] = {}
        self.errors: List[str] = []
        self.warnings: List[str] = []

    @classmethod
    def run(cls, inputs: Optional[Mapping], manifest: Any = None) -> Dict[str, Any]:
        return cls(inputs, manifest).execute()

    # ── input shape ──────────────────────────────────────────────────────────

    def preferred_sections(self, flat: Dict[str, Any]) -> List[str]:
        """Sections merged last, so their values win over any other section."""
        return []

    def canonicalize_inputs(self) -> Dict[str, Any]:
        """
        Collapse flat and section-grouped payloads into one flat mapping.

        Mapping-valued entries are sections; their non-empty values override
        flat keys of the same name.
        """
        flat = {k: v for k, v in self.raw_inputs.items() if not isinstance(v, Mapping)}
        sections = {k: v for k, v in self.raw_inputs.items() if isinstance(v, Mapping)}

        def merge(data: Mapping) -> None:
            for name, value in data.items():
                if not is_empty(value) or name not in flat:
                    flat[name] = value

        for data in sections.values():
            merge(data)
        for section_id in self.preferred_sections(flat):
            if section_id in sections:
                merge(sections[section_id])
        return flat

    # ── validation ───────────────────────────────────────────────────────────

    def has_section_data(self, section: Section) -> bool:
        if any(not is_empty(self.inputs.get(f.name)) for f in section.fields):
            return True
        data = self.raw_inputs.get(section.id)
        return isinstance(data, Mapping) and any(not is_empty(v) for v in data.values())

    def validate_inputs(self) -> bool:
        """Check inputs against the manifest; errors accumulate instead of raising."""
        if self.manifest is None:
            return True

        if self.manifest.sections is not None:
            for section in self.manifest.sections:
                if section.required and not self.has_section_data(section):
                    self.add_error(f'Section "{section.title or section.id}" is required')
                    continue
                for field in section.fields:
                    self._check_field(field)
        else:
            for field in self.manifest.parameters or []:
                self._check_field(field)

        return not self.errors

    def _check_field(self, field: ManifestField) -> None:
        value = self.inputs.get(field.name)
        if is_empty(value):
            if field.required:
                self.add_error(f"{field.display_name} is required")
            return
        if not self.validate_field(field, value):
            rules = field.validation
            self.add_error(rules.message if rules and rules.message
                           else f"Invalid value for {field.display_name}")

    def validate_field(self, field: ManifestField, value: Any) -> bool:
        rules = field.validation or FieldValidation()

        if field.type == "number":
            number = to_number(value)
            if number is None:
                return False
            for lower in (field.min, rules.min):
                if lower is not None and number < lower:
                    return False
            for upper in (field.max, rules.max):
                if upper is not None and number > upper:
                    return False

        if field.type in ("select", "radio") and field.options:
            if str(value) not in _option_values(field.options):
                return False

        if rules.choices is not None and str(value) not in _option_values(rules.choices):
            return False

        if rules.pattern is not None:
            try:
                if re.fullmatch(rules.pattern, str(value)) is None:
                    return False
            except re.error as exc:
                logger.warning(f"Bad validation pattern on {field.name}: {exc}")
                return False

        return True

    # ── units ────────────────────────────────────────────────────────────────

    def normalize_inputs(self) -> Dict[str, Any]:
        """Convert unit-tagged fields (``<field>`` + ``<field>Unit``) to standard units."""
        normalized = dict(self.inputs)
        if self.manifest is None:
            return normalized

        for _, field in self.manifest.iter_fields():
            unit_key = f"{field.name}Unit"
            value = normalized.get(field.name)
            unit = normalized.get(unit_key)
            if field.units is None or field.name in self.self_converted_fields:
                continue
            if is_empty(value) or is_empty(unit):
                continue
            number = to_number(value)
            if number is None:
                continue
            category = field.units.category
            standard = self.converter.get_standard_unit(category)
            normalized[field.name] = self.converter.convert(number, unit, standard, category)
            normalized[unit_key] = standard

        return normalized

    # ── output ───────────────────────────────────────────────────────────────

    def get_output_conversions(self, value: float, unit_config: UnitConfig) -> Dict[str, float]:
        base_unit = unit_config.default or unit_config.available[0]
        return {
            unit: self.converter.convert(value, base_unit, unit, unit_config.category)
            for unit in unit_config.available
            if unit != base_unit
        }

    def format_results(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        """Apply manifest output precision and attach ``<name>Conversions`` maps."""
        formatted = dict(raw)
        if self.manifest is None:
            return formatted

        for output in self.manifest.outputs:
            value = formatted.get(output.name)
            if to_number(value) is None:
                continue
            if output.precision is not None:
                value = clean_number(float(value), output.precision)
                formatted[output.name] = value
            if output.units and output.units.available:
                try:
                    formatted[f"{output.name}Conversions"] = self.get_output_conversions(
                        float(value), output.units)
                except UnknownUnitError as exc:
                    self.add_warning(f"No conversions for {output.name}: {exc}")

        return formatted

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def get_results(self) -> Dict[str, Any]:
        result = {
            **self.results,
            "metadata": {
                "hasErrors": bool(self.errors),
                "hasWarnings": bool(self.warnings),
                "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds")
                                     .replace("+00:00", "Z"),
                "calculator": (self.manifest.tool_name if self.manifest and self.manifest.tool_name
                               else self.name),
            },
        }
        if self.errors:
            result["error"] = ", ".join(self.errors)
            result["errors"] = list(self.errors)
        if self.warnings:
            result["warnings"] = list(self.warnings)
        return result

    # ── workflow ─────────────────────────────────────────────────────────────

    def compute(self, values: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError(f"{type(self).__name__} must implement compute()")

    def execute(self) -> Dict[str, Any]:
        try:
            self.manifest = _coerce_manifest(self.manifest_source)
        except ValidationError as exc:
            logger.debug(f"{self.key}: rejected manifest: {exc.error_count()} errors")
            return {"error": f"Invalid manifest: {validation_summary(exc)}"}

        self.inputs = self.canonicalize_inputs()

        if not self.validate_inputs():
            logger.debug(f"{self.key}: validation failed: {self.errors}")
            return {"error": ", ".join(self.errors), "errors": list(self.errors)}

        try:
            self.normalized_inputs = self.normalize_inputs()
            raw = self.compute(self.normalized_inputs)
        except (CalculationError, UnknownUnitError) as exc:
            logger.debug(f"{self.key}: rejected: {exc}")
            result: Dict[str, Any] = {"error": str(exc)}
            if self.warnings:
                result["warnings"] = list(self.warnings)
            return result
        except Exception as exc:
            logger.exception(f"{self.key}: unexpected calculation error")
            self.add_error(f"Calculation failed: {exc}")
            return self.get_results()

        self.results = self.format_results(raw)
        return self.get_results()
