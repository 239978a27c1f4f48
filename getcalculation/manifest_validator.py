"""
Structural checks for manifest documents.

Works on the raw JSON mapping rather than the pydantic model, so a manifest
that would fail to parse still gets a full list of problems.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Optional, Set

from getcalculation.models import ManifestValidationResult
from getcalculation.registry import CalculatorRegistry
from getcalculation.units import CONVERSION_TABLES

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("toolName", "toolSlug", "categorySlug", "description", "calculationLogic")

VALID_FIELD_TYPES = ("number", "text", "email", "tel", "select", "checkbox", "radio")
VALID_UNIT_CATEGORIES = (*CONVERSION_TABLES, "percentage")
VALID_DISPLAY_TYPES = ("unit-selector", "dropdown", "toggle", "radio")
VALID_POSITIONS = ("left", "right", "below", "above")
VALID_OUTPUT_SECTIONS = ("primary", "secondary", "tertiary")

VALID_UI_COMPONENTS = ("generic", "specialized")
VALID_UI_LAYOUTS = ("single-section", "multi-section", "tabbed")
VALID_UI_THEMES = ("math", "chemistry", "finance", "engineering", "biology")
KNOWN_FEATURES = (
    "unitConversion", "healthCategories", "weightRecommendations",
    "trendAnalysis", "exportResults", "amortizationSchedule",
    "extraPayments", "taxInsuranceCalculation", "comparisonMode",
)

SLUG_RE = re.compile(r"^[a-z0-9-]+$")
LOGIC_KEY_RE = re.compile(r"^[A-Z_]+$")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ManifestValidator:
    """Collects errors, warnings and info for one manifest per ``validate()`` call."""

    def validate(self, manifest: Any,
                 registry: Optional[CalculatorRegistry] = None) -> ManifestValidationResult:
        result = ManifestValidationResult()
        if not isinstance(manifest, Mapping):
            result.errors.append("Manifest must be a JSON object")
            result.is_valid = False
            return result

        self._required_fields(manifest, result)
        self._basic_structure(manifest, result)

        if manifest.get("sections") is not None:
            self._sections(manifest["sections"], result)
        elif manifest.get("parameters") is not None:
            self._legacy_parameters(manifest["parameters"], result)
            result.warnings.append(
                "Using legacy parameter format. Consider upgrading to section-based format."
            )
        else:
            result.errors.append('Manifest must have either "sections" or "parameters" field')

        if manifest.get("outputs") is not None:
            self._outputs(manifest["outputs"], result)
        else:
            result.warnings.append("No outputs defined. Results may not display properly.")

        if isinstance(manifest.get("ui"), Mapping):
            self._ui_config(manifest["ui"], result)
        if isinstance(manifest.get("seo"), Mapping):
            self._seo_config(manifest["seo"], result)
        if isinstance(manifest.get("features"), Mapping):
            self._features(manifest["features"], result)

        logic = manifest.get("calculationLogic")
        if registry is not None and isinstance(logic, str) and logic:
            if registry.has_calculator(logic):
                result.info.append(f"calculationLogic {logic} is registered")
            else:
                result.errors.append(f"calculationLogic {logic} has no registered calculator")

        result.is_valid = not result.errors
        logger.debug(f"Validated manifest {manifest.get('toolSlug')!r}: "
                     f"{len(result.errors)} errors, {len(result.warnings)} warnings")
        return result

    # ── top level ────────────────────────────────────────────────────────────

    def _required_fields(self, manifest: Mapping, result: ManifestValidationResult) -> None:
        for name in REQUIRED_FIELDS:
            value = manifest.get(name)
            if value is None or value == "":
                result.errors.append(f"Required field missing: {name}")
            elif not isinstance(value, str) or not value.strip():
                result.errors.append(f"Required field empty or invalid: {name}")

    def _basic_structure(self, manifest: Mapping, result: ManifestValidationResult) -> None:
        for name in ("toolSlug", "categorySlug"):
            value = manifest.get(name)
            if isinstance(value, str) and value and not SLUG_RE.match(value):
                result.errors.append(
                    f"{name} must contain only lowercase letters, numbers, and hyphens"
                )

        logic = manifest.get("calculationLogic")
        if isinstance(logic, str) and logic and not LOGIC_KEY_RE.match(logic):
            result.warnings.append("calculationLogic should use UPPER_CASE_WITH_UNDERSCORES format")

    # ── sections and fields ──────────────────────────────────────────────────

    def _sections(self, sections: Any, result: ManifestValidationResult) -> None:
        if not isinstance(sections, list):
            result.errors.append("sections must be an array")
            return
        if not sections:
            result.errors.append("At least one section is required")
            return

        section_ids: Set[str] = set()
        for i, section in enumerate(sections):
            self._section(section, f"sections[{i}]", result, section_ids)

    def _section(self, section: Any, path: str, result: ManifestValidationResult,
                 section_ids: Set[str]) -> None:
        if not isinstance(section, Mapping):
            result.errors.append(f"{path}: Section must be an object")
            return

        section_id = section.get("id")
        if not section_id:
            result.errors.append(f'{path}: Missing required field "id"')
        elif section_id in section_ids:
            result.errors.append(f'{path}: Duplicate section ID "{section_id}"')
        else:
            section_ids.add(section_id)

        if not section.get("title"):
            result.errors.append(f'{path}: Missing required field "title"')

        fields = section.get("fields")
        if not isinstance(fields, list):
            result.errors.append(f'{path}: Missing or invalid "fields" array')
            return
        if not fields:
            result.warnings.append(f"{path}: Section has no fields")

        field_names: Set[str] = set()
        for i, field in enumerate(fields):
            self._field(field, f"{path}.fields[{i}]", result, field_names)

        order = section.get("order")
        if order is not None and (not _is_number(order) or order < 1):
            result.warnings.append(f"{path}: order should be a positive number")
        for flag in ("required", "collapsible"):
            if flag in section and not isinstance(section[flag], bool):
                result.warnings.append(f"{path}: {flag} should be a boolean")

    def _field(self, field: Any, path: str, result: ManifestValidationResult,
               field_names: Set[str]) -> None:
        if not isinstance(field, Mapping):
            result.errors.append(f"{path}: Field must be an object")
            return

        name = field.get("name")
        if not name:
            result.errors.append(f'{path}: Missing required field "name"')
        elif name in field_names:
            result.errors.append(f'{path}: Duplicate field name "{name}"')
        else:
            field_names.add(name)

        if not field.get("label"):
            result.errors.append(f'{path}: Missing required field "label"')

        field_type = field.get("type")
        if not field_type:
            result.errors.append(f'{path}: Missing required field "type"')
        elif field_type not in VALID_FIELD_TYPES:
            result.errors.append(f'{path}: Invalid field type "{field_type}". '
                                 f"Valid types: {', '.join(VALID_FIELD_TYPES)}")

        if field.get("units"):
            self._field_units(field["units"], f"{path}.units", result)
        if field.get("validation"):
            self._field_validation(field["validation"], f"{path}.validation", result)
        if isinstance(field.get("ui"), Mapping):
            self._field_ui(field["ui"], f"{path}.ui", result)
        if field_type == "number":
            self._numeric_field(field, path, result)
        if field.get("conditional"):
            self._conditional(field["conditional"], f"{path}.conditional", result)

    def _field_units(self, units: Any, path: str, result: ManifestValidationResult) -> None:
        if not isinstance(units, Mapping):
            result.errors.append(f"{path}: units must be an object")
            return

        category = units.get("category")
        if not category:
            result.errors.append(f'{path}: Missing required field "category"')
        elif category not in VALID_UNIT_CATEGORIES:
            result.errors.append(f'{path}: Invalid unit category "{category}". '
                                 f"Valid categories: {', '.join(VALID_UNIT_CATEGORIES)}")

        available = units.get("available")
        if not isinstance(available, list):
            result.errors.append(f'{path}: Missing or invalid "available" array')
            available = None
        elif not available:
            result.errors.append(f'{path}: "available" array cannot be empty')

        default = units.get("default")
        if not default:
            result.warnings.append(f"{path}: No default unit specified")
        elif available is not None and default not in available:
            result.errors.append(f'{path}: Default unit "{default}" not found in available units')

    def _field_validation(self, rules: Any, path: str, result: ManifestValidationResult) -> None:
        if not isinstance(rules, Mapping):
            result.errors.append(f"{path}: validation must be an object")
            return

        low, high = rules.get("min"), rules.get("max")
        if low is not None and not _is_number(low):
            result.errors.append(f'{path}: "min" must be a number')
        if high is not None and not _is_number(high):
            result.errors.append(f'{path}: "max" must be a number')
        if _is_number(low) and _is_number(high) and low > high:
            result.errors.append(f'{path}: "min" cannot be greater than "max"')

        pattern = rules.get("pattern")
        if pattern is not None:
            try:
                re.compile(pattern)
            except (re.error, TypeError):
                result.errors.append(f'{path}: "pattern" must be a valid regular expression')

        if rules.get("choices") is not None and not isinstance(rules["choices"], list):
            result.errors.append(f'{path}: "choices" must be an array')
        if "custom" in rules:
            result.errors.append(f'{path}: "custom" expressions are not supported; '
                                 f"use min, max, pattern or choices")
        if rules.get("message") and not isinstance(rules["message"], str):
            result.warnings.append(f'{path}: "message" should be a string')

    def _field_ui(self, ui: Mapping, path: str, result: ManifestValidationResult) -> None:
        display, position = ui.get("display"), ui.get("position")
        if display and display not in VALID_DISPLAY_TYPES:
            result.warnings.append(f'{path}: Invalid display type "{display}". '
                                   f"Valid types: {', '.join(VALID_DISPLAY_TYPES)}")
        if position and position not in VALID_POSITIONS:
            result.warnings.append(f'{path}: Invalid position "{position}". '
                                   f"Valid positions: {', '.join(VALID_POSITIONS)}")

    def _numeric_field(self, field: Mapping, path: str, result: ManifestValidationResult) -> None:
        for bound in ("min", "max"):
            if field.get(bound) is not None and not _is_number(field[bound]):
                result.errors.append(f'{path}: "{bound}" must be a number for numeric fields')
        step = field.get("step")
        if step is not None and (not _is_number(step) or step <= 0):
            result.errors.append(f'{path}: "step" must be a positive number')

    def _conditional(self, conditional: Any, path: str, result: ManifestValidationResult) -> None:
        if not isinstance(conditional, Mapping):
            result.errors.append(f"{path}: conditional must be an object")
            return
        for key in ("showWhen", "hideWhen"):
            if conditional.get(key) and not isinstance(conditional[key], str):
                result.errors.append(f'{path}: "{key}" must be a string expression')

    def _legacy_parameters(self, parameters: Any, result: ManifestValidationResult) -> None:
        if not isinstance(parameters, list):
            result.errors.append("parameters must be an array")
            return

        names: Set[str] = set()
        for i, param in enumerate(parameters):
            path = f"parameters[{i}]"
            if not isinstance(param, Mapping):
                result.errors.append(f"{path}: Parameter must be an object")
                continue
            name = param.get("name")
            if not name:
                result.errors.append(f'{path}: Missing required field "name"')
            elif name in names:
                result.errors.append(f'{path}: Duplicate parameter name "{name}"')
            else:
                names.add(name)
            for key in ("label", "type"):
                if not param.get(key):
                    result.errors.append(f'{path}: Missing required field "{key}"')

    # ── outputs and hints ────────────────────────────────────────────────────

    def _outputs(self, outputs: Any, result: ManifestValidationResult) -> None:
        if not isinstance(outputs, list):
            result.errors.append("outputs must be an array")
            return

        names: Set[str] = set()
        for i, output in enumerate(outputs):
            path = f"outputs[{i}]"
            if not isinstance(output, Mapping):
                result.errors.append(f"{path}: Output must be an object")
                continue

            name = output.get("name")
            if not name:
                result.errors.append(f'{path}: Missing required field "name"')
            elif name in names:
                result.errors.append(f'{path}: Duplicate output name "{name}"')
            else:
                names.add(name)

            if not output.get("label"):
                result.errors.append(f'{path}: Missing required field "label"')

            section = output.get("section")
            if section and section not in VALID_OUTPUT_SECTIONS:
                result.warnings.append(f'{path}: Invalid section "{section}". '
                                       f"Valid sections: {', '.join(VALID_OUTPUT_SECTIONS)}")

            precision = output.get("precision")
            if precision is not None and (not _is_number(precision) or precision < 0):
                result.errors.append(f'{path}: "precision" must be a non-negative number')

    def _ui_config(self, ui: Mapping, result: ManifestValidationResult) -> None:
        checks = (
            ("component", VALID_UI_COMPONENTS, "components"),
            ("layout", VALID_UI_LAYOUTS, "layouts"),
            ("theme", VALID_UI_THEMES, "themes"),
        )
        for key, valid, plural in checks:
            value = ui.get(key)
            if value and value not in valid:
                result.warnings.append(f'Invalid UI {key} "{value}". '
                                       f"Valid {plural}: {', '.join(valid)}")

    def _seo_config(self, seo: Mapping, result: ManifestValidationResult) -> None:
        for key in ("keywords", "scenarios"):
            if seo.get(key) and not isinstance(seo[key], list):
                result.warnings.append(f"SEO {key} should be an array")
        if seo.get("metaDescription") and not isinstance(seo["metaDescription"], str):
            result.warnings.append("SEO metaDescription should be a string")

    def _features(self, features: Mapping, result: ManifestValidationResult) -> None:
        for feature, value in features.items():
            if feature not in KNOWN_FEATURES:
                result.warnings.append(f'Unknown feature "{feature}"')
            if not isinstance(value, bool):
                result.warnings.append(f'Feature "{feature}" should be a boolean value')


manifest_validator = ManifestValidator()


def validate_manifest(document: Any,
                      registry: Optional[CalculatorRegistry] = None) -> ManifestValidationResult:
    return manifest_validator.validate(document, registry)
