import copy

import pytest

from getcalculation.manifest_validator import ManifestValidator, validate_manifest


@pytest.fixture
def validator():
    return ManifestValidator()


def _field(manifest, **changes):
    manifest["sections"][0]["fields"][0].update(changes)
    return manifest


class TestValidManifests:
    def test_clean_manifest(self, midpoint_manifest):
        result = validate_manifest(midpoint_manifest)
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_unit_and_validation_rules(self, measured_manifest):
        assert validate_manifest(measured_manifest).is_valid

    def test_does_not_mutate_input(self, midpoint_manifest):
        before = copy.deepcopy(midpoint_manifest)
        validate_manifest(midpoint_manifest)
        assert midpoint_manifest == before

    def test_validator_is_reusable(self, validator, midpoint_manifest):
        assert not validator.validate({}).is_valid
        assert validator.validate(midpoint_manifest).is_valid


class TestTopLevel:
    def test_not_an_object(self, validator):
        result = validator.validate(["not", "a", "manifest"])
        assert result.errors == ["Manifest must be a JSON object"]
        assert not result.is_valid

    @pytest.mark.parametrize("name", ["toolName", "toolSlug", "categorySlug",
                                      "description", "calculationLogic"])
    def test_required_field_missing(self, midpoint_manifest, name):
        del midpoint_manifest[name]
        result = validate_manifest(midpoint_manifest)
        assert f"Required field missing: {name}" in result.errors

    def test_required_field_blank(self, midpoint_manifest):
        midpoint_manifest["description"] = "   "
        result = validate_manifest(midpoint_manifest)
        assert "Required field empty or invalid: description" in result.errors

    def test_slug_format(self, midpoint_manifest):
        midpoint_manifest["toolSlug"] = "Mid Point"
        result = validate_manifest(midpoint_manifest)
        assert "toolSlug must contain only lowercase letters, numbers, and hyphens" in result.errors

    def test_logic_key_format_is_warning(self, midpoint_manifest):
        midpoint_manifest["calculationLogic"] = "midpoint"
        result = validate_manifest(midpoint_manifest)
        assert result.is_valid
        assert "calculationLogic should use UPPER_CASE_WITH_UNDERSCORES format" in result.warnings

    def test_needs_sections_or_parameters(self, midpoint_manifest):
        del midpoint_manifest["sections"]
        result = validate_manifest(midpoint_manifest)
        assert 'Manifest must have either "sections" or "parameters" field' in result.errors

    def test_legacy_parameters_warn(self, midpoint_manifest):
        del midpoint_manifest["sections"]
        midpoint_manifest["parameters"] = [
            {"name": "x1", "label": "x₁", "type": "number"},
            {"name": "x1", "label": "again", "type": "number"},
        ]
        result = validate_manifest(midpoint_manifest)
        assert 'parameters[1]: Duplicate parameter name "x1"' in result.errors
        assert any("legacy parameter format" in w for w in result.warnings)

    def test_missing_outputs_warn(self, midpoint_manifest):
        del midpoint_manifest["outputs"]
        result = validate_manifest(midpoint_manifest)
        assert result.is_valid
        assert "No outputs defined. Results may not display properly." in result.warnings


class TestSections:
    def test_empty_sections(self, midpoint_manifest):
        midpoint_manifest["sections"] = []
        assert validate_manifest(midpoint_manifest).errors == ["At least one section is required"]

    def test_duplicate_section_id(self, midpoint_manifest):
        midpoint_manifest["sections"].append(copy.deepcopy(midpoint_manifest["sections"][0]))
        result = validate_manifest(midpoint_manifest)
        assert 'sections[1]: Duplicate section ID "point-coordinates"' in result.errors

    def test_missing_title_and_fields(self, midpoint_manifest):
        midpoint_manifest["sections"] = [{"id": "empty"}]
        result = validate_manifest(midpoint_manifest)
        assert 'sections[0]: Missing required field "title"' in result.errors
        assert 'sections[0]: Missing or invalid "fields" array' in result.errors

    def test_bad_order_warns(self, midpoint_manifest):
        midpoint_manifest["sections"][0]["order"] = 0
        result = validate_manifest(midpoint_manifest)
        assert "sections[0]: order should be a positive number" in result.warnings

    def test_duplicate_field(self, midpoint_manifest):
        _field(midpoint_manifest, name="y1")
        result = validate_manifest(midpoint_manifest)
        assert 'sections[0].fields[1]: Duplicate field name "y1"' in result.errors

    def test_invalid_field_type(self, midpoint_manifest):
        _field(midpoint_manifest, type="slider")
        result = validate_manifest(midpoint_manifest)
        assert any(e.startswith('sections[0].fields[0]: Invalid field type "slider"')
                   for e in result.errors)

    def test_numeric_bounds_and_step(self, midpoint_manifest):
        _field(midpoint_manifest, min="zero", step=0)
        errors = validate_manifest(midpoint_manifest).errors
        assert 'sections[0].fields[0]: "min" must be a number for numeric fields' in errors
        assert 'sections[0].fields[0]: "step" must be a positive number' in errors

    def test_conditional_must_be_string(self, midpoint_manifest):
        _field(midpoint_manifest, conditional={"showWhen": 5})
        errors = validate_manifest(midpoint_manifest).errors
        assert 'sections[0].fields[0].conditional: "showWhen" must be a string expression' in errors


class TestFieldUnitsAndValidation:
    def test_unknown_unit_category(self, midpoint_manifest):
        _field(midpoint_manifest, units={"category": "luminosity", "available": ["lux"],
                                         "default": "lux"})
        errors = validate_manifest(midpoint_manifest).errors
        assert any('Invalid unit category "luminosity"' in e for e in errors)

    def test_percentage_category_allowed(self, midpoint_manifest):
        _field(midpoint_manifest, units={"category": "percentage", "available": ["%"],
                                         "default": "%"})
        assert validate_manifest(midpoint_manifest).is_valid

    def test_default_unit_must_be_available(self, midpoint_manifest):
        _field(midpoint_manifest, units={"category": "length", "available": ["m"],
                                         "default": "ft"})
        errors = validate_manifest(midpoint_manifest).errors
        assert 'sections[0].fields[0].units: Default unit "ft" not found in available units' \
            in errors

    def test_empty_available_units(self, midpoint_manifest):
        _field(midpoint_manifest, units={"category": "length", "available": []})
        result = validate_manifest(midpoint_manifest)
        assert 'sections[0].fields[0].units: "available" array cannot be empty' in result.errors
        assert "sections[0].fields[0].units: No default unit specified" in result.warnings

    def test_min_greater_than_max(self, midpoint_manifest):
        _field(midpoint_manifest, validation={"min": 10, "max": 1})
        errors = validate_manifest(midpoint_manifest).errors
        assert 'sections[0].fields[0].validation: "min" cannot be greater than "max"' in errors

    def test_bad_pattern(self, midpoint_manifest):
        _field(midpoint_manifest, validation={"pattern": "[unclosed"})
        errors = validate_manifest(midpoint_manifest).errors
        assert 'sections[0].fields[0].validation: "pattern" must be a valid regular expression' \
            in errors

    def test_custom_expressions_rejected(self, midpoint_manifest):
        _field(midpoint_manifest, validation={"custom": "value % 2 == 0"})
        errors = validate_manifest(midpoint_manifest).errors
        assert any('"custom" expressions are not supported' in e for e in errors)

    def test_choices_must_be_list(self, midpoint_manifest):
        _field(midpoint_manifest, validation={"choices": "a,b"})
        errors = validate_manifest(midpoint_manifest).errors
        assert 'sections[0].fields[0].validation: "choices" must be an array' in errors

    def test_field_ui_hints_warn(self, midpoint_manifest):
        _field(midpoint_manifest, ui={"display": "knob", "position": "middle"})
        result = validate_manifest(midpoint_manifest)
        assert result.is_valid
        assert len(result.warnings) == 2


class TestOutputsAndHints:
    def test_duplicate_output(self, midpoint_manifest):
        midpoint_manifest["outputs"][1]["name"] = "midpointX"
        errors = validate_manifest(midpoint_manifest).errors
        assert 'outputs[1]: Duplicate output name "midpointX"' in errors

    def test_negative_precision(self, midpoint_manifest):
        midpoint_manifest["outputs"][0]["precision"] = -1
        errors = validate_manifest(midpoint_manifest).errors
        assert 'outputs[0]: "precision" must be a non-negative number' in errors

    def test_output_section_warns(self, midpoint_manifest):
        midpoint_manifest["outputs"][0]["section"] = "sidebar"
        result = validate_manifest(midpoint_manifest)
        assert result.is_valid
        assert result.warnings[0].startswith('outputs[0]: Invalid section "sidebar"')

    def test_ui_seo_features(self, midpoint_manifest):
        midpoint_manifest["ui"] = {"component": "generic", "layout": "grid", "theme": "math"}
        midpoint_manifest["seo"] = {"keywords": "midpoint"}
        midpoint_manifest["features"] = {"unitConversion": True, "teleport": "yes"}
        result = validate_manifest(midpoint_manifest)
        assert result.is_valid
        assert result.warnings == [
            'Invalid UI layout "grid". Valid layouts: single-section, multi-section, tabbed',
            "SEO keywords should be an array",
            'Unknown feature "teleport"',
            'Feature "teleport" should be a boolean value',
        ]


class TestRegistryCheck:
    def test_registered_logic(self, midpoint_manifest, registry):
        result = validate_manifest(midpoint_manifest, registry)
        assert result.is_valid
        assert result.info == ["calculationLogic MIDPOINT is registered"]

    def test_unregistered_logic(self, measured_manifest, registry):
        result = validate_manifest(measured_manifest, registry)
        assert not result.is_valid
        assert result.errors == ["calculationLogic ECHO has no registered calculator"]
