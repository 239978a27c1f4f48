"""Pydantic models for getcalculation manifests, units and registry entries."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel


class _ManifestModel(BaseModel):
    """Base for manifest documents: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


# ── Units ────────────────────────────────────────────────────────────────────

class UnitInfo(BaseModel):
    """One row of a conversion table."""

    factor: float
    offset: float = 0.0
    label: str
    symbol: str
    precision: int = 2
    step: float = 0.01


class UnitConfig(_ManifestModel):
    """Unit selector attached to a field or an output."""

    category: str
    available: List[str] = []
    default: Optional[str] = None


# ── Manifest ─────────────────────────────────────────────────────────────────

class FieldValidation(_ManifestModel):
    """
    Declarative predicates checked against a field value.

    Only these kinds exist; manifests cannot carry executable code.
    """

    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None       # full-match regular expression
    choices: Optional[List[Any]] = None  # enum membership
    message: Optional[str] = None


class Conditional(_ManifestModel):
    """Visibility hints for the UI. The calculation core never evaluates them."""

    show_when: Optional[str] = None
    hide_when: Optional[str] = None


class ManifestField(_ManifestModel):
    name: str
    label: str = ""
    type: str = "number"
    required: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    default: Any = None
    options: List[Any] = []
    units: Optional[UnitConfig] = None
    validation: Optional[FieldValidation] = None
    conditional: Optional[Conditional] = None

    @property
    def display_name(self) -> str:
        return self.label or self.name


class Section(_ManifestModel):
    id: str
    title: str = ""
    required: bool = False
    order: Optional[int] = None
    collapsible: Optional[bool] = None
    fields: List[ManifestField] = []


class Output(_ManifestModel):
    name: str
    label: str = ""
    precision: Optional[int] = None
    units: Optional[UnitConfig] = None
    section: Optional[str] = None


class Manifest(_ManifestModel):
    """A calculator's identity, inputs, outputs and logic-key binding."""

    tool_name: str = ""
    tool_slug: str = ""
    category_slug: str = ""
    description: str = ""
    calculation_logic: str = ""
    sections: Optional[List[Section]] = None
    parameters: Optional[List[ManifestField]] = None  # legacy flat format
    outputs: List[Output] = []

    @property
    def is_legacy(self) -> bool:
        return self.sections is None

    def iter_fields(self) -> Iterator[Tuple[Optional[Section], ManifestField]]:
        """Yield (section, field) pairs; section is None for legacy manifests."""
        if self.sections is not None:
            for section in self.sections:
                for field in section.fields:
                    yield section, field
        else:
            for field in self.parameters or []:
                yield None, field

    def find_field(self, name: str) -> Optional[ManifestField]:
        for _, field in self.iter_fields():
            if field.name == name:
                return field
        return None


def validation_summary(exc: ValidationError) -> str:
    """One-line ``loc: msg; ...`` rendering of a manifest ValidationError."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "manifest"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


# ── Registry ─────────────────────────────────────────────────────────────────

CalculateFn = Callable[..., Dict[str, Any]]


class RegistryEntry(BaseModel):
    """A logic key bound either to a module path (scanned) or a function (manual)."""

    key: str
    module_path: Optional[str] = None
    func: Optional[CalculateFn] = None
    loaded: bool = False
    source: Literal["scan", "manual"] = "scan"


class ManifestValidationResult(BaseModel):
    """Outcome of validate_manifest()."""

    is_valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    info: List[str] = Field(default_factory=list)
