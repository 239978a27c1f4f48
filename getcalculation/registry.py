"""
Logic key -> calculator strategy resolution.

Strategies are discovered by scanning the calculators package. Each module
``foo_bar.py`` is registered under ``FOO_BAR`` and must export
``calculate(inputs, manifest=None)``. Modules are imported lazily on first
use unless ``initialize(eager=True)`` is called.
"""
from __future__ import annotations

import importlib
import logging
import pkgutil
import re
from typing import Any, Dict, List, Optional

from getcalculation import config
from getcalculation.models import CalculateFn, RegistryEntry

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Base class for logic-key resolution failures."""


class CalculatorNotFoundError(RegistryError, LookupError):
    """No calculator is registered under the requested key."""


class CalculatorLoadError(RegistryError):
    """A registered calculator module could not be imported or has no calculate()."""


def module_name_to_key(name: str) -> str:
    """``length-of-a-line-segment`` / ``slope_calculator`` / ``bmiCalculator`` -> UPPER_SNAKE."""
    name = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name)
    return re.sub(r"[^A-Za-z0-9]+", "_", name).strip("_").upper()


def _skipped(leaf: str) -> bool:
    lowered = leaf.lower()
    return leaf.startswith("_") or any(marker in lowered for marker in config.SCAN_SKIP_MARKERS)


class CalculatorRegistry:
    """
    Holds one RegistryEntry per logic key.

    Entries come from the package scan (``source="scan"``) or from
    ``register_function`` (``source="manual"``). Both write the same table,
    so for any key the last registration wins: a manual registration made
    before the one-time scan is replaced by the scanned module.
    """

    def __init__(self, package: str = config.CALCULATORS_PACKAGE):
        self.package = package
        self._entries: Dict[str, RegistryEntry] = {}
        self._initialized = False

    # ── discovery ────────────────────────────────────────────────────────────

    def initialize(self, eager: bool = False) -> None:
        """Scan the calculators package once. ``eager`` also imports every module."""
        if not self._initialized:
            self._scan()
            self._initialized = True
            logger.info(f"Registry initialized with {len(self._entries)} calculators")

        if eager:
            for key in self.get_available_calculators():
                try:
                    self.get_calculator(key)
                except CalculatorLoadError as exc:
                    logger.error(f"Eager load skipped {key}: {exc}")

    def _scan(self) -> None:
        try:
            package = importlib.import_module(self.package)
        except ImportError as exc:
            raise RegistryError(f"Cannot import calculator package {self.package}: {exc}") from exc

        for info in pkgutil.walk_packages(package.__path__, prefix=f"{package.__name__}."):
            if info.ispkg:
                continue
            leaf = info.name.rsplit(".", 1)[-1]
            if _skipped(leaf):
                logger.debug(f"Scan skipped {info.name}")
                continue

            key = module_name_to_key(leaf)
            existing = self._entries.get(key)
            if existing is not None and existing.source == "manual":
                logger.info(f"Scan of {info.name} replaces manual registration for {key}")
            self._entries[key] = RegistryEntry(key=key, module_path=info.name)
            logger.debug(f"Registered {key} -> {info.name}")

    # ── lookups ──────────────────────────────────────────────────────────────

    def has_calculator(self, key: str) -> bool:
        self.initialize()
        return key in self._entries

    def get_available_calculators(self) -> List[str]:
        self.initialize()
        return sorted(self._entries)

    def get_calculator(self, key: str) -> CalculateFn:
        """
        Resolve ``key`` to its calculate function, importing the module on first use.

        Raises CalculatorNotFoundError for unknown keys and CalculatorLoadError
        when the module cannot be imported or exports no calculate().
        """
        self.initialize()
        entry = self._entries.get(key)
        if entry is None:
            raise CalculatorNotFoundError(f"Calculator not found: {key}")

        if not entry.loaded or entry.func is None:
            entry.func = self._load(entry)
            entry.loaded = True
        return entry.func

    def _load(self, entry: RegistryEntry, reload: bool = False) -> CalculateFn:
        try:
            module = importlib.import_module(entry.module_path)
            if reload:
                module = importlib.reload(module)
        except Exception as exc:
            logger.error(f"Failed to load {entry.key} from {entry.module_path}: {exc}")
            raise CalculatorLoadError(f"Failed to load calculator {entry.key}: {exc}") from exc

        func = getattr(module, "calculate", None)
        if not callable(func):
            raise CalculatorLoadError(
                f"Calculator {entry.key} ({entry.module_path}) does not export calculate()"
            )
        logger.debug(f"Loaded {entry.key}")
        return func

    # ── mutation ─────────────────────────────────────────────────────────────

    def register_function(self, key: str, func: CalculateFn) -> None:
        """Register ``func`` under ``key``, replacing any existing entry."""
        if not callable(func):
            raise TypeError(f"Calculator for {key} must be callable, got {type(func).__name__}")
        if key in self._entries:
            logger.info(f"Replacing calculator {key} with a manual registration")
        self._entries[key] = RegistryEntry(key=key, func=func, loaded=True, source="manual")

    def reload_calculator(self, key: str) -> Optional[CalculateFn]:
        """Re-import a scanned calculator. Manual registrations are returned unchanged."""
        self.initialize()
        entry = self._entries.get(key)
        if entry is None:
            raise CalculatorNotFoundError(f"Calculator not found: {key}")
        if entry.source == "manual":
            return entry.func

        entry.func = self._load(entry, reload=True)
        entry.loaded = True
        logger.info(f"Reloaded {key}")
        return entry.func

    def get_stats(self) -> Dict[str, Any]:
        loaded = sum(1 for e in self._entries.values() if e.loaded)
        return {
            "total": len(self._entries),
            "loaded": loaded,
            "unloaded": len(self._entries) - loaded,
            "initialized": self._initialized,
            "calculators": sorted(self._entries),
        }
