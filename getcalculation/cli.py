"""
Command-line front end.

    getcalculation list
    getcalculation run MIDPOINT --inputs '{"x1": 0, "y1": 0, "x2": 4, "y2": 6}'
    getcalculation convert 100 c f --category temperature
    getcalculation validate-manifest manifests/midpoint.json

Exit codes: 0 ok, 1 error result / invalid manifest / bad conversion,
2 unknown logic key or calculator load failure.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from getcalculation import config
from getcalculation.manifest_validator import validate_manifest
from getcalculation.registry import CalculatorRegistry, RegistryError
from getcalculation.service import CalculationService
from getcalculation.units import UnknownUnitError, unit_converter

logger = logging.getLogger(__name__)


def _build_service() -> CalculationService:
    registry = CalculatorRegistry()
    registry.initialize(eager=config.EAGER_LOAD)
    return CalculationService(registry, unit_converter)


def _json_arg(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid JSON: {exc}") from exc


def _load_json_file(path: str) -> Any:
    with open(Path(path), encoding="utf-8") as f:
        return json.load(f)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


# ── Subcommands ──────────────────────────────────────────────────────────────

def cmd_list(args: argparse.Namespace) -> int:
    for key in _build_service().list_calculators():
        print(key)
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    manifest = _load_json_file(args.manifest) if args.manifest else None
    logger.debug(f"run {args.key} manifest={args.manifest or '-'}")
    try:
        result = _build_service().execute(args.key, args.inputs, manifest)
    except RegistryError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    _print_json(result)
    return 1 if "error" in result else 0


def cmd_convert(args: argparse.Namespace) -> int:
    try:
        value = unit_converter.convert(args.value, args.from_unit, args.to_unit, args.category)
    except UnknownUnitError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(value)
    return 0


def cmd_validate_manifest(args: argparse.Namespace) -> int:
    document = _load_json_file(args.file)
    registry = None
    if args.check_registry:
        registry = CalculatorRegistry()
        registry.initialize()
    report = validate_manifest(document, registry)
    logger.debug(f"{args.file}: {len(report.errors)} errors, {len(report.warnings)} warnings")
    print(report.model_dump_json(indent=2))
    return 0 if report.is_valid else 1


# ── main ─────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="getcalculation",
                                     description="Run manifest-driven calculators")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Debug logging (overrides GETCALC_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="List registered logic keys")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("run", help="Run a calculator and print the result as JSON")
    p.add_argument("key", help="Logic key, e.g. MIDPOINT")
    p.add_argument("--inputs", type=_json_arg, default={},
                   help="Inputs as a JSON object (flat or grouped by section)")
    p.add_argument("--manifest", default=None, help="Path to a manifest JSON file")
    p.set_defaults(func=cmd_run)

    p = sub.add_parser("convert", help="Convert a value between units")
    p.add_argument("value", type=float)
    p.add_argument("from_unit", metavar="FROM")
    p.add_argument("to_unit", metavar="TO")
    p.add_argument("--category", default="length",
                   help=f"One of: {', '.join(unit_converter.get_categories())}")
    p.set_defaults(func=cmd_convert)

    p = sub.add_parser("validate-manifest", help="Check a manifest document")
    p.add_argument("file")
    p.add_argument("--check-registry", action="store_true",
                   help="Also require calculationLogic to be a registered calculator")
    p.set_defaults(func=cmd_validate_manifest)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
                        format=config.LOG_FORMAT)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
