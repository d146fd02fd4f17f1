"""
fsmguard CLI

Validates FSM definitions and verifies audit trails against them.

Usage:
    fsmguard definition <definition.json>               # Validate a definition
    fsmguard definition <definition.json> --strict      # Production profile
    fsmguard audit <definition.json> <trail.jsonl>      # Verify an audit trail
    fsmguard --help                                     # Show help
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from jsonschema.exceptions import SchemaError

from fsmguard.audit import AuditInputError, AuditTrail, loads_jsonl
from fsmguard.definition import DefinitionInputError, parse_definition
from fsmguard.observability import configure_logging
from fsmguard.results import ValidationResult, Violation
from fsmguard.validation import DefinitionValidator, ValidatorConfig
from fsmguard.vocabulary import ErrorCode


EXIT_OK = 0
EXIT_REJECTED = 1


def print_result(label: str, result: ValidationResult, verbose: bool = False) -> None:
    """Print validation result"""
    if result.valid:
        print(f"[PASS] - {label}")
    else:
        print(f"[FAIL] - {label}: {len(result.errors)} error(s)")

    if result.errors:
        print("  Errors:")
        for error in result.errors:
            print(f"    - {error}")

    if verbose and result.warnings:
        print("  Warnings:")
        for warning in result.warnings:
            print(f"    [!] {warning}")


def emit(label: str, result: ValidationResult, as_json: bool, verbose: bool) -> int:
    if as_json:
        print(json.dumps({"target": label, **result.to_dict()}, indent=2))
    else:
        print_result(label, result, verbose)
    return EXIT_OK if result.valid else EXIT_REJECTED


def read_text(path: Path) -> str:
    """
    Read a UTF-8 text file.

    Raises:
        DefinitionInputError: missing, unreadable or not UTF-8
    """
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        reason = exc.strerror or str(exc)
        cause: Exception = exc
    except UnicodeDecodeError as exc:
        reason = f"not UTF-8 text (byte {exc.start})"
        cause = exc

    raise DefinitionInputError([Violation(
        code=ErrorCode.INVALID_JSON,
        message=f"Cannot read {path}: {reason}",
        location=str(path),
    )]) from cause


def read_json(path: Path) -> object:
    """
    Read a JSON file.

    Raises:
        DefinitionInputError: unreadable file or invalid JSON
    """
    text = read_text(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DefinitionInputError([Violation(
            code=ErrorCode.INVALID_JSON,
            message=f"{path.name}: invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}",
            position=exc.lineno,
            location=str(path),
        )]) from exc


def run_definition(args: argparse.Namespace) -> int:
    """Validate a single definition file"""
    path = Path(args.definition)
    schema = None

    try:
        if args.schema:
            schema = read_json(Path(args.schema))
        document = read_json(path)
    except DefinitionInputError as exc:
        return emit(path.name, ValidationResult.failure(exc.violations), args.json, args.verbose)

    config = ValidatorConfig(
        strict=args.strict,
        schema_check=bool(args.schema or args.builtin_schema),
        schema=schema,
    )
    try:
        validator = DefinitionValidator(config)
    except SchemaError as exc:
        result = ValidationResult.failure([Violation(
            code=ErrorCode.INVALID_SCHEMA,
            message=f"Schema compile error in {args.schema}: {exc.message}",
            location=args.schema,
        )])
        return emit(path.name, result, args.json, args.verbose)

    result = validator.validate_document(document)
    return emit(path.name, result, args.json, args.verbose)


def run_audit(args: argparse.Namespace) -> int:
    """Verify an audit trail file against a definition"""
    definition_path = Path(args.definition)
    trail_path = Path(args.trail)

    try:
        definition = parse_definition(read_json(definition_path))
    except DefinitionInputError as exc:
        return emit(definition_path.name, ValidationResult.failure(exc.violations), args.json, args.verbose)

    if not args.no_definition_check:
        result = DefinitionValidator().validate_definition(definition)
        if not result.valid:
            return emit(definition_path.name, result, args.json, args.verbose)

    try:
        entries = loads_jsonl(read_text(trail_path))
    except DefinitionInputError as exc:
        return emit(trail_path.name, ValidationResult.failure(exc.violations), args.json, args.verbose)
    except AuditInputError as exc:
        return emit(trail_path.name, ValidationResult.failure(exc.violations), args.json, args.verbose)

    result = AuditTrail.from_entries(entries).verify(definition)
    if result.valid and args.verbose and not args.json:
        print(f"  Verified {len(entries)} entries")
    return emit(trail_path.name, result, args.json, args.verbose)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsmguard",
        description="fsmguard - Validates FSM definitions and audit trails",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate a definition
  fsmguard definition examples/definitions/governance_lifecycle.json

  # Production profile with the built-in JSON Schema pre-check
  fsmguard definition examples/definitions/governance_lifecycle.json --strict --builtin-schema

  # Verify an audit trail
  fsmguard audit examples/definitions/governance_lifecycle.json examples/trails/governance_lifecycle.jsonl

  # Machine-readable output
  fsmguard audit definition.json trail.jsonl --json
        """
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level for stderr diagnostics (default: WARNING)"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines"
    )

    subparsers = parser.add_subparsers(dest="mode", required=True)

    definition = subparsers.add_parser("definition", help="Validate an FSM definition")
    definition.add_argument("definition", help="Definition JSON file")
    schema_group = definition.add_mutually_exclusive_group()
    schema_group.add_argument(
        "--schema",
        help="JSON Schema file to pre-check the document against"
    )
    schema_group.add_argument(
        "--builtin-schema",
        action="store_true",
        help="Pre-check the document against the built-in schema"
    )
    definition.add_argument(
        "--strict",
        action="store_true",
        help="Require invariants and an initial state"
    )

    audit = subparsers.add_parser("audit", help="Verify an audit trail")
    audit.add_argument("definition", help="Definition JSON file")
    audit.add_argument("trail", help="Audit trail JSONL file")
    audit.add_argument(
        "--no-definition-check",
        action="store_true",
        help="Skip validating the definition before verifying the trail"
    )

    for sub in (definition, audit):
        sub.add_argument("--json", action="store_true", help="Print the result as JSON")
        sub.add_argument("-v", "--verbose", action="store_true", help="Show warnings and details")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(level=getattr(logging, args.log_level), json_format=args.json_logs)

    if args.mode == "definition":
        return run_definition(args)
    return run_audit(args)


if __name__ == "__main__":
    sys.exit(main())
