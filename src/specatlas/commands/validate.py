"""
specatlas.commands.validate - Validate spec dependencies command.

Reports dangling dependencies, cycles and unknown parents. Exits 1 only
when an error is found; cycles become errors with --strict.
"""

from __future__ import annotations

import argparse
import json

from specatlas.commands.context import load_configuration, load_graph
from specatlas.serialize import serialize_validation_report
from specatlas.validation import validate_corpus


def run(args: argparse.Namespace) -> int:
    """
    Run the validate command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, 1 for validation errors)
    """
    config = load_configuration(args)
    if config is None:
        return 1

    graph = load_graph(args, config)
    if graph is None:
        return 1

    strict = args.strict or bool(config.get("validation", {}).get("strict_cycles", False))
    report = validate_corpus(graph, strict=strict)

    if args.json:
        print(json.dumps(serialize_validation_report(report), indent=2))
        return 0 if report.valid else 1

    if not args.quiet:
        print(f"Validating {report.spec_count} specs")

    if report.violations and not args.quiet:
        print()
        for violation in sorted(report.violations, key=lambda v: (v.severity.value, v.spec_id)):
            print(violation)
            print()

    if not args.quiet:
        print("─" * 60)
        if report.errors:
            print(f"❌ {len(report.errors)} errors")
        if report.warnings:
            print(f"⚠️  {len(report.warnings)} warnings")
        if not report.violations:
            print("✓ All specs valid")

    return 0 if report.valid else 1
