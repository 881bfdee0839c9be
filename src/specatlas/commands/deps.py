"""
specatlas.commands.deps - Show spec dependencies command.

Views:
- complete (default): direct dependencies and dependents
- --upstream: transitive dependencies up to --depth
- --downstream: transitive dependents up to --depth
- --impact: both directions, transitive
"""

from __future__ import annotations

import argparse
import json
import sys

from specatlas.commands.context import load_configuration, load_graph
from specatlas.errors import SpecNotFoundError
from specatlas.graph import DependencyReport
from specatlas.models import SpecRecord
from specatlas.serialize import serialize_dependency_report


def run(args: argparse.Namespace) -> int:
    """Run the deps command."""
    config = load_configuration(args)
    if config is None:
        return 1

    mode = view_mode(args)
    depth = args.depth if args.depth is not None else config.get("deps", {}).get("depth")
    if depth is not None and depth < 0:
        print(f"Error: --depth must be >= 0, got {depth}", file=sys.stderr)
        return 1
    if mode == "impact" and args.depth is None:
        depth = None

    graph = load_graph(args, config)
    if graph is None:
        return 1

    try:
        spec = graph.resolve(args.spec)
        report = graph.dependency_report(spec.id, mode=mode, depth=depth)
    except SpecNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(serialize_dependency_report(report), indent=2))
        return 0

    print_report(report)
    return 0


def view_mode(args: argparse.Namespace) -> str:
    if args.impact:
        return "impact"
    if args.upstream:
        return "upstream"
    if args.downstream:
        return "downstream"
    return "complete"


def print_report(report: DependencyReport) -> None:
    """Print a dependency report as text."""
    spec = report.spec
    print(f"{spec.status.emoji} {spec.id} - {spec.title}")
    print("─" * 60)

    if report.mode in ("complete", "upstream", "impact"):
        _print_section("Depends on", report.depends_on)
    if report.mode in ("complete", "downstream", "impact"):
        _print_section("Required by", report.required_by)

    if report.mode == "impact":
        print(f"Impact: {len(report.required_by)} specs affected by changes")
    if report.has_circular:
        print("⚠️  Circular dependency detected")


def _print_section(label: str, specs: tuple[SpecRecord, ...]) -> None:
    print(f"{label}:")
    if not specs:
        print("  (none)")
    for dep in specs:
        print(f"  {dep.status.emoji} {dep.id} - {dep.title}")
    print()
