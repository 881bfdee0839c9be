"""
specatlas.commands.analyze - Graph-wide dependency analysis command.

Actions:
- cycles: groups of specs that depend on each other
- order: specs ordered dependencies-first
- dangling: depends_on references that match no spec
"""

from __future__ import annotations

import argparse
import json
import sys

from specatlas.commands.context import load_configuration, load_graph
from specatlas.graph import DependencyGraph
from specatlas.serialize import serialize_dangling, serialize_spec_summary


def run(args: argparse.Namespace) -> int:
    """Run the analyze command."""
    if not args.analyze_action:
        print("Usage: specatlas analyze {cycles|order|dangling}")
        return 1

    config = load_configuration(args)
    if config is None:
        return 1
    graph = load_graph(args, config)
    if graph is None:
        return 1

    if args.analyze_action == "cycles":
        return run_cycles(graph, args)
    elif args.analyze_action == "order":
        return run_order(graph, args)
    elif args.analyze_action == "dangling":
        return run_dangling(graph, args)

    return 1


def run_cycles(graph: DependencyGraph, args: argparse.Namespace) -> int:
    """Show every circular dependency group."""
    groups = graph.circular_groups()

    if args.json:
        output = {
            "hasCycles": bool(groups),
            "cycles": [[s.id for s in group] for group in groups],
        }
        print(json.dumps(output, indent=2))
        return 0

    if not groups:
        print("✓ No circular dependencies")
        return 0

    print(f"Circular dependencies ({len(groups)} groups)")
    print("=" * 60)
    for group in groups:
        ids = [s.id for s in group]
        print(f"⚠️  {' -> '.join(ids + ids[:1])}")
    return 0


def run_order(graph: DependencyGraph, args: argparse.Namespace) -> int:
    """Show all specs ordered so dependencies come first."""
    order = graph.topological_order()

    if order is None:
        if args.json:
            print(json.dumps({"order": None, "hasCycles": True}, indent=2))
        print(
            "Error: Dependency graph has cycles; run 'specatlas analyze cycles'",
            file=sys.stderr,
        )
        return 1

    if args.json:
        output = {
            "order": [serialize_spec_summary(s) for s in order],
            "hasCycles": False,
        }
        print(json.dumps(output, indent=2))
        return 0

    print("Dependency order")
    print("=" * 60)
    for position, spec in enumerate(order, start=1):
        print(f"{position:>4}. {spec.status.emoji} {spec.id} - {spec.title}")
    return 0


def run_dangling(graph: DependencyGraph, args: argparse.Namespace) -> int:
    """Show depends_on references that resolve to nothing."""
    dangling = graph.dangling_dependencies()

    if args.json:
        print(json.dumps([serialize_dangling(d) for d in dangling], indent=2))
        return 0

    if not dangling:
        print("✓ No dangling dependencies")
        return 0

    print(f"Dangling dependencies ({len(dangling)})")
    print("=" * 60)
    for item in dangling:
        print(f"  {item}")
    return 0
