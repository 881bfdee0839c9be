"""
specatlas.commands.context - Shared configuration and corpus loading.

Every command runs against a fresh snapshot: configuration is resolved,
specs are loaded from disk, and (when needed) the graph is built, all per
invocation.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from specatlas.config import get_config, get_spec_directory
from specatlas.errors import ConfigError, DuplicateSpecError, SpecLoadError
from specatlas.graph import DependencyGraph, build_graph
from specatlas.loader import load_specs
from specatlas.models import SpecRecord


def load_configuration(args: argparse.Namespace) -> dict[str, Any] | None:
    """Load configuration from --config, the nearest config file, or defaults.

    Returns:
        Configuration dict, or None after printing an error
    """
    try:
        return get_config(args.config, Path.cwd())
    except ConfigError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return None


def load_corpus(args: argparse.Namespace, config: dict[str, Any]) -> list[SpecRecord] | None:
    """Load all specs from the configured spec directory.

    Returns:
        Spec records, or None after printing an error
    """
    specs_dir = get_spec_directory(args.spec_dir, config)
    try:
        return load_specs(specs_dir)
    except SpecLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


def load_graph(
    args: argparse.Namespace,
    config: dict[str, Any],
) -> DependencyGraph | None:
    """Load specs and build the dependency graph.

    Returns:
        The graph, or None after printing an error
    """
    specs = load_corpus(args, config)
    if specs is None:
        return None
    try:
        return build_graph(specs)
    except DuplicateSpecError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None
