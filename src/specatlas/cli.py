"""
specatlas.cli - Command-line interface.

Main entry point for the specatlas CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from specatlas import __version__
from specatlas.commands import analyze, deps, search, validate


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="specatlas",
        description="Dependency and search analysis for spec documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  specatlas deps 042                   # Direct dependencies of spec 042
  specatlas deps 042 --impact          # Everything affected by changing 042
  specatlas search "user auth"         # Find specs mentioning user auth
  specatlas search status:planned tag:api
  specatlas analyze cycles             # List circular dependencies
  specatlas validate --strict          # Fail on circular dependencies

Configuration:
  .specatlas.toml in the current or any parent directory
  SPECATLAS_<SECTION>_<KEY> environment variables override it

For detailed command help: specatlas <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"specatlas {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "--spec-dir",
        type=Path,
        help="Override spec directory",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # deps command
    deps_parser = subparsers.add_parser(
        "deps",
        help="Show dependencies and dependents of a spec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  specatlas deps 042-search            # By full id
  specatlas deps 42                    # By number
  specatlas deps 42 --upstream --depth 2
  specatlas deps 42 --impact -j        # JSON for tooling
""",
    )
    deps_parser.add_argument(
        "spec",
        help="Spec id or number",
    )
    deps_parser.add_argument(
        "--depth",
        type=int,
        help="Maximum depth for --upstream/--downstream/--impact (default from config: 3)",
        metavar="N",
    )
    view_group = deps_parser.add_mutually_exclusive_group()
    view_group.add_argument(
        "--upstream",
        action="store_true",
        help="Show transitive dependencies only",
    )
    view_group.add_argument(
        "--downstream",
        action="store_true",
        help="Show transitive dependents only",
    )
    view_group.add_argument(
        "--impact",
        action="store_true",
        help="Show everything upstream and downstream",
    )
    deps_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    # search command
    search_parser = subparsers.add_parser(
        "search",
        help="Search specs by text and metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Query syntax:
  word                 Substring of title, id, tags, or content
  "some phrase"        Phrase containing spaces
  status:planned       Field filter (status, tag, priority, title, created)
  created:>=2025-06    Date filter with =, >, >=, <, <=
  word~2               Fuzzy match within edit distance 2
  a OR b, NOT a        Boolean operators (AND binds tighter than OR)
""",
    )
    search_parser.add_argument(
        "query",
        nargs="+",
        help="Search query",
    )
    search_parser.add_argument(
        "--limit",
        type=int,
        help="Maximum results (default from config: 20)",
        metavar="N",
    )
    search_parser.add_argument(
        "--fuzzy",
        type=int,
        help="Edit distance tolerance for plain words (0 disables)",
        metavar="N",
    )
    search_parser.add_argument(
        "--min-score",
        type=float,
        help="Drop results scoring below this value",
        metavar="X",
    )
    search_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    # analyze command
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze the dependency graph",
    )
    analyze_parser.add_argument(
        "analyze_action",
        choices=["cycles", "order", "dangling"],
        nargs="?",
        help="Analysis to run",
    )
    analyze_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    # validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Check for dangling dependencies and cycles",
    )
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat circular dependencies as errors",
    )
    validate_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    return parser


def configure_logging(args: argparse.Namespace) -> None:
    """Send log records to stderr at a level chosen by -v/-q."""
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install specatlas[completion]
    # Then activate: eval "$(register-python-argcomplete specatlas)"
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    # Handle no command
    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args)

    try:
        # Dispatch to command handlers
        if args.command == "deps":
            return deps.run(args)
        elif args.command == "search":
            return search.run(args)
        elif args.command == "analyze":
            return analyze.run(args)
        elif args.command == "validate":
            return validate.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
