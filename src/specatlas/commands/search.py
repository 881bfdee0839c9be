"""
specatlas.commands.search - Search specs command.

Ranks specs against a query and prints them with a content snippet.
"""

from __future__ import annotations

import argparse
import json
import sys

from specatlas.commands.context import load_configuration, load_corpus
from specatlas.errors import QuerySyntaxError
from specatlas.search import SearchOptions, find_content_snippet, parse_query, search_parsed
from specatlas.serialize import serialize_search_response


def run(args: argparse.Namespace) -> int:
    """
    Run the search command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, including no matches; 1 for errors)
    """
    query = " ".join(args.query).strip()
    try:
        parsed = parse_query(query)
    except QuerySyntaxError as e:
        print(f"Error: Invalid query: {e}", file=sys.stderr)
        return 1

    config = load_configuration(args)
    if config is None:
        return 1

    try:
        options = build_options(args, config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    specs = load_corpus(args, config)
    if specs is None:
        return 1

    response = search_parsed(specs, parsed, options, query=query)

    if args.json:
        print(json.dumps(serialize_search_response(response), indent=2))
        return 0

    if not response.results:
        print(f"No specs found matching '{query}'")
        return 0

    if response.returned < response.total:
        print(f"{response.returned} of {response.total} results for '{query}':")
    else:
        print(f"{response.total} results for '{query}':")
    print()

    for result in response.results:
        spec = result.spec
        print(f"{spec.status.emoji} {spec.id} - {spec.title}")
        if spec.tags:
            print(f"   🏷️  {', '.join(spec.tags)}")
        snippet = find_content_snippet(spec.content, parsed.text_terms)
        if snippet:
            print(f"   {snippet}")
        if args.verbose:
            fuzzy = f", fuzzy distance {result.total_distance}" if result.tier else ""
            print(f"   score {result.score:g}{fuzzy}")
        print()

    return 0


def build_options(args: argparse.Namespace, config: dict) -> SearchOptions:
    """Combine command-line flags with the [search] config section.

    Raises:
        ValueError: If a limit or fuzzy distance is negative.
    """
    search_config = config.get("search", {})
    limit = args.limit if args.limit is not None else search_config.get("limit")
    fuzzy = args.fuzzy if args.fuzzy is not None else search_config.get("fuzzy_distance", 0)
    min_score = (
        args.min_score if args.min_score is not None else search_config.get("min_score", 0.0)
    )

    if limit is not None and int(limit) < 0:
        raise ValueError(f"--limit must be >= 0, got {limit}")
    if int(fuzzy) < 0:
        raise ValueError(f"--fuzzy must be >= 0, got {fuzzy}")

    return SearchOptions(
        limit=int(limit) if limit is not None else None,
        min_score=float(min_score),
        fuzzy_distance=int(fuzzy),
    )
