"""Top-level search over a corpus snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from specatlas.errors import QuerySyntaxError
from specatlas.models import SpecRecord
from specatlas.search.query import ParsedQuery, parse_query
from specatlas.search.ranker import SearchResponse, rank
from specatlas.search.scorer import evaluate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchOptions:
    """Search tuning.

    Attributes:
        limit: Maximum number of results returned (None = all).
        min_score: Matches scoring below this are dropped before counting.
        fuzzy_distance: Edit-distance tolerance for plain words (0 = off).
    """

    limit: int | None = None
    min_score: float = 0.0
    fuzzy_distance: int = 0


def search(
    specs: Iterable[SpecRecord],
    query: str,
    options: SearchOptions | None = None,
) -> SearchResponse:
    """Search specs and return ranked results.

    An invalid query matches nothing. Use parse_query() or validate_query()
    first to report syntax errors to the user.

    Args:
        specs: Corpus snapshot.
        query: Raw query string.
        options: Limit, score threshold and fuzzy tolerance.

    Returns:
        SearchResponse with the pre-limit total and the ranked slice.
    """
    options = options or SearchOptions()
    try:
        parsed = parse_query(query)
    except QuerySyntaxError as e:
        logger.debug("Ignoring invalid query %r: %s", query, e)
        return SearchResponse(query=query, total=0)
    return search_parsed(specs, parsed, options, query=query)


def search_parsed(
    specs: Iterable[SpecRecord],
    parsed: ParsedQuery,
    options: SearchOptions | None = None,
    query: str = "",
) -> SearchResponse:
    """Run an already-parsed query."""
    options = options or SearchOptions()
    matches = []
    for spec in specs:
        match = evaluate(spec, parsed, options.fuzzy_distance)
        if match is None or match.score < options.min_score:
            continue
        matches.append(match)

    results, total = rank(matches, options.limit)
    return SearchResponse(query=query, total=total, results=tuple(results))


def find_content_snippet(content: str, terms: Sequence[str], max_len: int = 100) -> str | None:
    """Return the first content line containing any term, trimmed to max_len.

    Matching is case-insensitive. Long lines are cut around the first hit.
    """
    lowered_terms = [t.lower() for t in terms if t]
    if not lowered_terms:
        return None
    for raw_line in content.splitlines():
        line = raw_line.strip()
        lowered = line.lower()
        hits = [p for p in (lowered.find(t) for t in lowered_terms) if p >= 0]
        if not hits:
            continue
        if len(line) <= max_len:
            return line
        start = max(0, min(hits) - max_len // 4)
        snippet = line[start : start + max_len]
        prefix = "..." if start > 0 else ""
        suffix = "..." if start + max_len < len(line) else ""
        return f"{prefix}{snippet}{suffix}"
    return None
