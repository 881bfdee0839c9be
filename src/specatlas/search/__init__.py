"""Search module - Query parsing, matching, fuzzy distance and ranking.

Exports:
- search / SearchOptions: Run a query over a corpus snapshot
- SearchResponse / SearchResult: Ranked output
- parse_query / validate_query: Query grammar
- levenshtein / best_distance: Edit-distance helpers
"""

from specatlas.search.engine import (
    SearchOptions,
    find_content_snippet,
    search,
    search_parsed,
)
from specatlas.search.filters import DateFilter, matches_field, parse_date_filter
from specatlas.search.fuzzy import best_distance, levenshtein, tokenize
from specatlas.search.query import (
    Connector,
    FieldTerm,
    ParsedQuery,
    PhraseTerm,
    QueryClause,
    QueryField,
    WordTerm,
    parse_query,
    validate_query,
)
from specatlas.search.ranker import SearchResponse, SearchResult, rank
from specatlas.search.scorer import SpecMatch, TermEvidence, evaluate, matches_query

__all__ = [
    "search",
    "search_parsed",
    "SearchOptions",
    "SearchResponse",
    "SearchResult",
    "find_content_snippet",
    "rank",
    "evaluate",
    "matches_query",
    "SpecMatch",
    "TermEvidence",
    "parse_query",
    "validate_query",
    "ParsedQuery",
    "QueryClause",
    "QueryField",
    "Connector",
    "WordTerm",
    "PhraseTerm",
    "FieldTerm",
    "DateFilter",
    "parse_date_filter",
    "matches_field",
    "levenshtein",
    "best_distance",
    "tokenize",
]
