"""Ordering and truncation of search matches."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from specatlas.models import SpecRecord, SpecStatus
from specatlas.search.scorer import SpecMatch, TermEvidence

# Match tiers
TIER_EXACT = 0
TIER_FUZZY = 1


@dataclass(frozen=True)
class SearchResult:
    """One ranked hit."""

    spec: SpecRecord
    score: float
    evidence: tuple[TermEvidence, ...] = ()
    tier: int = TIER_EXACT
    total_distance: int = 0

    @property
    def id(self) -> str:
        return self.spec.id

    @property
    def title(self) -> str:
        return self.spec.title

    @property
    def status(self) -> SpecStatus:
        return self.spec.status

    @classmethod
    def from_match(cls, match: SpecMatch) -> SearchResult:
        return cls(
            spec=match.spec,
            score=match.score,
            evidence=match.evidence,
            tier=TIER_FUZZY if match.fuzzy_only else TIER_EXACT,
            total_distance=match.total_distance,
        )


@dataclass(frozen=True)
class SearchResponse:
    """Ranked results plus the number of matches before the limit was applied."""

    query: str
    total: int
    results: tuple[SearchResult, ...] = ()

    @property
    def returned(self) -> int:
        return len(self.results)


def sort_key(result: SearchResult) -> tuple:
    """Tier, then fuzzy distance, then score (desc), then spec number, then id."""
    number = result.spec.number
    return (
        result.tier,
        result.total_distance,
        -result.score,
        number is None,
        number if number is not None else 0,
        result.id,
    )


def rank(matches: Iterable[SpecMatch], limit: int | None = None) -> tuple[list[SearchResult], int]:
    """Order matches and apply the limit.

    Args:
        matches: Matches in any order.
        limit: Maximum results to return; None means no limit.

    Returns:
        (results, total) where total counts every match before truncation.

    Raises:
        ValueError: If limit is negative.
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
    results = sorted((SearchResult.from_match(m) for m in matches), key=sort_key)
    total = len(results)
    if limit is not None:
        results = results[:limit]
    return results, total
