"""Match evaluation and relevance scoring for one spec.

A query matches a spec when its clauses, combined left to right with AND
binding tighter than OR, evaluate true. Every free-text term may be satisfied
by a different field of the same spec (title, id, tags, content).

Scoring weights, per matched term:
    word    title 10 (+5 whole word), id 8, tag 6 (+3 exact tag), content 1 per hit (max 5)
    phrase  title 14, id 10, tags 8, content 2 per hit (max 8)
    fuzzy   title 8-d, id 6-d, tags 4-d, content 2-d/2
    field   2
Queries with more than one term hitting the title get +2 per such term;
queries with no free-text term score at least 1.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property

from specatlas.models import SpecRecord
from specatlas.search.filters import matches_field
from specatlas.search.fuzzy import best_distance, tokenize
from specatlas.search.query import (
    Connector,
    FieldTerm,
    ParsedQuery,
    PhraseTerm,
    QueryTerm,
)

# Searchable fields, in weight order
TEXT_FIELDS = ("title", "id", "tags", "content")


@dataclass(frozen=True)
class TermEvidence:
    """How one query term matched a spec.

    Attributes:
        term: The term text (or "field:value" for field clauses).
        fields: Fields holding an exact/substring hit.
        distance: Best edit distance when the term matched only fuzzily.
    """

    term: str
    fields: tuple[str, ...] = ()
    distance: int | None = None

    @property
    def fuzzy_only(self) -> bool:
        return not self.fields and self.distance is not None


@dataclass(frozen=True)
class SpecMatch:
    """A spec that satisfied a query, with its score and evidence."""

    spec: SpecRecord
    score: float
    evidence: tuple[TermEvidence, ...] = ()

    @property
    def total_distance(self) -> int:
        """Sum of edit distances over fuzzy-only terms."""
        return sum(e.distance or 0 for e in self.evidence if e.fuzzy_only)

    @property
    def fuzzy_only(self) -> bool:
        """True if at least one term matched without an exact/substring hit."""
        return any(e.fuzzy_only for e in self.evidence)


@dataclass
class SpecText:
    """Lowercased searchable text of a spec, tokenized on demand."""

    title: str
    id: str
    tags: list[str] = field(default_factory=list)
    content: str = ""

    @classmethod
    def from_spec(cls, spec: SpecRecord) -> SpecText:
        return cls(
            title=spec.title.lower(),
            id=spec.id.lower(),
            tags=[t.lower() for t in spec.tags],
            content=spec.content.lower(),
        )

    @property
    def tags_text(self) -> str:
        return " ".join(self.tags)

    @cached_property
    def tokens(self) -> dict[str, list[str]]:
        return {
            "title": tokenize(self.title),
            "id": tokenize(self.id),
            "tags": tokenize(self.tags_text),
            "content": tokenize(self.content),
        }

    def substring_fields(self, value: str) -> tuple[str, ...]:
        hits: list[str] = []
        if value in self.title:
            hits.append("title")
        if value in self.id:
            hits.append("id")
        if any(value in tag for tag in self.tags):
            hits.append("tags")
        if value in self.content:
            hits.append("content")
        return tuple(hits)

    def phrase_fields(self, value: str) -> tuple[str, ...]:
        hits: list[str] = []
        for name, text in (
            ("title", self.title),
            ("id", self.id),
            ("tags", self.tags_text),
            ("content", self.content),
        ):
            if value in text:
                hits.append(name)
        return tuple(hits)

    def fuzzy_distances(self, value: str) -> dict[str, int]:
        distances: dict[str, int] = {}
        for name in TEXT_FIELDS:
            distance = best_distance(value, self.tokens[name])
            if distance is not None:
                distances[name] = distance
        return distances


def evaluate(spec: SpecRecord, parsed: ParsedQuery, fuzzy_distance: int = 0) -> SpecMatch | None:
    """Match and score a spec against a parsed query.

    Args:
        spec: Spec to evaluate.
        parsed: The parsed query.
        fuzzy_distance: Edit-distance tolerance for plain words (0 = off).
            Words with an explicit ~N use their own threshold.

    Returns:
        A SpecMatch, or None if the spec does not satisfy the query.
    """
    if parsed.is_empty:
        return None
    text = SpecText.from_spec(spec)

    results: list[TermEvidence | None] = []
    acc = False
    group = False
    for position, clause in enumerate(parsed.clauses):
        evidence = _match_term(spec, text, clause.term, fuzzy_distance)
        results.append(None if clause.negated else evidence)
        matched = evidence is not None
        if clause.negated:
            matched = not matched

        if position == 0:
            group = matched
        elif clause.connector is Connector.AND:
            group = group and matched
        else:
            acc = acc or group
            group = matched

    if not (acc or group):
        return None

    evidence_list = tuple(e for e in results if e is not None)
    score = _score(text, parsed, results, fuzzy_distance)
    return SpecMatch(spec=spec, score=score, evidence=evidence_list)


def matches_query(spec: SpecRecord, parsed: ParsedQuery, fuzzy_distance: int = 0) -> bool:
    """Check if a spec matches the parsed query.

    Thin wrapper around evaluate().
    """
    return evaluate(spec, parsed, fuzzy_distance) is not None


# ---------------------------------------------------------------------------
# Term matching
# ---------------------------------------------------------------------------


def _match_term(
    spec: SpecRecord,
    text: SpecText,
    term: QueryTerm,
    fuzzy_distance: int,
) -> TermEvidence | None:
    if isinstance(term, FieldTerm):
        if matches_field(spec, term.field, term.value):
            return TermEvidence(f"{term.field.value}:{term.value}", fields=(term.field.value,))
        return None

    if isinstance(term, PhraseTerm):
        hits = text.phrase_fields(term.text)
        return TermEvidence(term.text, fields=hits) if hits else None

    hits = text.substring_fields(term.text)
    if hits:
        return TermEvidence(term.text, fields=hits)

    threshold = term.fuzzy if term.fuzzy is not None else fuzzy_distance
    if threshold <= 0:
        return None
    distances = text.fuzzy_distances(term.text)
    if not distances:
        return None
    best = min(distances.values())
    if best > threshold:
        return None
    return TermEvidence(term.text, distance=best)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def _score(
    text: SpecText,
    parsed: ParsedQuery,
    results: list[TermEvidence | None],
    fuzzy_distance: int,
) -> float:
    score = 0.0
    text_terms = 0
    title_terms = 0

    for clause, evidence in zip(parsed.clauses, results):
        if evidence is None:
            continue
        term = clause.term
        if isinstance(term, FieldTerm):
            score += 2.0
            continue

        text_terms += 1
        if "title" in evidence.fields:
            title_terms += 1
        if isinstance(term, PhraseTerm):
            score += _score_phrase(term.text, text)
        elif evidence.fuzzy_only:
            threshold = term.fuzzy if term.fuzzy is not None else fuzzy_distance
            score += _score_fuzzy(term.text, text, threshold)
        else:
            score += _score_word(term.text, text)

    if title_terms > 1:
        score += title_terms * 2.0
    if text_terms == 0:
        return max(1.0, score)
    return score


def _score_word(value: str, text: SpecText) -> float:
    score = 0.0
    if value in text.title:
        score += 10.0
        if value in text.title.split():
            score += 5.0
    if value in text.id:
        score += 8.0
    if any(value in tag for tag in text.tags):
        score += 6.0
        if value in text.tags:
            score += 3.0
    hits = text.content.count(value)
    if hits:
        score += min(float(hits), 5.0)
    return score


def _score_phrase(value: str, text: SpecText) -> float:
    score = 0.0
    if value in text.title:
        score += 14.0
    if value in text.id:
        score += 10.0
    if value in text.tags_text:
        score += 8.0
    hits = text.content.count(value)
    if hits:
        score += min(hits * 2.0, 8.0)
    return score


_FUZZY_WEIGHTS = {"title": 8.0, "id": 6.0, "tags": 4.0}


def _score_fuzzy(value: str, text: SpecText, threshold: int) -> float:
    """Score a fuzzy-only term from its per-field distances within threshold."""
    score = 0.0
    for name, distance in text.fuzzy_distances(value).items():
        if distance > threshold:
            continue
        if name == "content":
            score += 2.0 - distance * 0.5
        else:
            score += _FUZZY_WEIGHTS[name] - distance
    return max(score, 0.0)
