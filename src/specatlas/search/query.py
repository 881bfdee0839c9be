"""Query parser for spec search.

Syntax:
    term            -> free text, substring of title, id, tags, or content
    field:value     -> field clause (status, tag, priority, title, created)
    created:>=2025-06
                    -> date clause with =, >, >=, <, <= prefixes
    "some phrase"   -> free text containing spaces
    term~N          -> fuzzy term (edit distance <= N; term~ means N=1)
    NOT term        -> negation
    a OR b          -> disjunction; AND (or a space) binds tighter than OR

Unknown field prefixes (and known fields with an empty value) are kept as
ordinary free text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from specatlas.errors import QuerySyntaxError


class QueryField(Enum):
    """The closed set of fields a clause can target."""

    STATUS = "status"
    TAG = "tag"
    PRIORITY = "priority"
    TITLE = "title"
    CREATED = "created"


class Connector(Enum):
    """How a clause joins the clauses before it."""

    AND = "AND"
    OR = "OR"


@dataclass(frozen=True)
class WordTerm:
    """A free-text word (lowercased), optionally with a fuzzy threshold."""

    text: str
    fuzzy: int | None = None


@dataclass(frozen=True)
class PhraseTerm:
    """A quoted phrase (lowercased)."""

    text: str


@dataclass(frozen=True)
class FieldTerm:
    """A field clause; value is lowercased and keeps any date operator."""

    field: QueryField
    value: str


QueryTerm = Union[WordTerm, PhraseTerm, FieldTerm]


@dataclass(frozen=True)
class QueryClause:
    term: QueryTerm
    connector: Connector = Connector.AND
    negated: bool = False


@dataclass(frozen=True)
class ParsedQuery:
    """Parsed query: clauses in order, each joined to the previous by its connector."""

    clauses: tuple[QueryClause, ...]

    @property
    def is_empty(self) -> bool:
        return not self.clauses

    @property
    def text_terms(self) -> tuple[str, ...]:
        """Words, phrases, and title values, for highlighting and snippets."""
        terms: list[str] = []
        for clause in self.clauses:
            term = clause.term
            if isinstance(term, (WordTerm, PhraseTerm)):
                terms.append(term.text)
            elif term.field is QueryField.TITLE:
                terms.append(term.value)
        return tuple(terms)


_FIELDS = {f.value: f for f in QueryField}

_OPERATORS = ("AND", "OR")
_NEGATION = "NOT"


def parse_query(raw: str) -> ParsedQuery:
    """Parse a raw query string into a ParsedQuery.

    Raises:
        QuerySyntaxError: For an empty query, an unterminated or empty quoted
            phrase, a misplaced operator, or a bad fuzzy threshold.
    """
    tokens = _tokenize(raw)
    if not tokens:
        raise QuerySyntaxError("Empty search query")
    return _build_clauses(tokens)


def validate_query(raw: str) -> None:
    """Raise QuerySyntaxError if the query cannot be parsed."""
    parse_query(raw)


def parse_term(word: str) -> QueryTerm:
    """Turn one whitespace-delimited word into a term."""
    field_name, sep, value = word.partition(":")
    if sep:
        query_field = _FIELDS.get(field_name.lower())
        value = value.strip().lower()
        if query_field is not None and value:
            return FieldTerm(query_field, value)
    return _make_word(word.lower())


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


@dataclass
class _Token:
    text: str
    phrase: bool = False


def _tokenize(raw: str) -> list[_Token]:
    """Walk character-by-character to produce word and phrase tokens."""
    tokens: list[_Token] = []
    current: list[str] = []

    def flush() -> None:
        if current:
            tokens.append(_Token("".join(current)))
            current.clear()

    i = 0
    n = len(raw)
    while i < n:
        ch = raw[i]
        if ch == '"':
            flush()
            j = raw.find('"', i + 1)
            if j == -1:
                raise QuerySyntaxError("Unterminated quote in query")
            phrase = raw[i + 1 : j].strip()
            if not phrase:
                raise QuerySyntaxError("Empty quoted phrase is not allowed")
            tokens.append(_Token(phrase.lower(), phrase=True))
            i = j + 1
            continue
        if ch.isspace():
            flush()
        else:
            current.append(ch)
        i += 1
    flush()
    return tokens


# ---------------------------------------------------------------------------
# Clause builder
# ---------------------------------------------------------------------------


def _build_clauses(tokens: list[_Token]) -> ParsedQuery:
    clauses: list[QueryClause] = []
    connector = Connector.AND
    negated = False
    expect_term = True

    for token in tokens:
        if not token.phrase and token.text in _OPERATORS:
            if expect_term:
                raise QuerySyntaxError(f"Unexpected operator '{token.text}'")
            connector = Connector(token.text)
            expect_term = True
            continue

        if not token.phrase and token.text == _NEGATION:
            if not expect_term:
                connector = Connector.AND
            negated = not negated
            expect_term = True
            continue

        term: QueryTerm
        if token.phrase:
            term = PhraseTerm(token.text)
        else:
            term = parse_term(token.text)
        clauses.append(QueryClause(term=term, connector=connector, negated=negated))
        connector = Connector.AND
        negated = False
        expect_term = False

    if expect_term:
        raise QuerySyntaxError("Query ends with an operator")
    return ParsedQuery(clauses=tuple(clauses))


def _make_word(word: str) -> WordTerm:
    """Create a WordTerm, handling a trailing ~N fuzzy marker."""
    base, sep, threshold = word.rpartition("~")
    if not sep:
        return WordTerm(word)
    base = base.strip()
    if not base:
        raise QuerySyntaxError("Invalid fuzzy token")
    if not threshold:
        return WordTerm(base, fuzzy=1)
    if not (threshold.isascii() and threshold.isdigit()):
        raise QuerySyntaxError("Invalid fuzzy threshold; expected number")
    try:
        return WordTerm(base, fuzzy=int(threshold))
    except ValueError:
        raise QuerySyntaxError("Invalid fuzzy threshold; number too large") from None
