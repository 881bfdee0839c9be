"""Edit-distance matching for free-text terms.

Text is split into tokens on any character that is not alphanumeric, ``_``,
or ``-``; tokens are lowercased. A term's best distance against a text is the
smallest Levenshtein distance to any of its tokens.
"""

from __future__ import annotations

import re
from typing import Iterable

_TOKEN_SEPARATOR = re.compile(r"[^\w-]+")


def tokenize(text: str) -> list[str]:
    """Split text into lowercase tokens."""
    return [token for token in _TOKEN_SEPARATOR.split(text.lower()) if token]


def levenshtein(a: str, b: str) -> int:
    """Unit-cost edit distance between two strings.

    Keeps only two rows of the dynamic-programming table.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    current = [0] * (len(b) + 1)
    for i, ca in enumerate(a, start=1):
        current[0] = i
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current[j] = min(
                previous[j] + 1,  # deletion
                current[j - 1] + 1,  # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous, current = current, previous
    return previous[len(b)]


def best_distance(term: str, tokens: Iterable[str]) -> int | None:
    """Smallest edit distance from `term` to any token, or None if no tokens."""
    term = term.lower()
    best: int | None = None
    for token in tokens:
        distance = levenshtein(term, token)
        if best is None or distance < best:
            best = distance
            if best == 0:
                break
    return best


def best_distance_in_text(term: str, text: str) -> int | None:
    """best_distance() against the tokens of a text."""
    return best_distance(term, tokenize(text))
