"""Pluggable string-similarity scorers used to rank fuzzy matches.

A scorer returns a distance-like number: lower means more similar. Inputs
have already had their diacritics removed.
"""

from __future__ import annotations

from typing import Protocol

from rapidfuzz import fuzz, utils
from rapidfuzz.distance import Levenshtein


class Scorer(Protocol):
    def score(self, source: str, target: str) -> float:
        ...


class LevenshteinScorer:
    """Case-insensitive edit distance between candidate and stored name."""

    def score(self, source: str, target: str) -> float:
        return float(Levenshtein.distance(source.casefold(), target.casefold()))


class TokenSortScorer:
    """100 minus the token-sort ratio, so word order and punctuation are ignored."""

    def score(self, source: str, target: str) -> float:
        return 100.0 - fuzz.token_sort_ratio(source, target, processor=utils.default_process)


SCORERS: dict[str, type[Scorer]] = {
    "levenshtein": LevenshteinScorer,
    "token-sort": TokenSortScorer,
}
