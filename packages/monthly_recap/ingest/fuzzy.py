"""Approximate matching of free-text names against reference lists.

Uploaded item, customer, and store names are often misspelled or shortened.
Each is corrected to the closest entry of its own reference list when that
entry is close enough; otherwise the text is kept as uploaded. A miss is not
an error: validators only require the corrected value to be non-empty.

Scoring uses :class:`difflib.SequenceMatcher` on case-folded, trimmed text and
reports a *distance* in ``[0, 1]`` (0 = identical). Two views are combined and
the smaller distance wins:

- whole-string: ``1 - ratio(query, entry)``;
- substring: when the query is shorter than the entry, the best ratio of the
  query against an equally long window of the entry, plus ``offset / 100``
  for a window starting ``offset`` characters in. This lets "Tech Store"
  match "Tech Store Downtown" while preferring matches near the start.

Any pair that differs after case-folding scores at least ``_MIN_DISTANCE``, so
a threshold of 0 accepts identical text only.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import NamedTuple

DEFAULT_THRESHOLD: float = 0.3
# Characters of offset that cost a full unit of distance.
_LOCATION_DISTANCE: int = 100
# Floor for non-identical pairs; a strict prefix would otherwise score 0.
_MIN_DISTANCE: float = 0.001


class FuzzyResult(NamedTuple):
    item: str
    distance: float
    index: int


def _norm(s: str) -> str:
    return s.strip().casefold()


def _ratio(a: str, b: str) -> float:
    return SequenceMatcher(None, a, b).ratio()


def _substring_distance(query: str, entry: str) -> float:
    """Distance of ``query`` to its best-aligned window inside the longer ``entry``."""

    n = len(query)
    best = 1.0
    matcher = SequenceMatcher(None, query, entry)
    for q_start, e_start, _size in matcher.get_matching_blocks():
        start = max(e_start - q_start, 0)
        window = entry[start : start + n]
        d = (1.0 - _ratio(query, window)) + start / _LOCATION_DISTANCE
        if d < best:
            best = d
    return best


def distance(query: str, entry: str) -> float:
    """Return the match distance between ``query`` and ``entry`` (0 = identical)."""

    q, e = _norm(query), _norm(entry)
    if q == e:
        return 0.0
    if not q or not e:
        return 1.0
    d = 1.0 - _ratio(q, e)
    if len(q) < len(e):
        d = min(d, _substring_distance(q, e))
    return min(max(d, _MIN_DISTANCE), 1.0)


@dataclass(frozen=True, slots=True)
class FuzzyMatcher:
    """Best-match search over one reference list."""

    corpus: tuple[str, ...]
    threshold: float = DEFAULT_THRESHOLD

    @classmethod
    def over(cls, corpus: Sequence[str], threshold: float = DEFAULT_THRESHOLD) -> FuzzyMatcher:
        return cls(tuple(corpus), threshold)

    def search(self, query: str) -> list[FuzzyResult]:
        """Return entries within the threshold, best first.

        Exact (case-sensitive) entries rank ahead of everything else; among
        equal distances the corpus order is kept.
        """

        if not query:
            return []
        hits: list[tuple[bool, FuzzyResult]] = []
        for i, entry in enumerate(self.corpus):
            d = distance(query, entry)
            if d <= self.threshold:
                hits.append((entry != query, FuzzyResult(entry, d, i)))
        hits.sort(key=lambda h: (h[0], h[1].distance, h[1].index))
        return [r for _, r in hits]

    def best_match(self, query: str) -> str:
        """Return the closest entry, or ``query`` unchanged when nothing is close enough."""

        if not query:
            return query
        results = self.search(query)
        return results[0].item if results else query


def best_match(corpus: Sequence[str], query: str, *, threshold: float = DEFAULT_THRESHOLD) -> str:
    """Correct ``query`` to its closest entry in ``corpus`` (or return it unchanged)."""

    return FuzzyMatcher.over(corpus, threshold).best_match(query)


def is_corrected(original: str, matched: str) -> bool:
    """True when a correction actually changed the text (ignoring case)."""

    return bool(original) and bool(matched) and original.lower() != matched.lower()


__all__ = [
    "DEFAULT_THRESHOLD",
    "FuzzyMatcher",
    "FuzzyResult",
    "best_match",
    "distance",
    "is_corrected",
]
