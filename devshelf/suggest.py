"""
Typo-tolerant "did you mean" suggestions.

When a query finds nothing the suggester fuzzy-matches it against every
catalog title.  Each title gets a composite of two Levenshtein-based
similarities: one over the whole cleaned strings and one averaged over
the query's individual words.  The best title overall is returned only
if its composite clears the acceptance threshold.

Titles are scanned in the order given (the engine passes them by
ascending document id) and a later title must score strictly higher to
replace the current best, so ties resolve to the earliest title.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from loguru import logger
from rapidfuzz.distance import Levenshtein

from .config import (
    DEFAULT_STOPWORDS,
    SUGGEST_GLOBAL_WEIGHT,
    SUGGEST_THRESHOLD,
    SUGGEST_WORD_EARLY_EXIT,
    SUGGEST_WORD_WEIGHT,
)
from .normalize import normalize_for_suggestion


def levenshtein(s1: str, s2: str) -> int:
    return Levenshtein.distance(s1 or "", s2 or "")


def global_similarity(s1: str, s2: str) -> float:
    """1 - distance / longest length; two empty strings are identical."""
    max_len = max(len(s1), len(s2))
    if max_len == 0:
        return 1.0
    return 1.0 - levenshtein(s1, s2) / max_len


def word_similarity(query: str, title: str) -> float:
    """Mean over query words of the best match against any title word."""
    if not query:
        return 0.0
    q_words = query.split(" ")
    t_words = title.split(" ")
    total = 0.0
    for qw in q_words:
        best = 0.0
        for tw in t_words:
            best = max(best, global_similarity(qw, tw))
            if best >= SUGGEST_WORD_EARLY_EXIT:
                break
        total += best
    return total / len(q_words)


def composite_similarity(query: str, title: str) -> float:
    return SUGGEST_WORD_WEIGHT * word_similarity(query, title) + SUGGEST_GLOBAL_WEIGHT * global_similarity(query, title)


class Suggester:
    def __init__(
        self,
        titles: Sequence[str],
        stopwords: Iterable[str] = DEFAULT_STOPWORDS,
        threshold: float = SUGGEST_THRESHOLD,
    ):
        self.stopwords = frozenset(stopwords)
        self.threshold = threshold
        # Titles are cleaned once; blank ones can never match.
        self._entries: List[Tuple[str, str]] = []
        for title in titles:
            cleaned = normalize_for_suggestion(title or "", self.stopwords)
            if cleaned:
                self._entries.append((title, cleaned))

    def best_match(self, query: str) -> Tuple[Optional[str], float]:
        """Return the highest-scoring title and its composite score."""
        cleaned_query = normalize_for_suggestion(query or "", self.stopwords)
        if not cleaned_query:
            return None, 0.0
        best_title: Optional[str] = None
        best_score = 0.0
        for title, cleaned_title in self._entries:
            score = composite_similarity(cleaned_query, cleaned_title)
            if score > best_score:
                best_title, best_score = title, score
        return best_title, best_score

    def suggest_similar(self, query: str) -> Optional[str]:
        title, score = self.best_match(query)
        if title is None or score < self.threshold:
            logger.debug("No suggestion for {!r} (best score {:.3f})", query, score)
            return None
        logger.debug("Suggesting {!r} for {!r} (score {:.3f})", title, query, score)
        return title
