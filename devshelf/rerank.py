"""
Fusion re-ranking of candidate documents.

After the query engine has produced cosine-scored candidates the
re-ranker blends that relevance with the document's rating and its
click popularity, then adds a title-match boost so that a query naming
a book outright puts that book on top.  The result is a strict total
order: equal fused scores are broken by ascending document id.

The re-ranker is a pure function of its inputs.  It holds a popularity
snapshot for convenience, but every call may pass a fresher one.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from loguru import logger

from .config import (
    EXACT_TITLE_BOOST,
    MAX_RATING,
    PREFIX_TITLE_BOOST,
    SUBSTRING_TITLE_BOOST,
    W_POPULARITY,
    W_RATING,
    W_TFIDF,
    Document,
)
from .retrieval import SearchResult


def title_boost(title: Optional[str], query: str) -> float:
    """Exact, prefix and substring matches are mutually exclusive; first match wins."""
    clean_query = (query or "").strip().lower()
    if not title or not clean_query:
        return 0.0
    clean_title = title.lower()
    if clean_title == clean_query:
        return EXACT_TITLE_BOOST
    if clean_title.startswith(clean_query):
        return PREFIX_TITLE_BOOST
    if clean_query in clean_title:
        return SUBSTRING_TITLE_BOOST
    return 0.0


def base_score(tfidf_score: float, rating: float, popularity: float) -> float:
    return W_TFIDF * tfidf_score + W_RATING * (rating / MAX_RATING) + W_POPULARITY * popularity


class ReRanker:
    def __init__(self, documents: Mapping[int, Document], popularity: Optional[Mapping[int, float]] = None):
        self.documents = documents
        self.popularity: Mapping[int, float] = popularity if popularity is not None else {}

    def fused_score(self, result: SearchResult, query: str, popularity: Mapping[int, float]) -> Optional[float]:
        doc = self.documents.get(result.doc_id)
        if doc is None:
            return None
        score = base_score(result.score, doc.rating, popularity.get(result.doc_id, 0.0))
        return score + title_boost(doc.title, query)

    def rerank(
        self,
        results: Sequence[SearchResult],
        query: str,
        popularity: Optional[Mapping[int, float]] = None,
    ) -> List[SearchResult]:
        """Return ``results`` with fused scores, best first.

        Results without a backing document are dropped.
        """
        if popularity is None:
            popularity = self.popularity
        reranked: List[SearchResult] = []
        dropped = 0
        for result in results:
            score = self.fused_score(result, query, popularity)
            if score is None:
                dropped += 1
                continue
            reranked.append(SearchResult(doc_id=result.doc_id, score=score))
        if dropped:
            logger.debug("Dropped {} results with no backing document", dropped)
        # Sort primarily by fused score desc, secondarily by doc id to stabilise ordering
        reranked.sort(key=lambda r: (-r.score, r.doc_id))
        return reranked
