"""
Retrieval module for the DevShelf search core.

The query engine turns a raw query string into a ranked list of
candidate documents using the vector model.  The query is run through
the same tokenizer that built the model, weighted with
``(1 + log10(count)) * idf``, and every document sharing at least one
term with it (OR semantics) is scored by cosine similarity.  The
resulting candidate list is later passed to the fusion re-ranker.

Example::

    from devshelf.retrieval import QueryEngine
    engine = QueryEngine(model, TextProcessor())
    for result in engine.search("clean code"):
        ...

"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Set

from loguru import logger

from .vectors import SparseVector, Tokenizer, VectorModel, cosine_similarity


@dataclass(frozen=True)
class SearchResult:
    doc_id: int
    score: float


def build_query_vector(terms: Iterable[str], idf: Dict[str, float]) -> SparseVector:
    """Weight each distinct query term; unknown terms weigh zero and are dropped."""
    counts = Counter(terms)
    vector: SparseVector = {}
    for term, count in counts.items():
        weight = (1.0 + math.log10(count)) * idf.get(term, 0.0)
        if weight:
            vector[term] = weight
    return vector


def find_candidates(terms: Iterable[str], model: VectorModel) -> Set[int]:
    """Union of the postings of every query term."""
    doc_ids: Set[int] = set()
    for term in terms:
        for posting in model.postings(term):
            doc_ids.add(posting.doc_id)
    return doc_ids


class QueryEngine:
    """Vector-space scorer over a read-only :class:`VectorModel`."""

    def __init__(self, model: VectorModel, tokenizer: Tokenizer):
        self.model = model
        self.tokenizer = tokenizer

    def search(self, query: str) -> List[SearchResult]:
        """Return matching documents by descending cosine score.

        Blank, stopword-only or out-of-vocabulary queries give an empty
        list.  Equal scores come out in ascending doc id order.
        """
        terms = self.tokenizer(query or "")
        query_vector = build_query_vector(terms, self.model.idf)
        if not query_vector:
            return []

        candidates = find_candidates(query_vector.keys(), self.model)
        results: List[SearchResult] = []
        for doc_id in candidates:
            score = cosine_similarity(query_vector, self.model.vector(doc_id))
            if score > 0:
                results.append(SearchResult(doc_id=doc_id, score=score))

        results.sort(key=lambda r: (-r.score, r.doc_id))
        logger.debug("Query {!r}: {} terms, {} candidates, {} scored", query, len(query_vector), len(candidates), len(results))
        return results
