"""
Engine façade for the DevShelf search core.

- Search: vector-space retrieval, falling back to a "did you mean"
  suggestion when nothing matches, then fusion re-ranking
- Autocomplete: a wide trie sample shaped so whole-title prefix hits
  come first
- Related books: graph neighbours ordered by popularity
- Trending: most clicked documents, or the first few when there is no
  click data yet

All structures are built once in the constructor and only read
afterwards.  A new popularity snapshot yields a new engine that shares
everything else (:meth:`SearchEngine.with_popularity`).
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from loguru import logger

from .autocomplete import AutocompleteTrie, build_title_trie, shape_completions
from .catalog import documents_from_records
from .config import (
    AUTOCOMPLETE_COUNT,
    AUTOCOMPLETE_SAMPLE,
    DEFAULT_STOPWORDS,
    RECOMMENDATION_LIMIT,
    TRENDING_LIMIT,
    Document,
)
from .graph import RelationshipGraph
from .normalize import TextProcessor, normalize_title_key
from .popularity import top_trending
from .rerank import ReRanker
from .retrieval import QueryEngine, SearchResult
from .suggest import Suggester
from .vectors import VectorModel, build_vector_model


@dataclass(frozen=True)
class SearchResponse:
    documents: List[Document] = field(default_factory=list)
    results: List[SearchResult] = field(default_factory=list)
    is_suggestion: bool = False
    used_query: str = ""


class SearchEngine:
    def __init__(
        self,
        documents: Sequence[Document],
        model: VectorModel,
        tokenizer: TextProcessor,
        popularity: Optional[Mapping[int, float]] = None,
        stopwords: Optional[Iterable[str]] = None,
    ):
        # Canonical corpus order: ascending document id.
        self.documents: List[Document] = sorted(documents, key=lambda d: d.id)
        self.by_id: Dict[int, Document] = {d.id: d for d in self.documents}
        self._by_title: Dict[str, Document] = {}
        for doc in self.documents:
            self._by_title.setdefault(normalize_title_key(doc.title), doc)

        self.popularity: Mapping[int, float] = dict(popularity or {})
        self.tokenizer = tokenizer
        self.model = model

        if stopwords is None:
            stopwords = tokenizer.stopwords if isinstance(tokenizer, TextProcessor) else DEFAULT_STOPWORDS

        self.query_engine = QueryEngine(model, tokenizer)
        self.reranker = ReRanker(self.by_id, self.popularity)
        self.suggester = Suggester([d.title for d in self.documents], stopwords)
        self.trie: AutocompleteTrie = build_title_trie(self.documents)
        self.graph: RelationshipGraph = RelationshipGraph.build(self.documents)
        logger.info("Search engine ready with {} documents", len(self.documents))

    @classmethod
    def from_records(
        cls,
        records: Iterable[Union[Document, Mapping]],
        model_mapping: Optional[Mapping] = None,
        popularity: Optional[Mapping[int, float]] = None,
        stopwords: Optional[Iterable[str]] = None,
    ) -> "SearchEngine":
        """
        Assemble an engine from raw records.  Without a precomputed
        model mapping the vector model is built here with the same
        tokenizer the queries will use.
        """
        documents = documents_from_records(records)
        tokenizer = TextProcessor(stopwords)
        if model_mapping is None:
            model = build_vector_model(documents, tokenizer)
        else:
            model = VectorModel.from_mapping(model_mapping)
        return cls(documents, model, tokenizer, popularity=popularity, stopwords=tokenizer.stopwords)

    def with_popularity(self, popularity: Mapping[int, float]) -> "SearchEngine":
        """A copy reading ``popularity``; built structures are shared."""
        clone = copy.copy(self)
        clone.popularity = dict(popularity or {})
        clone.reranker = ReRanker(self.by_id, clone.popularity)
        return clone

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, query: str) -> SearchResponse:
        results = self.query_engine.search(query)
        used_query = query
        is_suggestion = False

        if not results:
            suggestion = self.suggester.suggest_similar(query)
            if suggestion is not None:
                logger.info("No hits for {!r}; retrying with suggestion {!r}", query, suggestion)
                results = self.query_engine.search(suggestion)
                used_query = suggestion
                is_suggestion = True

        ranked = self.reranker.rerank(results, used_query)
        docs = [self.by_id[r.doc_id] for r in ranked]
        return SearchResponse(documents=docs, results=ranked, is_suggestion=is_suggestion, used_query=used_query)

    # ------------------------------------------------------------------
    # Autocomplete / recommendations / trending
    # ------------------------------------------------------------------

    def autocomplete(self, prefix: str, count: int = AUTOCOMPLETE_COUNT) -> List[str]:
        if not prefix or count <= 0:
            return []
        matches = self.trie.complete(prefix, AUTOCOMPLETE_SAMPLE)
        return shape_completions(matches, prefix, count)

    def find_by_title(self, title: str) -> Optional[Document]:
        return self._by_title.get(normalize_title_key(title))

    def recommendations_for(self, title: str, limit: int = RECOMMENDATION_LIMIT) -> List[Document]:
        related = self.graph.recommend(title, limit, self.popularity)
        docs = [self.find_by_title(t) for t in related]
        return [d for d in docs if d is not None]

    def trending(self, n: int = TRENDING_LIMIT) -> List[Document]:
        if n <= 0:
            return []
        known = {i: p for i, p in self.popularity.items() if i in self.by_id}
        ids = top_trending(known, n)
        if not ids:
            return self.documents[:n]
        return [self.by_id[i] for i in ids]
