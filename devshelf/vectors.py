"""
The vector model: inverted index, IDF table and per-document TF-IDF
vectors.

The model is normally built offline and handed to the query engine as a
read-only artifact.  This module offers both ways of getting one:

* :func:`build_vector_model` indexes a list of documents with the shared
  tokenizer (``idf = log10(N / df)``, ``tf = 1 + log10(freq)``).
* :meth:`VectorModel.from_mapping` parses the precomputed artifact in
  its plain-mapping form (``invertedIndex`` / ``idfScores`` /
  ``tfIdfVectors``), e.g. after ``json.load`` by the caller.

Cosine similarity over sparse ``{term: weight}`` vectors also lives
here because both the query engine and the tests need it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from loguru import logger

from .config import Document, Posting

Tokenizer = Callable[[str], List[str]]
SparseVector = Dict[str, float]

_SECTION_KEYS = {
    "inverted_index": ("inverted_index", "invertedIndex"),
    "idf": ("idf", "idfScores", "idf_scores"),
    "tfidf": ("tfidf", "tfIdfVectors", "tf_idf_vectors"),
}


@dataclass(frozen=True)
class VectorModel:
    inverted_index: Dict[str, List[Posting]] = field(default_factory=dict)
    idf: Dict[str, float] = field(default_factory=dict)
    tfidf: Dict[int, SparseVector] = field(default_factory=dict)

    @property
    def vocabulary_size(self) -> int:
        return len(self.idf)

    def postings(self, term: str) -> List[Posting]:
        return self.inverted_index.get(term, [])

    def vector(self, doc_id: int) -> Optional[SparseVector]:
        return self.tfidf.get(doc_id)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "VectorModel":
        """Parse a precomputed model.

        Doc ids may arrive as strings (JSON object keys) and are coerced
        to ``int``.  A missing section raises ``ValueError``; the caller
        is responsible for handing over a structurally valid model.
        """
        sections = {}
        for name, keys in _SECTION_KEYS.items():
            found = next((raw[k] for k in keys if k in raw), None)
            if found is None:
                raise ValueError(f"Vector model mapping is missing the '{keys[0]}' section")
            sections[name] = found

        inverted_index = {
            str(term): [p if isinstance(p, Posting) else Posting.model_validate(p) for p in postings]
            for term, postings in sections["inverted_index"].items()
        }
        idf = {str(term): float(w) for term, w in sections["idf"].items()}
        tfidf = {
            int(doc_id): {str(t): float(w) for t, w in vec.items() if w}
            for doc_id, vec in sections["tfidf"].items()
        }
        logger.info(
            "Loaded vector model: {} terms, {} document vectors", len(idf), len(tfidf)
        )
        return cls(inverted_index=inverted_index, idf=idf, tfidf=tfidf)


# ---------------------------
# Building
# ---------------------------

def document_text(doc: Document) -> str:
    """Concatenate every searchable field of a document."""
    parts = [doc.title, doc.author, doc.description, doc.category, doc.language, " ".join(doc.tags)]
    return " ".join(p for p in parts if p)


def term_positions(tokens: Sequence[str]) -> Dict[str, List[int]]:
    positions: Dict[str, List[int]] = {}
    for pos, term in enumerate(tokens):
        positions.setdefault(term, []).append(pos)
    return positions


def tf_weight(freq: int) -> float:
    """TF(t,d) = 1 + log10(f) for f > 0, else 0."""
    return 1.0 + math.log10(freq) if freq > 0 else 0.0


def build_vector_model(documents: Sequence[Document], tokenizer: Tokenizer) -> VectorModel:
    """
    Index ``documents`` with ``tokenizer`` and compute IDF and TF-IDF.

    Documents are indexed in ascending id order so postings lists are
    reproducible.  Weights of zero (a term present in every document)
    are not stored in the document vectors.
    """
    ordered = sorted(documents, key=lambda d: d.id)
    inverted_index: Dict[str, List[Posting]] = {}
    for doc in ordered:
        tokens = tokenizer(document_text(doc))
        for term, positions in term_positions(tokens).items():
            inverted_index.setdefault(term, []).append(
                Posting(doc_id=doc.id, freq=len(positions), positions=positions)
            )

    total = len(ordered)
    idf = {term: math.log10(total / len(postings)) for term, postings in inverted_index.items()}

    tfidf: Dict[int, SparseVector] = {doc.id: {} for doc in ordered}
    for term, postings in inverted_index.items():
        weight = idf[term]
        if weight == 0:
            continue
        for p in postings:
            tfidf[p.doc_id][term] = tf_weight(p.freq) * weight

    logger.info("Indexed {} documents, {} distinct terms", total, len(idf))
    return VectorModel(inverted_index=inverted_index, idf=idf, tfidf=tfidf)


# ---------------------------
# Similarity
# ---------------------------

def vector_norm(vec: Mapping[str, float]) -> float:
    return math.sqrt(sum(w * w for w in vec.values()))


def cosine_similarity(query_vec: Mapping[str, float], doc_vec: Optional[Mapping[str, float]]) -> float:
    """
    dot(q, d) / (|q| * |d|), defined as 0 when either norm is 0 or the
    document has no vector at all.
    """
    if not query_vec or not doc_vec:
        return 0.0
    dot = sum(w * doc_vec.get(term, 0.0) for term, w in query_vec.items())
    norm_q = vector_norm(query_vec)
    norm_d = vector_norm(doc_vec)
    if norm_q == 0.0 or norm_d == 0.0:
        return 0.0
    # rounding can push identical vectors a hair past 1.0
    return min(1.0, dot / (norm_q * norm_d))
