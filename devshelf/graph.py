"""
Relationship graph used for "related books" recommendations.

Two documents are related when they share, case-insensitively, an
author, a category, a tag or a language.  Only tags are trimmed before
comparison.  Nodes are keyed by normalized title (lowercased,
trimmed).

Rather than comparing every pair of documents, the build indexes each
attribute value to the documents carrying it and unions those buckets
per document; the adjacency is the same as the pairwise definition.
Neighbour lists follow corpus order (ascending document id), never
contain the node itself and never repeat a title.  Blank attribute
values relate nothing.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from loguru import logger

from .config import Document
from .normalize import normalize_title_key


def _fold(value: Optional[str]) -> str:
    return (value or "").lower()


def relation_keys(doc: Document) -> Set[Tuple[str, str]]:
    """Every (attribute, value) pair through which ``doc`` can relate to another."""
    keys: Set[Tuple[str, str]] = set()
    for attr, value in (("author", doc.author), ("category", doc.category), ("language", doc.language)):
        if value and value.strip():
            keys.add((attr, _fold(value)))
    for tag in doc.tags:
        tag = _fold(tag).strip()
        if tag:
            keys.add(("tag", tag))
    return keys


def are_related(a: Document, b: Document) -> bool:
    return bool(relation_keys(a) & relation_keys(b))


class RelationshipGraph:
    def __init__(self) -> None:
        self.adjacency: Dict[str, List[str]] = {}
        self.title_to_id: Dict[str, int] = {}

    @classmethod
    def build(cls, documents: Iterable[Document]) -> "RelationshipGraph":
        graph = cls()
        ordered = sorted((d for d in documents if d.title), key=lambda d: d.id)

        buckets: Dict[Tuple[str, str], List[int]] = {}
        doc_keys: List[Set[Tuple[str, str]]] = []
        for pos, doc in enumerate(ordered):
            keys = relation_keys(doc)
            doc_keys.append(keys)
            for key in keys:
                buckets.setdefault(key, []).append(pos)

        for pos, doc in enumerate(ordered):
            title = normalize_title_key(doc.title)
            neighbors = graph.adjacency.setdefault(title, [])
            # Duplicate normalized titles share one node; the lowest id wins the lookup.
            graph.title_to_id.setdefault(title, doc.id)

            related: Set[int] = set()
            for key in doc_keys[pos]:
                related.update(buckets[key])
            related.discard(pos)

            for other in sorted(related):
                other_title = normalize_title_key(ordered[other].title)
                if other_title != title and other_title not in neighbors:
                    neighbors.append(other_title)

        logger.info(
            "Relationship graph built: {} nodes, {} directed edges",
            len(graph.adjacency),
            graph.edge_count,
        )
        return graph

    @property
    def edge_count(self) -> int:
        return sum(len(n) for n in self.adjacency.values())

    def connections(self, title: str) -> List[str]:
        return list(self.adjacency.get(normalize_title_key(title), []))

    def recommend(
        self,
        title: str,
        limit: int,
        popularity: Optional[Mapping[int, float]] = None,
    ) -> List[str]:
        """
        Up to ``limit`` neighbour titles, most popular first.  Neighbours
        with equal popularity keep their adjacency order.
        """
        key = normalize_title_key(title)
        if key not in self.adjacency or limit <= 0:
            return []
        popularity = popularity or {}
        neighbors = self.adjacency[key]
        ranked = sorted(
            neighbors,
            key=lambda t: popularity.get(self.title_to_id.get(t, -1), 0.0),
            reverse=True,
        )
        return ranked[:limit]

    def explore(self, title: str, limit: int) -> List[str]:
        """Breadth-first walk from ``title``, returning up to ``limit`` reachable titles."""
        start = normalize_title_key(title)
        if start not in self.adjacency or limit <= 0:
            return []
        found: List[str] = []
        visited = {start}
        queue = deque([start])
        while queue and len(found) < limit:
            current = queue.popleft()
            for neighbor in self.adjacency.get(current, []):
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                queue.append(neighbor)
                found.append(neighbor)
                if len(found) >= limit:
                    break
        return found
