"""
Prefix autocomplete over catalog titles.

Every word of every title is inserted into a character trie and the
full, verbatim title is attached to the node where that word ends, so
typing ``pat`` finds "Design Patterns" as well as "Pattern Recognition".

Selection policy of :meth:`AutocompleteTrie.complete`: titles are
gathered by a depth-first walk in sorted character order that stops as
soon as ``limit`` distinct titles are held, and only then sorted
alphabetically.  With more matches than ``limit`` the returned titles
are therefore the first ones met by the walk (shorter and
alphabetically earlier *words* first), not the alphabetically smallest
titles.  This is deliberate and covered by tests.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Set

from loguru import logger

from .config import AUTOCOMPLETE_COUNT, Document
from .normalize import split_title_words


class TrieNode:
    __slots__ = ("children", "titles")

    def __init__(self) -> None:
        self.children: Dict[str, TrieNode] = {}
        self.titles: Set[str] = set()


class AutocompleteTrie:
    def __init__(self) -> None:
        self.root = TrieNode()
        self.word_count = 0

    def insert(self, word: str, title: str) -> None:
        """Index ``word`` (case-insensitively) and link it to ``title``."""
        if not word:
            return
        node = self.root
        for ch in word.lower():
            node = node.children.setdefault(ch, TrieNode())
        if not node.titles:
            self.word_count += 1
        node.titles.add(title)

    def add_title(self, title: str) -> None:
        for word in split_title_words(title):
            self.insert(word, title)

    def _find(self, prefix: str):
        node = self.root
        for ch in prefix.lower():
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    def _collect(self, node: TrieNode, found: Set[str], limit: int) -> None:
        if len(found) >= limit:
            return
        found.update(node.titles)
        if len(found) >= limit:
            return
        for key in sorted(node.children):
            self._collect(node.children[key], found, limit)
            if len(found) >= limit:
                return

    def complete(self, prefix: str, limit: int = 10) -> List[str]:
        """Up to ``limit`` unique titles containing a word that starts with ``prefix``."""
        if not prefix or limit <= 0:
            return []
        node = self._find(prefix)
        if node is None:
            return []
        found: Set[str] = set()
        self._collect(node, found, limit)
        return sorted(found)[:limit]


def build_title_trie(documents: Iterable[Document]) -> AutocompleteTrie:
    trie = AutocompleteTrie()
    titles = 0
    for doc in documents:
        if doc.title:
            trie.add_title(doc.title)
            titles += 1
    logger.info("Autocomplete trie built: {} titles, {} words", titles, trie.word_count)
    return trie


def shape_completions(matches: Iterable[str], prefix: str, count: int = AUTOCOMPLETE_COUNT) -> List[str]:
    """
    Put titles that themselves start with ``prefix`` ahead of titles
    matched on a later word, keep each group's order, drop duplicates
    and keep the first ``count``.
    """
    if count <= 0:
        return []
    lower_prefix = (prefix or "").lower()
    leading: List[str] = []
    inner: List[str] = []
    for title in matches:
        (leading if title.lower().startswith(lower_prefix) else inner).append(title)

    shaped: List[str] = []
    seen: Set[str] = set()
    for title in leading + inner:
        if title not in seen:
            seen.add(title)
            shaped.append(title)
    return shaped[:count]
