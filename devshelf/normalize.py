"""
Text normalization utilities used across the DevShelf search core.

Two very different normalizations live here.  The first is the shared
tokenizer (:class:`TextProcessor`) that turns free text into stemmed
terms; it must be the exact same transform at index-build time and at
query time or the vocabularies drift apart and ranking silently breaks.
The second is the lighter cleaning used by the fuzzy suggester and the
autocomplete trie, which work on surface words rather than stems.
Keeping both here ensures titles and queries are treated consistently.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from nltk.stem.snowball import SnowballStemmer

from .config import (
    DEFAULT_STOPWORDS,
    STEMMER_LANGUAGE,
    TITLE_SPLIT_PATTERN,
    TOKEN_SPLIT_PATTERN,
)


# ---------------------------
# Basic helpers
# ---------------------------

TOKEN_SPLIT_RE = re.compile(TOKEN_SPLIT_PATTERN)
TITLE_SPLIT_RE = re.compile(TITLE_SPLIT_PATTERN)
NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")


def normalize_whitespace(text: str) -> str:
    """
    Collapse all whitespace runs into a single space and strip edges.
    """
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


# ---------------------------
# Shared tokenizer
# ---------------------------

class TextProcessor:
    """
    Tokenize -> lowercase -> drop stopwords -> stem.

    Instances hold no mutable state after construction, so a single
    processor can be shared by the index builder and the query engine.
    Any object with a ``stem(word) -> str`` method can stand in for the
    Snowball stemmer.
    """

    def __init__(self, stopwords: Optional[Iterable[str]] = None, stemmer=None):
        if stopwords is None:
            stopwords = DEFAULT_STOPWORDS
        self.stopwords = frozenset(w.strip().lower() for w in stopwords if w and w.strip())
        self.stemmer = stemmer if stemmer is not None else SnowballStemmer(STEMMER_LANGUAGE)

    def split(self, text: str) -> List[str]:
        """Lowercase and split, keeping apostrophes inside words."""
        if not text or not text.strip():
            return []
        return [t for t in TOKEN_SPLIT_RE.split(text.lower()) if t]

    def tokenize(self, text: str) -> List[str]:
        """Return the ordered list of stemmed, stopword-free terms."""
        return [self.stemmer.stem(t) for t in self.split(text) if t not in self.stopwords]

    __call__ = tokenize


# ---------------------------
# Suggestion / autocomplete cleaning
# ---------------------------

def normalize_for_suggestion(text: str, stopwords: Iterable[str] = DEFAULT_STOPWORDS) -> str:
    """
    Cleaning applied to queries and titles before fuzzy matching.

    - lowercase
    - anything outside ``[a-z0-9 ]`` becomes a space
    - drop single-character words and stopwords
    - collapse whitespace
    """
    if not text:
        return ""
    stop = stopwords if isinstance(stopwords, (set, frozenset)) else set(stopwords)
    cleaned = NON_ALNUM_RE.sub(" ", text.lower())
    words = [w for w in cleaned.split() if len(w) > 1 and w not in stop]
    return " ".join(words)


def split_title_words(title: str) -> List[str]:
    """
    Split a title on whitespace and commas only, so words such as
    ``C++`` or ``C#`` survive intact for prefix lookups.
    """
    if not title:
        return []
    return [w.strip() for w in TITLE_SPLIT_RE.split(title) if w.strip()]


def normalize_title_key(title: Optional[str]) -> str:
    """Key used to identify a title case-insensitively."""
    return (title or "").strip().lower()
