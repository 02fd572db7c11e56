"""
Configuration for the DevShelf search core.

Weights, thresholds and limits live here so the ranking modules never
hardcode them.  A handful of values can be overridden through the
environment.  The pydantic schemas for the records the core consumes
are defined at the bottom of the module.
"""

from __future__ import annotations

import os
from typing import FrozenSet, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# Query engine
TOKEN_SPLIT_PATTERN = r"[^a-z0-9']+"
STEMMER_LANGUAGE = "english"

# Fusion re-ranking
W_TFIDF = 0.70
W_RATING = 0.10
W_POPULARITY = 0.20
MAX_RATING = 5.0

EXACT_TITLE_BOOST = 10.0
PREFIX_TITLE_BOOST = 5.0
SUBSTRING_TITLE_BOOST = 2.0

# Suggestion
SUGGEST_WORD_WEIGHT = 0.65
SUGGEST_GLOBAL_WEIGHT = 0.35
SUGGEST_WORD_EARLY_EXIT = 0.95
DEFAULT_SUGGEST_THRESHOLD = 0.6
SUGGEST_THRESHOLD = float(os.getenv("DEVSHELF_SUGGEST_THRESHOLD", str(DEFAULT_SUGGEST_THRESHOLD)))

# Autocomplete
TITLE_SPLIT_PATTERN = r"[\s,]+"
DEFAULT_AUTOCOMPLETE_SAMPLE = 50
DEFAULT_AUTOCOMPLETE_COUNT = 5
AUTOCOMPLETE_SAMPLE = int(os.getenv("DEVSHELF_AUTOCOMPLETE_SAMPLE", str(DEFAULT_AUTOCOMPLETE_SAMPLE)))
AUTOCOMPLETE_COUNT = int(os.getenv("DEVSHELF_AUTOCOMPLETE_COUNT", str(DEFAULT_AUTOCOMPLETE_COUNT)))

# Recommendations / trending
RECOMMENDATION_LIMIT = 5
TRENDING_LIMIT = 10

# Stopwords shared by the tokenizer and the suggester
DEFAULT_STOPWORDS: FrozenSet[str] = frozenset(
    {
        "a", "about", "above", "after", "again", "against", "all", "am", "an",
        "and", "any", "are", "as", "at", "be", "because", "been", "before",
        "being", "below", "between", "both", "but", "by", "can", "did", "do",
        "does", "doing", "down", "during", "each", "few", "for", "from",
        "further", "had", "has", "have", "having", "he", "her", "here", "hers",
        "herself", "him", "himself", "his", "how", "i", "if", "in", "into",
        "is", "it", "its", "itself", "just", "me", "more", "most", "my",
        "myself", "no", "nor", "not", "now", "of", "off", "on", "once", "only",
        "or", "other", "our", "ours", "ourselves", "out", "over", "own", "same",
        "she", "should", "so", "some", "such", "than", "that", "the", "their",
        "theirs", "them", "themselves", "then", "there", "these", "they",
        "this", "those", "through", "to", "too", "under", "until", "up", "very",
        "was", "we", "were", "what", "when", "where", "which", "while", "who",
        "whom", "why", "will", "with", "you", "your", "yours", "yourself",
        "yourselves",
    }
)


# Pydantic schemas
class Document(BaseModel):
    """A catalog entry.  Frozen: documents never change after load."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(validation_alias=AliasChoices("id", "bookId", "doc_id"))
    title: str
    author: str = ""
    description: str = ""
    category: str = ""
    language: str = Field(default="", validation_alias=AliasChoices("language", "progLang"))
    tags: List[str] = Field(default_factory=list, validation_alias=AliasChoices("tags", "tag"))
    rating: float = Field(default=0.0, ge=0.0, le=MAX_RATING)
    cover_url: str = Field(default="", validation_alias=AliasChoices("cover_url", "coverUrl"))
    download_link: str = Field(
        default="", validation_alias=AliasChoices("download_link", "downloadLink", "downLink")
    )


class Posting(BaseModel):
    """Occurrence of one term in one document."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    doc_id: int = Field(validation_alias=AliasChoices("doc_id", "docId"))
    freq: int = Field(ge=1)
    positions: List[int] = Field(default_factory=list)


class ClickEvent(BaseModel):
    query: str
    clicked_doc_id: int = Field(validation_alias=AliasChoices("clicked_doc_id", "clickedDocId"))
    timestamp: Optional[str] = None
