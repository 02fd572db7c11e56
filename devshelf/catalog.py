"""
Catalog records, filtering and sorting.

Raw document records (dicts as produced by whatever loads the catalog)
are validated into frozen :class:`~devshelf.config.Document` models.
Bad records are logged and skipped rather than failing the whole load.
For result refinement the documents can be viewed as a pandas
DataFrame and narrowed by author, category, language or minimum
rating, then sorted by title or rating.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd
from loguru import logger
from pydantic import ValidationError

from .config import Document

CATALOG_COLUMNS = [
    "id",
    "title",
    "author",
    "description",
    "category",
    "language",
    "tags",
    "rating",
    "cover_url",
    "download_link",
]

SORT_MODES = {"relevance", "rating", "title"}


# ---------------------------
# Record validation
# ---------------------------

def documents_from_records(records: Iterable[Union[Document, Mapping]]) -> List[Document]:
    """
    Validate records into documents sorted by ascending id.

    Invalid records are skipped with a warning; for duplicate ids the
    first occurrence is kept.
    """
    by_id = {}
    skipped = 0
    for i, rec in enumerate(records):
        if rec is None:
            skipped += 1
            continue
        try:
            doc = rec if isinstance(rec, Document) else Document.model_validate(rec)
        except ValidationError as e:
            logger.warning("Skipping invalid document record #{}: {}", i, e.errors()[0].get("msg", e))
            skipped += 1
            continue
        if doc.id in by_id:
            logger.warning("Duplicate document id {}; keeping the first record", doc.id)
            skipped += 1
            continue
        by_id[doc.id] = doc
    logger.info("Loaded {} documents ({} skipped)", len(by_id), skipped)
    return [by_id[k] for k in sorted(by_id)]


# ---------------------------
# DataFrame views
# ---------------------------

def catalog_frame(documents: Sequence[Document]) -> pd.DataFrame:
    """One row per document, indexed by id, in the given order."""
    if not documents:
        return pd.DataFrame(columns=CATALOG_COLUMNS).set_index("id")
    df = pd.DataFrame([d.model_dump() for d in documents], columns=CATALOG_COLUMNS)
    return df.set_index("id")


def _contains(series: pd.Series, needle: str) -> pd.Series:
    return series.fillna("").astype(str).str.lower().str.contains(needle, regex=False)


def filter_catalog(
    df: pd.DataFrame,
    *,
    author: Optional[str] = None,
    category: Optional[str] = None,
    language: Optional[str] = None,
    min_rating: float = 0.0,
) -> pd.DataFrame:
    """
    Case-insensitive substring filters.  Blank filter values and
    ``min_rating <= 0`` leave the frame untouched.  Row order is kept.
    """
    out = df
    for column, value in (("author", author), ("category", category), ("language", language)):
        if value is None or not value.strip():
            continue
        out = out[_contains(out[column], value.strip().lower())]
    if min_rating > 0:
        out = out[out["rating"] >= min_rating]
    return out


def sort_catalog(df: pd.DataFrame, by: str = "relevance", ascending: bool = False) -> pd.DataFrame:
    """
    ``relevance`` keeps the incoming (ranked) order; ``rating`` sorts
    numerically and ``title`` case-insensitively.  Sorting is stable.
    """
    if by not in SORT_MODES:
        raise ValueError(f"Unknown sort mode {by!r}; expected one of {sorted(SORT_MODES)}")
    if by == "relevance" or df.empty:
        return df
    if by == "rating":
        return df.sort_values("rating", ascending=ascending, kind="mergesort")
    return df.sort_values(
        "title",
        ascending=ascending,
        kind="mergesort",
        key=lambda s: s.fillna("").astype(str).str.lower(),
    )
