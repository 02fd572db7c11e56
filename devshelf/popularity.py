"""
Popularity scores derived from click events.

Clicks are counted per document, dampened with ``log10(1 + clicks)`` so
a thousand clicks is not worth a thousand times one click, and scaled
into ``[0, 1]`` by the largest score.  Writing the click log is the
caller's job; this module only turns already-read events into the
popularity snapshot the re-ranker and the graph read.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Union

import numpy as np
import pandas as pd
from loguru import logger
from pydantic import ValidationError

from .config import TRENDING_LIMIT, ClickEvent


def parse_click_events(records: Iterable[Union[ClickEvent, Mapping]]) -> List[ClickEvent]:
    """Validate raw records, skipping (and logging) the malformed ones."""
    events: List[ClickEvent] = []
    for i, rec in enumerate(records):
        if isinstance(rec, ClickEvent):
            events.append(rec)
            continue
        try:
            events.append(ClickEvent.model_validate(rec))
        except ValidationError as e:
            logger.warning("Skipping malformed click event #{}: {}", i, e.errors()[0].get("msg", e))
    return events


def popularity_from_clicks(events: Iterable[Union[ClickEvent, Mapping]]) -> Dict[int, float]:
    """Return ``{doc_id: score}`` with scores in ``[0, 1]``; no clicks gives ``{}``."""
    parsed = parse_click_events(events)
    if not parsed:
        return {}
    counts = pd.Series([e.clicked_doc_id for e in parsed]).value_counts()
    scores = np.log10(1.0 + counts.to_numpy(dtype="float64"))
    max_score = float(scores.max())
    if max_score > 0:
        scores = scores / max_score
    logger.info("Computed popularity for {} documents from {} clicks", len(counts), len(parsed))
    return {int(doc_id): float(s) for doc_id, s in zip(counts.index, scores)}


def top_trending(popularity: Mapping[int, float], n: int = TRENDING_LIMIT) -> List[int]:
    """The ``n`` most popular doc ids, ties broken by ascending id."""
    if n <= 0:
        return []
    ranked = sorted(popularity.items(), key=lambda kv: (-kv[1], kv[0]))
    return [doc_id for doc_id, _ in ranked[:n]]
