"""
Top-level package for the DevShelf search core.

This package ranks a small, in-memory catalog of technical books
against free-text queries (TF-IDF vector space plus a fusion
re-ranker) and offers typo-tolerant suggestions, prefix autocomplete
and related-book recommendations over the same catalog.  Loading data
from disk and presenting results are left to the caller; nothing here
performs I/O and there are no side effects on import.
"""
from __future__ import annotations
