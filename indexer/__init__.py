"""Index writer, query matcher and maintenance for the phonetic search index."""

from .client import SearchIndexClient
from .maintenance import IndexMaintenance, content_ids_from_filter
from .matcher import QueryMatcher, build_search_terms
from .models import (
    INDEXED,
    NO_INDEXABLE_TEXT,
    ContentMetadata,
    DeletionReport,
    IndexReport,
    SearchHit,
    SearchOutcome,
)
from .writer import IndexWriter, extract_text

__all__ = [
    "SearchIndexClient",
    "IndexMaintenance",
    "content_ids_from_filter",
    "QueryMatcher",
    "build_search_terms",
    "INDEXED",
    "NO_INDEXABLE_TEXT",
    "ContentMetadata",
    "DeletionReport",
    "IndexReport",
    "SearchHit",
    "SearchOutcome",
    "IndexWriter",
    "extract_text",
]
