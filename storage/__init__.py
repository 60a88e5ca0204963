"""Storage for the phonetic search index (SQLAlchemy) and its error kinds."""

from .content_ids import content_id_bytes, content_id_hex, is_content_id, normalize_content_id
from .errors import (
    InvalidIdentifier,
    MissingDependency,
    MissingIdentifier,
    PartialDeletionFailure,
    SearchIndexError,
    StorageUnavailable,
)
from .index_backend import TARGETS, IndexBackend, SqlIndexBackend, clean_identifier

__all__ = [
    "content_id_bytes",
    "content_id_hex",
    "is_content_id",
    "normalize_content_id",
    "InvalidIdentifier",
    "MissingDependency",
    "MissingIdentifier",
    "PartialDeletionFailure",
    "SearchIndexError",
    "StorageUnavailable",
    "TARGETS",
    "IndexBackend",
    "SqlIndexBackend",
    "clean_identifier",
]
