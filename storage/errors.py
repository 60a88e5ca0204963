"""Error kinds of the search index. Encoding and tokenization never raise."""


class SearchIndexError(Exception):
    """Base class for search index errors."""


class MissingIdentifier(SearchIndexError, ValueError):
    """Content id absent or empty."""


class InvalidIdentifier(SearchIndexError, ValueError):
    """Content id is not exactly 32 hexadecimal characters."""


class MissingDependency(SearchIndexError, RuntimeError):
    """Encoder, converter or storage backend not wired."""


class StorageUnavailable(SearchIndexError, RuntimeError):
    """Database connection could not be established."""


class PartialDeletionFailure(SearchIndexError, RuntimeError):
    """At least one of the per-table deletes failed; carries the report."""

    def __init__(self, report) -> None:
        failed = ", ".join(sorted(report.errors)) or "unknown"
        super().__init__(f"Index delete failed for content_id={report.content_id} ({failed})")
        self.report = report
