"""
Search index client: one object wiring writer, matcher and maintenance to a
shared backend, encoder, converter and stop word cache.
"""

from typing import Any, List, Mapping, Optional

from phonetic.cologne import PhoneticEncoder
from phonetic.stopwords import StopWordCache
from phonetic.tokens import TokenConverter
from storage.errors import MissingDependency
from storage.index_backend import IndexBackend

from .maintenance import IndexMaintenance
from .matcher import MAX_QUERY_WORDS, MAX_RESULTS, MIN_QUERY_CHARS, QueryMatcher
from .models import ContentMetadata, DeletionReport, IndexReport, SearchOutcome
from .writer import IndexWriter


class SearchIndexClient:
    """Index, search and delete content in the phonetic search index."""

    def __init__(
        self,
        backend: IndexBackend,
        encoder: PhoneticEncoder,
        converter: TokenConverter,
        stop_words: Optional[StopWordCache] = None,
        min_query_chars: int = MIN_QUERY_CHARS,
        max_query_words: int = MAX_QUERY_WORDS,
        max_results: int = MAX_RESULTS,
    ):
        if backend is None or encoder is None or converter is None:
            raise MissingDependency("SearchIndexClient needs a backend, a phonetic encoder and a token converter")
        self._backend = backend
        self.stop_words = stop_words or StopWordCache.empty()
        self.writer = IndexWriter(backend, encoder, converter, self.stop_words)
        self.matcher = QueryMatcher(
            backend,
            encoder,
            converter,
            self.stop_words,
            min_query_chars=min_query_chars,
            max_words=max_query_words,
            max_results=max_results,
        )
        self.maintenance = IndexMaintenance(backend)

    @property
    def backend(self) -> IndexBackend:
        return self._backend

    def index_content(
        self,
        content_id: str,
        text: Optional[str],
        metadata: Optional[ContentMetadata] = None,
        structured: Any = None,
    ) -> IndexReport:
        return self.writer.index_content(content_id, text, metadata, structured=structured)

    def reindex_content(
        self,
        content_id: str,
        text: Optional[str],
        metadata: Optional[ContentMetadata] = None,
        structured: Any = None,
    ) -> IndexReport:
        """
        Drop all rows of content_id, then index it again. Unlike index_content,
        tokens of words no longer in the text do not survive.
        """
        self.maintenance.delete_content(content_id).raise_for_failures()
        return self.writer.index_content(content_id, text, metadata, structured=structured)

    def search(self, query: str, lang: Optional[str] = None) -> SearchOutcome:
        return self.matcher.search(query, lang)

    def delete_content(self, content_id: str) -> DeletionReport:
        return self.maintenance.delete_content(content_id)

    def delete_by_filter(self, filters: Mapping[str, Any]) -> List[DeletionReport]:
        return self.maintenance.delete_by_filter(filters)

    def close(self) -> None:
        self._backend.close()
