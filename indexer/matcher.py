"""
Query matcher: raw query -> deduplicated (token, length) terms -> content rows.

A content item matches when, for every term, at least one of its stored
tokens satisfies token % 10**length == term.token, i.e. the query word's
phonetic code is a prefix of one of the content's word codes.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from phonetic.cologne import PhoneticEncoder
from phonetic.stopwords import StopWordCache
from phonetic.tokens import MAX_DIGITS, SearchTerm, TokenConverter
from phonetic.words import MIN_WORD_LENGTH, normalize_query, split_words
from storage.errors import MissingDependency, StorageUnavailable
from storage.index_backend import IndexBackend

from .models import STATUS_ERROR, SearchHit, SearchOutcome

logger = logging.getLogger(__name__)

MIN_QUERY_CHARS = 3
MAX_QUERY_WORDS = 6
MAX_RESULTS = 10


def build_search_terms(
    words: List[str],
    encoder: PhoneticEncoder,
    converter: TokenConverter,
) -> List[SearchTerm]:
    """Encode and convert words; drop empty codes and tokens <= 0; dedupe (token, length)."""
    terms: List[SearchTerm] = []
    for w in words:
        if len(w) < MIN_WORD_LENGTH:
            continue
        code = encoder.encode(w).strip()
        if not code:
            continue
        token, length = converter.to_token(code)
        if token <= 0:
            continue
        terms.append(SearchTerm(token, min(length, MAX_DIGITS)))
    return list(dict.fromkeys(terms))


class QueryMatcher:
    """Read-only search over the index. Never raises; failures come back as status "error"."""

    def __init__(
        self,
        backend: IndexBackend,
        encoder: PhoneticEncoder,
        converter: TokenConverter,
        stop_words: Optional[StopWordCache] = None,
        min_query_chars: int = MIN_QUERY_CHARS,
        max_words: int = MAX_QUERY_WORDS,
        max_results: int = MAX_RESULTS,
    ) -> None:
        if backend is None or encoder is None or converter is None:
            raise MissingDependency("QueryMatcher needs a backend, a phonetic encoder and a token converter")
        self._backend = backend
        self._encoder = encoder
        self._converter = converter
        self._stop_words = stop_words or StopWordCache.empty()
        self.min_query_chars = min_query_chars
        self.max_words = max_words
        self.max_results = max_results

    def terms_for(self, query: str, lang: Optional[str] = None) -> List[SearchTerm]:
        q = normalize_query(query)
        if len(q) < self.min_query_chars:
            return []
        words = split_words(q, max_words=self.max_words, stop_words=self._stop_words.get(lang))
        return build_search_terms(words, self._encoder, self._converter)

    def search(self, query: str, lang: Optional[str] = None) -> SearchOutcome:
        q = normalize_query(query if isinstance(query, str) else "")
        try:
            terms = self.terms_for(q, lang)
            if not terms:
                return SearchOutcome(q, [])
            self._backend.connect()
            rows = self._backend.find_matches(terms, self.max_results)
        except (StorageUnavailable, SQLAlchemyError) as e:
            logger.warning("Search failed for q=%r: %s", q, e)
            return SearchOutcome(q, [], status=STATUS_ERROR, message=f"Search unavailable: {e}")
        items = [SearchHit(**row) for row in rows]
        logger.debug("Search q=%r terms=%d hits=%d", q, len(terms), len(items))
        return SearchOutcome(q, items)
