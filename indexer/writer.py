"""
Index writer: content text -> words -> phonetic codes -> tokens -> storage.
"""

import json
import logging
from typing import Any, List, Optional, Sequence

from phonetic.cologne import PhoneticEncoder
from phonetic.stopwords import StopWordCache
from phonetic.tokens import TokenConverter
from phonetic.words import split_words, unique_words
from storage.content_ids import normalize_content_id
from storage.errors import MissingDependency
from storage.index_backend import IndexBackend

from .models import INDEXED, NO_INDEXABLE_TEXT, ContentMetadata, IndexReport

logger = logging.getLogger(__name__)


def extract_text(text: Optional[str], structured: Any = None) -> str:
    """Plain text if present, else a JSON rendering of structured content."""
    text = (text or "").strip()
    if text:
        return text
    if isinstance(structured, (dict, list)):
        return json.dumps(structured, ensure_ascii=False).strip()
    return ""


def valid_role_ids(roles: Optional[Sequence]) -> List[int]:
    """Positive integer role ids, deduplicated; anything unparsable is skipped."""
    out: List[int] = []
    for r in roles or []:
        try:
            rid = int(r)
        except (TypeError, ValueError):
            continue
        if rid > 0:
            out.append(rid)
    return list(dict.fromkeys(out))


class IndexWriter:
    """Builds search_index rows plus direct_link / read_roles for one content item."""

    def __init__(
        self,
        backend: IndexBackend,
        encoder: PhoneticEncoder,
        converter: TokenConverter,
        stop_words: Optional[StopWordCache] = None,
    ) -> None:
        if backend is None or encoder is None or converter is None:
            raise MissingDependency("IndexWriter needs a backend, a phonetic encoder and a token converter")
        self._backend = backend
        self._encoder = encoder
        self._converter = converter
        self._stop_words = stop_words or StopWordCache.empty()

    def words_for(self, text: str, lang: Optional[str] = None) -> List[str]:
        """Unique, stop-word-filtered words of text in first-seen order."""
        return unique_words(split_words(text, stop_words=self._stop_words.get(lang)))

    def tokens_for(self, words: List[str]) -> List[int]:
        out: List[int] = []
        for w in words:
            code = self._encoder.encode(w).strip()
            if not code:
                continue
            token, _ = self._converter.to_token(code)
            if token > 0:
                out.append(token)
        return list(dict.fromkeys(out))

    def index_content(
        self,
        content_id: str,
        text: Optional[str],
        metadata: Optional[ContentMetadata] = None,
        structured: Any = None,
    ) -> IndexReport:
        """
        Index one content item. Raises MissingIdentifier / InvalidIdentifier for a bad id
        and StorageUnavailable when the database cannot be reached.
        Re-indexing the same content is idempotent.
        """
        hex_id = normalize_content_id(content_id)
        meta = metadata or ContentMetadata()

        words = self.words_for(extract_text(text, structured), meta.lang)
        if not words:
            logger.info("No indexable text for content_id=%s; skipped", hex_id)
            return IndexReport(hex_id, NO_INDEXABLE_TEXT)

        self._backend.connect()
        raw_id = bytes.fromhex(hex_id)

        link = (meta.direct_link or "").strip()
        if link:
            self._backend.upsert_direct_link(raw_id, link, (meta.title or "").strip(), (meta.description or "").strip())

        roles = valid_role_ids(meta.read_roles)
        if roles:
            self._backend.replace_read_roles(raw_id, roles)

        tokens = self.tokens_for(words)
        written = self._backend.insert_tokens(raw_id, tokens)
        logger.debug(
            "Indexed content_id=%s words=%d tokens=%d roles=%d link=%s",
            hex_id, len(words), written, len(roles), bool(link),
        )
        return IndexReport(hex_id, INDEXED, words=len(words), tokens=written)
