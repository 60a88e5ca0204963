"""Composition root: builds the search index client from app configuration."""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from sqlalchemy.engine import Engine

from indexer import SearchIndexClient
from phonetic import ColognePhoneticEncoder, ReverseTokenConverter, StopWordCache
from storage import SqlIndexBackend

from . import config
from .database import engine as default_engine, make_engine


def build_index_client(
    engine: Optional[Engine] = None,
    database_url: Optional[str] = None,
    stopword_dir: Optional[Path] = None,
    stop_words: Optional[StopWordCache] = None,
) -> SearchIndexClient:
    """
    Wire backend, Cologne encoder, reverse converter and stop words.
    Pass engine or database_url to target another database (tests, CLI --db).
    """
    if engine is None:
        engine = make_engine(database_url) if database_url else default_engine
    backend = SqlIndexBackend(
        engine,
        search_table=config.SEARCH_TABLE,
        direct_link_table=config.DIRECT_LINK_TABLE,
        read_roles_table=config.READ_ROLES_TABLE,
    )
    if stop_words is None:
        stop_words = StopWordCache(stopword_dir or config.STOPWORD_DIR, default_lang=config.DEFAULT_LANG)
    return SearchIndexClient(
        backend,
        ColognePhoneticEncoder(),
        ReverseTokenConverter(),
        stop_words,
        min_query_chars=config.MIN_QUERY_CHARS,
        max_query_words=config.MAX_QUERY_WORDS,
        max_results=config.MAX_RESULTS,
    )


@lru_cache(maxsize=1)
def get_index_client() -> SearchIndexClient:
    """Process-wide client for request handlers (FastAPI dependency)."""
    return build_index_client()
