"""Shared fixtures: file-backed SQLite index per test, wired client, HTTP client."""

import os

# Keep the app's default engine off the on-disk data directory during tests
os.environ.setdefault("PHONOSEARCH_DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine

from indexer import SearchIndexClient
from phonetic import ColognePhoneticEncoder, ReverseTokenConverter, StopWordCache
from storage import SqlIndexBackend


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path / 'index.db'}", connect_args={"check_same_thread": False})
    yield eng
    eng.dispose()


@pytest.fixture
def backend(engine):
    return SqlIndexBackend(engine)


@pytest.fixture
def client(backend):
    return SearchIndexClient(backend, ColognePhoneticEncoder(), ReverseTokenConverter(), StopWordCache.empty())


@pytest.fixture
def api(client):
    from fastapi.testclient import TestClient

    from backend.app.index_service import get_index_client
    from backend.app.main import app

    app.dependency_overrides[get_index_client] = lambda: client
    yield TestClient(app)
    app.dependency_overrides.clear()
