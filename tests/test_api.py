"""
HTTP API: search envelope, content indexing and deletion routes.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from backend.app.index_service import get_index_client
from backend.app.main import app
from indexer import SearchIndexClient
from phonetic import ColognePhoneticEncoder, ReverseTokenConverter, StopWordCache
from storage import SqlIndexBackend, StorageUnavailable

ID1 = "00000000000000000000000000000001"
ID2 = "00000000000000000000000000000002"


class LockedLinksBackend(SqlIndexBackend):
    def delete_rows(self, target, content_id):
        if target == "direct_link":
            raise OperationalError("DELETE FROM direct_link", {}, Exception("database is locked"))
        return super().delete_rows(target, content_id)


class OfflineBackend(SqlIndexBackend):
    def connect(self):
        raise StorageUnavailable("Database unavailable: connection refused")


@pytest.fixture
def api_with():
    """TestClient over a client built on a given backend."""

    def make(backend):
        client = SearchIndexClient(backend, ColognePhoneticEncoder(), ReverseTokenConverter(), StopWordCache.empty())
        app.dependency_overrides[get_index_client] = lambda: client
        return TestClient(app)

    yield make
    app.dependency_overrides.clear()


def test_health(api):
    r = api.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_index_then_search(api):
    r = api.post(
        "/api/content",
        json={"content_id": ID1.lower(), "text": "Hallo Welt", "direct_link": "https://example.org/1", "title": "Eins"},
    )
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "content_id": ID1, "indexed": True, "words": 2, "tokens": 2}

    r = api.get("/api/search", params={"q": "Welt"})
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert "timestamp" in body
    assert body["data"]["q"] == "Welt"
    assert body["data"]["items"] == [
        {"content_id": ID1, "direct_link": "https://example.org/1", "title": "Eins", "description": ""}
    ]


def test_index_structured_content(api):
    r = api.post("/api/content", json={"content_id": ID1, "structured": {"title": "Meier"}})
    assert r.json()["indexed"] is True
    assert len(api.get("/api/search", params={"q": "Mayer"}).json()["data"]["items"]) == 1


@pytest.mark.parametrize("content_id", [None, "", "xyz", "0" * 31])
def test_index_rejects_bad_ids(api, content_id):
    r = api.post("/api/content", json={"content_id": content_id, "text": "Welt"})
    assert r.status_code == 400


def test_index_without_text_is_not_indexed(api):
    r = api.post("/api/content", json={"content_id": ID1, "text": "1 2 3"})
    assert r.status_code == 200
    assert r.json()["indexed"] is False
    assert r.json()["tokens"] == 0


def test_short_and_empty_queries_are_ok_and_empty(api):
    for q in ["", "ab"]:
        body = api.get("/api/search", params={"q": q}).json()
        assert body["status"] == "ok"
        assert body["data"]["items"] == []


def test_too_long_query_is_an_error(api):
    body = api.get("/api/search", params={"q": "welt " * 200}).json()
    assert body["status"] == "error"
    assert "too long" in body["message"]


def test_search_reports_storage_errors(api_with, engine):
    api = api_with(OfflineBackend(engine))
    r = api.get("/api/search", params={"q": "Welt"})
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "error"
    assert "unavailable" in body["message"]
    assert "data" not in body


def test_index_reports_storage_errors(api_with, engine):
    api = api_with(OfflineBackend(engine))
    r = api.post("/api/content", json={"content_id": ID1, "text": "Welt"})
    assert r.status_code == 503


def test_delete_content(api):
    api.post("/api/content", json={"content_id": ID1, "text": "Hallo Welt"})
    r = api.delete(f"/api/content/{ID1}")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.json()["removed"] == 2
    assert api.get("/api/search", params={"q": "Welt"}).json()["data"]["items"] == []

    assert api.delete(f"/api/content/{ID1}").json()["removed"] == 0
    assert api.delete("/api/content/nothex").status_code == 400


def test_partial_delete_answers_500(api_with, engine):
    api = api_with(LockedLinksBackend(engine))
    api.post("/api/content", json={"content_id": ID1, "text": "Welt", "direct_link": "https://a"})
    r = api.delete(f"/api/content/{ID1}")
    assert r.status_code == 500
    body = r.json()
    assert body["status"] == "partial"
    assert body["targets"] == {"search_index": True, "direct_link": False, "read_roles": True}


def test_delete_by_filter(api):
    api.post("/api/content", json={"content_id": ID1, "text": "Welt"})
    api.post("/api/content", json={"content_id": ID2, "text": "Welt"})
    r = api.post("/api/content/delete", json={"content_uuid": [ID1, ID2, "bogus"]})
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert [d["content_id"] for d in body["deleted"]] == [ID1, ID2]

    r = api.post("/api/content/delete", json={"content_uuid": "bogus"})
    assert r.json() == {"status": "ok", "deleted": []}


class LockedTokensBackend(SqlIndexBackend):
    def insert_tokens(self, content_id, tokens):
        raise OperationalError("INSERT INTO search_index", {}, Exception("database is locked"))


def test_index_write_failure_answers_503(api_with, engine):
    api = api_with(LockedTokensBackend(engine))
    r = api.post("/api/content", json={"content_id": ID1, "text": "Welt"})
    assert r.status_code == 503
    assert "database is locked" in r.json()["detail"]


def test_delete_by_filter_skips_non_string_ids(api):
    api.post("/api/content", json={"content_id": ID1, "text": "Welt"})
    r = api.post("/api/content/delete", json={"content_uuid": [ID1, 5, None, {"x": 1}]})
    assert r.status_code == 200
    assert [d["content_id"] for d in r.json()["deleted"]] == [ID1]


def test_request_languages_do_not_grow_stop_word_cache(api, client):
    for i in range(50):
        assert api.get("/api/search", params={"q": "Welt", "lang": f"zz{i}"}).status_code == 200
    assert set(client.stop_words._sets) <= {"de"}


def test_search_page(api):
    r = api.get("/search")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    html = r.text
    assert 'const SEARCH_ENDPOINT = "/api/search";' in html
    assert "const MIN_CHARS = 3;" in html
    assert "const MAX_RESULTS = 10;" in html
    assert "Min 3 chars" in html
    assert "$" not in html.split("<script>")[0]


def test_search_page_escapes_lang(api):
    html = api.get("/search", params={"lang": "</script><b>x"}).text
    assert "</script><b>" not in html
    assert 'const SEARCH_LANG = "\\u003c/script>\\u003cb>x";' in html
