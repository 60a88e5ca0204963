"""Search route: phonetic query over the index, JSON envelope with status."""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from indexer import SearchIndexClient

from ..config import MAX_SEARCH_QUERY_LENGTH
from ..index_service import get_index_client

router = APIRouter(prefix="/api", tags=["search"])


class SearchItem(BaseModel):
    content_id: str
    direct_link: str
    title: str
    description: str


class SearchData(BaseModel):
    q: str
    items: list[SearchItem]


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def json_success(data: dict) -> dict:
    return {"status": "ok", "timestamp": _timestamp(), "data": data}


def json_error(message: str) -> dict:
    return {"status": "error", "timestamp": _timestamp(), "message": message}


@router.get("/search")
def search(
    q: str = Query("", description="Raw query; up to 6 words are matched phonetically"),
    lang: str | None = Query(None, description="Stop word language (default from config)"),
    client: SearchIndexClient = Depends(get_index_client),
):
    """
    Always HTTP 200. status "ok" with possibly empty items means "no results";
    status "error" means the index could not be queried.
    """
    if len(q) > MAX_SEARCH_QUERY_LENGTH:
        return json_error(f"Search query too long (max {MAX_SEARCH_QUERY_LENGTH} characters).")
    outcome = client.search(q, lang)
    if not outcome.ok:
        return json_error(outcome.message)
    data = SearchData(q=q, items=[SearchItem(**hit.to_dict()) for hit in outcome.items])
    return json_success(data.model_dump())
