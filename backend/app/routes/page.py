"""Search page: type-to-search HTML over GET /api/search."""
import json
from functools import lru_cache
from pathlib import Path
from string import Template

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse

from ..config import MAX_RESULTS, MIN_QUERY_CHARS

router = APIRouter(tags=["page"])

TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "templates" / "search.html"
SEARCH_ENDPOINT = "/api/search"


@lru_cache(maxsize=1)
def _template() -> Template:
    return Template(TEMPLATE_PATH.read_text(encoding="utf-8"))


def _js_string(value: str) -> str:
    # "<" escaped so a value cannot close the surrounding <script>
    return json.dumps(value).replace("<", "\\u003c")


def render_search_page(
    endpoint: str = SEARCH_ENDPOINT,
    min_chars: int = MIN_QUERY_CHARS,
    max_results: int = MAX_RESULTS,
    lang: str | None = None,
) -> str:
    return _template().substitute(
        endpoint=_js_string(endpoint),
        lang=_js_string(lang or ""),
        min_chars=int(min_chars),
        max_results=int(max_results),
    )


@router.get("/search", response_class=HTMLResponse)
def search_page(lang: str | None = Query(None, description="Stop word language passed on to /api/search")):
    return HTMLResponse(render_search_page(lang=lang))
