"""FastAPI application: phonetic search and content indexing routes."""
import logging

from fastapi import FastAPI

from .config import LOG_LEVEL
from .routes import content, page, search

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Phonetic Search Index API",
    description="Pronunciation-tolerant full-text search: index content, query, delete",
    version="1.0.0",
)

app.include_router(search.router)
app.include_router(content.router)
app.include_router(page.router)


@app.get("/api/health")
def health():
    return {"status": "ok"}
