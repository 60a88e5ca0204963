"""Content routes: index, delete, delete by filter."""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from indexer import ContentMetadata, SearchIndexClient
from storage import MissingIdentifier, InvalidIdentifier, StorageUnavailable

from ..index_service import get_index_client

router = APIRouter(prefix="/api/content", tags=["content"])


class IndexRequest(BaseModel):
    content_id: str | None = None
    text: str | None = None
    structured: dict | list | None = None
    direct_link: str | None = None
    title: str = ""
    description: str = ""
    lang: str | None = None
    read_roles: list[Any] | None = None


class IndexResponse(BaseModel):
    status: str = "ok"
    content_id: str
    indexed: bool
    words: int
    tokens: int


class DeleteFilterRequest(BaseModel):
    content_uuid: str | list[Any] | None = None


@router.post("", response_model=IndexResponse)
def index_content(body: IndexRequest, client: SearchIndexClient = Depends(get_index_client)):
    meta = ContentMetadata(
        direct_link=body.direct_link,
        title=body.title,
        description=body.description,
        lang=body.lang,
        read_roles=body.read_roles,
    )
    try:
        report = client.index_content(body.content_id, body.text, meta, structured=body.structured)
    except (MissingIdentifier, InvalidIdentifier) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    except SQLAlchemyError as e:
        raise HTTPException(status_code=503, detail=f"Index write failed: {e}")
    return IndexResponse(
        content_id=report.content_id,
        indexed=report.indexed,
        words=report.words,
        tokens=report.tokens,
    )


@router.delete("/{content_id}")
def delete_content(content_id: str, client: SearchIndexClient = Depends(get_index_client)):
    """Remove all index rows of a content item. Partial failures answer 500 with per-table status."""
    try:
        report = client.delete_content(content_id)
    except (MissingIdentifier, InvalidIdentifier) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not report.ok:
        return JSONResponse(status_code=500, content=report.to_dict())
    return report.to_dict()


@router.post("/delete")
def delete_by_filter(body: DeleteFilterRequest, client: SearchIndexClient = Depends(get_index_client)):
    """Delete by {"content_uuid": id or [ids]}; invalid ids are ignored."""
    try:
        reports = client.delete_by_filter(body.model_dump())
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    status = "ok" if all(r.ok for r in reports) else "partial"
    out = {"status": status, "deleted": [r.to_dict() for r in reports]}
    if status != "ok":
        return JSONResponse(status_code=500, content=out)
    return out
