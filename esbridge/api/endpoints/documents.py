"""
Document endpoints - REST resource under /products (GET/POST/PUT/DELETE, bulk, term search).
Design: Thin controller; the bridge holds engine logic, responses carry their own status flag.
"""

import logging

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from esbridge.api.deps import Bridge, respond
from esbridge.core.results import BridgeResult, ErrorKind
from esbridge.schemas.document import BulkDecodeError, document_from_source, iter_documents, parse_document
from esbridge.services.document_bridge import FAILED

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def list_documents(bridge: Bridge, size: int | None = Query(None, ge=1)) -> JSONResponse:
    """All documents keyed by id. Optional size stops the scroll early."""
    return respond(await bridge.list_all(limit=size))


@router.post("/")
async def create_document(bridge: Bridge, request: Request) -> JSONResponse:
    """Create one document; malformed bodies are stored as empty fields."""
    document = parse_document(await request.body())
    return respond(await bridge.create(document))


@router.post("/_bulk")
async def bulk_create_documents(bridge: Bridge, request: Request) -> JSONResponse:
    """Create every document of a newline/whitespace separated JSON stream in one round trip."""
    try:
        documents = list(iter_documents(await request.body()))
    except BulkDecodeError as e:
        logger.warning("bulk body rejected: %s", e)
        return respond(BridgeResult.failure("invalid bulk body", ErrorKind.INVALID_REQUEST))
    return respond(await bridge.bulk_create(documents))


@router.get("/_search")
async def search_documents(
    bridge: Bridge,
    q: str | None = Query(None, description="field:value, split on the first colon"),
    size: int | None = Query(None, ge=1),
) -> JSONResponse:
    """Exact term search on one field."""
    field, sep, value = (q or "").partition(":")
    if not sep or not field:
        return respond(BridgeResult.failure("invalid query", ErrorKind.INVALID_REQUEST))
    return respond(await bridge.search(field, value, limit=size))


@router.get("/{doc_id}")
async def get_document(bridge: Bridge, doc_id: str) -> JSONResponse:
    return respond(await bridge.get(doc_id))


@router.put("/{doc_id}")
async def update_document(bridge: Bridge, doc_id: str, request: Request) -> JSONResponse:
    """Partial update: blank fields keep their stored value."""
    patch = parse_document(await request.body())
    stored = await bridge.get(doc_id)
    if stored.ok:
        patch = patch.fill_blanks(document_from_source(stored.payload))
    elif stored.error is not ErrorKind.NOT_FOUND:
        # Without the stored values the blank fields would overwrite them
        logger.warning("update skipped: could not read id=%s before merging", doc_id)
        return respond(BridgeResult.failure(FAILED, ErrorKind.ENGINE))
    return respond(await bridge.update(patch, doc_id))


@router.delete("/{doc_id}")
async def delete_document(bridge: Bridge, doc_id: str) -> JSONResponse:
    return respond(await bridge.delete(doc_id))
