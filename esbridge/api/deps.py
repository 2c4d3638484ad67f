"""
FastAPI dependencies - injection for the shared document bridge.
Design: One bridge (and one id counter) per process; tests override get_document_bridge.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.responses import JSONResponse

from esbridge.config import get_settings
from esbridge.core.results import BridgeResult, ErrorKind
from esbridge.search.elasticsearch_client import get_elasticsearch
from esbridge.services.document_bridge import DocumentBridge

_bridge: DocumentBridge | None = None

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.ENGINE: 502,
}


async def get_document_bridge() -> DocumentBridge:
    """Get the process-wide bridge. Used as FastAPI dependency."""
    global _bridge
    if _bridge is None:
        _bridge = DocumentBridge(await get_elasticsearch(), get_settings().index_name)
    return _bridge


def reset_document_bridge() -> None:
    global _bridge
    _bridge = None


def respond(result: BridgeResult) -> JSONResponse:
    """Serialize a bridge result. Always 200 unless strict status codes are enabled."""
    status_code = 200
    if not result.ok and get_settings().strict_status_codes:
        status_code = STATUS_BY_KIND.get(result.error, 500)
    return JSONResponse(result.to_response(), status_code=status_code)


Bridge = Annotated[DocumentBridge, Depends(get_document_bridge)]
