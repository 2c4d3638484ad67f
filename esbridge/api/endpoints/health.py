"""
Health checks - for load balancers, Kubernetes, and monitoring.
Challenge: Fast liveness; readiness pings Elasticsearch.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from esbridge.api.deps import Bridge
from esbridge.config import get_settings

router = APIRouter()
settings = get_settings()


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready(bridge: Bridge):
    """Readiness: can Elasticsearch be reached?"""
    if await bridge.es.ping():
        return {"status": "ready"}
    return JSONResponse({"status": "unavailable"}, status_code=503)
