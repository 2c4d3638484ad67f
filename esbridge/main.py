"""
FastAPI application entry point.
Challenge: Mount routes, middleware (Prometheus), startup events (index bootstrap, id counter seed).
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from esbridge import __version__
from esbridge.api.deps import get_document_bridge, reset_document_bridge
from esbridge.api.router import api_router
from esbridge.config import get_settings
from esbridge.search.elasticsearch_client import close_elasticsearch, ensure_index

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: ensure the index and seed the id counter. Shutdown: close the ES client."""
    bridge = await get_document_bridge()
    try:
        await ensure_index(bridge.es, bridge.index)
        await bridge.seed_counter()
    except Exception as e:
        # ES may be down at boot; requests will report status false until it is back
        logger.warning("Elasticsearch bootstrap failed: %s", e)
    yield
    await close_elasticsearch()
    reset_document_bridge()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()
    app = FastAPI(
        title=settings.app_name,
        description="REST bridge for person documents stored in Elasticsearch: CRUD, bulk indexing, term search.",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    settings = get_settings()
    uvicorn.run("esbridge.main:app", host=settings.host, port=settings.port)
