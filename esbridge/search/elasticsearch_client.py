"""
Elasticsearch client - shared async connection, index bootstrap, scroll draining.
Challenge: One client per process, lazy pagination that callers can stop early.
"""

import logging
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import urlparse

from elasticsearch import AsyncElasticsearch

from esbridge.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Text fields that carry an exact-match keyword sub-field
KEYWORD_FIELDS = ("first_name", "last_name")

_es_client: AsyncElasticsearch | None = None


def _es_client_options() -> dict:
    """Build Elasticsearch client options from settings (supports HTTPS + basic auth in URL)."""
    url = settings.elasticsearch_url
    basic_auth = None
    if "@" in url and "://" in url:
        parsed = urlparse(url)
        if parsed.username and parsed.password:
            basic_auth = (parsed.username, parsed.password)
        # Strip credentials from the URL; the client takes them as basic_auth
        netloc = parsed.hostname or ""
        if parsed.port:
            netloc += f":{parsed.port}"
        url = f"{parsed.scheme}://{netloc}"
    opts = {
        "hosts": [url],
        "verify_certs": settings.elasticsearch_verify_certs,
        "request_timeout": settings.elasticsearch_request_timeout,
    }
    if basic_auth:
        opts["basic_auth"] = basic_auth
    return opts


async def get_elasticsearch() -> AsyncElasticsearch:
    """Get the shared Elasticsearch client. Dependency injection for tests."""
    global _es_client
    if _es_client is None:
        _es_client = AsyncElasticsearch(**_es_client_options())
    return _es_client


async def close_elasticsearch() -> None:
    global _es_client
    if _es_client is not None:
        await _es_client.close()
        _es_client = None


def body_of(response: Any) -> Any:
    """Response may be ObjectApiResponse; support both .body and dict access."""
    return getattr(response, "body", response)


def index_settings() -> dict:
    return {
        "number_of_shards": settings.index_shards,
        "number_of_replicas": settings.index_replicas,
    }


def index_mappings() -> dict:
    """Mapping for the products index: names get a keyword sub-field for term queries."""
    name_field = {"type": "text", "fields": {"keyword": {"type": "keyword"}}}
    return {
        "properties": {
            "first_name": name_field,
            "last_name": name_field,
            "ttl": {"type": "date"},
        }
    }


async def ensure_index(es: AsyncElasticsearch, index: str) -> bool:
    """Create the index with settings and mapping if missing. Returns True when created."""
    if await es.indices.exists(index=index):
        logger.info("Index %r already exists", index)
        return False
    response = body_of(
        await es.indices.create(index=index, settings=index_settings(), mappings=index_mappings())
    )
    if response.get("acknowledged"):
        logger.info("Index %r created", index)
    return True


def term_field(field: str) -> str:
    """Route name fields to their keyword sub-field so term matching is exact."""
    if field in KEYWORD_FIELDS:
        return f"{field}.keyword"
    return field


async def iter_hits(
    es: AsyncElasticsearch,
    index: str,
    query: dict | None = None,
    *,
    page_size: int | None = None,
    keepalive: str | None = None,
    source: bool = True,
) -> AsyncIterator[dict[str, Any]]:
    """
    Yield raw hits page by page through the scroll API until an empty page.
    The scroll context is cleared when the consumer stops, early or not.
    """
    page_size = page_size or settings.scroll_page_size
    keepalive = keepalive or settings.scroll_keepalive
    response = body_of(
        await es.search(
            index=index,
            query=query or {"match_all": {}},
            size=page_size,
            scroll=keepalive,
            source=source,
        )
    )
    scroll_id = response.get("_scroll_id")
    try:
        while True:
            hits = response["hits"]["hits"]
            if not hits:
                break
            for hit in hits:
                yield hit
            response = body_of(await es.scroll(scroll_id=scroll_id, scroll=keepalive))
            scroll_id = response.get("_scroll_id", scroll_id)
    finally:
        if scroll_id:
            try:
                await es.clear_scroll(scroll_id=scroll_id)
            except Exception as e:
                logger.warning("clear_scroll failed: %s", e)
