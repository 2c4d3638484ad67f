"""
Document bridge - maps person documents onto Elasticsearch calls.
Challenge: Keep endpoints thin; own id assignment and scroll draining.
Design: Every engine failure becomes a typed BridgeResult, never an exception.
"""

import logging
from contextlib import aclosing

from elasticsearch import ApiError, AsyncElasticsearch, NotFoundError, TransportError

from esbridge.core.results import BridgeResult, ErrorKind
from esbridge.schemas.document import Document, document_from_source
from esbridge.search.elasticsearch_client import body_of, iter_hits, term_field
from esbridge.services.id_counter import IdCounter

logger = logging.getLogger(__name__)

ENGINE_ERRORS = (ApiError, TransportError)

FAILED = "failed"
DATA_NOT_FOUND = "data not found"


def _error_kind(exc: Exception) -> ErrorKind:
    if isinstance(exc, NotFoundError):
        return ErrorKind.NOT_FOUND
    return ErrorKind.ENGINE


class DocumentBridge:
    """Handles all document use cases against one index: CRUD, bulk, listing, term search."""

    def __init__(self, es: AsyncElasticsearch, index: str, counter: IdCounter | None = None):
        self.es = es
        self.index = index
        self.counter = counter or IdCounter()

    async def seed_counter(self) -> int:
        """Advance the id counter past the largest numeric id already stored."""
        highest = 0
        async with aclosing(iter_hits(self.es, self.index, source=False)) as hits:
            async for hit in hits:
                if hit["_id"].isdigit():
                    highest = max(highest, int(hit["_id"]))
        self.counter.advance_to(highest)
        logger.info("Id counter seeded at %d", self.counter.value)
        return self.counter.value

    async def list_all(self, limit: int | None = None) -> BridgeResult:
        """Drain the whole index into {id: document}."""
        documents: dict[str, dict] = {}
        try:
            async with aclosing(iter_hits(self.es, self.index)) as hits:
                async for hit in hits:
                    doc = document_from_source(hit.get("_source"))
                    documents[hit["_id"]] = doc.to_source()
                    if limit is not None and len(documents) >= limit:
                        break
        except ENGINE_ERRORS as e:
            logger.warning("list_all failed: index=%s error=%s", self.index, e)
            return BridgeResult.failure(FAILED, _error_kind(e))
        return BridgeResult.data(documents)

    async def create(self, document: Document) -> BridgeResult:
        """Assign the next id and index the document under it (overwrites on collision)."""
        doc_id = self.counter.next()
        try:
            response = body_of(
                await self.es.index(index=self.index, id=doc_id, document=document.to_source())
            )
        except ENGINE_ERRORS as e:
            logger.warning("create failed: id=%s error=%s", doc_id, e)
            return BridgeResult.failure(FAILED, _error_kind(e))
        return BridgeResult.success("success", id=response["_id"])

    async def bulk_create(self, documents: list[Document]) -> BridgeResult:
        """Index all documents in one bulk round trip, ids assigned in input order."""
        if not documents:
            return BridgeResult.failure(FAILED, ErrorKind.INVALID_REQUEST)
        operations: list[dict] = []
        for doc_id, document in zip(self.counter.reserve(len(documents)), documents):
            operations.append({"index": {"_index": self.index, "_id": doc_id}})
            operations.append(document.to_source())
        try:
            response = body_of(await self.es.bulk(operations=operations))
        except ENGINE_ERRORS as e:
            logger.warning("bulk_create failed: count=%d error=%s", len(documents), e)
            return BridgeResult.failure(FAILED, _error_kind(e))
        if response.get("errors"):
            logger.warning("bulk_create: some items were rejected, see per-item results")
        return BridgeResult.success("success", data=response["items"])

    async def get(self, doc_id: str) -> BridgeResult:
        """Fetch one document. Missing and unreachable both read "data not found"."""
        try:
            response = body_of(await self.es.get(index=self.index, id=doc_id))
        except ENGINE_ERRORS as e:
            if not isinstance(e, NotFoundError):
                logger.warning("get failed: id=%s error=%s", doc_id, e)
            return BridgeResult.failure(DATA_NOT_FOUND, _error_kind(e))
        doc = document_from_source(response.get("_source"))
        return BridgeResult.success("success", id=response["_id"], **doc.to_source())

    async def update(self, document: Document, doc_id: str) -> BridgeResult:
        """Write document as a merge-patch; no defaulting happens here."""
        try:
            response = body_of(
                await self.es.update(index=self.index, id=doc_id, doc=document.to_source())
            )
        except ENGINE_ERRORS as e:
            logger.warning("update failed: id=%s error=%s", doc_id, e)
            return BridgeResult.failure(FAILED, _error_kind(e))
        return BridgeResult.success("updated", id=response["_id"])

    async def delete(self, doc_id: str) -> BridgeResult:
        try:
            response = body_of(await self.es.delete(index=self.index, id=doc_id))
        except ENGINE_ERRORS as e:
            logger.warning("delete failed: id=%s error=%s", doc_id, e)
            return BridgeResult.failure(FAILED, _error_kind(e))
        return BridgeResult.success("deleted", id=response["_id"])

    async def search(self, field: str, value: str, limit: int | None = None) -> BridgeResult:
        """Exact term match on one field, every stored field returned plus _id."""
        query = {"term": {term_field(field): value}}
        data: list[dict] = []
        try:
            async with aclosing(iter_hits(self.es, self.index, query)) as hits:
                async for hit in hits:
                    data.append({**(hit.get("_source") or {}), "_id": hit["_id"]})
                    if limit is not None and len(data) >= limit:
                        break
        except ENGINE_ERRORS as e:
            logger.warning("search failed: %s=%r error=%s", field, value, e)
            return BridgeResult.failure(FAILED, _error_kind(e))
        return BridgeResult.data({"data": data})
