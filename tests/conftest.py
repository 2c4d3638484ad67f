"""
Pytest fixtures - in-memory Elasticsearch, bridge, client.
Challenge: Isolated tests; no real cluster in unit tests.
"""

from itertools import count
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from elasticsearch import NotFoundError
from httpx import ASGITransport, AsyncClient

from esbridge.api.deps import get_document_bridge
from esbridge.main import app
from esbridge.services.document_bridge import DocumentBridge

TEST_INDEX = "test_products"


def not_found(doc_id: str) -> NotFoundError:
    return NotFoundError(f"document {doc_id} not found", MagicMock(status=404), {"found": False})


class FakeIndices:
    def __init__(self):
        self.created: dict[str, dict] = {}

    async def exists(self, index):
        return index in self.created

    async def create(self, index, settings=None, mappings=None):
        self.created[index] = {"settings": settings, "mappings": mappings}
        return {"acknowledged": True, "index": index}


class FakeElasticsearch:
    """Just enough of AsyncElasticsearch for the bridge: CRUD, bulk, term query, scroll."""

    def __init__(self):
        self.docs: dict[str, dict[str, dict]] = {}
        self.indices = FakeIndices()
        self.scrolls: dict[str, tuple[list, int]] = {}
        self.cleared: list[str] = []
        self.calls: list[tuple[str, dict]] = []
        self.fail: Exception | None = None
        # When set, only these operations raise self.fail
        self.fail_ops: set[str] = set()
        self.alive = True
        self._scroll_ids = count(1)

    def _record(self, op, **kwargs):
        self.calls.append((op, kwargs))
        if self.fail is not None and (not self.fail_ops or op in self.fail_ops):
            raise self.fail

    def _store(self, index):
        return self.docs.setdefault(index, {})

    @staticmethod
    def _matches(query, source):
        if "term" not in query:
            return True
        (field, value), = query["term"].items()
        return source.get(field.removesuffix(".keyword")) == value

    async def index(self, index, id, document):
        self._record("index", index=index, id=id, document=document)
        self._store(index)[id] = dict(document)
        return {"_index": index, "_id": id, "result": "created"}

    async def get(self, index, id):
        self._record("get", index=index, id=id)
        store = self._store(index)
        if id not in store:
            raise not_found(id)
        return {"_index": index, "_id": id, "found": True, "_source": dict(store[id])}

    async def update(self, index, id, doc):
        self._record("update", index=index, id=id, doc=doc)
        store = self._store(index)
        if id not in store:
            raise not_found(id)
        store[id].update(doc)
        return {"_index": index, "_id": id, "result": "updated"}

    async def delete(self, index, id):
        self._record("delete", index=index, id=id)
        store = self._store(index)
        if id not in store:
            raise not_found(id)
        del store[id]
        return {"_index": index, "_id": id, "result": "deleted"}

    async def bulk(self, operations):
        self._record("bulk", operations=operations)
        items = []
        for action, source in zip(operations[::2], operations[1::2]):
            meta = action["index"]
            self._store(meta["_index"])[meta["_id"]] = dict(source)
            items.append({"index": {"_index": meta["_index"], "_id": meta["_id"], "status": 201, "result": "created"}})
        return {"took": 1, "errors": False, "items": items}

    async def search(self, index, query, size, scroll, source=True):
        self._record("search", index=index, query=query, size=size, scroll=scroll)
        hits = []
        for doc_id, doc in self._store(index).items():
            if self._matches(query, doc):
                hit = {"_index": index, "_id": doc_id}
                if source:
                    hit["_source"] = dict(doc)
                hits.append(hit)
        scroll_id = f"scroll-{next(self._scroll_ids)}"
        self.scrolls[scroll_id] = (hits[size:], size)
        return {"_scroll_id": scroll_id, "hits": {"hits": hits[:size]}}

    async def scroll(self, scroll_id, scroll):
        self._record("scroll", scroll_id=scroll_id)
        remaining, size = self.scrolls[scroll_id]
        self.scrolls[scroll_id] = (remaining[size:], size)
        return {"_scroll_id": scroll_id, "hits": {"hits": remaining[:size]}}

    async def clear_scroll(self, scroll_id):
        self.scrolls.pop(scroll_id, None)
        self.cleared.append(scroll_id)
        return {"succeeded": True}

    async def ping(self):
        return self.alive

    async def close(self):
        pass


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    return FakeElasticsearch()


@pytest.fixture
def bridge(fake_es: FakeElasticsearch) -> DocumentBridge:
    return DocumentBridge(fake_es, TEST_INDEX)


@pytest_asyncio.fixture
async def client(bridge: DocumentBridge):
    app.dependency_overrides[get_document_bridge] = lambda: bridge
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
