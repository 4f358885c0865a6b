"""
Shared fixtures: an in-memory document store, a scripted completion client
and an API test client with authentication stubbed out.
"""
import itertools
import json
from typing import Any, Dict, List, Optional
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_current_user, get_document_store
from api.main import app
from core.document_store import DocumentStore
from models.content_models import CallerIdentity

TEST_USER = CallerIdentity(uid="user-1", email="user1@example.com")


class InMemoryDocumentStore(DocumentStore):
    """DocumentStore over plain dicts, supporting the operators the routes use."""

    def __init__(self):
        super().__init__(client=None)
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._ids = itertools.count(1)

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self.collections.setdefault(name, {})

    def create(self, collection, data):
        doc_id = f"doc-{next(self._ids)}"
        self._collection(collection)[doc_id] = dict(data)
        return {"id": doc_id, **data}

    def get(self, collection, doc_id):
        data = self._collection(collection).get(doc_id)
        if data is None:
            return None
        return {"id": doc_id, **data}

    def update(self, collection, doc_id, changes):
        self._collection(collection)[doc_id].update(changes)
        return self.get(collection, doc_id)

    def delete(self, collection, doc_id):
        self._collection(collection).pop(doc_id, None)

    @staticmethod
    def _matches(doc, field, op, value):
        if op == "==":
            return doc.get(field) == value
        if op == "array_contains_any":
            return any(item in (doc.get(field) or []) for item in value)
        raise AssertionError(f"Unsupported operator {op}")

    def query(self, collection, filters=(), order_by=None, descending=True, limit=None):
        docs = [{"id": doc_id, **data} for doc_id, data in self._collection(collection).items()]
        for field, op, value in filters:
            docs = [doc for doc in docs if self._matches(doc, field, op, value)]
        if order_by:
            docs.sort(key=lambda doc: doc.get(order_by) or "", reverse=descending)
        if limit:
            docs = docs[:limit]
        return docs


class ScriptedLLM:
    """Stands in for the completion client with canned output."""

    def __init__(
        self,
        chunks: Optional[List[str]] = None,
        completion: str = "",
        open_error: Optional[Exception] = None,
        stream_error: Optional[Exception] = None,
    ):
        self.chunks = chunks or []
        self.completion = completion
        self.open_error = open_error
        self.stream_error = stream_error
        self.calls: List[Dict[str, Any]] = []

    async def open_stream(self, messages, **kwargs):
        self.calls.append({"messages": messages, **kwargs})
        if self.open_error:
            raise self.open_error
        return object()

    async def iter_deltas(self, response):
        for chunk in self.chunks:
            yield chunk
        if self.stream_error:
            raise self.stream_error

    async def complete(self, messages, **kwargs):
        self.calls.append({"messages": messages, **kwargs})
        if self.open_error:
            raise self.open_error
        return self.completion


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def client(store):
    """API client acting as TEST_USER against the in-memory store."""
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def scripted_llm():
    """Patch the pipeline's completion client; tests set chunks/completion on it."""
    fake = ScriptedLLM()
    with patch("core.pipeline.llm_client", fake):
        yield fake


def read_frames(response) -> List[Dict[str, Any]]:
    """Decode the JSON payloads of an event-stream response body."""
    frames = []
    for block in response.text.split("\n\n"):
        if block.startswith("data: "):
            frames.append(json.loads(block[len("data: "):]))
    return frames


@pytest.fixture
def sse_frames():
    return read_frames
