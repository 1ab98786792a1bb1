"""Shared pytest fixtures for offline-docs tests."""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Sequence
from typing import Any

import pytest

from offline_docs.config import Config
from offline_docs.documents import (
    Acknowledgment,
    Document,
    DocumentService,
    DocumentsState,
)
from offline_docs.session import SessionUser

_ids = itertools.count(1)


def make_document(**overrides: Any) -> Document:
    """Build a clean Document with a unique id unless overridden."""
    fields: dict[str, Any] = {
        "id": f"doc-{next(_ids)}",
        "title": "Unwritten Songs",
        "content": "Lorem ipsum",
        "author": "John Doe",
        "created_at": "2026-01-01T00:00:00+00:00",
        "updated_at": None,
        "is_dirty": False,
    }
    fields.update(overrides)
    return Document(**fields)


class FakeRemoteApi:
    """In-memory ``RemoteApi`` double.

    Records every call.  By default sync acknowledges every document it
    receives; set ``ack_ids`` to acknowledge a fixed list instead.  Set a
    ``*_gate`` event to hold the matching call until the test releases it,
    and a ``*_error`` to make the call fail.
    """

    def __init__(self) -> None:
        self.created: list[Document] = []
        self.sync_calls: list[list[Document]] = []
        self.auth_calls: list[tuple[str, str]] = []
        self.ack_ids: list[str] | None = None
        self.create_error: Exception | None = None
        self.sync_error: Exception | None = None
        self.auth_error: Exception | None = None
        self.create_gate: asyncio.Event | None = None
        self.sync_gate: asyncio.Event | None = None
        self._next_id = itertools.count(100)

    async def authenticate(self, email: str, password: str) -> SessionUser:
        self.auth_calls.append((email, password))
        if self.auth_error is not None:
            raise self.auth_error
        return SessionUser(token=f"token-for-{email}", user_name="Jane")

    async def create_document(
        self, title: str, content: str, author: str
    ) -> Document:
        if self.create_gate is not None:
            await self.create_gate.wait()
        if self.create_error is not None:
            raise self.create_error
        doc = Document(
            id=f"srv-{next(self._next_id)}",
            title=title,
            content=content,
            author=author,
            created_at="2026-02-01T12:00:00+00:00",
            updated_at="2026-02-01T12:00:00+00:00",
        )
        self.created.append(doc)
        return doc

    async def sync_documents(
        self, documents: Sequence[Document]
    ) -> list[Acknowledgment]:
        self.sync_calls.append(list(documents))
        if self.sync_gate is not None:
            await self.sync_gate.wait()
        if self.sync_error is not None:
            raise self.sync_error
        ids = self.ack_ids
        if ids is None:
            ids = [doc.id for doc in documents]
        return [Acknowledgment(id=i) for i in ids]


@pytest.fixture
def fake_api() -> FakeRemoteApi:
    return FakeRemoteApi()


@pytest.fixture
def state() -> DocumentsState:
    return DocumentsState()


@pytest.fixture
def service(fake_api: FakeRemoteApi, state: DocumentsState) -> DocumentService:
    return DocumentService(fake_api, state)


@pytest.fixture
def unfenced_service(
    fake_api: FakeRemoteApi, state: DocumentsState
) -> DocumentService:
    return DocumentService(fake_api, state, fence_stale_acks=False)


@pytest.fixture
def mock_config() -> Config:
    """Create a Config instance for testing."""
    return Config(
        api_url="https://docs.example.com/api",
        timeout=10,
        insecure=False,
    )


@pytest.fixture
def make_doc():
    """Factory fixture for clean Documents with unique ids."""
    return make_document


@pytest.fixture
def populated(state: DocumentsState, make_doc):
    """State holding two clean documents, A and B, in that order."""
    doc_a = make_doc(id="A", title="Alpha")
    doc_b = make_doc(id="B", title="Beta")
    state.add_document(doc_a)
    state.add_document(doc_b)
    return state
