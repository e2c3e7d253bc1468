from collections.abc import AsyncGenerator
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.adapters.store.memory import MemoryStoreAdapter
from app.config import AuthProviderKind, Settings, StoreBackend
from app.domain.models import BOOKS
from app.domain.state import AppState
from app.main import create_app
from app.ports.store import StoreError
from app.services.library import LibrarySync

BASE = "http://test"

SEED_BOOKS = [
    {
        "title": "Dune",
        "author": "Frank Herbert",
        "genre": "Science Fiction",
        "rating": 4.6,
        "description": "Desert planet politics.",
        "recommendedBy": "seed-user",
    },
    {
        "title": "Foundation",
        "author": "Isaac Asimov",
        "genre": "Science Fiction",
        "rating": 4.3,
        "description": "The fall of a galactic empire.",
        "recommendedBy": "seed-user",
    },
    {
        "title": "Kafka on the Shore",
        "author": "Haruki Murakami",
        "genre": "Magical Realism",
        "rating": 4.1,
        "description": "A runaway and a cat whisperer.",
        "recommendedBy": "mock-alice",
    },
]


class FlakyStore(MemoryStoreAdapter):
    """Memory store whose writes can be switched to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.failing = False

    def _check(self) -> None:
        if self.failing:
            raise StoreError("store unavailable")

    async def list_all(self, collection):
        self._check()
        return await super().list_all(collection)

    async def insert(self, collection, data):
        self._check()
        return await super().insert(collection, data)

    async def update(self, collection, doc_id, data):
        self._check()
        return await super().update(collection, doc_id, data)

    async def delete(self, collection, doc_id):
        self._check()
        return await super().delete(collection, doc_id)

    async def array_union(self, collection, doc_id, field, value):
        self._check()
        return await super().array_union(collection, doc_id, field, value)

    async def array_remove(self, collection, doc_id, field, value):
        self._check()
        return await super().array_remove(collection, doc_id, field, value)


async def seed(store) -> list[str]:
    return [await store.insert(BOOKS, dict(book)) for book in SEED_BOOKS]


@pytest.fixture
def store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
async def library(store: FlakyStore) -> LibrarySync:
    await seed(store)
    sync = LibrarySync(store, AppState())
    await sync.fetch_all_books()
    return sync


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        store_backend=StoreBackend.MEMORY,
        auth_provider=AuthProviderKind.MOCK,
        session_secret="test-secret",
        oauth_redirect_url=f"{BASE}/auth/callback",
    )


@pytest.fixture
async def app(test_settings: Settings) -> AsyncGenerator[FastAPI, None]:
    application = create_app(test_settings)
    async with application.router.lifespan_context(application):
        await seed(application.state.store)
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c


@pytest.fixture
async def auth_client(client: AsyncClient) -> AsyncClient:
    """Sign in through the mock provider and return the same client."""
    resp = await client.get("/auth/login")
    assert resp.status_code == 302
    params = parse_qs(urlparse(resp.headers["location"]).query)
    resp = await client.get(
        "/auth/callback",
        params={"code": "alice", "state": params["state"][0]},
    )
    assert resp.status_code == 200
    return client
