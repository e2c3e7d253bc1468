"""Adapter selection from settings."""

from app.config import AuthProviderKind, Settings, StoreBackend
from app.ports.auth import AuthProvider
from app.ports.store import DocumentStore


async def build_store(settings: Settings) -> DocumentStore:
    """Instantiate the configured document store adapter."""
    if settings.store_backend == StoreBackend.MEMORY:
        from app.adapters.store.memory import MemoryStoreAdapter

        return MemoryStoreAdapter()

    if settings.store_backend == StoreBackend.MONGO:
        from app.adapters.store.mongo import MongoStoreAdapter

        return MongoStoreAdapter(settings.mongo_url, settings.mongo_database)

    from app.adapters.store.sql import SQLStoreAdapter

    store = SQLStoreAdapter(settings.database_url)
    await store.create_schema()
    return store


def build_auth(settings: Settings) -> AuthProvider:
    """Instantiate the configured authentication provider."""
    if settings.auth_provider == AuthProviderKind.MOCK:
        from app.adapters.auth.mock import MockAuthAdapter

        return MockAuthAdapter()

    from app.adapters.auth.google import GoogleAuthAdapter

    return GoogleAuthAdapter(settings.google_client_id, settings.google_client_secret)
