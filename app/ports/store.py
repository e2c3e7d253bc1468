"""Document store port — abstract interface for the remote database."""

from abc import ABC, abstractmethod
from typing import Any


class StoreError(Exception):
    """A store operation failed."""


class DocumentNotFound(StoreError):
    """The addressed document does not exist."""

    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"{collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


class DocumentStore(ABC):
    """
    Schemaless collections of documents addressed by collection name and id.

    Documents are returned as ``(id, data)`` pairs in insertion order.
    Adapters wrap driver failures in ``StoreError``.
    """

    @abstractmethod
    async def list_all(self, collection: str) -> list[tuple[str, dict]]:
        """Return every document in a collection."""
        ...

    @abstractmethod
    async def query(
        self, collection: str, field: str, value: Any
    ) -> list[tuple[str, dict]]:
        """Return documents whose ``field`` equals ``value``."""
        ...

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> dict | None:
        """Return one document's data, or None when absent."""
        ...

    @abstractmethod
    async def insert(self, collection: str, data: dict) -> str:
        """Insert a document and return its store-assigned id."""
        ...

    @abstractmethod
    async def set(
        self, collection: str, doc_id: str, data: dict, merge: bool = False
    ) -> None:
        """Write a document at ``doc_id``, creating it when absent."""
        ...

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: dict) -> None:
        """Update fields of an existing document. Raises DocumentNotFound."""
        ...

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""
        ...

    @abstractmethod
    async def array_union(
        self, collection: str, doc_id: str, field: str, value: Any
    ) -> None:
        """Add ``value`` to an array field unless already present."""
        ...

    @abstractmethod
    async def array_remove(
        self, collection: str, doc_id: str, field: str, value: Any
    ) -> None:
        """Remove every occurrence of ``value`` from an array field."""
        ...

    async def close(self) -> None:
        """Release connections held by the adapter."""
