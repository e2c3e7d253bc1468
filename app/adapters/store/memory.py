import copy
import logging
from typing import Any
from uuid import uuid4

from app.ports.store import DocumentNotFound, DocumentStore

logger = logging.getLogger(__name__)


class MemoryStoreAdapter(DocumentStore):
    """
    In-process document store for tests and local development.

    Data lives only as long as the process. Documents are copied on the way
    in and out so callers never share state with the store.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict]] = {}
        logger.info("MemoryStore initialized")

    def _collection(self, name: str) -> dict[str, dict]:
        return self._collections.setdefault(name, {})

    def _existing(self, collection: str, doc_id: str) -> dict:
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            raise DocumentNotFound(collection, doc_id)
        return doc

    async def list_all(self, collection: str) -> list[tuple[str, dict]]:
        return [
            (doc_id, copy.deepcopy(data))
            for doc_id, data in self._collection(collection).items()
        ]

    async def query(
        self, collection: str, field: str, value: Any
    ) -> list[tuple[str, dict]]:
        return [
            (doc_id, copy.deepcopy(data))
            for doc_id, data in self._collection(collection).items()
            if data.get(field) == value
        ]

    async def get(self, collection: str, doc_id: str) -> dict | None:
        data = self._collection(collection).get(doc_id)
        return copy.deepcopy(data) if data is not None else None

    async def insert(self, collection: str, data: dict) -> str:
        doc_id = uuid4().hex
        self._collection(collection)[doc_id] = copy.deepcopy(data)
        logger.debug("Inserted %s/%s", collection, doc_id)
        return doc_id

    async def set(
        self, collection: str, doc_id: str, data: dict, merge: bool = False
    ) -> None:
        docs = self._collection(collection)
        if merge and doc_id in docs:
            docs[doc_id].update(copy.deepcopy(data))
        else:
            docs[doc_id] = copy.deepcopy(data)

    async def update(self, collection: str, doc_id: str, data: dict) -> None:
        self._existing(collection, doc_id).update(copy.deepcopy(data))

    async def delete(self, collection: str, doc_id: str) -> None:
        self._collection(collection).pop(doc_id, None)

    async def array_union(
        self, collection: str, doc_id: str, field: str, value: Any
    ) -> None:
        items = self._existing(collection, doc_id).setdefault(field, [])
        if value not in items:
            items.append(value)

    async def array_remove(
        self, collection: str, doc_id: str, field: str, value: Any
    ) -> None:
        doc = self._existing(collection, doc_id)
        doc[field] = [item for item in doc.get(field, []) if item != value]
