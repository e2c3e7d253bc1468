"""MongoDB document store adapter."""

import logging
from typing import Any

from bson import ObjectId
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from app.ports.store import DocumentNotFound, DocumentStore, StoreError

logger = logging.getLogger(__name__)


def _split(doc: dict) -> tuple[str, dict]:
    data = {**doc}
    return str(data.pop("_id")), data


class MongoStoreAdapter(DocumentStore):
    """
    Store documents in MongoDB, one Mongo collection per store collection.

    Ids are stringified ObjectIds so they round-trip through URLs unchanged.
    Their hex form sorts in creation order, which gives insertion order.
    Array updates map onto ``$addToSet`` and ``$pull``.
    """

    def __init__(self, url: str, database: str) -> None:
        self._client: AsyncMongoClient = AsyncMongoClient(url)
        self._db = self._client[database]
        logger.info("MongoStore initialized: database=%s", database)

    async def close(self) -> None:
        await self._client.close()

    async def _update_existing(self, collection: str, doc_id: str, update: dict) -> None:
        try:
            result = await self._db[collection].update_one({"_id": doc_id}, update)
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc
        if result.matched_count == 0:
            raise DocumentNotFound(collection, doc_id)

    async def list_all(self, collection: str) -> list[tuple[str, dict]]:
        return await self._find(collection, {})

    async def query(
        self, collection: str, field: str, value: Any
    ) -> list[tuple[str, dict]]:
        return await self._find(collection, {field: value})

    async def _find(self, collection: str, q: dict) -> list[tuple[str, dict]]:
        try:
            cursor = self._db[collection].find(q).sort("_id", 1)
            return [_split(doc) for doc in await cursor.to_list()]
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    async def get(self, collection: str, doc_id: str) -> dict | None:
        try:
            doc = await self._db[collection].find_one({"_id": doc_id})
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc
        return _split(doc)[1] if doc else None

    async def insert(self, collection: str, data: dict) -> str:
        doc = {**data, "_id": str(ObjectId())}
        try:
            await self._db[collection].insert_one(doc)
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc
        logger.debug("Inserted %s/%s", collection, doc["_id"])
        return doc["_id"]

    async def set(
        self, collection: str, doc_id: str, data: dict, merge: bool = False
    ) -> None:
        try:
            if merge:
                await self._db[collection].update_one(
                    {"_id": doc_id}, {"$set": data}, upsert=True
                )
            else:
                await self._db[collection].replace_one(
                    {"_id": doc_id}, data, upsert=True
                )
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    async def update(self, collection: str, doc_id: str, data: dict) -> None:
        await self._update_existing(collection, doc_id, {"$set": data})

    async def delete(self, collection: str, doc_id: str) -> None:
        try:
            await self._db[collection].delete_one({"_id": doc_id})
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    async def array_union(
        self, collection: str, doc_id: str, field: str, value: Any
    ) -> None:
        await self._update_existing(collection, doc_id, {"$addToSet": {field: value}})

    async def array_remove(
        self, collection: str, doc_id: str, field: str, value: Any
    ) -> None:
        await self._update_existing(collection, doc_id, {"$pull": {field: value}})
