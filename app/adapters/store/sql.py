"""Relational document store adapter (PostgreSQL, SQLite) over SQLAlchemy async."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Integer,
    String,
    UniqueConstraint,
    select,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.ports.store import DocumentNotFound, DocumentStore, StoreError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class DocumentRow(Base):
    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("collection", "doc_id"),)

    seq = Column(Integer, primary_key=True, autoincrement=True)
    collection = Column(String(100), nullable=False, index=True)
    doc_id = Column(String(64), nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class SQLStoreAdapter(DocumentStore):
    """Keep every document as a JSON row in a single ``documents`` table."""

    def __init__(self, database_url: str) -> None:
        self._engine = create_async_engine(database_url)
        self._sessions = async_sessionmaker(self._engine, expire_on_commit=False)
        logger.info("SQLStore initialized: %s", self._engine.url.render_as_string())

    async def create_schema(self) -> None:
        """Create the documents table if missing. Migrations cover production."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self._engine.dispose()

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._sessions() as session, session.begin():
                yield session
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    async def _row(
        self, session: AsyncSession, collection: str, doc_id: str, lock: bool = False
    ) -> DocumentRow | None:
        stmt = select(DocumentRow).where(
            DocumentRow.collection == collection, DocumentRow.doc_id == doc_id
        )
        if lock:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def _existing(
        self, session: AsyncSession, collection: str, doc_id: str
    ) -> DocumentRow:
        row = await self._row(session, collection, doc_id, lock=True)
        if row is None:
            raise DocumentNotFound(collection, doc_id)
        return row

    async def list_all(self, collection: str) -> list[tuple[str, dict]]:
        async with self._transaction() as session:
            result = await session.execute(
                select(DocumentRow)
                .where(DocumentRow.collection == collection)
                .order_by(DocumentRow.seq)
            )
            return [(row.doc_id, dict(row.data)) for row in result.scalars()]

    async def query(
        self, collection: str, field: str, value: Any
    ) -> list[tuple[str, dict]]:
        # Equality on arbitrary JSON values is not portable across dialects,
        # so filter the collection here.
        docs = await self.list_all(collection)
        return [(doc_id, data) for doc_id, data in docs if data.get(field) == value]

    async def get(self, collection: str, doc_id: str) -> dict | None:
        async with self._transaction() as session:
            row = await self._row(session, collection, doc_id)
            return dict(row.data) if row else None

    async def insert(self, collection: str, data: dict) -> str:
        doc_id = uuid4().hex
        async with self._transaction() as session:
            session.add(DocumentRow(collection=collection, doc_id=doc_id, data=dict(data)))
        logger.debug("Inserted %s/%s", collection, doc_id)
        return doc_id

    async def set(
        self, collection: str, doc_id: str, data: dict, merge: bool = False
    ) -> None:
        async with self._transaction() as session:
            row = await self._row(session, collection, doc_id, lock=True)
            if row is None:
                session.add(DocumentRow(collection=collection, doc_id=doc_id, data=dict(data)))
            elif merge:
                row.data = {**row.data, **data}
            else:
                row.data = dict(data)

    async def update(self, collection: str, doc_id: str, data: dict) -> None:
        async with self._transaction() as session:
            row = await self._existing(session, collection, doc_id)
            row.data = {**row.data, **data}

    async def delete(self, collection: str, doc_id: str) -> None:
        async with self._transaction() as session:
            row = await self._row(session, collection, doc_id, lock=True)
            if row is not None:
                await session.delete(row)

    async def array_union(
        self, collection: str, doc_id: str, field: str, value: Any
    ) -> None:
        async with self._transaction() as session:
            row = await self._existing(session, collection, doc_id)
            items = list(row.data.get(field, []))
            if value not in items:
                items.append(value)
            row.data = {**row.data, field: items}

    async def array_remove(
        self, collection: str, doc_id: str, field: str, value: Any
    ) -> None:
        async with self._transaction() as session:
            row = await self._existing(session, collection, doc_id)
            items = [item for item in row.data.get(field, []) if item != value]
            row.data = {**row.data, field: items}
