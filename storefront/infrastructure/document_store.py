"""Collection-oriented document storage.

Documents are plain JSON-compatible dictionaries keyed by an ``id``
field. Two backends are provided:

- ``InMemoryDocumentStore`` keeps collections in process memory.
- ``SqlDocumentStore`` persists documents as JSON rows through SQLAlchemy.

Queries are predicate based: callers pass a function that decides whether
a document matches. Ordering is insertion order.
"""

import copy
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any
from uuid import uuid4

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from storefront.infrastructure.config import settings
from storefront.infrastructure.database import create_tables, get_engine, get_session_factory
from storefront.infrastructure.models import DocumentRecord

logger = structlog.get_logger()

Document = dict[str, Any]
Predicate = Callable[[Document], bool]

CATEGORIES = "categories"
PRODUCTS = "products"
REVIEWS = "reviews"


def new_document_id() -> str:
    """Generate a new document identifier."""
    return uuid4().hex


def field_equals(**fields: Any) -> Predicate:
    """Build a predicate matching documents whose fields equal the given values."""

    def predicate(document: Document) -> bool:
        return all(document.get(name) == value for name, value in fields.items())

    return predicate


class DocumentStore(ABC):
    """Abstract document store."""

    @abstractmethod
    async def insert(self, collection: str, document: Document) -> Document:
        """Insert a document, assigning an id when it has none.

        Args:
            collection: Collection name.
            document: Document to insert.

        Returns:
            The stored document including its id.
        """

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> Document | None:
        """Get a document by id."""

    @abstractmethod
    async def find(
        self,
        collection: str,
        where: Predicate | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        """Find documents matching a predicate, in insertion order."""

    @abstractmethod
    async def replace(self, collection: str, document_id: str, document: Document) -> bool:
        """Replace a document. Returns False when it does not exist."""

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> bool:
        """Delete a document. Returns False when it does not exist."""

    @abstractmethod
    async def clear(self, collection: str) -> int:
        """Delete every document in a collection. Returns the deleted count."""

    async def find_one(self, collection: str, where: Predicate) -> Document | None:
        """Find the first document matching a predicate."""
        found = await self.find(collection, where, limit=1)
        return found[0] if found else None

    async def count(self, collection: str, where: Predicate | None = None) -> int:
        """Count documents matching a predicate."""
        return len(await self.find(collection, where))


class InMemoryDocumentStore(DocumentStore):
    """In-memory document store.

    Returned documents are copies, so callers can mutate them freely.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Document]] = {}

    def _collection(self, name: str) -> dict[str, Document]:
        return self._collections.setdefault(name, {})

    async def insert(self, collection: str, document: Document) -> Document:
        stored = copy.deepcopy(document)
        stored["id"] = stored.get("id") or new_document_id()
        self._collection(collection)[stored["id"]] = stored
        return copy.deepcopy(stored)

    async def get(self, collection: str, document_id: str) -> Document | None:
        document = self._collection(collection).get(document_id)
        return copy.deepcopy(document) if document is not None else None

    async def find(
        self,
        collection: str,
        where: Predicate | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        results: list[Document] = []
        for document in self._collection(collection).values():
            if where is not None and not where(document):
                continue
            results.append(copy.deepcopy(document))
            if limit is not None and len(results) >= limit:
                break
        return results

    async def replace(self, collection: str, document_id: str, document: Document) -> bool:
        documents = self._collection(collection)
        if document_id not in documents:
            return False
        stored = copy.deepcopy(document)
        stored["id"] = document_id
        documents[document_id] = stored
        return True

    async def delete(self, collection: str, document_id: str) -> bool:
        return self._collection(collection).pop(document_id, None) is not None

    async def clear(self, collection: str) -> int:
        documents = self._collection(collection)
        count = len(documents)
        documents.clear()
        return count


class SqlDocumentStore(DocumentStore):
    """Document store backed by the ``documents`` table.

    Each operation runs in its own session and commits on success.
    """

    def __init__(self, engine: AsyncEngine | None = None) -> None:
        self.engine = engine or get_engine()
        self._session_factory: async_sessionmaker[AsyncSession] = get_session_factory(self.engine)

    async def create_schema(self) -> None:
        """Create the documents table if needed."""
        await create_tables(self.engine)

    async def insert(self, collection: str, document: Document) -> Document:
        body = copy.deepcopy(document)
        document_id = body.pop("id", None) or new_document_id()
        async with self._session_factory() as session:
            record = DocumentRecord(id=document_id, collection=collection, body=body)
            session.add(record)
            await session.commit()
            return record.to_dict()

    async def get(self, collection: str, document_id: str) -> Document | None:
        async with self._session_factory() as session:
            record = await self._get_record(session, collection, document_id)
            return record.to_dict() if record is not None else None

    async def find(
        self,
        collection: str,
        where: Predicate | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        query = (
            select(DocumentRecord)
            .where(DocumentRecord.collection == collection)
            .order_by(DocumentRecord.created_at.asc())
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            records = result.scalars().all()

        results: list[Document] = []
        for record in records:
            document = record.to_dict()
            if where is not None and not where(document):
                continue
            results.append(document)
            if limit is not None and len(results) >= limit:
                break
        return results

    async def replace(self, collection: str, document_id: str, document: Document) -> bool:
        body = copy.deepcopy(document)
        body.pop("id", None)
        async with self._session_factory() as session:
            record = await self._get_record(session, collection, document_id)
            if record is None:
                return False
            record.body = body
            await session.commit()
            return True

    async def delete(self, collection: str, document_id: str) -> bool:
        async with self._session_factory() as session:
            record = await self._get_record(session, collection, document_id)
            if record is None:
                return False
            await session.delete(record)
            await session.commit()
            return True

    async def clear(self, collection: str) -> int:
        async with self._session_factory() as session:
            count_result = await session.execute(
                select(func.count(DocumentRecord.id)).where(
                    DocumentRecord.collection == collection
                )
            )
            count = count_result.scalar_one()
            await session.execute(
                delete(DocumentRecord).where(DocumentRecord.collection == collection)
            )
            await session.commit()
            return count

    async def _get_record(
        self,
        session: AsyncSession,
        collection: str,
        document_id: str,
    ) -> DocumentRecord | None:
        result = await session.execute(
            select(DocumentRecord).where(
                DocumentRecord.collection == collection,
                DocumentRecord.id == document_id,
            )
        )
        return result.scalar_one_or_none()


# Global store instance
_store: DocumentStore | None = None


def get_document_store() -> DocumentStore:
    """Get the document store singleton for the configured backend."""
    global _store
    if _store is None:
        if settings.storage_backend == "sql":
            _store = SqlDocumentStore()
        else:
            _store = InMemoryDocumentStore()
        logger.info("Document store initialized", backend=settings.storage_backend)
    return _store


def set_document_store(store: DocumentStore | None) -> None:
    """Replace the document store singleton (None resets it)."""
    global _store
    _store = store
