from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import copy
import uuid

from fastapi import Depends
from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.core.db import get_db
from cms.db.models.document import ContentDocument
from cms.domains.content.errors import StoreError

# (id документа, тело документа)
DocumentSnapshot = Tuple[str, Dict[str, Any]]


def generate_document_id() -> str:
    """Генерация ключа документа (20 символов, как у автоключей Firestore)"""
    return uuid.uuid4().hex[:20]


def _sort_key(order_by: str):
    def key(snapshot: DocumentSnapshot):
        value = snapshot[1].get(order_by)
        # Документы без поля сортировки идут в конец
        return (value is None, value if value is not None else 0, snapshot[0])
    return key


class DocumentStore(ABC):
    """Хранилище JSON-документов, адресуемых путем коллекции и id"""

    @abstractmethod
    async def get(self, path: str, doc_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    async def set(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Создание или полная замена документа (upsert)"""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, path: str, doc_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def list(self, path: str, order_by: Optional[str] = None) -> List[DocumentSnapshot]:
        raise NotImplementedError

    async def count(self, path: str) -> int:
        return len(await self.list(path))


@dataclass
class MemoryDocumentStore(DocumentStore):
    """Хранилище в памяти процесса (тесты и локальная разработка)"""
    _docs: Dict[str, Dict[str, Dict[str, Any]]] = field(default_factory=dict)

    async def get(self, path: str, doc_id: str) -> Optional[Dict[str, Any]]:
        data = self._docs.get(path, {}).get(doc_id)
        return copy.deepcopy(data) if data is not None else None

    async def set(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._docs.setdefault(path, {})[doc_id] = copy.deepcopy(data)

    async def delete(self, path: str, doc_id: str) -> bool:
        return self._docs.get(path, {}).pop(doc_id, None) is not None

    async def list(self, path: str, order_by: Optional[str] = None) -> List[DocumentSnapshot]:
        snapshots = [(doc_id, copy.deepcopy(data)) for doc_id, data in self._docs.get(path, {}).items()]
        if order_by:
            snapshots.sort(key=_sort_key(order_by))
        return snapshots


class SQLDocumentStore(DocumentStore):
    """Хранилище документов поверх таблицы content_documents"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_row(self, path: str, doc_id: str) -> Optional[ContentDocument]:
        result = await self.session.execute(
            select(ContentDocument).where(
                ContentDocument.collection_path == path,
                ContentDocument.doc_id == doc_id,
            )
        )
        return result.scalar_one_or_none()

    async def get(self, path: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            row = await self._get_row(path, doc_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read {path}/{doc_id}") from e
        return dict(row.data or {}) if row else None

    async def set(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        try:
            row = await self._get_row(path, doc_id)
            if row is None:
                row = ContentDocument(collection_path=path, doc_id=doc_id, data=dict(data))
                self.session.add(row)
            else:
                # Новый объект, чтобы SQLAlchemy заметил изменение JSON
                row.data = dict(data)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"Failed to write {path}/{doc_id}") from e

    async def delete(self, path: str, doc_id: str) -> bool:
        try:
            result = await self.session.execute(
                delete(ContentDocument).where(
                    ContentDocument.collection_path == path,
                    ContentDocument.doc_id == doc_id,
                )
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"Failed to delete {path}/{doc_id}") from e
        return result.rowcount > 0

    async def list(self, path: str, order_by: Optional[str] = None) -> List[DocumentSnapshot]:
        try:
            result = await self.session.execute(
                select(ContentDocument)
                .where(ContentDocument.collection_path == path)
                .order_by(ContentDocument.pk)
            )
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list {path}") from e

        snapshots = [(row.doc_id, dict(row.data or {})) for row in rows]
        if order_by:
            # JSON-поля сортируются в Python: одинаково для SQLite и PostgreSQL
            snapshots.sort(key=_sort_key(order_by))
        return snapshots

    async def count(self, path: str) -> int:
        try:
            result = await self.session.execute(
                select(func.count(ContentDocument.pk)).where(ContentDocument.collection_path == path)
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to count {path}") from e
        return result.scalar()


# Функция для dependency injection в FastAPI
async def get_document_store(session: AsyncSession = Depends(get_db)) -> DocumentStore:
    return SQLDocumentStore(session)
