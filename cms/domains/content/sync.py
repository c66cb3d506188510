import logging
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, Type

from pydantic import ValidationError

from cms.db.repositories.document_repository import DocumentStore, generate_document_id
from cms.domains.content.collection import OrderedCollection, T, renumber
from cms.domains.content.errors import (
    BulkSaveError, CollectionNotEmptyError, ItemNotFoundError, SaveInProgressError, StoreError,
)

logger = logging.getLogger(__name__)


class PersistenceSynchronizer(Generic[T]):
    """Сверка упорядоченных коллекций с хранилищем документов.

    id элемента - ключ документа и в тело не пишется. Массовое сохранение
    последовательное и без отката: при ошибке часть документов уже записана.
    """

    def __init__(
        self,
        store: DocumentStore,
        model: Type[T],
        defaults: Sequence[T] = (),
        base: int = 0,
        mirror: Sequence[str] = ()
    ):
        self.store = store
        self.model = model
        self.defaults = list(defaults)
        self.base = base
        self.mirror = tuple(mirror)

    def to_document(self, item: T) -> Tuple[str, Dict[str, Any]]:
        body = item.model_dump(by_alias=True, exclude={"id"})
        return item.id, body

    def from_document(self, doc_id: str, body: Dict[str, Any]) -> T:
        return self.model.model_validate({**body, "id": doc_id})

    def default_items(self) -> List[T]:
        return sorted(self.defaults, key=lambda item: item.order)

    def collection(self, items: Sequence[T]) -> OrderedCollection[T]:
        return OrderedCollection.from_stored(items, self.base, self.mirror)

    async def fetch(self, path: str) -> List[T]:
        """Сохраненные элементы без подстановки значений по умолчанию"""
        items = []
        for doc_id, body in await self.store.list(path, order_by="order"):
            try:
                items.append(self.from_document(doc_id, body))
            except ValidationError as e:
                logger.warning(f"Skipping malformed document {path}/{doc_id}: {e}")
        return sorted(items, key=lambda item: item.order)

    async def load(self, path: str) -> Tuple[List[T], bool]:
        """Загрузка коллекции; второй элемент - признак подстановки значений по умолчанию"""
        try:
            items = await self.fetch(path)
        except StoreError:
            logger.error(f"Failed to load {path}, serving defaults", exc_info=True)
            return self.default_items(), True

        if not items:
            logger.info(f"Collection {path} is empty, serving defaults")
            return self.default_items(), True
        return items, False

    async def load_all(self, path: str) -> List[T]:
        items, _ = await self.load(path)
        return items

    async def save_all(self, items: Sequence[T], path: str) -> int:
        """Последовательная запись всех элементов в порядке коллекции"""
        written = 0
        for item in items:
            doc_id, body = self.to_document(item)
            try:
                await self.store.set(path, doc_id, body)
            except StoreError as e:
                logger.error(f"Bulk save of {path} stopped at {doc_id} after {written} documents", exc_info=True)
                raise BulkSaveError(written, doc_id, e) from e
            written += 1

        logger.info(f"Saved {written} documents to {path}")
        return written

    async def save_one(self, item: T, path: str) -> None:
        doc_id, body = self.to_document(item)
        await self.store.set(path, doc_id, body)

    async def delete_one(self, item_id: str, path: str) -> bool:
        """Удаление документа; пересчет порядка остальных - на вызывающем"""
        return await self.store.delete(path, item_id)

    async def initialize_defaults(self, path: str) -> List[T]:
        """Однократное заполнение пустой коллекции значениями по умолчанию"""
        count = await self.store.count(path)
        if count:
            raise CollectionNotEmptyError(path, count)

        seeded = [item.model_copy(update={"id": generate_document_id()}) for item in self.default_items()]
        items = renumber(seeded, self.base, self.mirror)
        await self.save_all(items, path)
        return items


class ItemState(str, Enum):
    NEW = "new"
    SAVED = "saved"
    DIRTY = "dirty"
    DELETED = "deleted"


class EditingSession(Generic[T]):
    """Коллекция, которую редактирует одна сессия админки.

    Правки локальны до сохранения. remove удаляет документ сразу, а
    перенумерованные соседи становятся DIRTY до следующего save_all.
    """

    def __init__(
        self,
        synchronizer: PersistenceSynchronizer[T],
        path: str,
        id_factory: Callable[[], str] = generate_document_id
    ):
        self.synchronizer = synchronizer
        self.path = path
        self.id_factory = id_factory
        self.collection: OrderedCollection[T] = OrderedCollection([], synchronizer.base, synchronizer.mirror)
        self.from_fallback = False
        self._states: Dict[str, ItemState] = {}
        self._saving = False

    @property
    def items(self) -> List[T]:
        return self.collection.to_list()

    @property
    def saving(self) -> bool:
        return self._saving

    @property
    def is_dirty(self) -> bool:
        return any(
            self._states.get(item_id) in (ItemState.NEW, ItemState.DIRTY)
            for item_id in self.collection.ids()
        )

    def state_of(self, item_id: str) -> ItemState:
        try:
            return self._states[item_id]
        except KeyError:
            raise ItemNotFoundError(item_id) from None

    def _apply(self, updated: OrderedCollection[T]) -> None:
        """Замена коллекции; измененные сохраненные элементы становятся DIRTY"""
        for item in updated:
            previous = self.collection.get(item.id)
            if previous is not None and previous != item and self._states.get(item.id) == ItemState.SAVED:
                self._states[item.id] = ItemState.DIRTY
        self.collection = updated

    async def load(self) -> List[T]:
        items, fallback = await self.synchronizer.load(self.path)
        self.collection = self.synchronizer.collection(items)
        self.from_fallback = fallback
        # Значения по умолчанию в хранилище еще не записаны
        state = ItemState.NEW if fallback else ItemState.SAVED
        self._states = {item.id: state for item in self.collection}
        return self.items

    def add(self, **fields) -> T:
        """Новый элемент в конце коллекции"""
        fields.pop("order", None)
        item_id = fields.pop("id", None) or self.id_factory()
        if self._states.get(item_id) == ItemState.DELETED:
            raise ValueError(f"Item {item_id} was deleted and cannot be reused")

        self.collection = self.collection.append(self.synchronizer.model(id=item_id, **fields))
        self._states[item_id] = ItemState.NEW
        return self.collection.get(item_id)

    def update(self, item_id: str, **patch) -> T:
        self._apply(self.collection.update_by_id(item_id, patch))
        return self.collection.get(item_id)

    async def remove(self, item_id: str) -> bool:
        """Удаление элемента локально и в хранилище"""
        if item_id not in self.collection:
            return False

        # Несохраненный элемент удаляется только локально
        if self._states.get(item_id) != ItemState.NEW:
            await self.synchronizer.delete_one(item_id, self.path)

        self._apply(self.collection.remove_by_id(item_id))
        self._states[item_id] = ItemState.DELETED
        return True

    def move(self, item_id: str, direction: str) -> None:
        self._apply(self.collection.move_adjacent(item_id, direction))

    def reorder(self, ids: Sequence[str]) -> None:
        self._apply(self.collection.reorder(ids))

    async def save_all(self) -> int:
        """Сохранение всей коллекции; повторный вызов во время сохранения запрещен"""
        if self._saving:
            raise SaveInProgressError("Save already in progress")

        self._saving = True
        items = self.items
        try:
            written = await self.synchronizer.save_all(items, self.path)
        except BulkSaveError as e:
            # Записанные до сбоя документы совпадают с хранилищем
            for item in items[:e.written]:
                self._states[item.id] = ItemState.SAVED
            raise
        finally:
            self._saving = False

        for item in items:
            self._states[item.id] = ItemState.SAVED
        self.from_fallback = False
        return written

    async def save_one(self, item_id: str) -> T:
        item = self.collection.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        await self.synchronizer.save_one(item, self.path)
        self._states[item_id] = ItemState.SAVED
        return item

    def discard(self) -> None:
        """Сброс несохраненной коллекции без обращения к хранилищу"""
        self.collection = OrderedCollection([], self.synchronizer.base, self.synchronizer.mirror)
        self._states = {}
        self.from_fallback = False
