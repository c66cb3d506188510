import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from pydantic import ValidationError

from cms.core.config import Settings
from cms.db.repositories.document_repository import DocumentStore, generate_document_id
from cms.domains.content.collection import OrderedCollection, renumber
from cms.domains.content.errors import InvalidPayloadError, ItemNotFoundError, StoreError
from cms.domains.content.paths import CollectionSpec, get_collection, get_document
from cms.domains.content.schemas import (
    LEGAL_TYPES, SCHEMA_VERSION, Record, check_environment_payload, field_patch, merge_with_defaults,
)
from cms.domains.content.sync import PersistenceSynchronizer

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def changed_items(before: OrderedCollection, after: OrderedCollection) -> List[Record]:
    """Элементы, которые отличаются от прежней версии (обычно только order)"""
    return [item for item in after if before.get(item.id) != item]


class ContentService:
    """Сервис для упорядоченных коллекций и документов-одиночек"""

    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.app_id = settings.app_id

    def _synchronizer(self, spec: CollectionSpec) -> PersistenceSynchronizer:
        return PersistenceSynchronizer(self.store, spec.model, spec.defaults, spec.base, spec.mirror)

    async def _stored_collection(self, spec: CollectionSpec) -> Tuple[PersistenceSynchronizer, OrderedCollection]:
        synchronizer = self._synchronizer(spec)
        items = await synchronizer.fetch(spec.path(self.app_id))
        return synchronizer, synchronizer.collection(items)

    def _build_item(self, spec: CollectionSpec, data: Mapping[str, Any], item_id: str) -> Record:
        fields = field_patch(spec.model, data)
        fields.pop("order", None)
        fields["id"] = item_id
        return spec.model.model_validate(fields)

    # --- Коллекции ---

    async def list_items(self, slug: str, include_hidden: bool = False) -> Tuple[List[Record], bool]:
        """Элементы коллекции по порядку; второй элемент - признак значений по умолчанию"""
        spec = get_collection(slug)
        items, from_fallback = await self._synchronizer(spec).load(spec.path(self.app_id))
        if not include_hidden:
            items = [item for item in items if getattr(item, spec.visibility_field, True)]
        return items, from_fallback

    async def create_item(self, slug: str, data: Mapping[str, Any]) -> Record:
        """Добавление элемента в конец коллекции"""
        spec = get_collection(slug)
        synchronizer, collection = await self._stored_collection(spec)

        item_id = generate_document_id()
        collection = collection.append(self._build_item(spec, data, item_id))
        item = collection.get(item_id)

        await synchronizer.save_one(item, spec.path(self.app_id))
        logger.info(f"Created {slug} item {item_id} at position {item.order}")
        return item

    async def update_item(self, slug: str, item_id: str, patch: Mapping[str, Any]) -> Record:
        """Частичное обновление элемента"""
        spec = get_collection(slug)
        synchronizer, collection = await self._stored_collection(spec)

        collection = collection.update_by_id(item_id, field_patch(spec.model, patch))
        item = collection.get(item_id)
        await synchronizer.save_one(item, spec.path(self.app_id))
        return item

    async def delete_item(self, slug: str, item_id: str) -> bool:
        """Удаление элемента и сохранение нового порядка оставшихся"""
        spec = get_collection(slug)
        synchronizer, collection = await self._stored_collection(spec)
        if item_id not in collection:
            return False

        path = spec.path(self.app_id)
        await synchronizer.delete_one(item_id, path)
        updated = collection.remove_by_id(item_id)
        await synchronizer.save_all(changed_items(collection, updated), path)
        logger.info(f"Deleted {slug} item {item_id}, {len(updated)} remaining")
        return True

    async def replace_all(self, slug: str, items: Sequence[Mapping[str, Any]]) -> List[Record]:
        """Сохранение всей коллекции в переданном порядке.

        Документы, которых нет в списке, удаляются после записи.
        """
        spec = get_collection(slug)
        synchronizer = self._synchronizer(spec)
        path = spec.path(self.app_id)

        built = [self._build_item(spec, data, data.get("id") or generate_document_id()) for data in items]
        collection = OrderedCollection(renumber(built, spec.base, spec.mirror), spec.base, spec.mirror)

        existing = {doc_id for doc_id, _ in await self.store.list(path)}
        await synchronizer.save_all(collection.to_list(), path)
        for stale_id in existing - set(collection.ids()):
            await synchronizer.delete_one(stale_id, path)
        return collection.to_list()

    async def reorder(self, slug: str, ids: Sequence[str]) -> List[Record]:
        spec = get_collection(slug)
        synchronizer, collection = await self._stored_collection(spec)

        updated = collection.reorder(ids)
        await synchronizer.save_all(changed_items(collection, updated), spec.path(self.app_id))
        return updated.to_list()

    async def move(self, slug: str, item_id: str, direction: str) -> List[Record]:
        """Сдвиг элемента на одну позицию вверх или вниз"""
        spec = get_collection(slug)
        synchronizer, collection = await self._stored_collection(spec)
        if item_id not in collection:
            raise ItemNotFoundError(item_id)

        updated = collection.move_adjacent(item_id, direction)
        await synchronizer.save_all(changed_items(collection, updated), spec.path(self.app_id))
        return updated.to_list()

    async def initialize(self, slug: str) -> List[Record]:
        spec = get_collection(slug)
        items = await self._synchronizer(spec).initialize_defaults(spec.path(self.app_id))
        logger.info(f"Seeded {slug} with {len(items)} default items")
        return items

    # --- Документы-одиночки ---

    async def get_document(self, kind: str) -> Tuple[Dict[str, Any], bool]:
        """Документ, слитый со значениями по умолчанию; второй элемент - признак отката на них"""
        spec = get_document(kind)
        default = spec.default()
        default_body = default.to_document()

        try:
            stored = await self.store.get(spec.path(self.app_id), spec.doc_id)
        except StoreError:
            logger.error(f"Failed to load {kind} document, serving defaults", exc_info=True)
            return default_body, True

        merged = merge_with_defaults(stored, default_body)
        try:
            return type(default).model_validate(merged).to_document(), False
        except ValidationError as e:
            logger.warning(f"Stored {kind} document is malformed, serving defaults: {e}")
            return default_body, True

    async def put_document(self, kind: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Запись документа целиком (или поверх значений по умолчанию); проставляет updatedAt"""
        spec = get_document(kind)
        if kind == "environment":
            check_environment_payload(data)

        default = spec.default()
        if spec.merge_on_write:
            data = merge_with_defaults(data, default.to_document())

        try:
            document = type(default).model_validate(dict(data))
        except ValidationError as e:
            if kind != "environment":
                raise
            # Для environment ошибки типов тоже 400, а не 422
            error = e.errors()[0]
            location = ".".join(str(part) for part in error["loc"])
            raise InvalidPayloadError(f"Invalid field {location}: {error['msg']}") from e
        if hasattr(document, "sections"):
            document = document.model_copy(update={"sections": renumber(document.sections)})

        body = document.to_document()
        body["schemaVersion"] = SCHEMA_VERSION
        body["updatedAt"] = utc_now_iso()

        await self.store.set(spec.path(self.app_id), spec.doc_id, body)
        logger.info(f"Updated {kind} document")
        return body

    async def get_legal(self, legal_type: str) -> Tuple[Dict[str, Any], bool]:
        if legal_type not in LEGAL_TYPES:
            raise InvalidPayloadError("Invalid type. Must be terms, privacy, or refund.")
        return await self.get_document(f"legal:{legal_type}")

    async def put_legal(self, legal_type: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        if legal_type not in LEGAL_TYPES:
            raise InvalidPayloadError("Invalid type. Must be terms, privacy, or refund.")
        return await self.put_document(f"legal:{legal_type}", {**data, "type": legal_type})
