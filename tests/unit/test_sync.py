"""Unit tests for cms.domains.content.sync"""

from dataclasses import dataclass
from typing import Optional

import anyio
import pytest

from cms.db.repositories.document_repository import MemoryDocumentStore
from cms.domains.content.defaults import DEFAULT_FAQ, DEFAULT_STEPS
from cms.domains.content.errors import (
    BulkSaveError, CollectionNotEmptyError, ItemNotFoundError, SaveInProgressError, StoreError,
)
from cms.domains.content.schemas import FAQItem, HowItWorksStep
from cms.domains.content.sync import EditingSession, ItemState, PersistenceSynchronizer

PATH = "artifacts/test/public/data/faq"


@dataclass
class FailingStore(MemoryDocumentStore):
    """Хранилище, которое падает после fail_after записей или на любом чтении"""
    fail_after: Optional[int] = None
    fail_reads: bool = False
    writes: int = 0

    async def set(self, path, doc_id, data):
        if self.fail_after is not None and self.writes >= self.fail_after:
            raise StoreError(f"write to {path}/{doc_id} refused")
        self.writes += 1
        await super().set(path, doc_id, data)

    async def list(self, path, order_by=None):
        if self.fail_reads:
            raise StoreError(f"list of {path} refused")
        return await super().list(path, order_by)


@dataclass
class SlowStore(MemoryDocumentStore):
    async def set(self, path, doc_id, data):
        await anyio.sleep(0.01)
        await super().set(path, doc_id, data)


def _synchronizer(store):
    return PersistenceSynchronizer(store, FAQItem, DEFAULT_FAQ)


def _items(*ids):
    return [FAQItem(id=item_id, order=index, question=item_id.upper()) for index, item_id in enumerate(ids)]


@pytest.mark.anyio
async def test_load_empty_collection_serves_sorted_defaults(memory_store):
    items, from_fallback = await _synchronizer(memory_store).load(PATH)
    assert from_fallback is True
    assert [item.order for item in items] == sorted(item.order for item in DEFAULT_FAQ)
    assert len(items) == len(DEFAULT_FAQ)


@pytest.mark.anyio
async def test_load_failure_serves_defaults():
    items, from_fallback = await _synchronizer(FailingStore(fail_reads=True)).load(PATH)
    assert from_fallback is True
    assert [item.id for item in items] == [item.id for item in DEFAULT_FAQ]


@pytest.mark.anyio
async def test_fetch_propagates_store_errors():
    with pytest.raises(StoreError):
        await _synchronizer(FailingStore(fail_reads=True)).fetch(PATH)


@pytest.mark.anyio
async def test_load_sorts_stored_items_by_order(memory_store):
    await memory_store.set(PATH, "b", {"question": "B", "order": 1})
    await memory_store.set(PATH, "a", {"question": "A", "order": 0})

    items, from_fallback = await _synchronizer(memory_store).load(PATH)
    assert from_fallback is False
    assert [item.id for item in items] == ["a", "b"]


@pytest.mark.anyio
async def test_documents_are_camel_case_without_id(memory_store):
    synchronizer = PersistenceSynchronizer(memory_store, HowItWorksStep, DEFAULT_STEPS, base=1, mirror=("step",))
    await synchronizer.save_one(HowItWorksStep(id="s1", order=1, step=1, title="Go", is_active=False), PATH)

    body = await memory_store.get(PATH, "s1")
    assert "id" not in body
    assert body["isActive"] is False
    assert body["step"] == 1


@pytest.mark.anyio
async def test_save_all_twice_is_idempotent(memory_store):
    synchronizer = _synchronizer(memory_store)
    items = _items("a", "b", "c")

    assert await synchronizer.save_all(items, PATH) == 3
    first = await memory_store.list(PATH)
    assert await synchronizer.save_all(items, PATH) == 3
    second = await memory_store.list(PATH)

    assert first == second
    assert len(second) == 3


@pytest.mark.anyio
async def test_partial_bulk_save_is_not_rolled_back():
    store = FailingStore(fail_after=2)
    with pytest.raises(BulkSaveError) as exc_info:
        await _synchronizer(store).save_all(_items("a", "b", "c"), PATH)

    assert exc_info.value.written == 2
    assert exc_info.value.failed_id == "c"
    assert [doc_id for doc_id, _ in await store.list(PATH)] == ["a", "b"]


@pytest.mark.anyio
async def test_initialize_defaults_only_on_empty_collection(memory_store):
    synchronizer = _synchronizer(memory_store)
    seeded = await synchronizer.initialize_defaults(PATH)

    assert len(seeded) == len(DEFAULT_FAQ)
    assert [item.order for item in seeded] == list(range(len(DEFAULT_FAQ)))
    assert await memory_store.count(PATH) == len(DEFAULT_FAQ)

    with pytest.raises(CollectionNotEmptyError):
        await synchronizer.initialize_defaults(PATH)


@pytest.mark.anyio
async def test_delete_one_reports_missing_documents(memory_store):
    synchronizer = _synchronizer(memory_store)
    await synchronizer.save_all(_items("a"), PATH)
    assert await synchronizer.delete_one("a", PATH) is True
    assert await synchronizer.delete_one("a", PATH) is False


# --- EditingSession ---

@pytest.mark.anyio
async def test_session_item_lifecycle(memory_store):
    await _synchronizer(memory_store).save_all(_items("a", "b"), PATH)
    session = EditingSession(_synchronizer(memory_store), PATH, id_factory=lambda: "c")
    await session.load()
    assert session.state_of("a") == ItemState.SAVED

    session.add(question="Q3")
    assert session.state_of("c") == ItemState.NEW
    assert session.collection.get("c").order == 2

    session.update("a", question="Changed")
    assert session.state_of("a") == ItemState.DIRTY
    assert session.is_dirty

    await session.save_all()
    assert {session.state_of(item_id) for item_id in ("a", "b", "c")} == {ItemState.SAVED}
    assert not session.is_dirty


@pytest.mark.anyio
async def test_session_remove_marks_survivors_dirty_until_save(memory_store):
    await _synchronizer(memory_store).save_all(_items("a", "b", "c"), PATH)
    session = EditingSession(_synchronizer(memory_store), PATH)
    await session.load()

    assert await session.remove("b") is True
    assert session.state_of("b") == ItemState.DELETED
    assert session.state_of("c") == ItemState.DIRTY
    assert session.state_of("a") == ItemState.SAVED
    assert [(item.id, item.order) for item in session.items] == [("a", 0), ("c", 1)]

    # Документ удален сразу, а порядок в хранилище обновится при save_all
    assert (await memory_store.get(PATH, "c"))["order"] == 2
    assert await memory_store.get(PATH, "b") is None

    await session.save_all()
    assert (await memory_store.get(PATH, "c"))["order"] == 1


@pytest.mark.anyio
async def test_session_removed_id_cannot_be_reused(memory_store):
    await _synchronizer(memory_store).save_all(_items("a"), PATH)
    session = EditingSession(_synchronizer(memory_store), PATH)
    await session.load()
    await session.remove("a")

    with pytest.raises(ValueError):
        session.add(id="a", question="again")


@pytest.mark.anyio
async def test_session_remove_of_new_item_skips_store():
    store = FailingStore(fail_reads=False)
    session = EditingSession(_synchronizer(store), PATH, id_factory=lambda: "n1")
    await session.load()
    session.add(question="Draft")

    assert await session.remove("n1") is True
    assert await session.remove("n1") is False
    assert store.writes == 0


@pytest.mark.anyio
async def test_session_loaded_defaults_are_new(memory_store):
    session = EditingSession(_synchronizer(memory_store), PATH)
    await session.load()
    assert session.from_fallback
    assert all(session.state_of(item.id) == ItemState.NEW for item in session.items)

    with pytest.raises(ItemNotFoundError):
        session.state_of("missing")


@pytest.mark.anyio
async def test_session_partial_save_marks_written_items():
    store = FailingStore(fail_after=1)
    session = EditingSession(_synchronizer(store), PATH)
    await session.load()
    first, second = session.items[:2]

    with pytest.raises(BulkSaveError):
        await session.save_all()

    assert session.state_of(first.id) == ItemState.SAVED
    assert session.state_of(second.id) == ItemState.NEW
    assert not session.saving


@pytest.mark.anyio
async def test_session_rejects_concurrent_save():
    store = SlowStore()
    session = EditingSession(_synchronizer(store), PATH)
    await session.load()

    results = []

    async def save():
        try:
            results.append(await session.save_all())
        except SaveInProgressError:
            results.append("busy")

    async with anyio.create_task_group() as tg:
        tg.start_soon(save)
        tg.start_soon(save)

    assert sorted(results, key=str) == sorted([len(DEFAULT_FAQ), "busy"], key=str)


@pytest.mark.anyio
async def test_session_move_and_discard(memory_store):
    await _synchronizer(memory_store).save_all(_items("a", "b"), PATH)
    session = EditingSession(_synchronizer(memory_store), PATH)
    await session.load()

    session.move("b", "up")
    assert [item.id for item in session.items] == ["b", "a"]
    assert session.state_of("a") == ItemState.DIRTY

    session.discard()
    assert session.items == []
