"""Unit tests for cms.domains.content.services on the in-memory store"""

import pytest

from cms.domains.content.errors import InvalidPayloadError, ItemNotFoundError, UnknownContentError
from cms.domains.content.paths import data_path, get_collection, get_document
from cms.domains.content.services import ContentService


@pytest.fixture
def service(memory_store, settings):
    return ContentService(memory_store, settings)


def _faq_path(settings):
    return data_path(settings.app_id, "faq")


def test_paths_are_namespaced_by_app():
    assert get_collection("how-it-works").path("snap") == "artifacts/snap/public/data/howItWorks"
    assert get_document("environment").path("snap") == "artifacts/snap/public/data/content"
    assert get_document("legal:terms").doc_id == "terms"


def test_unknown_content_names():
    with pytest.raises(UnknownContentError):
        get_collection("pricing")
    with pytest.raises(UnknownContentError):
        get_document("legal:cookies")


@pytest.mark.anyio
async def test_create_update_delete_keep_order_contiguous(service, memory_store, settings):
    first = await service.create_item("faq", {"question": "Q1", "answer": "A1"})
    second = await service.create_item("faq", {"question": "Q2", "answer": "A2"})
    third = await service.create_item("faq", {"question": "Q3", "answer": "A3", "order": 99})
    assert [first.order, second.order, third.order] == [0, 1, 2]

    updated = await service.update_item("faq", second.id, {"answer": "Changed"})
    assert updated.answer == "Changed" and updated.order == 1

    assert await service.delete_item("faq", second.id) is True
    items, from_fallback = await service.list_items("faq")
    assert not from_fallback
    assert [(item.id, item.order) for item in items] == [(first.id, 0), (third.id, 1)]
    assert (await memory_store.get(_faq_path(settings), third.id))["order"] == 1


@pytest.mark.anyio
async def test_delete_missing_item_is_noop(service):
    await service.create_item("faq", {"question": "Q1"})
    assert await service.delete_item("faq", "missing") is False


@pytest.mark.anyio
async def test_update_missing_item_raises(service):
    with pytest.raises(ItemNotFoundError):
        await service.update_item("faq", "missing", {"question": "x"})


@pytest.mark.anyio
async def test_hidden_items_need_include_hidden(service):
    await service.create_item("faq", {"question": "Shown"})
    await service.create_item("faq", {"question": "Hidden", "visible": False})

    public, _ = await service.list_items("faq")
    everything, _ = await service.list_items("faq", include_hidden=True)
    assert [item.question for item in public] == ["Shown"]
    assert [item.question for item in everything] == ["Shown", "Hidden"]


@pytest.mark.anyio
async def test_replace_all_saves_given_order_and_drops_stale(service, memory_store, settings):
    keep = await service.create_item("features", {"title": "Keep"})
    await service.create_item("features", {"title": "Drop"})

    saved = await service.replace_all("features", [{"title": "New"}, {"id": keep.id, "title": "Kept"}])
    assert [item.title for item in saved] == ["New", "Kept"]
    assert [item.order for item in saved] == [0, 1]

    stored = await memory_store.list(data_path(settings.app_id, "features"), order_by="order")
    assert [body["title"] for _, body in stored] == ["New", "Kept"]


@pytest.mark.anyio
async def test_steps_are_one_based(service):
    for title in ("One", "Two", "Three"):
        await service.create_item("how-it-works", {"title": title})
    items = await service.move("how-it-works", (await service.list_items("how-it-works"))[0][2].id, "up")
    assert [item.title for item in items] == ["One", "Three", "Two"]
    assert [(item.order, item.step) for item in items] == [(1, 1), (2, 2), (3, 3)]


@pytest.mark.anyio
async def test_reorder_persists_new_positions(service):
    a = await service.create_item("stats", {"label": "A", "value": 1})
    b = await service.create_item("stats", {"label": "B", "value": 2})

    await service.reorder("stats", [b.id, a.id])
    items, _ = await service.list_items("stats")
    assert [item.label for item in items] == ["B", "A"]


@pytest.mark.anyio
async def test_move_unknown_item_raises(service):
    with pytest.raises(ItemNotFoundError):
        await service.move("stats", "missing", "up")


@pytest.mark.anyio
async def test_singleton_read_merges_defaults(service, memory_store, settings):
    data, from_fallback = await service.get_document("environment")
    assert from_fallback is False
    assert data["headline"] == "Your Green Impact"

    await memory_store.set(data_path(settings.app_id, "content"), "environmentImpact", {"headline": "Stored"})
    data, _ = await service.get_document("environment")
    assert data["headline"] == "Stored"
    assert data["metricsLabels"]["rides"] == "Pooled Rides"


@pytest.mark.anyio
async def test_put_legal_renumbers_sections(service):
    saved = await service.put_legal("privacy", {
        "title": "Privacy",
        "sections": [{"id": "s2", "order": 5, "title": "B"}, {"id": "s1", "order": 9, "title": "A"}],
    })
    assert saved["type"] == "privacy"
    assert [section["order"] for section in saved["sections"]] == [0, 1]
    assert saved["updatedAt"]


@pytest.mark.anyio
async def test_unknown_legal_type(service):
    with pytest.raises(InvalidPayloadError, match="Invalid type"):
        await service.get_legal("cookies")


@pytest.mark.anyio
async def test_put_environment_with_wrong_types_is_invalid_payload(service):
    body = {
        "headline": "Impact",
        "subheadline": "Every ride counts",
        "defaultRides": 1,
        "co2PerRide": 2.0,
        "treesEquivalent": 0.1,
        "metricsLabels": ["rides"],
    }
    with pytest.raises(InvalidPayloadError, match="Invalid field metricsLabels"):
        await service.put_document("environment", body)


@pytest.mark.anyio
async def test_put_seo_keeps_defaults_for_missing_fields(service, memory_store, settings):
    saved = await service.put_document("seo", {"siteTagline": "Pool smarter"})

    assert saved["siteTagline"] == "Pool smarter"
    assert saved["siteName"] == "Snapgo"
    stored = await memory_store.get(data_path(settings.app_id, "seo"), "config")
    assert stored["twitterHandle"] == "@snapgo_app"
