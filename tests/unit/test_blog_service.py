"""Unit tests for cms.domains.blog.services on the in-memory store"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from cms.db.repositories.document_repository import MemoryDocumentStore
from cms.domains.blog.entities import CONTENT_VERSION_BLOCKS, CONTENT_VERSION_MARKDOWN
from cms.domains.blog.schemas import BlogCreate, BlogUpdate
from cms.domains.blog.services import BlogService, post_summary
from cms.domains.content.errors import InvalidPermutationError, ItemNotFoundError, SlugConflictError, StoreError


@dataclass
class UnreachableStore(MemoryDocumentStore):
    async def list(self, path, order_by=None):
        raise StoreError("store is down")


@pytest.fixture
def service(memory_store, settings):
    return BlogService(memory_store, settings)


@pytest.mark.anyio
async def test_create_post_derives_slug_excerpt_and_metrics(service):
    post = await service.create_post(BlogCreate(title="Why Cab Pooling Works", content="word " * 250))

    assert post.slug == "why-cab-pooling-works"
    assert post.content_version == CONTENT_VERSION_MARKDOWN
    assert post.word_count == 250
    assert post.reading_time == 2
    assert post.excerpt.startswith("word word")
    assert post.published_at is None


@pytest.mark.anyio
async def test_slug_must_be_unique(service):
    await service.create_post(BlogCreate(title="Same Title"))
    with pytest.raises(SlugConflictError):
        await service.create_post(BlogCreate(title="Same Title"))


@pytest.mark.anyio
async def test_explicit_slug_is_sanitised(service):
    post = await service.create_post(BlogCreate(title="T", slug="/blog/Custom/"))
    assert post.slug == "custom"
    assert (await service.get_by_slug("custom")).id == post.id


def test_scheduled_post_requires_date():
    with pytest.raises(ValidationError):
        BlogCreate(title="Later", status="scheduled")


def test_blank_title_is_rejected():
    with pytest.raises(ValidationError):
        BlogCreate(title="   ")


@pytest.mark.anyio
async def test_publishing_sets_published_at_once(service):
    post = await service.create_post(BlogCreate(title="Draft"))
    published = await service.update_post(post.id, BlogUpdate(status="published"))
    assert published.published_at is not None

    again = await service.update_post(post.id, BlogUpdate(title="Renamed"))
    assert again.published_at == published.published_at
    assert again.title == "Renamed"


@pytest.mark.anyio
async def test_public_listing_hides_drafts_and_future_posts(service):
    now = datetime(2026, 6, 1, tzinfo=timezone.utc)
    await service.create_post(BlogCreate(title="Published", status="published"))
    await service.create_post(BlogCreate(title="Draft"))
    await service.create_post(BlogCreate(title="Due", status="scheduled", scheduled_at=now - timedelta(hours=1)))
    await service.create_post(BlogCreate(title="Future", status="scheduled", scheduled_at=now + timedelta(hours=1)))

    posts, total, _ = await service.list_posts(public=True, now=now, sort="title", order="asc")
    assert [post.title for post in posts] == ["Due", "Published"]
    assert total == 2

    _, total, _ = await service.list_posts(now=now)
    assert total == 4


@pytest.mark.anyio
async def test_list_filters_search_and_pagination(service):
    await service.create_post(BlogCreate(title="Safety tips", category="safety", tags=["sos"]))
    await service.create_post(BlogCreate(title="Saving money", category="pricing", content="Split the FARE"))
    await service.create_post(BlogCreate(title="Green rides", category="pricing"))

    posts, _, _ = await service.list_posts(category="pricing", sort="title", order="asc")
    assert [post.title for post in posts] == ["Green rides", "Saving money"]

    posts, _, _ = await service.list_posts(tag="sos")
    assert [post.title for post in posts] == ["Safety tips"]

    posts, _, _ = await service.list_posts(search="fare")
    assert [post.title for post in posts] == ["Saving money"]

    posts, total, _ = await service.list_posts(sort="title", order="asc", page=2, per_page=2)
    assert total == 3
    assert [post.title for post in posts] == ["Saving money"]


@pytest.mark.anyio
async def test_block_editing_renumbers_and_switches_to_blocks(service):
    post = await service.create_post(BlogCreate(title="Blocks"))

    post, first = await service.add_block(post.id, "paragraph", data={"content": "one two three"})
    post, heading = await service.add_block(post.id, "heading", level=3, data={"content": "Title"})
    post, listing = await service.add_block(post.id, "list", index=0, data={"items": ["a", "b"]})

    assert post.content_version == CONTENT_VERSION_BLOCKS
    assert [block.id for block in post.content_blocks] == [listing.id, first.id, heading.id]
    assert [block.order for block in post.content_blocks] == [0, 1, 2]
    assert post.word_count == 6

    post = await service.move_block(post.id, heading.id, "up")
    assert [block.id for block in post.content_blocks] == [listing.id, heading.id, first.id]

    post = await service.reorder_blocks(post.id, [first.id, heading.id, listing.id])
    assert [block.order for block in post.content_blocks] == [0, 1, 2]

    post = await service.update_block(post.id, first.id, {"content": "changed"})
    assert post.content_blocks[0].content == "changed"

    post = await service.remove_block(post.id, heading.id)
    assert [(block.id, block.order) for block in post.content_blocks] == [(first.id, 0), (listing.id, 1)]


@pytest.mark.anyio
async def test_block_errors(service):
    post = await service.create_post(BlogCreate(title="Errors"))
    post, block = await service.add_block(post.id, "paragraph")

    with pytest.raises(ItemNotFoundError):
        await service.remove_block(post.id, "missing")
    with pytest.raises(ItemNotFoundError):
        await service.add_block("missing-post", "paragraph")
    with pytest.raises(InvalidPermutationError):
        await service.reorder_blocks(post.id, [block.id, block.id])


@pytest.mark.anyio
async def test_post_summary_has_no_body(service):
    post = await service.create_post(BlogCreate(title="Summary", content="Body"))
    summary = post_summary(post)
    assert "content" not in summary
    assert "contentBlocks" not in summary
    assert summary["slug"] == "summary"


@pytest.mark.anyio
async def test_public_listing_serves_default_posts_when_store_is_down(settings):
    service = BlogService(UnreachableStore(), settings)

    posts, total, from_fallback = await service.list_posts(public=True)

    assert from_fallback is True
    assert total == 2
    assert [post.slug for post in posts] == ["carpooling-saves-money", "safety-first-snapgo"]


@pytest.mark.anyio
async def test_admin_listing_surfaces_store_errors(settings):
    service = BlogService(UnreachableStore(), settings)

    with pytest.raises(StoreError):
        await service.list_posts(public=False)
