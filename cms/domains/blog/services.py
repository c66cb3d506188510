import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from cms.core.config import Settings
from cms.db.repositories.document_repository import DocumentStore, generate_document_id
from cms.domains.blog.defaults import DEFAULT_BLOGS
from cms.domains.blog.entities import (
    CONTENT_VERSION_BLOCKS, as_utc, blocks_text, calculate_reading_time, calculate_word_count,
    generate_excerpt, is_publicly_visible, sanitize_slug, slugify,
)
from cms.domains.blog.schemas import BlogCreate, BlogPost, BlogUpdate
from cms.domains.content.blocks import ContentBlock, create_block, validate_block
from cms.domains.content.collection import OrderedCollection, renumber
from cms.domains.content.errors import InvalidPayloadError, ItemNotFoundError, SlugConflictError, StoreError
from cms.domains.content.paths import BLOGS_COLLECTION, data_path

logger = logging.getLogger(__name__)

SORT_FIELDS = ("created_at", "updated_at", "title")
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _text_of(post: BlogPost) -> str:
    if post.content_version == CONTENT_VERSION_BLOCKS:
        return blocks_text(post.content_blocks)
    return post.content


class BlogService:
    """Сервис для работы с постами блога"""

    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.path = data_path(settings.app_id, BLOGS_COLLECTION)

    async def _load_all(self) -> List[BlogPost]:
        posts = []
        for doc_id, body in await self.store.list(self.path):
            try:
                posts.append(BlogPost.model_validate({**body, "id": doc_id}))
            except ValidationError as e:
                logger.warning(f"Skipping malformed blog post {doc_id}: {e}")
        return posts

    async def _require(self, post_id: str) -> BlogPost:
        post = await self.get_post(post_id)
        if post is None:
            raise ItemNotFoundError(post_id)
        return post

    async def _check_slug(self, slug: str, exclude_id: Optional[str] = None) -> None:
        """Проверка уникальности slug среди всех постов"""
        for post in await self._load_all():
            if post.slug == slug and post.id != exclude_id:
                raise SlugConflictError(slug)

    def _with_metrics(self, post: BlogPost) -> BlogPost:
        """Пересчет количества слов и времени чтения"""
        text = _text_of(post)
        return post.model_copy(update={
            "word_count": calculate_word_count(text),
            "reading_time": calculate_reading_time(text),
        })

    async def _save(self, post: BlogPost) -> BlogPost:
        await self.store.set(self.path, post.id, post.to_document())
        return post

    async def get_post(self, post_id: str) -> Optional[BlogPost]:
        """Получение поста по id"""
        body = await self.store.get(self.path, post_id)
        if body is None:
            return None
        return BlogPost.model_validate({**body, "id": post_id})

    async def get_by_slug(self, slug: str, public: bool = False) -> Optional[BlogPost]:
        """Получение поста по slug"""
        slug = sanitize_slug(slug)
        now = datetime.now(timezone.utc)
        for post in await self._load_all():
            if post.slug != slug:
                continue
            if public and not is_publicly_visible(post.status, post.scheduled_at, now):
                return None
            return post
        return None

    async def create_post(self, data: BlogCreate) -> BlogPost:
        """Создание нового поста"""
        slug = sanitize_slug(data.slug) if data.slug else slugify(data.title)
        if not slug:
            raise InvalidPayloadError("Slug is required")
        await self._check_slug(slug)

        now = datetime.now(timezone.utc)
        fields = data.model_dump(exclude={"slug", "content_blocks"})
        post = BlogPost(id=generate_document_id(), slug=slug, created_at=now, updated_at=now, **fields)

        if data.content_blocks is not None:
            blocks = OrderedCollection(renumber(data.content_blocks))
            post = post.model_copy(update={
                "content_blocks": blocks.to_list(),
                "content_version": CONTENT_VERSION_BLOCKS,
            })
        if not post.excerpt:
            post = post.model_copy(update={"excerpt": generate_excerpt(_text_of(post))})
        if post.status == "published":
            post = post.model_copy(update={"published_at": now})

        post = await self._save(self._with_metrics(post))
        logger.info(f"Created blog post {post.id} ({post.slug})")
        return post

    async def update_post(self, post_id: str, data: BlogUpdate) -> BlogPost:
        """Частичное обновление поста"""
        post = await self._require(post_id)
        patch = data.model_dump(exclude_unset=True, exclude={"content_blocks"})

        if "slug" in patch:
            slug = sanitize_slug(patch["slug"])
            if not slug:
                raise InvalidPayloadError("Slug is required")
            await self._check_slug(slug, exclude_id=post_id)
            patch["slug"] = slug

        if data.content_blocks is not None:
            blocks = OrderedCollection(renumber(data.content_blocks))
            patch["content_blocks"] = blocks.to_list()
            patch["content_version"] = CONTENT_VERSION_BLOCKS

        now = datetime.now(timezone.utc)
        if patch.get("status") == "published" and post.published_at is None:
            patch["published_at"] = now
        patch["updated_at"] = now

        updated = BlogPost.model_validate({**post.model_dump(), **patch})
        if updated.status == "scheduled" and updated.scheduled_at is None:
            raise InvalidPayloadError("scheduledAt is required for scheduled posts")

        return await self._save(self._with_metrics(updated))

    async def delete_post(self, post_id: str) -> bool:
        """Удаление поста"""
        deleted = await self.store.delete(self.path, post_id)
        if deleted:
            logger.info(f"Deleted blog post {post_id}")
        return deleted

    async def list_posts(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        search: Optional[str] = None,
        sort: str = "created_at",
        order: str = "desc",
        page: int = 1,
        per_page: int = 20,
        public: bool = False,
        now: Optional[datetime] = None
    ) -> Tuple[List[BlogPost], int, bool]:
        """Список постов с фильтрами, поиском, сортировкой и пагинацией.

        Третий элемент - признак того, что публичный список собран из
        постов по умолчанию, потому что хранилище недоступно.
        """
        if sort not in SORT_FIELDS:
            raise InvalidPayloadError(f"Invalid sort field: {sort}")

        now = as_utc(now) or datetime.now(timezone.utc)
        from_fallback = False
        try:
            posts = await self._load_all()
        except StoreError:
            if not public:
                raise
            logger.error("Failed to load blog posts, serving defaults", exc_info=True)
            posts, from_fallback = list(DEFAULT_BLOGS), True

        if public:
            posts = [post for post in posts if is_publicly_visible(post.status, post.scheduled_at, now)]
        if status:
            posts = [post for post in posts if post.status == status]
        if category:
            posts = [post for post in posts if post.category == category]
        if tag:
            posts = [post for post in posts if tag in post.tags]
        if search:
            needle = search.casefold()
            posts = [
                post for post in posts
                if any(needle in text.casefold() for text in (post.title, post.excerpt, _text_of(post)))
            ]

        if sort == "title":
            posts.sort(key=lambda post: post.title.casefold(), reverse=order == "desc")
        else:
            posts.sort(key=lambda post: getattr(post, sort) or _EPOCH, reverse=order == "desc")

        total = len(posts)
        start = (page - 1) * per_page
        return posts[start:start + per_page], total, from_fallback

    # --- Блоки ---

    async def _save_blocks(self, post: BlogPost, blocks: OrderedCollection) -> BlogPost:
        """Сохранение блоков: content_version 2 и пересчет метрик"""
        updated = post.model_copy(update={
            "content_blocks": blocks.to_list(),
            "content_version": CONTENT_VERSION_BLOCKS,
            "updated_at": datetime.now(timezone.utc),
        })
        return await self._save(self._with_metrics(updated))

    async def _blocks_of(self, post_id: str) -> Tuple[BlogPost, OrderedCollection]:
        post = await self._require(post_id)
        return post, OrderedCollection.from_stored(post.content_blocks)

    async def add_block(
        self,
        post_id: str,
        block_type: str,
        level: int = 2,
        ordered: bool = False,
        index: Optional[int] = None,
        data: Optional[Mapping[str, Any]] = None
    ) -> Tuple[BlogPost, ContentBlock]:
        """Добавление блока в конец поста или на позицию index"""
        post, blocks = await self._blocks_of(post_id)
        block = create_block(block_type, order=len(blocks), level=level, ordered=ordered)

        blocks = blocks.append(block)
        if data:
            blocks = blocks.update_by_id(block.id, dict(data))
        if index is not None:
            blocks = blocks.move_to(block.id, index)

        block = blocks.get(block.id)
        if not validate_block(block):
            raise InvalidPayloadError(f"Invalid content block: {block.id}")
        return await self._save_blocks(post, blocks), block

    async def update_block(self, post_id: str, block_id: str, patch: Mapping[str, Any]) -> BlogPost:
        post, blocks = await self._blocks_of(post_id)
        blocks = blocks.update_by_id(block_id, dict(patch))
        if not validate_block(blocks.get(block_id)):
            raise InvalidPayloadError(f"Invalid content block: {block_id}")
        return await self._save_blocks(post, blocks)

    async def remove_block(self, post_id: str, block_id: str) -> BlogPost:
        post, blocks = await self._blocks_of(post_id)
        if block_id not in blocks:
            raise ItemNotFoundError(block_id)
        return await self._save_blocks(post, blocks.remove_by_id(block_id))

    async def move_block(self, post_id: str, block_id: str, direction: str) -> BlogPost:
        post, blocks = await self._blocks_of(post_id)
        if block_id not in blocks:
            raise ItemNotFoundError(block_id)
        return await self._save_blocks(post, blocks.move_adjacent(block_id, direction))

    async def reorder_blocks(self, post_id: str, ids: Sequence[str]) -> BlogPost:
        post, blocks = await self._blocks_of(post_id)
        return await self._save_blocks(post, blocks.reorder(ids))


def post_summary(post: BlogPost) -> Dict[str, Any]:
    """Пост для списков (без тела)"""
    return post.model_dump(mode="json", by_alias=True, exclude={"content", "content_blocks"})
