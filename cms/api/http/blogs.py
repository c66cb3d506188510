from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status

from cms.api.http.documents import FALLBACK_HEADER
from cms.api.http.errors import content_errors
from cms.core.auth import get_current_admin, get_optional_admin
from cms.core.config import Settings, get_settings
from cms.db.repositories.document_repository import DocumentStore, get_document_store
from cms.domains.blog.entities import is_publicly_visible
from cms.domains.blog.schemas import BlockCreate, BlogCreate, BlogListResponse, BlogStatus, BlogUpdate
from cms.domains.blog.services import BlogService, post_summary
from cms.domains.content.blocks import dump_blocks
from cms.domains.content.schemas import MoveRequest, ReorderRequest
from cms.domains.identity import AdminUser

router = APIRouter(prefix="/api/blogs", tags=["blogs"])


def get_blog_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings)
) -> BlogService:
    return BlogService(store, settings)


def _not_found(post_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Blog post not found: {post_id}")


@router.get("", response_model=BlogListResponse, response_model_by_alias=True)
async def list_posts(
    response: Response,
    status_filter: Optional[BlogStatus] = Query(None, alias="status"),
    category: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    search: Optional[str] = Query(None, max_length=200),
    sort: str = Query("created_at"),
    order: Literal["asc", "desc"] = Query("desc"),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100, alias="perPage"),
    service: BlogService = Depends(get_blog_service),
    current_admin: Optional[AdminUser] = Depends(get_optional_admin)
):
    """Список постов; анонимным пользователям только опубликованные"""
    with content_errors("Failed to fetch blog posts"):
        posts, total, from_fallback = await service.list_posts(
            status=status_filter,
            category=category,
            tag=tag,
            search=search,
            sort=sort,
            order=order,
            page=page,
            per_page=per_page,
            public=current_admin is None,
        )
    if from_fallback:
        response.headers[FALLBACK_HEADER] = "fallback"
    return BlogListResponse(
        posts=[post_summary(post) for post in posts],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get("/slug/{slug}")
async def get_post_by_slug(
    slug: str,
    service: BlogService = Depends(get_blog_service),
    current_admin: Optional[AdminUser] = Depends(get_optional_admin)
):
    """Пост по slug (для публичной страницы)"""
    post = await service.get_by_slug(slug, public=current_admin is None)
    if post is None:
        raise _not_found(slug)
    return post.to_response()


@router.get("/{post_id}")
async def get_post(
    post_id: str,
    service: BlogService = Depends(get_blog_service),
    current_admin: Optional[AdminUser] = Depends(get_optional_admin)
):
    """Пост по id; черновики видны только администратору"""
    post = await service.get_post(post_id)
    if post is None:
        raise _not_found(post_id)
    if current_admin is None and not is_publicly_visible(post.status, post.scheduled_at, datetime.now(timezone.utc)):
        raise _not_found(post_id)
    return post.to_response()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    data: BlogCreate,
    service: BlogService = Depends(get_blog_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Создание поста"""
    with content_errors("Failed to create blog post"):
        post = await service.create_post(data)
    return post.to_response()


@router.put("/{post_id}")
async def update_post(
    post_id: str,
    data: BlogUpdate,
    service: BlogService = Depends(get_blog_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Частичное обновление поста"""
    with content_errors("Failed to update blog post"):
        post = await service.update_post(post_id, data)
    return post.to_response()


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    service: BlogService = Depends(get_blog_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Удаление поста"""
    with content_errors("Failed to delete blog post"):
        deleted = await service.delete_post(post_id)
    if not deleted:
        raise _not_found(post_id)
    return {"success": True}


# --- Блоки ---

@router.post("/{post_id}/blocks", status_code=status.HTTP_201_CREATED)
async def add_block(
    post_id: str,
    request: BlockCreate,
    service: BlogService = Depends(get_blog_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Добавление блока в пост"""
    with content_errors("Failed to save content blocks"):
        post, block = await service.add_block(
            post_id,
            request.type,
            level=request.level,
            ordered=request.ordered,
            index=request.index,
            data=request.data,
        )
    return {"block": block.model_dump(mode="json"), "post": post.to_response()}


@router.put("/{post_id}/blocks/order")
async def reorder_blocks(
    post_id: str,
    request: ReorderRequest,
    service: BlogService = Depends(get_blog_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Новый порядок блоков (drag-and-drop)"""
    with content_errors("Failed to save content blocks"):
        post = await service.reorder_blocks(post_id, request.ids)
    return {"contentBlocks": dump_blocks(post.content_blocks)}


@router.put("/{post_id}/blocks/{block_id}")
async def update_block(
    post_id: str,
    block_id: str,
    patch: Dict[str, Any] = Body(...),
    service: BlogService = Depends(get_blog_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Изменение полей блока"""
    with content_errors("Failed to save content blocks"):
        post = await service.update_block(post_id, block_id, patch)
    return {"contentBlocks": dump_blocks(post.content_blocks)}


@router.delete("/{post_id}/blocks/{block_id}")
async def remove_block(
    post_id: str,
    block_id: str,
    service: BlogService = Depends(get_blog_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    with content_errors("Failed to save content blocks"):
        post = await service.remove_block(post_id, block_id)
    return {"contentBlocks": dump_blocks(post.content_blocks)}


@router.post("/{post_id}/blocks/{block_id}/move")
async def move_block(
    post_id: str,
    block_id: str,
    request: MoveRequest,
    service: BlogService = Depends(get_blog_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    with content_errors("Failed to save content blocks"):
        post = await service.move_block(post_id, block_id, request.direction)
    return {"contentBlocks": dump_blocks(post.content_blocks)}
