import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status

from cms.api.http.documents import FALLBACK_HEADER, get_content_service
from cms.api.http.errors import content_errors
from cms.core.auth import get_current_admin, get_optional_admin
from cms.domains.content.errors import UnknownContentError
from cms.domains.content.paths import CollectionSpec, get_collection
from cms.domains.content.schemas import MoveRequest, ReorderRequest
from cms.domains.content.services import ContentService
from cms.domains.identity import AdminUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/content", tags=["collections"])


def get_collection_spec(slug: str) -> CollectionSpec:
    """Коллекция по slug из URL; неизвестный slug - 404"""
    try:
        return get_collection(slug)
    except UnknownContentError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown collection: {slug}")


def _documents(items) -> List[Dict[str, Any]]:
    return [item.to_document() for item in items]


@router.get("/{slug}")
async def list_items(
    response: Response,
    all: bool = Query(False, description="Показать скрытые элементы (только для администратора)"),
    spec: CollectionSpec = Depends(get_collection_spec),
    service: ContentService = Depends(get_content_service),
    current_admin: Optional[AdminUser] = Depends(get_optional_admin)
):
    """Элементы коллекции по порядку"""
    if all and current_admin is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    items, from_fallback = await service.list_items(spec.slug, include_hidden=all)
    if from_fallback:
        response.headers[FALLBACK_HEADER] = "fallback"
    return _documents(items)


@router.post("/{slug}", status_code=status.HTTP_201_CREATED)
async def create_item(
    data: Dict[str, Any] = Body(...),
    spec: CollectionSpec = Depends(get_collection_spec),
    service: ContentService = Depends(get_content_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Добавление элемента в конец коллекции"""
    with content_errors(f"Failed to save {spec.label}"):
        item = await service.create_item(spec.slug, data)
    return item.to_document()


@router.put("/{slug}")
async def save_all(
    items: List[Dict[str, Any]] = Body(...),
    spec: CollectionSpec = Depends(get_collection_spec),
    service: ContentService = Depends(get_content_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Сохранение всей коллекции в переданном порядке"""
    with content_errors(f"Failed to save {spec.label}"):
        saved = await service.replace_all(spec.slug, items)
    return {"success": True, "items": _documents(saved)}


@router.post("/{slug}/reorder")
async def reorder_items(
    request: ReorderRequest,
    spec: CollectionSpec = Depends(get_collection_spec),
    service: ContentService = Depends(get_content_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Новый порядок коллекции (drag-and-drop)"""
    with content_errors(f"Failed to save {spec.label}"):
        items = await service.reorder(spec.slug, request.ids)
    return {"success": True, "items": _documents(items)}


@router.post("/{slug}/initialize", status_code=status.HTTP_201_CREATED)
async def initialize_collection(
    spec: CollectionSpec = Depends(get_collection_spec),
    service: ContentService = Depends(get_content_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Однократное заполнение пустой коллекции значениями по умолчанию"""
    with content_errors(f"Failed to save {spec.label}"):
        items = await service.initialize(spec.slug)
    return {"success": True, "items": _documents(items)}


@router.put("/{slug}/{item_id}")
async def update_item(
    item_id: str,
    patch: Dict[str, Any] = Body(...),
    spec: CollectionSpec = Depends(get_collection_spec),
    service: ContentService = Depends(get_content_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Частичное обновление элемента"""
    with content_errors(f"Failed to save {spec.label}"):
        item = await service.update_item(spec.slug, item_id, patch)
    return item.to_document()


@router.delete("/{slug}/{item_id}")
async def delete_item(
    item_id: str,
    spec: CollectionSpec = Depends(get_collection_spec),
    service: ContentService = Depends(get_content_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Удаление элемента; оставшиеся перенумеровываются и сохраняются"""
    with content_errors(f"Failed to save {spec.label}"):
        deleted = await service.delete_item(spec.slug, item_id)
    return {"success": True, "deleted": deleted}


@router.post("/{slug}/{item_id}/move")
async def move_item(
    item_id: str,
    request: MoveRequest,
    spec: CollectionSpec = Depends(get_collection_spec),
    service: ContentService = Depends(get_content_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Сдвиг элемента вверх или вниз"""
    with content_errors(f"Failed to save {spec.label}"):
        items = await service.move(spec.slug, item_id, request.direction)
    return {"success": True, "items": _documents(items)}
