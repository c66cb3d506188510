from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Response

from cms.api.http.errors import content_errors
from cms.core.auth import get_current_admin
from cms.core.config import Settings, get_settings
from cms.db.repositories.document_repository import DocumentStore, get_document_store
from cms.domains.content.services import ContentService
from cms.domains.identity import AdminUser

router = APIRouter(prefix="/api", tags=["documents"])

FALLBACK_HEADER = "X-Data-Source"


def get_content_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings)
) -> ContentService:
    return ContentService(store, settings)


async def _read(service: ContentService, kind: str, response: Response) -> Dict[str, Any]:
    data, from_fallback = await service.get_document(kind)
    if from_fallback:
        response.headers[FALLBACK_HEADER] = "fallback"
    return data


@router.get("/content/environment")
async def get_environment(response: Response, service: ContentService = Depends(get_content_service)):
    """Настройки блока CO2 (слитые со значениями по умолчанию)"""
    return await _read(service, "environment", response)


@router.put("/content/environment")
async def update_environment(
    data: Dict[str, Any] = Body(...),
    service: ContentService = Depends(get_content_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Обновление настроек блока CO2"""
    with content_errors("Failed to update CO2 config"):
        saved = await service.put_document("environment", data)
    return {"success": True, "data": saved}


@router.get("/content/safety")
async def get_safety(response: Response, service: ContentService = Depends(get_content_service)):
    """Контент страницы безопасности"""
    return await _read(service, "safety", response)


@router.put("/content/safety")
async def update_safety(
    data: Dict[str, Any] = Body(...),
    service: ContentService = Depends(get_content_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    with content_errors("Failed to update safety content"):
        saved = await service.put_document("safety", data)
    return {"success": True, "data": saved}


@router.get("/content/images")
async def get_images(response: Response, service: ContentService = Depends(get_content_service)):
    """Конфигурация изображений сайта"""
    return await _read(service, "images", response)


@router.put("/content/images")
async def update_images(
    data: Dict[str, Any] = Body(...),
    service: ContentService = Depends(get_content_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    with content_errors("Failed to update images configuration"):
        saved = await service.put_document("images", data)
    return {"success": True, "data": saved}


@router.get("/admin/settings")
async def get_site_settings(response: Response, service: ContentService = Depends(get_content_service)):
    """Настройки сайта: название, контакты, соцсети"""
    return await _read(service, "settings", response)


@router.put("/admin/settings")
async def update_site_settings(
    data: Dict[str, Any] = Body(...),
    service: ContentService = Depends(get_content_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    with content_errors("Failed to save settings"):
        saved = await service.put_document("settings", data)
    return {"success": True, "data": saved}


@router.get("/content/legal")
async def get_legal(
    response: Response,
    type: Optional[str] = Query(None, description="terms, privacy или refund"),
    service: ContentService = Depends(get_content_service)
):
    """Юридическая страница по типу"""
    with content_errors("Failed to fetch legal content"):
        data, from_fallback = await service.get_legal(type)
    if from_fallback:
        response.headers[FALLBACK_HEADER] = "fallback"
    return data


@router.put("/content/legal/{legal_type}")
async def update_legal(
    legal_type: str,
    data: Dict[str, Any] = Body(...),
    service: ContentService = Depends(get_content_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Обновление юридической страницы; разделы перенумеровываются"""
    with content_errors("Failed to save legal content"):
        saved = await service.put_legal(legal_type, data)
    return {"success": True, "data": saved}


@router.get("/admin/seo")
async def get_seo(response: Response, service: ContentService = Depends(get_content_service)):
    """Глобальные SEO-настройки"""
    return await _read(service, "seo", response)


@router.put("/admin/seo")
async def update_seo(
    data: Dict[str, Any] = Body(...),
    service: ContentService = Depends(get_content_service),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """Обновление SEO-настроек; отсутствующие поля берутся из значений по умолчанию"""
    with content_errors("Failed to save SEO settings"):
        saved = await service.put_document("seo", data)
    return {"success": True, "data": saved}
