from fastapi import APIRouter

from cms.api.http import auth_router, blogs_router, collections_router, documents_router, health_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(auth_router)
# Документы раньше коллекций: /api/content/environment не должен попасть в /api/content/{slug}
api_router.include_router(documents_router)
api_router.include_router(collections_router)
api_router.include_router(blogs_router)
