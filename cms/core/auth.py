from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cms.core.config import Settings, get_settings
from cms.core.db import get_db
from cms.core.rate_limit import write_rate_limit
from cms.domains.identity.entities import AdminUser
from cms.domains.identity.services import IdentityService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_optional_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> Optional[AdminUser]:
    """Администратор из Bearer токена или None"""
    if credentials is None:
        return None
    return await IdentityService(db, settings).get_current_user_from_token(credentials.credentials)


async def get_current_admin(
    admin: Optional[AdminUser] = Depends(get_optional_admin),
    _: None = Depends(write_rate_limit)
) -> AdminUser:
    """Обязательная аутентификация (и лимит частоты) для изменяющих запросов"""
    if admin is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return admin
