from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from cms.core.auth import get_current_admin
from cms.core.config import Settings, get_settings
from cms.core.db import get_db
from cms.core.rate_limit import login_rate_limit
from cms.domains.identity import AdminLogin, AdminUser, Token, VerifyResponse
from cms.domains.identity.services import IdentityService

router = APIRouter(prefix="/api/admin", tags=["authentication"])


@router.post("/login", response_model=Token)
async def login(
    login_data: AdminLogin,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _: None = Depends(login_rate_limit)
):
    """Вход администратора"""
    identity_service = IdentityService(db, settings)

    token = await identity_service.login(login_data)

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {"access_token": token, "token_type": "bearer"}


@router.get("/verify", response_model=VerifyResponse)
async def verify(current_admin: AdminUser = Depends(get_current_admin)):
    """Проверка токена администратора"""
    return {"authenticated": True, "email": current_admin.email}
