import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from cms.core.config import Settings
from cms.core.security import create_access_token, verify_token
from cms.db.repositories.user_repository import AdminUserRepository
from cms.domains.identity.entities import AdminUser
from cms.domains.identity.schemas import AdminLogin

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис аутентификации администраторов"""

    def __init__(self, session: AsyncSession, settings: Settings):
        self.session = session
        self.settings = settings
        self.user_repository = AdminUserRepository(session)

    async def authenticate(self, login_data: AdminLogin) -> Optional[AdminUser]:
        """Проверка email и пароля"""
        user = await self.user_repository.get_by_email(login_data.email)

        if not user or not user.authenticate(login_data.password):
            return None

        return user

    async def login(self, login_data: AdminLogin) -> Optional[str]:
        """Вход администратора и создание JWT токена"""
        user = await self.authenticate(login_data)

        if not user:
            logger.warning(f"Failed login attempt for {login_data.email}")
            return None

        token_data = {
            "sub": str(user.uuid),
            "email": user.email
        }
        return create_access_token(token_data, self.settings)

    async def get_current_user_from_token(self, token: str) -> Optional[AdminUser]:
        """Получение администратора из JWT токена"""
        payload = verify_token(token, self.settings)
        if not payload or not payload.get("sub"):
            return None

        try:
            user_uuid = uuid.UUID(payload["sub"])
        except ValueError:
            return None

        user = await self.user_repository.get_by_uuid(user_uuid)
        if user is None or not user.is_active:
            return None

        return user

    async def ensure_admin(self, email: str, password: str) -> AdminUser:
        """Создание администратора из настроек или обновление его пароля"""
        user = await self.user_repository.get_by_email(email)

        if user is None:
            user = await self.user_repository.create(AdminUser.create(email, password))
            logger.info(f"Created admin user {user.email}")
            return user

        if not user.authenticate(password):
            user.set_password(password)
            await self.user_repository.update_password(user)
            logger.info(f"Updated password of admin user {user.email}")

        return user
