from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
import uuid

from cms.db.models.user import AdminUser as AdminUserModel
from cms.domains.identity.entities import AdminUser


class AdminUserRepository:
    """Репозиторий для работы с администраторами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: AdminUser) -> AdminUser:
        """Создание администратора"""
        db_user = AdminUserModel(
            uuid=user.uuid,
            email=user.email,
            password_hash=user.password_hash,
            is_active=user.is_active
        )

        self.session.add(db_user)
        try:
            await self.session.commit()
            await self.session.refresh(db_user)
            return self._to_domain(db_user)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Admin with this email already exists")

    async def get_by_uuid(self, user_uuid: uuid.UUID) -> Optional[AdminUser]:
        """Получение администратора по UUID"""
        result = await self.session.execute(
            select(AdminUserModel).where(AdminUserModel.uuid == user_uuid)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def get_by_email(self, email: str) -> Optional[AdminUser]:
        """Получение администратора по email"""
        result = await self.session.execute(
            select(AdminUserModel).where(AdminUserModel.email == email.lower())
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def update_password(self, user: AdminUser) -> None:
        """Сохранение нового хеша пароля"""
        await self.session.execute(
            update(AdminUserModel)
            .where(AdminUserModel.uuid == user.uuid)
            .values(password_hash=user.password_hash, updated_at=user.updated_at)
        )
        await self.session.commit()

    def _to_domain(self, db_user: AdminUserModel) -> AdminUser:
        """Преобразование модели БД в доменную сущность"""
        return AdminUser(
            uuid=db_user.uuid,
            email=db_user.email,
            password_hash=db_user.password_hash,
            is_active=db_user.is_active,
            created_at=db_user.created_at,
            updated_at=db_user.updated_at
        )
