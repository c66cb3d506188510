import uuid
from datetime import datetime, timezone
from typing import Optional

from cms.core.security import get_password_hash, verify_password


class AdminUser:
    """Администратор CMS"""

    def __init__(
        self,
        uuid: uuid.UUID,
        email: str,
        password_hash: str,
        is_active: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.email = email
        self.password_hash = password_hash
        self.is_active = is_active
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or datetime.now(timezone.utc)

    def authenticate(self, password: str) -> bool:
        """Проверка пароля администратора"""
        return self.is_active and verify_password(password, self.password_hash)

    def set_password(self, password: str) -> None:
        self.password_hash = get_password_hash(password)
        self.updated_at = datetime.now(timezone.utc)

    @classmethod
    def create(cls, email: str, password: str) -> "AdminUser":
        """Создание администратора с хешированием пароля"""
        return cls(
            uuid=uuid.uuid4(),
            email=email.lower(),
            password_hash=get_password_hash(password)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, AdminUser):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"AdminUser(uuid={self.uuid}, email={self.email})"
