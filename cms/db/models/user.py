import uuid

from sqlalchemy import Column, String, Boolean, DateTime, Uuid, func

from cms.core.db import Base


class AdminUser(Base):
    __tablename__ = "admin_users"

    uuid = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
