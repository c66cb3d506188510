from typing import List, Optional

from fastapi import Request
from limits import parse
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./cms.db"
    sql_echo: bool = False

    # Пространство имен приложения в путях документов: artifacts/{app_id}/public/data/...
    app_id: str = "default"

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Администратор создается при старте, если заданы оба значения
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None

    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    # Лимиты в нотации limits: "5/15 minutes", "60/minute"
    rate_limit_enabled: bool = True
    login_rate_limit: str = "5/15 minutes"
    write_rate_limit: str = "60/minute"
    # X-Forwarded-For учитывается только за доверенным прокси
    trust_forwarded_for: bool = False

    @field_validator("login_rate_limit", "write_rate_limit")
    @classmethod
    def validate_rate_limit(cls, v):
        parse(v)
        return v

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()


def get_settings(request: Request) -> Settings:
    """Настройки конкретного экземпляра приложения"""
    return request.app.state.settings
