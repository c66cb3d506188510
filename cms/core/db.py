from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Базовый класс для моделей
Base = declarative_base()


class Database:
    """Клиент базы данных, создается явно при старте приложения"""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[sessionmaker] = None

    def init(self) -> None:
        """Создание движка и фабрики сессий"""
        if self.engine is not None:
            return

        kwargs = {"future": True, "echo": self.echo}
        if self.url.startswith("sqlite") and ":memory:" in self.url:
            # Одно соединение на процесс, иначе каждая сессия видит пустую БД
            kwargs.update({
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            })

        self.engine = create_async_engine(self.url, **kwargs)
        self._sessionmaker = sessionmaker(
            bind=self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def create_all(self) -> None:
        """Создание таблиц (для разработки и тестов; в продакшене - alembic)"""
        # Импорт регистрирует модели в метаданных
        import cms.db.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Закрытие соединений"""
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self._sessionmaker = None

    def session(self) -> AsyncSession:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not initialized, call init() first")
        return self._sessionmaker()


# Функция для dependency injection в FastAPI
async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
