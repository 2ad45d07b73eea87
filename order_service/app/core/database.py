"""Database configuration for Order Service"""

from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from ..models.base import OrderServiceBase
from .setting import get_settings


class OrderServiceDatabaseManager:
    """Custom database manager for Order Service with optimized settings."""

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 40,
    ) -> None:
        engine_kwargs: Dict[str, Any] = {"echo": echo, "future": True}

        if "sqlite" in database_url:
            # SQLite configuration for development and tests; connections are
            # not pooled so they never outlive the event loop that opened them
            engine_kwargs["poolclass"] = NullPool
            engine_kwargs["connect_args"] = {
                "timeout": 60,
                "check_same_thread": False,
            }
        else:
            # PostgreSQL configuration for the order store
            engine_kwargs.update(
                {
                    "pool_size": pool_size,
                    "max_overflow": max_overflow,
                    "pool_timeout": 45,
                    "pool_recycle": 3600,
                    "pool_pre_ping": True,
                    "connect_args": {"command_timeout": 30},
                }
            )

        self.database_url = database_url
        self.async_engine = create_async_engine(database_url, **engine_kwargs)
        self.async_session_maker = async_sessionmaker(
            bind=self.async_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_tables(self) -> None:
        """Create all Order Service database tables."""
        async with self.async_engine.begin() as conn:
            await conn.run_sync(OrderServiceBase.metadata.create_all, checkfirst=True)

    async def drop_tables(self) -> None:
        """Drop all Order Service database tables."""
        async with self.async_engine.begin() as conn:
            await conn.run_sync(OrderServiceBase.metadata.drop_all)

    async def get_async_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get async database session for Order Service."""
        async with self.async_session_maker() as session:
            yield session

    async def close(self) -> None:
        """Properly close the Order Service database engine and connections."""
        await self.async_engine.dispose()


_database_manager: Optional[OrderServiceDatabaseManager] = None


def get_database_manager() -> OrderServiceDatabaseManager:
    """Get the Order Service database manager, creating it on first use"""
    global _database_manager
    if _database_manager is None:
        settings = get_settings()
        _database_manager = OrderServiceDatabaseManager(
            database_url=settings.ORDER_DATABASE_URL,
            echo=settings.DEBUG,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
        )
    return _database_manager


def set_database_manager(manager: Optional[OrderServiceDatabaseManager]) -> None:
    """Replace the process-wide database manager (used by tests)"""
    global _database_manager
    _database_manager = manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Database session dependency for FastAPI using Order Service database manager"""
    async for session in get_database_manager().get_async_session():
        yield session
