"""
Database configuration and session management.
Uses SQLAlchemy 2.0 with async support.
"""

from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
    AsyncEngine
)
from sqlalchemy.pool import StaticPool

from .config import Settings, DatabaseConfig
from .exceptions import DatabaseError
from .logging import get_logger

logger = get_logger(__name__)


class Database:
    """
    Owns the async engine and session maker for the job store.

    SQLite URLs (used for local runs and tests) skip pool sizing; an
    in-memory SQLite database is kept on a single shared connection so every
    session sees the same tables.
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        echo: bool = False
    ):
        self.url = url
        self.is_sqlite = url.startswith("sqlite")

        if self.is_sqlite:
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs = {
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_pre_ping": True,
                "pool_recycle": 3600,
            }

        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        self.session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Create a database handle from application settings."""
        engine_config = DatabaseConfig.get_engine_config(settings)
        return cls(
            DatabaseConfig.get_database_url(settings, async_driver=True),
            pool_size=engine_config["pool_size"],
            max_overflow=engine_config["max_overflow"],
            echo=settings.debug
        )

    async def connect(self) -> None:
        """Verify the database is reachable."""
        logger.info("Connecting to database", dialect=self.engine.dialect.name)
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database connection failed", error=str(e))
            raise DatabaseError(
                f"Failed to connect to database: {e}",
                {"dialect": self.engine.dialect.name}
            ) from e
        logger.info("Database connected")

    async def close(self) -> None:
        """Close database connections."""
        logger.info("Closing database connections")
        await self.engine.dispose()
        logger.info("Database connections closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get an async database session with automatic cleanup.

        Usage:
            async with database.session() as session:
                # Use session here
                pass
        """
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """Create all tables in the database."""
        from mint_worker.models.base import Base

        logger.info("Creating database tables")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def drop_tables(self) -> None:
        """Drop all tables in the database."""
        from mint_worker.models.base import Base

        logger.warning("Dropping all database tables")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped")

    async def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error("Database health check failed", error=str(e))
            return False


def create_database(settings: Settings, url: Optional[str] = None) -> Database:
    """Create a database handle, optionally overriding the configured URL."""
    if url:
        return Database(url, echo=settings.debug)
    return Database.from_settings(settings)
