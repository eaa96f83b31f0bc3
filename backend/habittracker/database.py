"""
Habit Tracker Backend — Database Connection Management
=======================================================

What:  Async SQLAlchemy engine, session factory and declarative base.
How:   `Database` owns one async engine (with its connection pool) and the
       session factory bound to it. One instance is built at process start
       and handed to the application factory, which shares it across
       every request through `app.state`.
Who:   Constructed by main.create_app(); consumed by HabitStore.

Connection Pooling:
    PostgreSQL (asyncpg):  pool_size / max_overflow / pre_ping from settings,
                           connections recycled every hour.
    SQLite (aiosqlite):    driver defaults; pool arguments are not passed.
"""

from typing import List, Optional

from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from habittracker.config import Settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


class Database:
    """
    Long-lived handle to the record store: engine, pool and session factory.

    The engine is safe for concurrent use by many coroutines; each store
    call opens its own short-lived session from `session_factory`.
    """

    def __init__(self, url: str, engine: AsyncEngine):
        self.url = url
        self.engine = engine
        # expire_on_commit=False keeps attributes readable after commit
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the engine from configuration. Does not open a connection."""
        options = {"echo": settings.log_level == "DEBUG"}
        if not settings.is_sqlite:
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        engine = create_async_engine(settings.database_url, **options)
        return cls(settings.database_url, engine)

    @property
    def name(self) -> Optional[str]:
        """Logical database name from the connection URL."""
        return self.engine.url.database

    async def create_all(self) -> None:
        """Create any missing tables registered on Base.metadata."""
        # Register the models with Base.metadata before emitting DDL
        import habittracker.models.habit  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        """Run a trivial query. Raises whatever the driver raises."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def list_databases(self) -> List[str]:
        """
        Names of the logical databases visible to this connection.

        PostgreSQL: non-template entries of pg_database.
        Other dialects: the schema names reported by the inspector
        (SQLite reports "main" plus any attached databases).
        """
        async with self.engine.connect() as conn:
            if conn.dialect.name == "postgresql":
                result = await conn.execute(
                    text(
                        "SELECT datname FROM pg_database "
                        "WHERE NOT datistemplate ORDER BY datname"
                    )
                )
                return list(result.scalars().all())
            return await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_schema_names()
            )

    async def dispose(self) -> None:
        """Close all pooled connections. Called on application shutdown."""
        await self.engine.dispose()
