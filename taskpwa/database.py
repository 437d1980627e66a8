"""Database configuration for the client-side local task store."""
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from taskpwa.config import settings


# Base class for models
Base = declarative_base()


def build_engine(url: str = settings.LOCAL_DATABASE_URL, echo: bool = settings.DATABASE_ECHO) -> AsyncEngine:
    """Create an async engine; SQLite gets a static pool so in-memory DBs survive."""
    engine_kwargs = {
        "echo": echo,
        "pool_pre_ping": True,
    }
    if url.startswith("sqlite"):
        engine_kwargs.update(
            {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        )
    return create_async_engine(url, **engine_kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create an async session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database (create tables)."""
    # Import models so they register on Base.metadata.
    import taskpwa.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """Close database connections."""
    await engine.dispose()
