from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from services.common import get_async_database_url

# Import all models so they are registered with metadata
from services.events.models import Base
from services.events.models import Event  # noqa: F401
from services.events.models import EventParticipant  # noqa: F401
from services.events.models import EventType  # noqa: F401
from services.events.settings import get_settings

metadata = Base.metadata

# Global variables for lazy initialization
_engine: AsyncEngine | None = None
_async_session_local: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get database engine with lazy initialization."""
    global _engine
    if _engine is None:
        settings = get_settings()
        database_url = get_async_database_url(settings.db_url_events)
        if database_url.startswith("sqlite"):
            # aiosqlite connections are bound to the loop that opened them
            _engine = create_async_engine(database_url, echo=False, poolclass=NullPool)
        else:
            _engine = create_async_engine(
                database_url, echo=False, pool_pre_ping=True
            )
    return _engine


def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get async session factory with lazy initialization."""
    global _async_session_local
    if _async_session_local is None:
        engine = get_engine()
        _async_session_local = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )
    return _async_session_local


async def create_tables() -> None:
    """Create all tables."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _async_session_local
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_local = None


def reset_db() -> None:
    """Drop cached engine state without disposing (for tests switching databases)."""
    global _engine, _async_session_local
    _engine = None
    _async_session_local = None
