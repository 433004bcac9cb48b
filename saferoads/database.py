from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from saferoads.config import settings

_ASYNC_DRIVERS = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


def async_database_url(url: str) -> str:
    """Swap a plain postgres/sqlite scheme for its async driver; other URLs pass through."""
    for scheme, async_scheme in _ASYNC_DRIVERS.items():
        if url.startswith(scheme):
            return async_scheme + url[len(scheme):]
    return url


def engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # aiosqlite connections are cheap; don't hold them across event loops
        return {"echo": False, "poolclass": NullPool}
    return {"echo": False, "pool_size": 5, "max_overflow": 10, "pool_pre_ping": True}


_database_url = async_database_url(settings.database_url)

engine = create_async_engine(_database_url, **engine_options(_database_url))
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def create_tables():
    async with engine.begin() as conn:
        from saferoads.models import report  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    async with async_session() as session:
        yield session
