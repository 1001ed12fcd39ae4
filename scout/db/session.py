"""Engine and session factory shared by the API, the scheduler and the scanner."""

from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from scout.core.config import settings


def create_engine(database_url: str | None = None) -> AsyncEngine:
    """Create the async engine.

    Server databases get a pool large enough for one connection per
    concurrent channel scan plus a few admin requests.
    """

    url = database_url or settings.database_url
    pool_options: dict[str, int] = {}
    if not url.startswith("sqlite"):
        pool_options = {"pool_size": max(settings.scan_max_concurrency, 5), "max_overflow": 5}
    return create_async_engine(url, echo=False, pool_pre_ping=True, **pool_options)


engine = create_engine()
SessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False)


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding a session for one admin request."""

    async with SessionLocal() as session:
        yield session
