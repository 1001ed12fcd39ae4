import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from scout.db.models import Base
from scout.db.session import engine

logger = logging.getLogger(__name__)


async def init_models(db_engine: AsyncEngine) -> None:
    """Create the channel and video tables when missing."""

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(init_models(engine))
