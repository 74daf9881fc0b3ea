"""Process-wide service handles, built once at startup."""

from dataclasses import dataclass

import redis.asyncio as redis
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.core.config import Settings, settings
from src.core.database import create_engine, create_schema, create_session_factory
from src.core.logging import get_logger
from src.core.redis import create_redis_pool
from src.integrations.storage import LogoStorage

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Shared handles to the record store, cache and logo storage.

    Stored on ``app.state.context`` and handed to request handlers through
    FastAPI dependencies. Tests build one directly with substitute handles.
    """

    db_engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    redis: redis.Redis
    logo_storage: LogoStorage
    settings: Settings

    async def aclose(self) -> None:
        """Release pooled connections."""
        await self.redis.aclose()
        logger.info("Redis pool closed")
        await self.db_engine.dispose()
        logger.info("Database engine disposed")


async def create_app_context(config: Settings | None = None) -> AppContext:
    """Create engine, session factory, Redis pool and logo storage.

    Args:
        config: Settings to build from. Defaults to the module settings.

    Returns:
        Ready-to-use AppContext.
    """
    config = config or settings

    engine = create_engine(config.database_url)
    if config.database_auto_create:
        await create_schema(engine)
    logger.info("Database engine created")

    pool = await create_redis_pool(config.redis_url)
    logger.info("Redis pool created")

    storage = LogoStorage(config.logo_base_url, config.logo_public_base_url)
    logger.info("Logo storage configured", base_url=storage.base_url)

    return AppContext(
        db_engine=engine,
        session_factory=create_session_factory(engine),
        redis=pool,
        logo_storage=storage,
        settings=config,
    )
