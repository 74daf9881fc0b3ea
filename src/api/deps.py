"""FastAPI dependency injection for the shared service context."""

from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.service import ClientService
from src.core.context import AppContext

if TYPE_CHECKING:
    import redis.asyncio as redis


def get_context(request: Request) -> AppContext:
    """Get the AppContext created during lifespan startup.

    Args:
        request: FastAPI request containing app state.

    Returns:
        The shared AppContext.

    Raises:
        RuntimeError: If the context is not initialized.
    """
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise RuntimeError("AppContext not initialized. Check lifespan setup.")
    return context


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session from the context's session factory.

    Args:
        request: FastAPI request containing app state.

    Yields:
        AsyncSession for database operations with automatic commit/rollback.
    """
    async with get_context(request).session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_redis(request: Request) -> "redis.Redis":
    """Get Redis connection pool from the context.

    Args:
        request: FastAPI request containing app state.

    Returns:
        Redis connection pool backing the client cache.
    """
    return get_context(request).redis


def get_client_service(request: Request) -> ClientService:
    """Build a ClientService over the shared context handles."""
    return ClientService.from_context(get_context(request))
