"""FastAPI application entry point with lifespan management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from src.api.clients import router as clients_router
from src.api.errors import register_exception_handlers
from src.api.health import router as health_router
from src.api.middleware import RequestContextMiddleware
from src.core.config import settings
from src.core.context import create_app_context
from src.core.logging import configure_logging, get_logger
from src.core.sentry import init_sentry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle resources.

    Startup:
        - Configure structured logging
        - Initialize Sentry error tracking
        - Build the AppContext (database, Redis, logo storage)

    Shutdown:
        - Close Redis connections and dispose the database engine
    """
    configure_logging()
    logger.info("Starting application", environment=settings.environment)

    if init_sentry():
        logger.info("Sentry initialized")

    app.state.context = await create_app_context()

    yield

    logger.info("Shutting down application")
    await app.state.context.aclose()


app = FastAPI(
    title="Client Registry",
    description="Client records with Redis read-through caching and S3 logo uploads",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)
register_exception_handlers(app)

app.include_router(health_router)
app.include_router(clients_router)


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
