"""API module exports."""

from src.api.clients import router as clients_router
from src.api.deps import get_client_service, get_context, get_db, get_redis
from src.api.health import router as health_router

__all__ = [
    "clients_router",
    "get_client_service",
    "get_context",
    "get_db",
    "get_redis",
    "health_router",
]
