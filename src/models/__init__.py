"""SQLAlchemy models for the client registry."""

from src.models.base import Base, SoftDeleteMixin, TimestampMixin
from src.models.client import DEFAULT_CLIENT_LOGO, Client

__all__ = [
    "Base",
    "Client",
    "DEFAULT_CLIENT_LOGO",
    "SoftDeleteMixin",
    "TimestampMixin",
]
