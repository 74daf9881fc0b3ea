"""Client resource: schemas, snapshot cache and the service orchestrating them."""

from src.clients.cache import ClientCache
from src.clients.errors import (
    ClientNotFound,
    ClientPersistenceError,
    ClientServiceError,
    InvalidClientInput,
    LogoUploadError,
)
from src.clients.schemas import (
    ClientCreateRequest,
    ClientResponse,
    ClientUpdateRequest,
    to_client_response,
)
from src.clients.service import ClientService, LogoUpload

__all__ = [
    "ClientCache",
    "ClientCreateRequest",
    "ClientNotFound",
    "ClientPersistenceError",
    "ClientResponse",
    "ClientService",
    "ClientServiceError",
    "ClientUpdateRequest",
    "InvalidClientInput",
    "LogoUpload",
    "LogoUploadError",
    "to_client_response",
]
