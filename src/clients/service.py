"""Client resource operations over the record store, cache and logo storage.

Reads are cache-aside: the cache is consulted first and repopulated from the
database on a miss. Writes commit to the database before touching the cache.
There is no locking between concurrent requests for the same slug, so the
cache may briefly hold a stale snapshot; a cache hit is served without
re-checking the database (a client deleted while a stale entry survives can
still be returned until that entry is evicted).
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.clients.cache import ClientCache
from src.clients.errors import (
    ClientNotFound,
    ClientPersistenceError,
    InvalidClientInput,
    LogoUploadError,
)
from src.clients.schemas import (
    ClientCreateRequest,
    ClientResponse,
    ClientUpdateRequest,
    to_client_response,
)
from src.core.context import AppContext
from src.core.logging import client_slug_ctx, get_logger
from src.integrations.storage import LogoStorage, generate_logo_key
from src.models.base import utcnow
from src.models.client import Client

logger = get_logger(__name__)

PayloadT = TypeVar("PayloadT", bound=BaseModel)


@dataclass
class LogoUpload:
    """Logo file received with a create or update request."""

    filename: str
    content: bytes
    content_type: str | None = None


class ClientService:
    """Create, get, update and soft-delete clients by slug."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        cache: ClientCache,
        logo_storage: LogoStorage,
        allowed_logo_types: list[str],
        max_logo_bytes: int,
    ) -> None:
        self._session_factory = session_factory
        self._cache = cache
        self._logo_storage = logo_storage
        self._allowed_logo_types = {t.lower() for t in allowed_logo_types}
        self._max_logo_bytes = max_logo_bytes

    @property
    def max_logo_bytes(self) -> int:
        return self._max_logo_bytes

    @classmethod
    def from_context(cls, context: AppContext) -> "ClientService":
        """Build a service over the shared handles in ``context``."""
        config = context.settings
        return cls(
            session_factory=context.session_factory,
            cache=ClientCache(
                context.redis,
                prefix=config.client_cache_prefix,
                ttl_seconds=config.client_cache_ttl_seconds,
            ),
            logo_storage=context.logo_storage,
            allowed_logo_types=config.allowed_logo_types,
            max_logo_bytes=config.max_logo_bytes,
        )

    async def create(
        self, data: Mapping[str, Any], logo: LogoUpload | None = None
    ) -> ClientResponse:
        """Create a client, uploading its logo first when one is given.

        A failed upload aborts before anything is written to the database.
        """
        payload = _bind(ClientCreateRequest, data)
        client_slug_ctx.set(payload.slug)

        fields = payload.model_dump()
        if logo is not None:
            fields["client_logo"] = await self._store_logo(logo)

        client = Client(**fields)
        async with self._session_factory() as session:
            session.add(client)
            await self._persist(session, client)

        snapshot = to_client_response(client)
        await self._cache.set(snapshot)
        logger.info("client_created", client_id=snapshot.id, slug=snapshot.slug)
        return snapshot

    async def get(self, slug: str) -> ClientResponse:
        client_slug_ctx.set(slug)

        cached = await self._cache.get(slug)
        if cached is not None:
            logger.debug("client_cache_hit", slug=slug)
            return cached

        async with self._session_factory() as session:
            client = await self._find_active(session, slug)

        snapshot = to_client_response(client)
        await self._cache.set(snapshot)
        return snapshot

    async def update(
        self,
        slug: str,
        data: Mapping[str, Any],
        logo: LogoUpload | None = None,
        body_error: InvalidClientInput | None = None,
    ) -> ClientResponse:
        """Apply the fields present in ``data`` to the client at ``slug``.

        ``body_error`` is a failure met while reading the request body; it is
        raised only once the slug is known to exist, so a missing client is
        reported as not found whatever the body held.

        The cache entry for the old slug is evicted before the database write
        and the fresh snapshot is cached under the (possibly new) slug after
        commit.
        """
        client_slug_ctx.set(slug)

        async with self._session_factory() as session:
            client = await self._find_active(session, slug)

            if body_error is not None:
                raise body_error
            changes = _bind(ClientUpdateRequest, data).changes()
            if logo is not None:
                changes["client_logo"] = await self._store_logo(logo)

            await self._cache.delete(slug)

            for field, value in changes.items():
                setattr(client, field, value)
            client.updated_at = utcnow()
            await self._persist(session, client)

        snapshot = to_client_response(client)
        await self._cache.set(snapshot)
        logger.info(
            "client_updated",
            client_id=snapshot.id,
            slug=snapshot.slug,
            fields=sorted(changes),
        )
        return snapshot

    async def delete(self, slug: str) -> None:
        """Soft-delete the client at ``slug`` and evict its cache entry."""
        client_slug_ctx.set(slug)

        async with self._session_factory() as session:
            client = await self._find_active(session, slug)
            client.soft_delete()
            await self._persist(session, client)

        await self._cache.delete(slug)
        logger.info("client_deleted", client_id=client.id, slug=slug)

    async def _find_active(self, session: AsyncSession, slug: str) -> Client:
        """Load the non-deleted client for slug or raise ClientNotFound."""
        try:
            result = await session.execute(Client.active_by_slug(slug))
        except SQLAlchemyError as e:
            logger.exception("client_lookup_failed", slug=slug)
            raise ClientPersistenceError("could not load client") from e

        client = result.scalar_one_or_none()
        if client is None:
            raise ClientNotFound(slug)
        return client

    async def _persist(self, session: AsyncSession, client: Client) -> None:
        """Commit pending changes and reload server-side values."""
        # read before commit; a rollback expires the instance
        slug = client.slug
        try:
            await session.commit()
            await session.refresh(client)
        except IntegrityError as e:
            await session.rollback()
            logger.warning("client_slug_conflict", slug=slug, error=str(e.orig))
            raise ClientPersistenceError(
                f"could not save client: slug {slug!r} is already taken"
            ) from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("client_persist_failed", slug=slug)
            raise ClientPersistenceError("could not save client") from e

    async def _store_logo(self, logo: LogoUpload) -> str:
        """Validate and upload a logo, returning its public URL."""
        content_type = (logo.content_type or "").lower()
        if content_type and content_type not in self._allowed_logo_types:
            raise InvalidClientInput(
                f"client_logo: unsupported content type {logo.content_type!r}"
            )
        if len(logo.content) > self._max_logo_bytes:
            raise InvalidClientInput(
                f"client_logo: file exceeds {self._max_logo_bytes} bytes"
            )

        key = generate_logo_key(logo.filename)
        try:
            return await self._logo_storage.upload(key, logo.content)
        except Exception as e:
            logger.exception("logo_upload_failed", key=key, error=str(e))
            raise LogoUploadError() from e


def _bind(model: type[PayloadT], data: Mapping[str, Any]) -> PayloadT:
    """Validate raw request fields into ``model``."""
    try:
        return model.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidClientInput.from_validation_error(e) from e
