"""Tests for the Client model's soft-delete lifecycle."""

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from src.core.context import AppContext
from src.models.client import Client


def _client(slug: str = "acme") -> Client:
    return Client(name="Acme", slug=slug, client_prefix="ACM")


def test_new_client_is_not_deleted() -> None:
    assert _client().is_deleted is False


def test_soft_delete_sets_timestamp() -> None:
    client = _client()
    when = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    client.soft_delete(when)

    assert client.is_deleted
    assert client.deleted_at == when


def test_active_query_filters_deleted_rows() -> None:
    sql = str(Client.active_by_slug("acme").compile())

    assert "clients.deleted_at IS NULL" in sql
    assert "clients.slug =" in sql


@pytest.mark.asyncio
async def test_active_lookup_skips_soft_deleted(app_context: AppContext) -> None:
    async with app_context.session_factory() as session:
        deleted = _client("old")
        deleted.soft_delete()
        session.add_all([deleted, _client("live")])
        await session.commit()

        live = (await session.execute(Client.active_by_slug("live"))).scalar_one_or_none()
        old = (await session.execute(Client.active_by_slug("old"))).scalar_one_or_none()

    assert live is not None
    assert live.client_logo == "no-image.jpg"
    assert old is None


@pytest.mark.asyncio
async def test_slug_stays_reserved_after_soft_delete(app_context: AppContext) -> None:
    """The unique index covers deleted rows, so the slug cannot be reused."""
    async with app_context.session_factory() as session:
        deleted = _client("taken")
        deleted.soft_delete()
        session.add(deleted)
        await session.commit()

        session.add(_client("taken"))
        with pytest.raises(IntegrityError):
            await session.commit()
