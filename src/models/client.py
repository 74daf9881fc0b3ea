"""Client SQLAlchemy model."""

from sqlalchemy import Select, String, Text, select
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, SoftDeleteMixin, TimestampMixin

DEFAULT_CLIENT_LOGO = "no-image.jpg"


class Client(Base, TimestampMixin, SoftDeleteMixin):
    """Represents a client organisation addressed by its slug.

    Deletion is soft: ``deleted_at`` is set and the row stays in the table.
    Lookups go through :meth:`active` so deleted rows never resolve by slug.
    The unique index on ``slug`` spans deleted rows too, so a slug cannot be
    reused after its client is deleted.
    """

    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(250), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    is_project: Mapped[str] = mapped_column(
        String(30), nullable=False, default="0", server_default="0"
    )
    self_capture: Mapped[str] = mapped_column(
        String(1), nullable=False, default="1", server_default="1"
    )
    client_prefix: Mapped[str] = mapped_column(String(4), nullable=False)
    client_logo: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default=DEFAULT_CLIENT_LOGO,
        server_default=DEFAULT_CLIENT_LOGO,
    )
    address: Mapped[str | None] = mapped_column(Text)
    phone_number: Mapped[str | None] = mapped_column(String(50))
    city: Mapped[str | None] = mapped_column(String(50))

    @classmethod
    def active(cls) -> Select[tuple["Client"]]:
        """Select statement restricted to clients that are not soft-deleted."""
        return select(cls).where(cls.deleted_at.is_(None))

    @classmethod
    def active_by_slug(cls, slug: str) -> Select[tuple["Client"]]:
        return cls.active().where(cls.slug == slug)

    def __repr__(self) -> str:
        return f"<Client id={self.id} slug={self.slug!r}>"
