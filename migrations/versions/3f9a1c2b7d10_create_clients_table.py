"""create_clients_table

Revision ID: 3f9a1c2b7d10
Revises:
Create Date: 2026-10-17 09:12:44.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the clients table with a unique slug index."""
    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=250), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("is_project", sa.String(length=30), nullable=False, server_default="0"),
        sa.Column("self_capture", sa.String(length=1), nullable=False, server_default="1"),
        sa.Column("client_prefix", sa.String(length=4), nullable=False),
        sa.Column(
            "client_logo",
            sa.String(length=255),
            nullable=False,
            server_default="no-image.jpg",
        ),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("phone_number", sa.String(length=50), nullable=True),
        sa.Column("city", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    # Unique across deleted rows as well; a deleted slug stays reserved
    op.create_index("ix_clients_slug", "clients", ["slug"], unique=True)


def downgrade() -> None:
    """Drop the clients table."""
    op.drop_index("ix_clients_slug", table_name="clients")
    op.drop_table("clients")
