"""create_locations_table

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-08-25

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a2b7d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create locations table."""
    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("address", sa.String(length=255), nullable=False),
        sa.Column("latitude", sa.Numeric(10, 8), nullable=False),
        sa.Column("longitude", sa.Numeric(11, 8), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="attivo"),
        sa.Column("opening_hours", sa.Text(), nullable=True),
        sa.Column("ticket_price", sa.String(length=255), nullable=True),
        sa.Column("website", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=255), nullable=True),
        sa.Column("visitor_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("status IN ('attivo', 'disattivo', 'in_allarme')", name="ck_locations_status"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("title"),
    )
    op.create_index("ix_locations_status", "locations", ["status"])
    op.create_index("ix_locations_latitude_longitude", "locations", ["latitude", "longitude"])


def downgrade() -> None:
    """Drop locations table."""
    op.drop_index("ix_locations_latitude_longitude", table_name="locations")
    op.drop_index("ix_locations_status", table_name="locations")
    op.drop_table("locations", if_exists=True)
