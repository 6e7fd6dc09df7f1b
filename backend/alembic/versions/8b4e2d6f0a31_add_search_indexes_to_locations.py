"""add search indexes to locations

Revision ID: 8b4e2d6f0a31
Revises: 3f1c9a2b7d10
Create Date: 2026-08-28

"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "8b4e2d6f0a31"
down_revision: Union[str, Sequence[str], None] = "3f1c9a2b7d10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Index the columns used by text search and status + title ordering."""
    op.create_index("ix_locations_title", "locations", ["title"])
    op.create_index("ix_locations_address", "locations", ["address"])
    op.create_index("ix_locations_status_title", "locations", ["status", "title"])


def downgrade() -> None:
    """Drop search indexes."""
    op.drop_index("ix_locations_status_title", table_name="locations")
    op.drop_index("ix_locations_address", table_name="locations")
    op.drop_index("ix_locations_title", table_name="locations")
