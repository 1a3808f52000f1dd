"""create bundles table

Revision ID: 002
Revises: 001
Create Date: 2026-09-28 10:30:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "bundles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("namespace", sa.String(63), nullable=False),
        sa.Column("name", sa.String(63), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        # Upserts rely on this constraint to stay idempotent
        sa.UniqueConstraint("namespace", "name", name="uq_bundles_namespace_name"),
    )


def downgrade() -> None:
    op.drop_table("bundles")
