"""create subscriptions table

Revision ID: 003
Revises: 002
Create Date: 2026-09-28 11:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column("bundle_id", sa.Uuid(), nullable=False),
        sa.Column("current_version", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.ForeignKeyConstraint(["bundle_id"], ["bundles.id"]),
        # Serializes concurrent subscribes of the same project to the same bundle
        sa.UniqueConstraint(
            "project_id", "bundle_id", name="uq_subscriptions_project_bundle"
        ),
    )


def downgrade() -> None:
    op.drop_table("subscriptions")
