"""add event settings and operator token version

Revision ID: 8f3b6d21c4a7
Revises: 5c1e2a7d9b40
Create Date: 2026-10-19 14:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8f3b6d21c4a7"
down_revision: str | None = "5c1e2a7d9b40"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    with op.batch_alter_table("tenants") as batch_op:
        batch_op.add_column(sa.Column("couple_names", sa.String(255), nullable=True))
        batch_op.add_column(sa.Column("event_date", sa.Date(), nullable=True))
        batch_op.add_column(sa.Column("event_time", sa.String(50), nullable=True))
        batch_op.add_column(sa.Column("venue_name", sa.String(255), nullable=True))
        batch_op.add_column(sa.Column("venue_address", sa.String(500), nullable=True))
        batch_op.add_column(sa.Column("color_of_day", sa.String(50), nullable=True))

    with op.batch_alter_table("operators") as batch_op:
        batch_op.add_column(
            sa.Column("token_version", sa.Integer(), nullable=False, server_default="0")
        )


def downgrade() -> None:
    with op.batch_alter_table("operators") as batch_op:
        batch_op.drop_column("token_version")

    with op.batch_alter_table("tenants") as batch_op:
        batch_op.drop_column("color_of_day")
        batch_op.drop_column("venue_address")
        batch_op.drop_column("venue_name")
        batch_op.drop_column("event_time")
        batch_op.drop_column("event_date")
        batch_op.drop_column("couple_names")
