"""create guest list tables

Revision ID: 5c1e2a7d9b40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
import sqlalchemy_utils
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c1e2a7d9b40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("uuid", sqlalchemy_utils.UUIDType(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("event_title", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_tenants_username", "tenants", ["username"], unique=True)

    op.create_table(
        "operators",
        sa.Column("uuid", sqlalchemy_utils.UUIDType(), primary_key=True),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_operators_username", "operators", ["username"], unique=True)

    op.create_table(
        "tags",
        sa.Column("uuid", sqlalchemy_utils.UUIDType(), primary_key=True),
        sa.Column(
            "tenant_id",
            sqlalchemy_utils.UUIDType(),
            sa.ForeignKey("tenants.uuid", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("color", sa.String(20), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "name", name="uq_tags_tenant_name"),
    )
    op.create_index("ix_tags_tenant_id", "tags", ["tenant_id"])

    op.create_table(
        "guests",
        sa.Column("uuid", sqlalchemy_utils.UUIDType(), primary_key=True),
        sa.Column(
            "tenant_id",
            sqlalchemy_utils.UUIDType(),
            sa.ForeignKey("tenants.uuid", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("identifier", sa.String(32), nullable=False),
        sa.Column("code", sa.String(4), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(50), nullable=False),
        sa.Column("rsvp_confirmed", sa.Boolean(), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("companion_allowed", sa.Boolean(), nullable=False),
        sa.Column("companion_name", sa.String(255), nullable=True),
        sa.Column("companion_phone", sa.String(50), nullable=True),
        sa.Column("companion_rsvp", sa.Boolean(), nullable=False),
        sa.Column("meal_preference", sa.String(255), nullable=True),
        sa.Column("dietary_restrictions", sa.Text(), nullable=True),
        sa.Column("companion_meal_preference", sa.String(255), nullable=True),
        sa.Column("companion_dietary_restrictions", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("identifier", name="uq_guests_identifier"),
        sa.UniqueConstraint("tenant_id", "phone_number", name="uq_guests_tenant_phone"),
        sa.UniqueConstraint("tenant_id", "code", name="uq_guests_tenant_code"),
    )
    op.create_index("ix_guests_tenant_id", "guests", ["tenant_id"])
    op.create_index("ix_guests_identifier", "guests", ["identifier"])
    op.create_index("ix_guests_name", "guests", ["name"])

    op.create_table(
        "guest_tags",
        sa.Column(
            "guest_id",
            sqlalchemy_utils.UUIDType(),
            sa.ForeignKey("guests.uuid", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "tag_id",
            sqlalchemy_utils.UUIDType(),
            sa.ForeignKey("tags.uuid", ondelete="CASCADE"),
            primary_key=True,
        ),
    )


def downgrade() -> None:
    op.drop_table("guest_tags")
    op.drop_index("ix_guests_name", table_name="guests")
    op.drop_index("ix_guests_identifier", table_name="guests")
    op.drop_index("ix_guests_tenant_id", table_name="guests")
    op.drop_table("guests")
    op.drop_index("ix_tags_tenant_id", table_name="tags")
    op.drop_table("tags")
    op.drop_index("ix_operators_username", table_name="operators")
    op.drop_table("operators")
    op.drop_index("ix_tenants_username", table_name="tenants")
    op.drop_table("tenants")
