from datetime import datetime
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, declarative_base, declared_attr, mapped_column
from sqlalchemy_utils import UUIDType

from guestlist.config.table_names import TableNames

BaseModel = declarative_base(type_annotation_map={UUID: UUIDType})


class Base(BaseModel):
    __abstract__ = True

    uuid: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)


class TimeStamp(BaseModel):
    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.current_timestamp(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.current_timestamp(),
        onupdate=sa.func.current_timestamp(),
        nullable=False,
    )


class TenantOwned(BaseModel):
    """Rows that belong to exactly one tenant and go away with it."""

    __abstract__ = True

    @declared_attr
    def tenant_id(cls) -> Mapped[UUID]:
        return mapped_column(
            sa.ForeignKey(f"{TableNames.TENANTS.value}.uuid", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
