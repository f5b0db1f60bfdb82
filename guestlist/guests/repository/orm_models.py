from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Table, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy_utils import UUIDType

from guestlist.config.table_names import TableNames
from guestlist.models.base import Base, BaseModel, TenantOwned, TimeStamp

DEFAULT_TAG_COLOR = "#3b82f6"

# Composite primary key: a guest can be in a tag at most once.
guest_tags = Table(
    TableNames.GUEST_TAGS.value,
    BaseModel.metadata,
    Column(
        "guest_id",
        UUIDType,
        ForeignKey(f"{TableNames.GUESTS.value}.uuid", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        UUIDType,
        ForeignKey(f"{TableNames.TAGS.value}.uuid", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Tag(Base, TenantOwned, TimeStamp):
    __tablename__ = TableNames.TAGS.value
    __table_args__ = (UniqueConstraint("tenant_id", "name", name="uq_tags_tenant_name"),)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(20), nullable=False, default=DEFAULT_TAG_COLOR)

    def __repr__(self) -> str:
        return f"<Tag {self.name}>"


class Guest(Base, TenantOwned, TimeStamp):
    __tablename__ = TableNames.GUESTS.value
    __table_args__ = (
        UniqueConstraint("identifier", name="uq_guests_identifier"),
        UniqueConstraint("tenant_id", "phone_number", name="uq_guests_tenant_phone"),
        UniqueConstraint("tenant_id", "code", name="uq_guests_tenant_code"),
    )

    # Opaque token used in RSVP links and QR payloads, unique across tenants
    identifier: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    # Short keypad code, unique only within the tenant
    code: Mapped[str] = mapped_column(String(4), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone_number: Mapped[str] = mapped_column(String(50), nullable=False)

    rsvp_confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Only ever set from False to True, by the check-in conditional update
    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    # Companion (plus-one)
    companion_allowed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    companion_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    companion_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    companion_rsvp: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Meal preferences
    meal_preference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)
    companion_meal_preference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    companion_dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    tags: Mapped[list[Tag]] = relationship(
        Tag, secondary=guest_tags, lazy="selectin", order_by=Tag.name
    )

    def clear_companion(self) -> None:
        self.companion_name = None
        self.companion_phone = None
        self.companion_rsvp = False
        self.companion_meal_preference = None
        self.companion_dietary_restrictions = None

    def __repr__(self) -> str:
        return f"<Guest {self.name} ({self.code})>"
