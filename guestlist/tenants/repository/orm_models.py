from datetime import date

from sqlalchemy import Boolean, Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from guestlist.config.table_names import TableNames
from guestlist.models.base import Base, TimeStamp

DEFAULT_EVENT_TITLE = "Wedding Invitation"


class Tenant(Base, TimeStamp):
    """A couple: the isolation boundary for guests and tags."""

    __tablename__ = TableNames.TENANTS.value

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # Event settings shown on the public RSVP page
    event_title: Mapped[str] = mapped_column(
        String(255), nullable=False, default=DEFAULT_EVENT_TITLE
    )
    couple_names: Mapped[str | None] = mapped_column(String(255), nullable=True)
    event_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    event_time: Mapped[str | None] = mapped_column(String(50), nullable=True)
    venue_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    venue_address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    color_of_day: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<Tenant {self.username}>"


class Operator(Base, TimeStamp):
    """A deployment operator allowed to act on any tenant."""

    __tablename__ = TableNames.OPERATORS.value

    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # Bumped on password rotation and deactivation; older tokens stop working
    token_version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<Operator {self.username}>"
