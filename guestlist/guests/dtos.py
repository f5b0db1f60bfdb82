from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from guestlist.config.settings import settings
from guestlist.tenants.dtos import EventSettingsDTO

if TYPE_CHECKING:
    from guestlist.guests.repository.orm_models import Guest, Tag


class TokenKind(str, Enum):
    """How a check-in token was obtained: scanned from a QR or typed on a keypad."""

    IDENTIFIER = "identifier"
    CODE = "code"


def rsvp_link_for(identifier: str) -> str:
    return f"{settings.frontend_url}/rsvp/{identifier}"


@dataclass(frozen=True)
class TagDTO:
    id: UUID
    name: str
    color: str
    guest_count: int | None = None

    @classmethod
    def from_tag(cls, tag: "Tag", guest_count: int | None = None) -> "TagDTO":
        return cls(id=tag.uuid, name=tag.name, color=tag.color, guest_count=guest_count)


@dataclass(frozen=True)
class CompanionDTO:
    """Plus-one details, present only for guests allowed a companion."""

    name: str | None = None
    phone: str | None = None
    attending: bool = False
    meal_preference: str | None = None
    dietary_restrictions: str | None = None


@dataclass(frozen=True)
class GuestDTO:
    """DTO for guest data."""

    id: UUID
    tenant_id: UUID
    identifier: str
    code: str
    name: str
    phone_number: str
    rsvp_link: str
    rsvp_confirmed: bool = False
    verified: bool = False
    verified_at: datetime | None = None
    companion_allowed: bool = False
    companion: CompanionDTO | None = None
    meal_preference: str | None = None
    dietary_restrictions: str | None = None
    notes: str | None = None
    tags: list[TagDTO] = field(default_factory=list)

    @classmethod
    def from_guest(cls, guest: "Guest") -> "GuestDTO":
        """Create GuestDTO from Guest ORM model (tags must already be loaded)."""
        companion = None
        if guest.companion_allowed:
            companion = CompanionDTO(
                name=guest.companion_name,
                phone=guest.companion_phone,
                attending=guest.companion_rsvp,
                meal_preference=guest.companion_meal_preference,
                dietary_restrictions=guest.companion_dietary_restrictions,
            )
        return cls(
            id=guest.uuid,
            tenant_id=guest.tenant_id,
            identifier=guest.identifier,
            code=guest.code,
            name=guest.name,
            phone_number=guest.phone_number,
            rsvp_link=rsvp_link_for(guest.identifier),
            rsvp_confirmed=guest.rsvp_confirmed,
            verified=guest.verified,
            verified_at=guest.verified_at,
            companion_allowed=guest.companion_allowed,
            companion=companion,
            meal_preference=guest.meal_preference,
            dietary_restrictions=guest.dietary_restrictions,
            notes=guest.notes,
            tags=[TagDTO.from_tag(tag) for tag in guest.tags],
        )


@dataclass(frozen=True)
class NewGuestDTO:
    """Fields an operator may set when adding a guest."""

    name: str
    phone_number: str
    companion_allowed: bool = False
    companion_name: str | None = None
    meal_preference: str | None = None
    dietary_restrictions: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class GuestUpdateDTO:
    """Allow-listed guest fields; None leaves a field unchanged."""

    name: str | None = None
    phone_number: str | None = None
    companion_allowed: bool | None = None
    notes: str | None = None


@dataclass(frozen=True)
class RSVPSubmissionDTO:
    attending: bool
    companion: CompanionDTO | None = None
    meal_preference: str | None = None
    dietary_restrictions: str | None = None


@dataclass(frozen=True)
class RSVPInfoDTO:
    """Public RSVP page data for a guest."""

    guest: GuestDTO
    tenant_name: str
    event_title: str
    event: EventSettingsDTO | None = None


@dataclass(frozen=True)
class VerificationResultDTO:
    success: bool
    first_scan: bool
    message: str
    guest: GuestDTO
