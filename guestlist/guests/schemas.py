"""Response bodies shared by the guest routers."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from guestlist.guests.dtos import GuestDTO, TagDTO


class TagResponse(BaseModel):
    id: UUID
    name: str
    color: str
    guest_count: int | None = None

    @classmethod
    def from_dto(cls, tag: TagDTO) -> "TagResponse":
        return cls(id=tag.id, name=tag.name, color=tag.color, guest_count=tag.guest_count)


class CompanionResponse(BaseModel):
    name: str | None = None
    phone: str | None = None
    attending: bool = False
    meal_preference: str | None = None
    dietary_restrictions: str | None = None


class GuestResponse(BaseModel):
    id: UUID
    tenant_id: UUID
    identifier: str
    code: str
    name: str
    phone_number: str
    rsvp_link: str
    rsvp_confirmed: bool
    verified: bool
    verified_at: datetime | None = None
    companion_allowed: bool
    companion: CompanionResponse | None = None
    meal_preference: str | None = None
    dietary_restrictions: str | None = None
    notes: str | None = None
    tags: list[TagResponse] = []

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "GuestResponse":
        companion = None
        if guest.companion is not None:
            companion = CompanionResponse(
                name=guest.companion.name,
                phone=guest.companion.phone,
                attending=guest.companion.attending,
                meal_preference=guest.companion.meal_preference,
                dietary_restrictions=guest.companion.dietary_restrictions,
            )
        return cls(
            id=guest.id,
            tenant_id=guest.tenant_id,
            identifier=guest.identifier,
            code=guest.code,
            name=guest.name,
            phone_number=guest.phone_number,
            rsvp_link=guest.rsvp_link,
            rsvp_confirmed=guest.rsvp_confirmed,
            verified=guest.verified,
            verified_at=guest.verified_at,
            companion_allowed=guest.companion_allowed,
            companion=companion,
            meal_preference=guest.meal_preference,
            dietary_restrictions=guest.dietary_restrictions,
            notes=guest.notes,
            tags=[TagResponse.from_dto(tag) for tag in guest.tags],
        )
