from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from guestlist.errors import GuestNotFoundError
from guestlist.events import get_event_publisher
from guestlist.guests.dtos import CompanionDTO, GuestDTO, RSVPSubmissionDTO
from guestlist.guests.features.get_guests.router import get_guest_read_model
from guestlist.guests.features.submit_rsvp.write_model import RSVPWriteModel, SqlRSVPWriteModel
from guestlist.guests.repository.read_models import GuestReadModel
from guestlist.guests.schemas import CompanionResponse
from guestlist.guests.urls import RSVP_URL
from guestlist.tenants.features.event_settings.router import EventSettingsResponse

router = APIRouter()


class CompanionSubmit(BaseModel):
    name: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    attending: bool = True
    meal_preference: str | None = Field(default=None, max_length=255)
    dietary_restrictions: str | None = None


class RSVPSubmit(BaseModel):
    attending: bool
    companion: CompanionSubmit | None = None
    meal_preference: str | None = Field(default=None, max_length=255)
    dietary_restrictions: str | None = None


class RSVPGuestResponse(BaseModel):
    """What a guest sees on their own RSVP page; operator notes and tags stay private."""

    identifier: str
    code: str
    name: str
    rsvp_confirmed: bool
    verified: bool
    companion_allowed: bool
    companion: CompanionResponse | None = None
    meal_preference: str | None = None
    dietary_restrictions: str | None = None

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "RSVPGuestResponse":
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
            identifier=guest.identifier,
            code=guest.code,
            name=guest.name,
            rsvp_confirmed=guest.rsvp_confirmed,
            verified=guest.verified,
            companion_allowed=guest.companion_allowed,
            companion=companion,
            meal_preference=guest.meal_preference,
            dietary_restrictions=guest.dietary_restrictions,
        )


class RSVPInfoResponse(BaseModel):
    tenant_name: str
    event_title: str
    event: EventSettingsResponse | None = None
    guest: RSVPGuestResponse


def get_rsvp_write_model() -> RSVPWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRSVPWriteModel(event_publisher=get_event_publisher())


@router.get(RSVP_URL, response_model=RSVPInfoResponse)
async def get_rsvp_info(
    identifier: str,
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> RSVPInfoResponse:
    """
    Get RSVP page information by identifier.
    Public: the identifier in the link is the guest's only credential.
    """
    info = await read_model.get_rsvp_info(identifier.strip().lower())
    if info is None:
        raise GuestNotFoundError("Invalid or expired RSVP link")
    return RSVPInfoResponse(
        tenant_name=info.tenant_name,
        event_title=info.event_title,
        event=EventSettingsResponse.from_dto(info.event) if info.event else None,
        guest=RSVPGuestResponse.from_dto(info.guest),
    )


@router.put(RSVP_URL, response_model=RSVPGuestResponse)
async def submit_rsvp(
    identifier: str,
    rsvp_data: RSVPSubmit,
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
) -> RSVPGuestResponse:
    """
    Submit or overwrite a guest's RSVP.
    Companion details are only accepted for guests allowed a companion.
    """
    companion = None
    if rsvp_data.companion is not None:
        companion = CompanionDTO(
            name=rsvp_data.companion.name,
            phone=rsvp_data.companion.phone,
            attending=rsvp_data.companion.attending,
            meal_preference=rsvp_data.companion.meal_preference,
            dietary_restrictions=rsvp_data.companion.dietary_restrictions,
        )

    guest = await write_model.submit_rsvp(
        identifier,
        RSVPSubmissionDTO(
            attending=rsvp_data.attending,
            companion=companion,
            meal_preference=rsvp_data.meal_preference,
            dietary_restrictions=rsvp_data.dietary_restrictions,
        ),
    )
    return RSVPGuestResponse.from_dto(guest)
