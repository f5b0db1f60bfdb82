from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from guestlist.events import get_event_publisher
from guestlist.guests.dtos import GuestUpdateDTO
from guestlist.guests.features.update_guest.write_model import (
    GuestUpdateWriteModel,
    SqlGuestUpdateWriteModel,
)
from guestlist.guests.schemas import GuestResponse
from guestlist.guests.urls import GUEST_URL
from guestlist.tenants.authorizer import TenantScope
from guestlist.tenants.dependencies import get_tenant_scope

router = APIRouter()


class UpdateGuestRequest(BaseModel):
    """Fields an operator may change; anything else in the body is rejected."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    phone_number: str | None = Field(default=None, min_length=1, max_length=50)
    companion_allowed: bool | None = None
    notes: str | None = None


def get_guest_update_write_model() -> GuestUpdateWriteModel:
    """Dependency to get guest update write model instance."""
    return SqlGuestUpdateWriteModel(event_publisher=get_event_publisher())


@router.put(GUEST_URL, response_model=GuestResponse)
async def update_guest(
    guest_id: UUID,
    request: UpdateGuestRequest,
    scope: TenantScope = Depends(get_tenant_scope),
    write_model: GuestUpdateWriteModel = Depends(get_guest_update_write_model),
) -> GuestResponse:
    guest = await write_model.update_guest(
        scope,
        guest_id,
        GuestUpdateDTO(
            name=request.name,
            phone_number=request.phone_number,
            companion_allowed=request.companion_allowed,
            notes=request.notes,
        ),
    )
    return GuestResponse.from_dto(guest)
