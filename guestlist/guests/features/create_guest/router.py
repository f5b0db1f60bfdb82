from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from guestlist.events import get_event_publisher
from guestlist.guests.dtos import NewGuestDTO
from guestlist.guests.features.create_guest.write_model import (
    GuestCreateWriteModel,
    SqlGuestCreateWriteModel,
)
from guestlist.guests.schemas import GuestResponse
from guestlist.guests.urls import GUESTS_URL
from guestlist.tenants.authorizer import TenantScope
from guestlist.tenants.dependencies import get_tenant_scope

router = APIRouter()


class CreateGuestRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    phone_number: str = Field(min_length=1, max_length=50)
    companion_allowed: bool = False
    companion_name: str | None = None
    meal_preference: str | None = None
    dietary_restrictions: str | None = None
    notes: str | None = None


def get_guest_create_write_model() -> GuestCreateWriteModel:
    """Dependency to get guest create write model instance."""
    return SqlGuestCreateWriteModel(event_publisher=get_event_publisher())


@router.post(GUESTS_URL, response_model=GuestResponse, status_code=status.HTTP_201_CREATED)
async def create_guest(
    request: CreateGuestRequest,
    scope: TenantScope = Depends(get_tenant_scope),
    write_model: GuestCreateWriteModel = Depends(get_guest_create_write_model),
) -> GuestResponse:
    """
    Add a guest to a tenant's list.

    Tenant owners always add to their own list; operators must pass tenant_id.
    A phone number already used in the tenant is rejected with 409.
    """
    guest = await write_model.create_guest(
        scope,
        NewGuestDTO(
            name=request.name,
            phone_number=request.phone_number,
            companion_allowed=request.companion_allowed,
            companion_name=request.companion_name,
            meal_preference=request.meal_preference,
            dietary_restrictions=request.dietary_restrictions,
            notes=request.notes,
        ),
    )
    return GuestResponse.from_dto(guest)
