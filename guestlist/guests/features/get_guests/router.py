from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from guestlist.errors import NotFoundError
from guestlist.guests.repository.read_models import GuestReadModel, SqlGuestReadModel
from guestlist.guests.schemas import GuestResponse
from guestlist.guests.urls import GUEST_LOOKUP_URL, GUEST_URL, GUESTS_URL
from guestlist.tenants.authorizer import TenantScope
from guestlist.tenants.dependencies import get_tenant_scope

router = APIRouter()


def get_guest_read_model() -> GuestReadModel:
    """Dependency to get guest read model instance."""
    return SqlGuestReadModel()


@router.get(GUESTS_URL, response_model=list[GuestResponse])
async def list_guests(
    scope: TenantScope = Depends(get_tenant_scope),
    read_model: GuestReadModel = Depends(get_guest_read_model),
    phone_number: Annotated[str | None, Query(max_length=50)] = None,
) -> list[GuestResponse]:
    """
    List guests, newest first. Operators without tenant_id see every tenant.

    With phone_number, returns the single guest of the tenant using that
    number, or an empty list. Operators must pass tenant_id for this filter.
    """
    if phone_number is not None:
        guest = await read_model.find_by_phone(scope, phone_number)
        return [GuestResponse.from_dto(guest)] if guest else []

    guests = await read_model.list_guests(scope)
    return [GuestResponse.from_dto(guest) for guest in guests]


@router.get(GUEST_LOOKUP_URL, response_model=GuestResponse)
async def lookup_guest_by_identifier(
    identifier: str,
    scope: TenantScope = Depends(get_tenant_scope),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> GuestResponse:
    """Resolve a scanned identifier without checking the guest in."""
    guest = await read_model.find_by_identifier(identifier)
    # Guests of other tenants look exactly like unknown identifiers
    if guest is None or not scope.allows(guest.tenant_id):
        raise NotFoundError("Guest")
    return GuestResponse.from_dto(guest)


@router.get(GUEST_URL, response_model=GuestResponse)
async def get_guest(
    guest_id: UUID,
    scope: TenantScope = Depends(get_tenant_scope),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> GuestResponse:
    guest = await read_model.get_guest(scope, guest_id)
    if guest is None:
        raise NotFoundError("Guest", guest_id)
    return GuestResponse.from_dto(guest)
