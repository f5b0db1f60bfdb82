from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from guestlist.events import get_event_publisher
from guestlist.guests.features.delete_guest.write_model import (
    GuestDeleteWriteModel,
    SqlGuestDeleteWriteModel,
)
from guestlist.guests.urls import GUEST_URL
from guestlist.tenants.authorizer import TenantScope
from guestlist.tenants.dependencies import get_tenant_scope

router = APIRouter()


class DeleteGuestResponse(BaseModel):
    message: str


def get_guest_delete_write_model() -> GuestDeleteWriteModel:
    """Dependency to get guest delete write model instance."""
    return SqlGuestDeleteWriteModel(event_publisher=get_event_publisher())


@router.delete(GUEST_URL, response_model=DeleteGuestResponse)
async def delete_guest(
    guest_id: UUID,
    scope: TenantScope = Depends(get_tenant_scope),
    write_model: GuestDeleteWriteModel = Depends(get_guest_delete_write_model),
) -> DeleteGuestResponse:
    await write_model.delete_guest(scope, guest_id)
    return DeleteGuestResponse(message="Guest deleted successfully")
