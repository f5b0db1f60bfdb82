from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from guestlist.events import get_event_publisher
from guestlist.guests.dtos import TokenKind
from guestlist.guests.features.verify_guest.write_model import (
    GuestVerifyWriteModel,
    SqlGuestVerifyWriteModel,
)
from guestlist.guests.schemas import GuestResponse
from guestlist.guests.urls import VERIFY_GUEST_URL
from guestlist.tenants.authorizer import TenantScope
from guestlist.tenants.dependencies import get_tenant_scope

router = APIRouter()


class VerifyGuestRequest(BaseModel):
    token_kind: TokenKind
    token: str = Field(min_length=1, max_length=64)


class VerifyGuestResponse(BaseModel):
    success: bool
    first_scan: bool
    message: str
    guest: GuestResponse


def get_guest_verify_write_model() -> GuestVerifyWriteModel:
    """Dependency to get guest verify write model instance."""
    return SqlGuestVerifyWriteModel(event_publisher=get_event_publisher())


@router.post(VERIFY_GUEST_URL, response_model=VerifyGuestResponse)
async def verify_guest(
    request: VerifyGuestRequest,
    scope: TenantScope = Depends(get_tenant_scope),
    write_model: GuestVerifyWriteModel = Depends(get_guest_verify_write_model),
) -> VerifyGuestResponse:
    """
    Check a guest in by scanned identifier or typed 4-digit code.

    Scanning the same guest again succeeds with first_scan=false.
    Codes need a tenant: operators must pass tenant_id to use them.
    """
    result = await write_model.verify(scope, request.token_kind, request.token)
    return VerifyGuestResponse(
        success=result.success,
        first_scan=result.first_scan,
        message=result.message,
        guest=GuestResponse.from_dto(result.guest),
    )
