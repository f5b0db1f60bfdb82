from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from guestlist.events import get_event_publisher
from guestlist.guests.features.get_guests.router import get_guest_read_model
from guestlist.guests.features.manage_tags.write_model import SqlTagWriteModel, TagWriteModel
from guestlist.guests.repository.read_models import GuestReadModel
from guestlist.guests.schemas import GuestResponse, TagResponse
from guestlist.guests.urls import GUEST_TAGS_URL, TAG_GUESTS_URL, TAG_URL, TAGS_URL
from guestlist.tenants.authorizer import TenantScope
from guestlist.tenants.dependencies import get_tenant_scope

router = APIRouter()


class CreateTagRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str | None = Field(default=None, max_length=20)


class AssignTagsRequest(BaseModel):
    tag_ids: list[UUID]


class AddGuestsToTagRequest(BaseModel):
    guest_ids: list[UUID]


class DeleteTagResponse(BaseModel):
    message: str


def get_tag_write_model() -> TagWriteModel:
    """Dependency to get tag write model instance."""
    return SqlTagWriteModel(event_publisher=get_event_publisher())


@router.get(TAGS_URL, response_model=list[TagResponse])
async def list_tags(
    scope: TenantScope = Depends(get_tenant_scope),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> list[TagResponse]:
    tags = await read_model.list_tags(scope)
    return [TagResponse.from_dto(tag) for tag in tags]


@router.post(TAGS_URL, response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    request: CreateTagRequest,
    scope: TenantScope = Depends(get_tenant_scope),
    write_model: TagWriteModel = Depends(get_tag_write_model),
) -> TagResponse:
    tag = await write_model.create_tag(scope, name=request.name, color=request.color)
    return TagResponse.from_dto(tag)


@router.delete(TAG_URL, response_model=DeleteTagResponse)
async def delete_tag(
    tag_id: UUID,
    scope: TenantScope = Depends(get_tenant_scope),
    write_model: TagWriteModel = Depends(get_tag_write_model),
) -> DeleteTagResponse:
    await write_model.delete_tag(scope, tag_id)
    return DeleteTagResponse(message="Tag deleted")


@router.put(GUEST_TAGS_URL, response_model=GuestResponse)
async def assign_tags(
    guest_id: UUID,
    request: AssignTagsRequest,
    scope: TenantScope = Depends(get_tenant_scope),
    write_model: TagWriteModel = Depends(get_tag_write_model),
) -> GuestResponse:
    """Replace the guest's tags. Any tag outside the guest's tenant rejects the whole request."""
    guest = await write_model.assign_tags(scope, guest_id, request.tag_ids)
    return GuestResponse.from_dto(guest)


@router.post(TAG_GUESTS_URL, response_model=TagResponse)
async def add_guests_to_tag(
    tag_id: UUID,
    request: AddGuestsToTagRequest,
    scope: TenantScope = Depends(get_tenant_scope),
    write_model: TagWriteModel = Depends(get_tag_write_model),
) -> TagResponse:
    tag = await write_model.add_guests_to_tag(scope, tag_id, request.guest_ids)
    return TagResponse.from_dto(tag)
