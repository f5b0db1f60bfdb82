from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from guestlist.tenants.authorizer import Caller
from guestlist.tenants.dependencies import get_operator
from guestlist.tenants.dtos import TenantDTO, TenantUpdateDTO
from guestlist.tenants.features.manage_tenants.write_model import (
    SqlTenantWriteModel,
    TenantWriteModel,
)
from guestlist.tenants.urls import TENANT_URL, TENANTS_URL

router = APIRouter()


class CreateTenantRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr | None = None


class UpdateTenantRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6)


class TenantResponse(BaseModel):
    id: UUID
    name: str
    username: str
    email: str | None = None
    event_title: str

    @classmethod
    def from_dto(cls, tenant: TenantDTO) -> "TenantResponse":
        return cls(
            id=tenant.id,
            name=tenant.name,
            username=tenant.username,
            email=tenant.email,
            event_title=tenant.event_title,
        )


class CreatedTenantResponse(BaseModel):
    """The plain password is only ever returned here."""

    tenant: TenantResponse
    username: str
    password: str


class DeleteTenantResponse(BaseModel):
    message: str


def get_tenant_write_model() -> TenantWriteModel:
    """Dependency to get tenant write model instance."""
    return SqlTenantWriteModel()


@router.get(TENANTS_URL, response_model=list[TenantResponse])
async def list_tenants(
    operator: Caller = Depends(get_operator),
    write_model: TenantWriteModel = Depends(get_tenant_write_model),
) -> list[TenantResponse]:
    tenants = await write_model.list_tenants(operator)
    return [TenantResponse.from_dto(tenant) for tenant in tenants]


@router.post(TENANTS_URL, response_model=CreatedTenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    request: CreateTenantRequest,
    operator: Caller = Depends(get_operator),
    write_model: TenantWriteModel = Depends(get_tenant_write_model),
) -> CreatedTenantResponse:
    created = await write_model.create_tenant(operator, name=request.name, email=request.email)
    return CreatedTenantResponse(
        tenant=TenantResponse.from_dto(created.tenant),
        username=created.credentials.username,
        password=created.credentials.password,
    )


@router.put(TENANT_URL, response_model=TenantResponse)
async def update_tenant(
    tenant_id: UUID,
    request: UpdateTenantRequest,
    operator: Caller = Depends(get_operator),
    write_model: TenantWriteModel = Depends(get_tenant_write_model),
) -> TenantResponse:
    tenant = await write_model.update_tenant(
        operator,
        tenant_id,
        TenantUpdateDTO(name=request.name, email=request.email, password=request.password),
    )
    return TenantResponse.from_dto(tenant)


@router.delete(TENANT_URL, response_model=DeleteTenantResponse)
async def delete_tenant(
    tenant_id: UUID,
    operator: Caller = Depends(get_operator),
    write_model: TenantWriteModel = Depends(get_tenant_write_model),
) -> DeleteTenantResponse:
    """Delete a tenant together with all of its guests and tags."""
    await write_model.delete_tenant(operator, tenant_id)
    return DeleteTenantResponse(message="Tenant deleted successfully")
