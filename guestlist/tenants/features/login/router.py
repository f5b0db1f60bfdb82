import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel

from guestlist.errors import UnauthorizedError
from guestlist.tenants.authorizer import Role
from guestlist.tenants.features.login.read_model import (
    CredentialsReadModel,
    get_credentials_read_model,
)
from guestlist.tenants.security import create_access_token
from guestlist.tenants.urls import OPERATOR_LOGIN_URL, TENANT_LOGIN_URL

logger = logging.getLogger(__name__)

router = APIRouter()


class LoggedInTenant(BaseModel):
    id: UUID
    name: str
    username: str
    event_title: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: Role
    tenant: LoggedInTenant | None = None


@router.post(OPERATOR_LOGIN_URL, response_model=TokenResponse)
async def login_operator(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    read_model: CredentialsReadModel = Depends(get_credentials_read_model),
) -> TokenResponse:
    """Exchange operator credentials (form data) for a bearer token."""
    operator = await read_model.authenticate_operator(form_data.username, form_data.password)
    if operator is None:
        logger.warning(f"Failed operator login for {form_data.username!r}")
        raise UnauthorizedError("Incorrect username or password")

    token = create_access_token(
        subject=str(operator.id),
        role=Role.OPERATOR.value,
        token_version=operator.token_version,
    )
    return TokenResponse(access_token=token, role=Role.OPERATOR)


@router.post(TENANT_LOGIN_URL, response_model=TokenResponse)
async def login_tenant(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    read_model: CredentialsReadModel = Depends(get_credentials_read_model),
) -> TokenResponse:
    """Exchange a couple's generated credentials (form data) for a bearer token bound to their tenant."""
    tenant = await read_model.authenticate_tenant(form_data.username, form_data.password)
    if tenant is None:
        logger.warning(f"Failed tenant login for {form_data.username!r}")
        raise UnauthorizedError("Incorrect username or password")

    token = create_access_token(
        subject=tenant.username,
        role=Role.TENANT_OWNER.value,
        tenant_id=str(tenant.id),
    )
    return TokenResponse(
        access_token=token,
        role=Role.TENANT_OWNER,
        tenant=LoggedInTenant(
            id=tenant.id,
            name=tenant.name,
            username=tenant.username,
            event_title=tenant.event_title,
        ),
    )
