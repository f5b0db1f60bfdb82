"""
FastAPI dependencies that turn a bearer token into a resolved tenant scope.

Flow:
  1. OAuth2PasswordBearer extracts the Bearer token from the Authorization header.
  2. decode_access_token validates the signature and expiry.
  3. Operator tokens are checked against the operator row: a deactivated
     operator or a rotated password makes older tokens invalid.
  4. The claims become a Caller, which TenantAuthorizer turns into a TenantScope.

Operators pick the tenant they act on with the ``tenant_id`` query parameter.
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Query
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from guestlist.errors import UnauthorizedError
from guestlist.tenants.authorizer import Caller, Role, TenantScope, tenant_authorizer
from guestlist.tenants.features.login.read_model import CredentialsReadModel, get_credentials_read_model
from guestlist.tenants.security import decode_access_token
from guestlist.tenants.urls import TENANT_LOGIN_URL

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=TENANT_LOGIN_URL, auto_error=False)


async def _check_operator_token(payload: dict, credentials: CredentialsReadModel) -> None:
    version = payload.get("ver")
    try:
        operator_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise UnauthorizedError("Invalid token")
    if not isinstance(version, int) or not await credentials.operator_token_is_current(operator_id, version):
        logger.warning(f"Rejected stale token of operator {operator_id}")
        raise UnauthorizedError("Token has been revoked")


async def get_caller(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    credentials: Annotated[CredentialsReadModel, Depends(get_credentials_read_model)],
) -> Caller:
    if not token:
        raise UnauthorizedError("No token provided")
    try:
        payload = decode_access_token(token)
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise UnauthorizedError("Invalid token")

    role = payload.get("role")
    subject = payload.get("sub")
    if not role or not subject:
        raise UnauthorizedError("Invalid token")
    if role == Role.OPERATOR.value:
        await _check_operator_token(payload, credentials)
    return Caller(role=role, subject=subject, tenant_id_claim=payload.get("tenant_id"))


async def get_tenant_scope(
    caller: Annotated[Caller, Depends(get_caller)],
    tenant_id: Annotated[str | None, Query()] = None,
) -> TenantScope:
    return tenant_authorizer.authorize(caller, tenant_id)


async def get_operator(caller: Annotated[Caller, Depends(get_caller)]) -> Caller:
    tenant_authorizer.authorize_operator(caller)
    return caller
