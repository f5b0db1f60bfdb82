from uuid import uuid4

import pytest
from sqlalchemy import delete

from guestlist.config.database import async_session_manager
from guestlist.tenants.authorizer import Caller, Role
from guestlist.tenants.dtos import OperatorDTO, TenantDTO
from guestlist.tenants.features.login.read_model import (
    CredentialsReadModel,
    SqlCredentialsReadModel,
    get_credentials_read_model,
)
from guestlist.tenants.features.manage_tenants.write_model import SqlOperatorWriteModel, SqlTenantWriteModel
from guestlist.tenants.repository.orm_models import Operator
from guestlist.tenants.security import create_access_token, decode_access_token
from guestlist.tenants.urls import OPERATOR_LOGIN_URL, TENANT_LOGIN_URL, TENANTS_URL


class InMemoryCredentialsReadModel(CredentialsReadModel):
    """In-memory read model for testing."""

    def __init__(self, operators: dict[str, str] = None, tenants: dict[str, tuple[str, TenantDTO]] = None):
        self._operators = operators or {}
        self._tenants = tenants or {}

    async def authenticate_operator(self, username: str, password: str) -> OperatorDTO | None:
        if self._operators.get(username) != password:
            return None
        return OperatorDTO(id=uuid4(), username=username)

    async def authenticate_tenant(self, username: str, password: str) -> TenantDTO | None:
        entry = self._tenants.get(username)
        if entry is None or entry[0] != password:
            return None
        return entry[1]

    async def operator_token_is_current(self, operator_id, token_version: int) -> bool:
        return True


@pytest.fixture
def couple():
    return TenantDTO(id=uuid4(), name="Anna & Ben", username="annaben1a2b")


@pytest.fixture
def read_model(couple):
    return InMemoryCredentialsReadModel(
        operators={"admin": "admin-password"},
        tenants={couple.username: ("1234abcd", couple)},
    )


async def test_operator_login(client_factory, read_model):
    overrides = {get_credentials_read_model: lambda: read_model}

    async with client_factory(overrides) as client:
        response = await client.post(
            OPERATOR_LOGIN_URL, data={"username": "admin", "password": "admin-password"}
        )

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["role"] == "operator"
    assert data["tenant"] is None
    claims = decode_access_token(data["access_token"])
    assert claims["role"] == "operator"
    assert claims["ver"] == 0
    assert "tenant_id" not in claims


async def test_tenant_login_binds_token_to_tenant(client_factory, read_model, couple):
    overrides = {get_credentials_read_model: lambda: read_model}

    async with client_factory(overrides) as client:
        response = await client.post(
            TENANT_LOGIN_URL, data={"username": couple.username, "password": "1234abcd"}
        )

    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "tenant_owner"
    assert data["tenant"]["id"] == str(couple.id)
    assert data["tenant"]["event_title"] == "Wedding Invitation"
    assert decode_access_token(data["access_token"])["tenant_id"] == str(couple.id)


@pytest.mark.parametrize(
    "url, username, password",
    [
        (OPERATOR_LOGIN_URL, "admin", "wrong"),
        (OPERATOR_LOGIN_URL, "annaben1a2b", "1234abcd"),
        (TENANT_LOGIN_URL, "annaben1a2b", "wrong"),
        (TENANT_LOGIN_URL, "admin", "admin-password"),
    ],
)
async def test_bad_credentials(client_factory, read_model, url, username, password):
    overrides = {get_credentials_read_model: lambda: read_model}

    async with client_factory(overrides) as client:
        response = await client.post(url, data={"username": username, "password": password})

    assert response.status_code == 401
    assert response.json() == {"detail": "Incorrect username or password", "error": "unauthorized"}


async def test_sql_credentials_read_model():
    operator = Caller(role=Role.OPERATOR.value, subject="tests")
    tenants = SqlTenantWriteModel()
    created = await tenants.create_tenant(operator, name="Login Couple")
    try:
        read_model = SqlCredentialsReadModel()
        username = created.credentials.username

        tenant = await read_model.authenticate_tenant(username, created.credentials.password)
        assert tenant.id == created.tenant.id
        assert await read_model.authenticate_tenant(username, "wrong") is None
        assert await read_model.authenticate_tenant("nobody", created.credentials.password) is None
    finally:
        await tenants.delete_tenant(operator, created.tenant.id)


async def test_operator_tokens_stop_working_after_rotation_and_deactivation(client):
    operators = SqlOperatorWriteModel()
    username = f"ops-{uuid4().hex[:8]}"
    await operators.create_operator(username, "first-password")
    try:
        login = await client.post(OPERATOR_LOGIN_URL, data={"username": username, "password": "first-password"})
        old_headers = {"Authorization": f"Bearer {login.json()['access_token']}"}
        assert (await client.get(TENANTS_URL, headers=old_headers)).status_code == 200

        await operators.rotate_operator_password(username, "second-password")

        revoked = await client.get(TENANTS_URL, headers=old_headers)
        assert revoked.status_code == 401
        assert revoked.json()["detail"] == "Token has been revoked"

        login = await client.post(OPERATOR_LOGIN_URL, data={"username": username, "password": "second-password"})
        assert decode_access_token(login.json()["access_token"])["ver"] == 1
        new_headers = {"Authorization": f"Bearer {login.json()['access_token']}"}
        assert (await client.get(TENANTS_URL, headers=new_headers)).status_code == 200

        await operators.deactivate_operator(username)

        assert (await client.get(TENANTS_URL, headers=new_headers)).status_code == 401
        relogin = await client.post(OPERATOR_LOGIN_URL, data={"username": username, "password": "second-password"})
        assert relogin.status_code == 401
    finally:
        async with async_session_manager() as session:
            await session.execute(delete(Operator).where(Operator.username == username))


async def test_operator_token_without_version_is_rejected(client):
    token = create_access_token(subject=str(uuid4()), role="operator")

    response = await client.get(TENANTS_URL, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
