import contextlib
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine, make_url
from sqlalchemy.orm import Session

from guestlist.config.database import async_session_maker
from guestlist.config.settings import settings
from guestlist.guests.repository import orm_models as guest_orm_models  # noqa: F401
from guestlist.main import app
from guestlist.models import BaseModel
from guestlist.tenants.authorizer import Role, TenantScope
from guestlist.tenants.repository.orm_models import Operator, Tenant
from guestlist.tenants.security import create_access_token, hash_password

TEST_OPERATOR_ID = uuid4()


@pytest.fixture(scope="session", autouse=True)
def test_database():
    """Recreate the schema of the test database once per test session and seed an operator."""
    url = make_url(settings.test_database_url)
    sync_engine = create_engine(url.set(drivername=url.get_backend_name()))
    BaseModel.metadata.drop_all(sync_engine)
    BaseModel.metadata.create_all(sync_engine)
    with Session(sync_engine) as session:
        session.add(
            Operator(
                uuid=TEST_OPERATOR_ID,
                username="test-operator",
                hashed_password=hash_password("operator-password"),
                is_active=True,
                token_version=0,
            )
        )
        session.commit()
    yield
    sync_engine.dispose()


@pytest.fixture
async def db_session():
    """A session whose work is rolled back after the test."""
    async with async_session_maker() as session:
        yield session
        await session.rollback()


async def make_tenant(session, name: str = "Anna & Ben") -> Tenant:
    tenant = Tenant(
        name=name,
        username=f"tenant{uuid4().hex[:12]}",
        hashed_password="not-a-real-hash",
        email=None,
        event_title="Wedding Invitation",
    )
    session.add(tenant)
    await session.flush()
    return tenant


@pytest.fixture
async def tenant(db_session) -> Tenant:
    return await make_tenant(db_session)


@pytest.fixture
async def other_tenant(db_session) -> Tenant:
    return await make_tenant(db_session, name="Carla & Dan")


@pytest.fixture
def tenant_scope(tenant) -> TenantScope:
    return TenantScope.for_tenant(tenant.uuid, role=Role.TENANT_OWNER)


@pytest.fixture
def operator_headers() -> dict[str, str]:
    token = create_access_token(subject=str(TEST_OPERATOR_ID), role=Role.OPERATOR.value, token_version=0)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def tenant_headers():
    """Build the Authorization header of a tenant owner."""

    def build(tenant_id) -> dict[str, str]:
        token = create_access_token(
            subject="couple", role=Role.TENANT_OWNER.value, tenant_id=str(tenant_id)
        )
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def client_factory():
    """Build a test client with the given dependency overrides applied."""

    @contextlib.asynccontextmanager
    async def factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return factory
