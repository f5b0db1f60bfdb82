"""Write model for tenants and operators.

Tenants are created by an operator with generated credentials; the plain
password is handed back exactly once and only its bcrypt hash is stored.
Operators themselves are managed from the CLI.
"""

import logging
import re
import secrets
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from guestlist.config.database import async_session_manager
from guestlist.errors import DuplicateUsernameError, InvalidInputError, NotFoundError
from guestlist.guests.repository.orm_models import Guest, Tag, guest_tags
from guestlist.tenants.authorizer import Caller, tenant_authorizer
from guestlist.tenants.dtos import (
    CreatedTenantDTO,
    OperatorDTO,
    TenantCredentialsDTO,
    TenantDTO,
    TenantUpdateDTO,
)
from guestlist.tenants.repository.orm_models import DEFAULT_EVENT_TITLE, Operator, Tenant
from guestlist.tenants.security import hash_password

logger = logging.getLogger(__name__)

USERNAME_SUFFIX_BYTES = 2
PASSWORD_BYTES = 4
USERNAME_ATTEMPTS = 5


def generate_username(name: str) -> str:
    """Lower-cased alphanumerics of the name plus 4 random hex chars, e.g. ``annaben3f9a``."""
    base = re.sub(r"[^a-z0-9]", "", name.lower()) or "tenant"
    return f"{base}{secrets.token_hex(USERNAME_SUFFIX_BYTES)}"


def generate_password() -> str:
    return secrets.token_hex(PASSWORD_BYTES)


class TenantWriteModel(ABC):
    @abstractmethod
    async def create_tenant(self, operator: Caller, name: str, email: str | None = None) -> CreatedTenantDTO:
        raise NotImplementedError

    @abstractmethod
    async def update_tenant(self, operator: Caller, tenant_id: UUID, update: TenantUpdateDTO) -> TenantDTO:
        raise NotImplementedError

    @abstractmethod
    async def delete_tenant(self, operator: Caller, tenant_id: UUID) -> None:
        """Delete the tenant with all of its guests and tags."""
        raise NotImplementedError

    @abstractmethod
    async def list_tenants(self, operator: Caller) -> list[TenantDTO]:
        raise NotImplementedError


class SqlTenantWriteModel(TenantWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def _username_taken(self, session, username: str) -> bool:
        result = await session.execute(select(Tenant.uuid).where(Tenant.username == username))
        return result.scalar_one_or_none() is not None

    async def create_tenant(self, operator: Caller, name: str, email: str | None = None) -> CreatedTenantDTO:
        tenant_authorizer.authorize_operator(operator)
        name = name.strip()
        if not name:
            raise InvalidInputError("Tenant name must not be empty")

        password = generate_password()
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            for _ in range(USERNAME_ATTEMPTS):
                username = generate_username(name)
                if not await self._username_taken(session, username):
                    break
            else:
                raise DuplicateUsernameError(username)

            tenant = Tenant(
                name=name,
                username=username,
                hashed_password=hash_password(password),
                email=email,
                event_title=DEFAULT_EVENT_TITLE,
                couple_names=name,
            )
            try:
                async with session.begin_nested():
                    session.add(tenant)
                    await session.flush()
            except IntegrityError:
                raise DuplicateUsernameError(username)

            tenant_dto = TenantDTO.from_tenant(tenant)

        logger.info(f"Operator {operator.subject} created tenant {tenant_dto.id} ({tenant_dto.username})")
        return CreatedTenantDTO(
            tenant=tenant_dto,
            credentials=TenantCredentialsDTO(username=tenant_dto.username, password=password),
        )

    async def update_tenant(self, operator: Caller, tenant_id: UUID, update: TenantUpdateDTO) -> TenantDTO:
        tenant_authorizer.authorize_operator(operator)
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            tenant = await session.get(Tenant, tenant_id)
            if tenant is None:
                raise NotFoundError("Tenant", tenant_id)

            tenant.name = update.name
            tenant.email = update.email
            if update.password:
                tenant.hashed_password = hash_password(update.password)
            await session.flush()

            tenant_dto = TenantDTO.from_tenant(tenant)

        logger.info(f"Operator {operator.subject} updated tenant {tenant_id}")
        return tenant_dto

    async def delete_tenant(self, operator: Caller, tenant_id: UUID) -> None:
        tenant_authorizer.authorize_operator(operator)
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            tenant = await session.get(Tenant, tenant_id)
            if tenant is None:
                raise NotFoundError("Tenant", tenant_id)

            # Child rows go first; not every backend enforces ON DELETE CASCADE
            guest_ids = select(Guest.uuid).where(Guest.tenant_id == tenant_id)
            await session.execute(delete(guest_tags).where(guest_tags.c.guest_id.in_(guest_ids)))
            await session.execute(delete(Guest).where(Guest.tenant_id == tenant_id))
            await session.execute(delete(Tag).where(Tag.tenant_id == tenant_id))
            await session.delete(tenant)
            await session.flush()

        logger.info(f"Operator {operator.subject} deleted tenant {tenant_id}")

    async def list_tenants(self, operator: Caller) -> list[TenantDTO]:
        tenant_authorizer.authorize_operator(operator)
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(select(Tenant).order_by(Tenant.name))
            return [TenantDTO.from_tenant(tenant) for tenant in result.scalars().all()]


class OperatorWriteModel(ABC):
    @abstractmethod
    async def create_operator(self, username: str, password: str) -> OperatorDTO:
        raise NotImplementedError

    @abstractmethod
    async def rotate_operator_password(self, username: str, new_password: str) -> OperatorDTO:
        """Replace the password and invalidate every token issued before."""
        raise NotImplementedError

    @abstractmethod
    async def deactivate_operator(self, username: str) -> OperatorDTO:
        raise NotImplementedError


class SqlOperatorWriteModel(OperatorWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def _get_by_username(self, session, username: str) -> Operator:
        result = await session.execute(select(Operator).where(Operator.username == username))
        operator = result.scalar_one_or_none()
        if operator is None:
            raise NotFoundError("Operator", username)
        return operator

    async def create_operator(self, username: str, password: str) -> OperatorDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(select(Operator.uuid).where(Operator.username == username))
            if result.scalar_one_or_none() is not None:
                raise DuplicateUsernameError(username)

            operator = Operator(username=username, hashed_password=hash_password(password), is_active=True)
            session.add(operator)
            try:
                await session.flush()
            except IntegrityError:
                raise DuplicateUsernameError(username)

            operator_dto = OperatorDTO.from_operator(operator)

        logger.info(f"Created operator {username}")
        return operator_dto

    async def rotate_operator_password(self, username: str, new_password: str) -> OperatorDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            operator = await self._get_by_username(session, username)
            operator.hashed_password = hash_password(new_password)
            operator.token_version += 1
            await session.flush()

            operator_dto = OperatorDTO.from_operator(operator)

        logger.info(f"Rotated password of operator {username}")
        return operator_dto

    async def deactivate_operator(self, username: str) -> OperatorDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            operator = await self._get_by_username(session, username)
            operator.is_active = False
            operator.token_version += 1
            await session.flush()

            operator_dto = OperatorDTO.from_operator(operator)

        logger.info(f"Deactivated operator {username}")
        return operator_dto
