"""Credential checks for operators and tenant owners."""

import abc
import logging
from uuid import UUID

from sqlalchemy import select

from guestlist.config.database import async_session_manager
from guestlist.tenants.dtos import OperatorDTO, TenantDTO
from guestlist.tenants.repository.orm_models import Operator, Tenant
from guestlist.tenants.security import verify_password

logger = logging.getLogger(__name__)


class CredentialsReadModel(abc.ABC):
    @abc.abstractmethod
    async def authenticate_operator(self, username: str, password: str) -> OperatorDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def authenticate_tenant(self, username: str, password: str) -> TenantDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def operator_token_is_current(self, operator_id: UUID, token_version: int) -> bool:
        """False once the operator is gone, deactivated or has rotated its password."""
        raise NotImplementedError


class SqlCredentialsReadModel(CredentialsReadModel):
    async def authenticate_operator(self, username: str, password: str) -> OperatorDTO | None:
        async with async_session_manager() as session:
            result = await session.execute(select(Operator).where(Operator.username == username))
            operator = result.scalar_one_or_none()
            if operator is None or not operator.is_active:
                return None
            if not verify_password(password, operator.hashed_password):
                return None
            return OperatorDTO.from_operator(operator)

    async def authenticate_tenant(self, username: str, password: str) -> TenantDTO | None:
        async with async_session_manager() as session:
            result = await session.execute(select(Tenant).where(Tenant.username == username))
            tenant = result.scalar_one_or_none()
            if tenant is None or not verify_password(password, tenant.hashed_password):
                return None
            return TenantDTO.from_tenant(tenant)

    async def operator_token_is_current(self, operator_id: UUID, token_version: int) -> bool:
        async with async_session_manager(auto_commit=False) as session:
            result = await session.execute(
                select(Operator.is_active, Operator.token_version).where(Operator.uuid == operator_id)
            )
            row = result.one_or_none()
            if row is None:
                return False
            is_active, current_version = row
            return bool(is_active) and current_version == token_version


def get_credentials_read_model() -> CredentialsReadModel:
    """Dependency to get credentials read model instance."""
    return SqlCredentialsReadModel()
