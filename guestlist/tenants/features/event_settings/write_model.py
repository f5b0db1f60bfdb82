"""Write model for a tenant's event settings (title, date, venue...)."""

import logging
from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession

from guestlist.config.database import async_session_manager
from guestlist.errors import InvalidInputError, NotFoundError
from guestlist.tenants.authorizer import TenantScope
from guestlist.tenants.dtos import EventSettingsDTO, EventSettingsUpdateDTO
from guestlist.tenants.repository.orm_models import Tenant

logger = logging.getLogger(__name__)


class EventSettingsWriteModel(ABC):
    @abstractmethod
    async def get_event_settings(self, scope: TenantScope) -> EventSettingsDTO:
        raise NotImplementedError

    @abstractmethod
    async def update_event_settings(self, scope: TenantScope, update: EventSettingsUpdateDTO) -> EventSettingsDTO:
        """Apply the allow-listed changes to the scope's tenant.

        Raises:
            InvalidInputError: blank event title, or no concrete tenant in scope
            NotFoundError: the tenant does not exist
        """
        raise NotImplementedError


class SqlEventSettingsWriteModel(EventSettingsWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_event_settings(self, scope: TenantScope) -> EventSettingsDTO:
        tenant_id = scope.require_tenant()
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            tenant = await session.get(Tenant, tenant_id)
            if tenant is None:
                raise NotFoundError("Tenant", tenant_id)
            return EventSettingsDTO.from_tenant(tenant)

    async def update_event_settings(self, scope: TenantScope, update: EventSettingsUpdateDTO) -> EventSettingsDTO:
        tenant_id = scope.require_tenant()
        changes = update.changes()
        if "event_title" in changes:
            changes["event_title"] = changes["event_title"].strip()
            if not changes["event_title"]:
                raise InvalidInputError("Event title must not be empty")

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            tenant = await session.get(Tenant, tenant_id)
            if tenant is None:
                raise NotFoundError("Tenant", tenant_id)

            for name, value in changes.items():
                if isinstance(value, str) and name != "event_title":
                    value = value.strip() or None
                setattr(tenant, name, value)
            await session.flush()

            settings_dto = EventSettingsDTO.from_tenant(tenant)

        logger.info(f"Updated event settings {sorted(changes)} of tenant {tenant_id}")
        return settings_dto
