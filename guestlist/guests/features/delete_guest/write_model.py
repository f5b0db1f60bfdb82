"""Write model for removing a guest from a tenant's list."""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from guestlist.config.database import async_session_manager
from guestlist.errors import NotFoundError
from guestlist.events import EventPublisher, GuestDeletedEvent, publish_safely
from guestlist.guests.repository.queries import get_scoped_guest
from guestlist.tenants.authorizer import TenantScope

logger = logging.getLogger(__name__)


class GuestDeleteWriteModel(ABC):
    @abstractmethod
    async def delete_guest(self, scope: TenantScope, guest_id: UUID) -> None:
        """Delete a guest in scope; guests of other tenants raise NotFoundError."""
        raise NotImplementedError


class SqlGuestDeleteWriteModel(GuestDeleteWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        event_publisher: EventPublisher | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.event_publisher = event_publisher

    async def delete_guest(self, scope: TenantScope, guest_id: UUID) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            guest = await get_scoped_guest(session, scope, guest_id)
            if guest is None:
                raise NotFoundError("Guest", guest_id)
            tenant_id = guest.tenant_id
            # Tag links are removed with the guest through the secondary relationship
            await session.delete(guest)
            await session.flush()

        logger.info(f"Deleted guest {guest_id} from tenant {tenant_id}")
        await publish_safely(
            self.event_publisher,
            GuestDeletedEvent(tenant_id=str(tenant_id), guest_id=str(guest_id)),
        )
