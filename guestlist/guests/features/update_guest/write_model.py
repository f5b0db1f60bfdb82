"""Write model for editing a guest's operator-managed fields."""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from guestlist.config.database import async_session_manager
from guestlist.errors import DuplicatePhoneError, NotFoundError
from guestlist.events import EventPublisher, GuestUpdatedEvent, publish_safely
from guestlist.guests.dtos import GuestDTO, GuestUpdateDTO
from guestlist.guests.repository.queries import get_scoped_guest, phone_number_taken
from guestlist.tenants.authorizer import TenantScope

logger = logging.getLogger(__name__)


class GuestUpdateWriteModel(ABC):
    @abstractmethod
    async def update_guest(
        self, scope: TenantScope, guest_id: UUID, update: GuestUpdateDTO
    ) -> GuestDTO:
        """
        Apply the allow-listed fields of ``update`` to a guest in scope.
        Raises NotFoundError for guests of other tenants, DuplicatePhoneError on phone clashes.
        """
        raise NotImplementedError


class SqlGuestUpdateWriteModel(GuestUpdateWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        event_publisher: EventPublisher | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.event_publisher = event_publisher

    async def update_guest(
        self, scope: TenantScope, guest_id: UUID, update: GuestUpdateDTO
    ) -> GuestDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            guest = await get_scoped_guest(session, scope, guest_id)
            if guest is None:
                raise NotFoundError("Guest", guest_id)

            if update.phone_number is not None and update.phone_number != guest.phone_number:
                if await phone_number_taken(
                    session, guest.tenant_id, update.phone_number, exclude_guest_id=guest.uuid
                ):
                    raise DuplicatePhoneError(update.phone_number)
                guest.phone_number = update.phone_number

            if update.name is not None:
                guest.name = update.name
            if update.notes is not None:
                guest.notes = update.notes
            if update.companion_allowed is not None:
                guest.companion_allowed = update.companion_allowed
                if not update.companion_allowed:
                    guest.clear_companion()

            try:
                await session.flush()
            except IntegrityError:
                # Lost a race against another write using the same phone number
                raise DuplicatePhoneError(guest.phone_number)
            await session.refresh(guest)

            guest_dto = GuestDTO.from_guest(guest)

        logger.info(f"Updated guest {guest_dto.id} in tenant {guest_dto.tenant_id}")
        await publish_safely(
            self.event_publisher,
            GuestUpdatedEvent(
                tenant_id=str(guest_dto.tenant_id),
                guest_id=str(guest_dto.id),
                rsvp_confirmed=guest_dto.rsvp_confirmed,
            ),
        )
        return guest_dto
