"""Write model for the public RSVP form.

Guests reach their RSVP through the identifier in their link, so lookups
never go through a tenant scope. Check-in state is not touched here.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from guestlist.config.database import async_session_manager
from guestlist.errors import GuestNotFoundError, InvalidInputError
from guestlist.events import EventPublisher, GuestUpdatedEvent, publish_safely
from guestlist.guests.dtos import GuestDTO, RSVPSubmissionDTO
from guestlist.guests.identity import is_well_formed_identifier
from guestlist.guests.repository.orm_models import Guest

logger = logging.getLogger(__name__)


class RSVPWriteModel(ABC):
    @abstractmethod
    async def submit_rsvp(self, identifier: str, submission: RSVPSubmissionDTO) -> GuestDTO:
        """
        Record a guest's answer. Resubmitting overwrites the previous answer.

        Raises:
            GuestNotFoundError: the identifier does not resolve to a guest
            InvalidInputError: companion details for a guest without a companion
        """
        raise NotImplementedError


class SqlRSVPWriteModel(RSVPWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        event_publisher: EventPublisher | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.event_publisher = event_publisher

    @staticmethod
    def _apply(guest: Guest, submission: RSVPSubmissionDTO) -> None:
        guest.rsvp_confirmed = submission.attending
        guest.meal_preference = submission.meal_preference
        guest.dietary_restrictions = submission.dietary_restrictions

        companion = submission.companion
        if not submission.attending or companion is None:
            guest.clear_companion()
            return

        guest.companion_name = companion.name
        guest.companion_phone = companion.phone
        guest.companion_rsvp = companion.attending
        guest.companion_meal_preference = companion.meal_preference
        guest.companion_dietary_restrictions = companion.dietary_restrictions

    async def submit_rsvp(self, identifier: str, submission: RSVPSubmissionDTO) -> GuestDTO:
        identifier = identifier.strip().lower()
        if not is_well_formed_identifier(identifier):
            raise GuestNotFoundError()

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(select(Guest).where(Guest.identifier == identifier))
            guest = result.scalar_one_or_none()
            if guest is None:
                raise GuestNotFoundError()

            if submission.companion is not None and not guest.companion_allowed:
                raise InvalidInputError("This guest is not allowed to bring a companion")

            self._apply(guest, submission)
            await session.flush()
            await session.refresh(guest)

            guest_dto = GuestDTO.from_guest(guest)

        logger.info(
            f"RSVP from guest {guest_dto.id} of tenant {guest_dto.tenant_id}: "
            f"{'attending' if submission.attending else 'declined'}"
        )
        await publish_safely(
            self.event_publisher,
            GuestUpdatedEvent(
                tenant_id=str(guest_dto.tenant_id),
                guest_id=str(guest_dto.id),
                rsvp_confirmed=guest_dto.rsvp_confirmed,
            ),
        )
        return guest_dto
