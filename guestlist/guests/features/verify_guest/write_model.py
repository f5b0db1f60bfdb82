"""Write model for checking guests in at the door.

A guest moves from unverified to verified exactly once. The transition is a
single conditional UPDATE keyed by guest id and ``verified = false``, so two
scans racing each other cannot both win. Every later scan is still a
success, reported with ``first_scan=False``.
"""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from functools import partial

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from guestlist.config.database import async_session_manager
from guestlist.errors import GuestNotFoundError, InvalidInputError
from guestlist.events import EventPublisher, GuestVerifiedEvent, publish_safely
from guestlist.guests.dtos import GuestDTO, TokenKind, VerificationResultDTO
from guestlist.guests.identity import is_well_formed_code, is_well_formed_identifier
from guestlist.guests.repository.orm_models import Guest
from guestlist.guests.repository.queries import scoped
from guestlist.tenants.authorizer import TenantScope

logger = logging.getLogger(__name__)

FIRST_SCAN_MESSAGE = "Verification successful"
ALREADY_VERIFIED_MESSAGE = "This guest has already been verified"


class GuestVerifyWriteModel(ABC):
    @abstractmethod
    async def verify(self, scope: TenantScope, token_kind: TokenKind, token: str) -> VerificationResultDTO:
        """
        Check in the guest the token resolves to.

        Raises:
            InvalidInputError: malformed token, or a code without a tenant scope
            GuestNotFoundError: no guest in scope matches the token
        """
        raise NotImplementedError


class SqlGuestVerifyWriteModel(GuestVerifyWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        event_publisher: EventPublisher | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.event_publisher = event_publisher

    def _lookup(self, scope: TenantScope, token_kind: TokenKind, token: str):
        if token_kind == TokenKind.IDENTIFIER:
            if not is_well_formed_identifier(token):
                raise InvalidInputError("Malformed guest identifier")
            stmt = select(Guest).where(Guest.identifier == token)
        else:
            if not is_well_formed_code(token):
                raise InvalidInputError("Guest codes are 4 digits")
            # Codes repeat across tenants, so they only mean something inside one
            scope.require_tenant()
            stmt = select(Guest).where(Guest.code == token)
        return scoped(stmt, Guest, scope)

    async def verify(self, scope: TenantScope, token_kind: TokenKind, token: str) -> VerificationResultDTO:
        token = token.strip().lower()
        stmt = self._lookup(scope, token_kind, token)

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(stmt)
            guest = result.scalar_one_or_none()
            if guest is None:
                raise GuestNotFoundError()

            transition = await session.execute(
                update(Guest)
                .where(Guest.uuid == guest.uuid, Guest.verified.is_(False))
                .values(verified=True, rsvp_confirmed=True, verified_at=datetime.now(UTC))
                .execution_options(synchronize_session=False)
            )
            first_scan = transition.rowcount == 1
            await session.refresh(guest)

            guest_dto = GuestDTO.from_guest(guest)

        if first_scan:
            logger.info(f"Checked in guest {guest_dto.id} of tenant {guest_dto.tenant_id}")
            await publish_safely(
                self.event_publisher,
                GuestVerifiedEvent(
                    tenant_id=str(guest_dto.tenant_id),
                    guest_id=str(guest_dto.id),
                    guest_name=guest_dto.name,
                ),
            )
        else:
            logger.info(f"Repeated scan for already verified guest {guest_dto.id}")

        return VerificationResultDTO(
            success=True,
            first_scan=first_scan,
            message=FIRST_SCAN_MESSAGE if first_scan else ALREADY_VERIFIED_MESSAGE,
            guest=guest_dto,
        )
