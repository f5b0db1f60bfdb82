"""Write model for creating guests.

Allocates the guest's identifier and tenant-scoped code, enforces the
(phone number, tenant) uniqueness and persists the guest.
Returns DTOs instead of ORM models.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from guestlist.config.database import async_session_manager
from guestlist.errors import CodeSpaceExhaustedError, DuplicatePhoneError, NotFoundError
from guestlist.events import EventPublisher, GuestCreatedEvent, publish_safely
from guestlist.guests.dtos import GuestDTO, NewGuestDTO
from guestlist.guests.identity import IdentityGenerator
from guestlist.guests.repository.orm_models import Guest
from guestlist.guests.repository.queries import phone_number_taken, tenant_codes
from guestlist.tenants.authorizer import TenantScope
from guestlist.tenants.repository.orm_models import Tenant

logger = logging.getLogger(__name__)


class GuestCreateWriteModel(ABC):
    """Abstract base class for guest creation write operations."""

    @abstractmethod
    async def create_guest(self, scope: TenantScope, new_guest: NewGuestDTO) -> GuestDTO:
        """Create a guest in the scope's tenant.

        Raises:
            DuplicatePhoneError: the phone number is already used in this tenant
            CodeSpaceExhaustedError: no free code could be allocated
            NotFoundError: the tenant does not exist
        """
        raise NotImplementedError


class SqlGuestCreateWriteModel(GuestCreateWriteModel):
    """SQL implementation of guest creation write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        event_publisher: EventPublisher | None = None,
        identity_generator: IdentityGenerator | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.event_publisher = event_publisher
        self.identity_generator = identity_generator or IdentityGenerator()

    async def create_guest(self, scope: TenantScope, new_guest: NewGuestDTO) -> GuestDTO:
        tenant_id = scope.require_tenant()
        attempts = self.identity_generator.max_attempts

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            # 1. The tenant must exist in this deployment
            tenant = await session.execute(select(Tenant.uuid).where(Tenant.uuid == tenant_id))
            if tenant.scalar_one_or_none() is None:
                raise NotFoundError("Tenant", tenant_id)

            # 2. Reject a phone number already used in this tenant
            if await phone_number_taken(session, tenant_id, new_guest.phone_number):
                raise DuplicatePhoneError(new_guest.phone_number)

            # 3. Allocate identifier and code; a concurrent insert can still take
            # the same code, so the unique constraint decides and we re-roll.
            for _ in range(attempts):
                existing_codes = await tenant_codes(session, tenant_id)
                guest = Guest(
                    tenant_id=tenant_id,
                    identifier=self.identity_generator.new_identifier(),
                    code=self.identity_generator.new_code(existing_codes),
                    name=new_guest.name,
                    phone_number=new_guest.phone_number,
                    rsvp_confirmed=False,
                    verified=False,
                    verified_at=None,
                    companion_allowed=new_guest.companion_allowed,
                    companion_name=new_guest.companion_name if new_guest.companion_allowed else None,
                    companion_phone=None,
                    companion_rsvp=False,
                    companion_meal_preference=None,
                    companion_dietary_restrictions=None,
                    meal_preference=new_guest.meal_preference,
                    dietary_restrictions=new_guest.dietary_restrictions,
                    notes=new_guest.notes,
                    tags=[],
                )
                try:
                    async with session.begin_nested():
                        session.add(guest)
                        await session.flush()
                except IntegrityError:
                    if await phone_number_taken(session, tenant_id, new_guest.phone_number):
                        raise DuplicatePhoneError(new_guest.phone_number)
                    logger.info(f"Guest code {guest.code} taken concurrently in tenant {tenant_id}, retrying")
                    continue
                break
            else:
                raise CodeSpaceExhaustedError(attempts=attempts)

            guest_dto = GuestDTO.from_guest(guest)

        logger.info(f"Created guest {guest_dto.id} in tenant {tenant_id}")
        await publish_safely(
            self.event_publisher,
            GuestCreatedEvent(
                tenant_id=str(tenant_id),
                guest_id=str(guest_dto.id),
                guest_name=guest_dto.name,
            ),
        )
        return guest_dto
