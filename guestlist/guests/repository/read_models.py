import abc
from uuid import UUID

from sqlalchemy import func, select

from guestlist.config.database import async_session_manager
from guestlist.guests.dtos import GuestDTO, RSVPInfoDTO, TagDTO
from guestlist.guests.repository.orm_models import Guest, Tag, guest_tags
from guestlist.guests.repository.queries import get_scoped_guest, scoped
from guestlist.tenants.authorizer import TenantScope
from guestlist.tenants.dtos import EventSettingsDTO
from guestlist.tenants.repository.orm_models import Tenant


class GuestReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_guest(self, scope: TenantScope, guest_id: UUID) -> GuestDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def find_by_phone(self, scope: TenantScope, phone_number: str) -> GuestDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def find_by_identifier(self, identifier: str) -> GuestDTO | None:
        """
        Look a guest up by identifier across all tenants.
        Callers acting for a tenant owner must check the result against its scope.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def list_guests(self, scope: TenantScope) -> list[GuestDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_tags(self, scope: TenantScope) -> list[TagDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_rsvp_info(self, identifier: str) -> RSVPInfoDTO | None:
        raise NotImplementedError


class SqlGuestReadModel(GuestReadModel):
    """SQL implementation of guest read model."""

    async def get_guest(self, scope: TenantScope, guest_id: UUID) -> GuestDTO | None:
        async with async_session_manager() as session:
            guest = await get_scoped_guest(session, scope, guest_id)
            return GuestDTO.from_guest(guest) if guest else None

    async def find_by_phone(self, scope: TenantScope, phone_number: str) -> GuestDTO | None:
        tenant_id = scope.require_tenant()
        async with async_session_manager() as session:
            result = await session.execute(
                select(Guest).where(
                    Guest.tenant_id == tenant_id,
                    Guest.phone_number == phone_number,
                )
            )
            guest = result.scalar_one_or_none()
            return GuestDTO.from_guest(guest) if guest else None

    async def find_by_identifier(self, identifier: str) -> GuestDTO | None:
        async with async_session_manager() as session:
            result = await session.execute(
                select(Guest).where(Guest.identifier == identifier.strip().lower())
            )
            guest = result.scalar_one_or_none()
            return GuestDTO.from_guest(guest) if guest else None

    async def list_guests(self, scope: TenantScope) -> list[GuestDTO]:
        async with async_session_manager() as session:
            stmt = scoped(select(Guest), Guest, scope).order_by(
                Guest.created_at.desc(), Guest.name
            )
            result = await session.execute(stmt)
            return [GuestDTO.from_guest(guest) for guest in result.scalars().all()]

    async def list_tags(self, scope: TenantScope) -> list[TagDTO]:
        async with async_session_manager() as session:
            stmt = (
                select(Tag, func.count(guest_tags.c.guest_id))
                .outerjoin(guest_tags, guest_tags.c.tag_id == Tag.uuid)
                .group_by(Tag.uuid)
                .order_by(Tag.name)
            )
            result = await session.execute(scoped(stmt, Tag, scope))
            return [TagDTO.from_tag(tag, guest_count=count) for tag, count in result.all()]

    async def get_rsvp_info(self, identifier: str) -> RSVPInfoDTO | None:
        async with async_session_manager() as session:
            result = await session.execute(
                select(Guest, Tenant)
                .join(Tenant, Tenant.uuid == Guest.tenant_id)
                .where(Guest.identifier == identifier.strip().lower())
            )
            row = result.one_or_none()
            if row is None:
                return None
            guest, tenant = row
            return RSVPInfoDTO(
                guest=GuestDTO.from_guest(guest),
                tenant_name=tenant.name,
                event_title=tenant.event_title,
                event=EventSettingsDTO.from_tenant(tenant),
            )
