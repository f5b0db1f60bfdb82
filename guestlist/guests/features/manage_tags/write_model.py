"""Write model for tags and guest-tag membership.

Tags belong to one tenant and their names are unique within it. Membership
changes never mix tenants: a reference to a tag or guest outside the
tenant rejects the whole operation.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from guestlist.config.database import async_session_manager
from guestlist.errors import DuplicateTagNameError, InvalidInputError, InvalidTagError, NotFoundError
from guestlist.events import EventPublisher, GuestUpdatedEvent, publish_safely
from guestlist.guests.dtos import GuestDTO, TagDTO
from guestlist.guests.repository.orm_models import DEFAULT_TAG_COLOR, Guest, Tag, guest_tags
from guestlist.guests.repository.queries import (
    get_scoped_guest,
    get_scoped_tag,
    tenant_tags_by_id,
)
from guestlist.tenants.authorizer import TenantScope

logger = logging.getLogger(__name__)


class TagWriteModel(ABC):
    @abstractmethod
    async def create_tag(self, scope: TenantScope, name: str, color: str | None = None) -> TagDTO:
        raise NotImplementedError

    @abstractmethod
    async def delete_tag(self, scope: TenantScope, tag_id: UUID) -> None:
        raise NotImplementedError

    @abstractmethod
    async def assign_tags(self, scope: TenantScope, guest_id: UUID, tag_ids: list[UUID]) -> GuestDTO:
        """Replace the guest's tag set. Raises InvalidTagError if any tag is not in the guest's tenant."""
        raise NotImplementedError

    @abstractmethod
    async def add_guests_to_tag(self, scope: TenantScope, tag_id: UUID, guest_ids: list[UUID]) -> TagDTO:
        """Add guests to a tag, keeping existing members."""
        raise NotImplementedError


class SqlTagWriteModel(TagWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        event_publisher: EventPublisher | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.event_publisher = event_publisher

    async def _tag_name_taken(self, session, tenant_id: UUID, name: str) -> bool:
        result = await session.execute(
            select(Tag.uuid).where(Tag.tenant_id == tenant_id, Tag.name == name)
        )
        return result.scalar_one_or_none() is not None

    async def _member_ids(self, session, tag_id: UUID) -> set[UUID]:
        result = await session.execute(
            select(guest_tags.c.guest_id).where(guest_tags.c.tag_id == tag_id)
        )
        return set(result.scalars().all())

    async def create_tag(self, scope: TenantScope, name: str, color: str | None = None) -> TagDTO:
        tenant_id = scope.require_tenant()
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            if await self._tag_name_taken(session, tenant_id, name):
                raise DuplicateTagNameError(name)

            tag = Tag(tenant_id=tenant_id, name=name, color=color or DEFAULT_TAG_COLOR)
            try:
                async with session.begin_nested():
                    session.add(tag)
                    await session.flush()
            except IntegrityError:
                raise DuplicateTagNameError(name)

            tag_dto = TagDTO.from_tag(tag, guest_count=0)

        logger.info(f"Created tag {tag_dto.name!r} in tenant {tenant_id}")
        return tag_dto

    async def delete_tag(self, scope: TenantScope, tag_id: UUID) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            tag = await get_scoped_tag(session, scope, tag_id)
            if tag is None:
                raise NotFoundError("Tag", tag_id)
            await session.execute(guest_tags.delete().where(guest_tags.c.tag_id == tag.uuid))
            await session.delete(tag)
            await session.flush()
        logger.info(f"Deleted tag {tag_id}")

    async def assign_tags(self, scope: TenantScope, guest_id: UUID, tag_ids: list[UUID]) -> GuestDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            guest = await get_scoped_guest(session, scope, guest_id)
            if guest is None:
                raise NotFoundError("Guest", guest_id)

            wanted = list(dict.fromkeys(tag_ids))
            tags = await tenant_tags_by_id(session, guest.tenant_id, wanted)
            missing = [tag_id for tag_id in wanted if tag_id not in tags]
            if missing:
                raise InvalidTagError(missing)

            guest.tags = [tags[tag_id] for tag_id in wanted]
            await session.flush()
            await session.refresh(guest)

            guest_dto = GuestDTO.from_guest(guest)

        await publish_safely(
            self.event_publisher,
            GuestUpdatedEvent(
                tenant_id=str(guest_dto.tenant_id),
                guest_id=str(guest_dto.id),
                rsvp_confirmed=guest_dto.rsvp_confirmed,
            ),
        )
        return guest_dto

    async def add_guests_to_tag(self, scope: TenantScope, tag_id: UUID, guest_ids: list[UUID]) -> TagDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            tag = await get_scoped_tag(session, scope, tag_id)
            if tag is None:
                raise NotFoundError("Tag", tag_id)

            wanted = set(guest_ids)
            if wanted:
                result = await session.execute(
                    select(Guest.uuid).where(Guest.tenant_id == tag.tenant_id, Guest.uuid.in_(wanted))
                )
                found = set(result.scalars().all())
                if found != wanted:
                    raise InvalidInputError("Some guests were not found for this tenant")

            members = await self._member_ids(session, tag.uuid)
            new_members = wanted - members
            if new_members:
                await session.execute(
                    insert(guest_tags),
                    [{"guest_id": guest_id, "tag_id": tag.uuid} for guest_id in new_members],
                )
            tag_dto = TagDTO.from_tag(tag, guest_count=len(members | wanted))

        logger.info(f"Added {len(new_members)} guests to tag {tag_id}")
        return tag_dto
