"""Scoped lookups shared by the guest write models."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from guestlist.guests.repository.orm_models import Guest, Tag
from guestlist.tenants.authorizer import TenantScope


def scoped(stmt, model, scope: TenantScope):
    """Restrict a select/update/delete on a tenant-owned model to the scope."""
    if scope.is_unrestricted:
        return stmt
    return stmt.where(model.tenant_id == scope.tenant_id)


async def get_scoped_guest(session: AsyncSession, scope: TenantScope, guest_id: UUID) -> Guest | None:
    stmt = scoped(select(Guest).where(Guest.uuid == guest_id), Guest, scope)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_scoped_tag(session: AsyncSession, scope: TenantScope, tag_id: UUID) -> Tag | None:
    stmt = scoped(select(Tag).where(Tag.uuid == tag_id), Tag, scope)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def phone_number_taken(
    session: AsyncSession,
    tenant_id: UUID,
    phone_number: str,
    exclude_guest_id: UUID | None = None,
) -> bool:
    stmt = select(Guest.uuid).where(
        Guest.tenant_id == tenant_id,
        Guest.phone_number == phone_number,
    )
    if exclude_guest_id is not None:
        stmt = stmt.where(Guest.uuid != exclude_guest_id)
    result = await session.execute(stmt.limit(1))
    return result.scalar_one_or_none() is not None


async def tenant_codes(session: AsyncSession, tenant_id: UUID) -> set[str]:
    result = await session.execute(select(Guest.code).where(Guest.tenant_id == tenant_id))
    return set(result.scalars().all())


async def tenant_tags_by_id(session: AsyncSession, tenant_id: UUID, tag_ids: Iterable[UUID]) -> dict[UUID, Tag]:
    tag_ids = list(tag_ids)
    if not tag_ids:
        return {}
    result = await session.execute(
        select(Tag).where(Tag.tenant_id == tenant_id, Tag.uuid.in_(tag_ids))
    )
    return {tag.uuid: tag for tag in result.scalars().all()}
