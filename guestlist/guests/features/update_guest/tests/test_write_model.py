"""Tests for SqlGuestUpdateWriteModel."""

from uuid import uuid4

import pytest

from guestlist.errors import DuplicatePhoneError, NotFoundError
from guestlist.guests.dtos import CompanionDTO, GuestUpdateDTO, NewGuestDTO, RSVPSubmissionDTO
from guestlist.guests.features.create_guest.write_model import SqlGuestCreateWriteModel
from guestlist.guests.features.submit_rsvp.write_model import SqlRSVPWriteModel
from guestlist.guests.features.update_guest.write_model import SqlGuestUpdateWriteModel
from guestlist.tenants.authorizer import Role, TenantScope


@pytest.fixture
def create_model(db_session):
    return SqlGuestCreateWriteModel(session_overwrite=db_session)


@pytest.fixture
def update_model(db_session):
    return SqlGuestUpdateWriteModel(session_overwrite=db_session)


async def test_update_allowed_fields(create_model, update_model, tenant_scope):
    guest = await create_model.create_guest(tenant_scope, NewGuestDTO(name="Alice", phone_number="+15550001"))

    result = await update_model.update_guest(
        tenant_scope,
        guest.id,
        GuestUpdateDTO(name="Alice Smith", phone_number="+15550009", notes="Table 4"),
    )

    assert result.name == "Alice Smith"
    assert result.phone_number == "+15550009"
    assert result.notes == "Table 4"
    assert result.identifier == guest.identifier
    assert result.code == guest.code


async def test_update_keeps_unset_fields(create_model, update_model, tenant_scope):
    guest = await create_model.create_guest(
        tenant_scope, NewGuestDTO(name="Alice", phone_number="+15550001", notes="VIP")
    )

    result = await update_model.update_guest(tenant_scope, guest.id, GuestUpdateDTO(name="Al"))

    assert result.name == "Al"
    assert result.phone_number == "+15550001"
    assert result.notes == "VIP"


async def test_update_to_taken_phone(create_model, update_model, tenant_scope):
    await create_model.create_guest(tenant_scope, NewGuestDTO(name="Alice", phone_number="+15550001"))
    bob = await create_model.create_guest(tenant_scope, NewGuestDTO(name="Bob", phone_number="+15550002"))

    with pytest.raises(DuplicatePhoneError):
        await update_model.update_guest(tenant_scope, bob.id, GuestUpdateDTO(phone_number="+15550001"))


async def test_update_to_own_phone_is_allowed(create_model, update_model, tenant_scope):
    alice = await create_model.create_guest(tenant_scope, NewGuestDTO(name="Alice", phone_number="+15550001"))

    result = await update_model.update_guest(
        tenant_scope, alice.id, GuestUpdateDTO(name="Alice", phone_number="+15550001")
    )

    assert result.phone_number == "+15550001"


async def test_update_guest_of_other_tenant(create_model, update_model, tenant_scope, other_tenant):
    guest = await create_model.create_guest(tenant_scope, NewGuestDTO(name="Alice", phone_number="+15550001"))
    other_scope = TenantScope.for_tenant(other_tenant.uuid, role=Role.TENANT_OWNER)

    with pytest.raises(NotFoundError):
        await update_model.update_guest(other_scope, guest.id, GuestUpdateDTO(name="Mallory"))


async def test_update_unknown_guest(update_model, tenant_scope):
    with pytest.raises(NotFoundError):
        await update_model.update_guest(tenant_scope, uuid4(), GuestUpdateDTO(name="Nobody"))


async def test_disallowing_companion_clears_details(db_session, create_model, update_model, tenant_scope):
    guest = await create_model.create_guest(
        tenant_scope, NewGuestDTO(name="Alice", phone_number="+15550001", companion_allowed=True)
    )
    await SqlRSVPWriteModel(session_overwrite=db_session).submit_rsvp(
        guest.identifier,
        RSVPSubmissionDTO(attending=True, companion=CompanionDTO(name="Eve", attending=True)),
    )

    result = await update_model.update_guest(tenant_scope, guest.id, GuestUpdateDTO(companion_allowed=False))

    assert result.companion_allowed is False
    assert result.companion is None

    reallowed = await update_model.update_guest(tenant_scope, guest.id, GuestUpdateDTO(companion_allowed=True))
    assert reallowed.companion.name is None
    assert reallowed.companion.attending is False
