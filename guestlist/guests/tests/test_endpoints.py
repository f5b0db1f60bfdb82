from uuid import uuid4

import pytest

from guestlist.guests.features.create_guest.router import get_guest_create_write_model
from guestlist.guests.features.get_guests.router import get_guest_read_model
from guestlist.guests.features.submit_rsvp.router import get_rsvp_write_model
from guestlist.guests.features.update_guest.router import get_guest_update_write_model
from guestlist.guests.features.verify_guest.router import get_guest_verify_write_model
from guestlist.guests.tests.inmemory_models import (
    InMemoryGuestCreateWriteModel,
    InMemoryGuestReadModel,
    InMemoryGuestStore,
    InMemoryGuestUpdateWriteModel,
    InMemoryGuestVerifyWriteModel,
    InMemoryRSVPWriteModel,
    create_test_guest,
)
from guestlist.guests.urls import GUEST_LOOKUP_URL, GUEST_URL, GUESTS_URL, RSVP_URL, VERIFY_GUEST_URL


@pytest.fixture
def tenant_id():
    return uuid4()


@pytest.fixture
def test_guest(tenant_id):
    return create_test_guest(tenant_id, name="John Doe", code="4821", companion_allowed=True)


@pytest.fixture
def foreign_guest():
    return create_test_guest(uuid4(), name="Mallory", code="4821")


@pytest.fixture
def store(test_guest, foreign_guest, tenant_id):
    return InMemoryGuestStore(guests=[test_guest, foreign_guest], tenant_names={tenant_id: "Anna & Ben"})


@pytest.fixture
def overrides(store):
    return {
        get_guest_read_model: lambda: InMemoryGuestReadModel(store),
        get_guest_create_write_model: lambda: InMemoryGuestCreateWriteModel(store),
        get_guest_update_write_model: lambda: InMemoryGuestUpdateWriteModel(store),
        get_guest_verify_write_model: lambda: InMemoryGuestVerifyWriteModel(store),
    }


# Guest directory


async def test_create_guest(client_factory, overrides, tenant_headers, tenant_id):
    async with client_factory(overrides) as client:
        response = await client.post(
            GUESTS_URL,
            json={"name": "Alice", "phone_number": "+15550002"},
            headers=tenant_headers(tenant_id),
        )

    assert response.status_code == 201
    data = response.json()
    assert data["tenant_id"] == str(tenant_id)
    assert data["name"] == "Alice"
    assert len(data["identifier"]) == 32
    assert data["rsvp_link"].endswith(f"/rsvp/{data['identifier']}")
    assert data["verified"] is False


async def test_create_guest_duplicate_phone(client_factory, overrides, tenant_headers, tenant_id, test_guest):
    async with client_factory(overrides) as client:
        response = await client.post(
            GUESTS_URL,
            json={"name": "Johnny", "phone_number": test_guest.phone_number},
            headers=tenant_headers(tenant_id),
        )

    assert response.status_code == 409
    assert response.json()["error"] == "duplicate_phone"


async def test_operator_must_pick_tenant_to_create(client_factory, overrides, operator_headers):
    async with client_factory(overrides) as client:
        response = await client.post(
            GUESTS_URL, json={"name": "Alice", "phone_number": "+15550002"}, headers=operator_headers
        )

    assert response.status_code == 422
    assert response.json()["error"] == "invalid_input"


async def test_operator_creates_for_chosen_tenant(client_factory, overrides, operator_headers, tenant_id):
    async with client_factory(overrides) as client:
        response = await client.post(
            GUESTS_URL,
            params={"tenant_id": str(tenant_id)},
            json={"name": "Alice", "phone_number": "+15550002"},
            headers=operator_headers,
        )

    assert response.status_code == 201
    assert response.json()["tenant_id"] == str(tenant_id)


async def test_owner_lists_only_own_guests(client_factory, overrides, tenant_headers, tenant_id, test_guest):
    async with client_factory(overrides) as client:
        response = await client.get(GUESTS_URL, headers=tenant_headers(tenant_id))

    assert response.status_code == 200
    assert [guest["id"] for guest in response.json()] == [str(test_guest.id)]


async def test_owner_tenant_id_param_is_ignored(client_factory, overrides, tenant_headers, tenant_id, foreign_guest):
    async with client_factory(overrides) as client:
        response = await client.get(
            GUESTS_URL,
            params={"tenant_id": str(foreign_guest.tenant_id)},
            headers=tenant_headers(tenant_id),
        )

    assert str(foreign_guest.id) not in [guest["id"] for guest in response.json()]


async def test_operator_lists_all_guests(client_factory, overrides, operator_headers):
    async with client_factory(overrides) as client:
        response = await client.get(GUESTS_URL, headers=operator_headers)

    assert response.status_code == 200
    assert len(response.json()) == 2


async def test_find_guest_by_phone_within_tenant(client_factory, overrides, tenant_headers, tenant_id, test_guest):
    async with client_factory(overrides) as client:
        found = await client.get(
            GUESTS_URL, params={"phone_number": test_guest.phone_number}, headers=tenant_headers(tenant_id)
        )
        missing = await client.get(
            GUESTS_URL, params={"phone_number": "+19990000"}, headers=tenant_headers(tenant_id)
        )

    assert [guest["id"] for guest in found.json()] == [str(test_guest.id)]
    assert missing.json() == []


async def test_operator_phone_lookup_needs_tenant(client_factory, overrides, operator_headers, test_guest):
    async with client_factory(overrides) as client:
        response = await client.get(
            GUESTS_URL, params={"phone_number": test_guest.phone_number}, headers=operator_headers
        )

    assert response.status_code == 422


async def test_lookup_by_identifier_ignores_case(client_factory, overrides, tenant_headers, tenant_id, test_guest):
    async with client_factory(overrides) as client:
        response = await client.get(
            GUEST_LOOKUP_URL.format(identifier=test_guest.identifier.upper()),
            headers=tenant_headers(tenant_id),
        )

    assert response.status_code == 200
    assert response.json()["id"] == str(test_guest.id)
    assert response.json()["verified"] is False


async def test_lookup_of_other_tenants_guest_is_not_found(
    client_factory, overrides, tenant_headers, tenant_id, foreign_guest
):
    async with client_factory(overrides) as client:
        response = await client.get(
            GUEST_LOOKUP_URL.format(identifier=foreign_guest.identifier),
            headers=tenant_headers(tenant_id),
        )

    assert response.status_code == 404


async def test_get_guest_of_other_tenant_is_not_found(
    client_factory, overrides, tenant_headers, tenant_id, foreign_guest
):
    async with client_factory(overrides) as client:
        response = await client.get(
            GUEST_URL.format(guest_id=foreign_guest.id), headers=tenant_headers(tenant_id)
        )

    assert response.status_code == 404
    assert response.json() == {"detail": "Guest not found", "error": "not_found"}


async def test_update_guest(client_factory, overrides, tenant_headers, tenant_id, test_guest):
    async with client_factory(overrides) as client:
        response = await client.put(
            GUEST_URL.format(guest_id=test_guest.id),
            json={"name": "John Smith"},
            headers=tenant_headers(tenant_id),
        )

    assert response.status_code == 200
    assert response.json()["name"] == "John Smith"
    assert response.json()["code"] == test_guest.code


@pytest.mark.parametrize("field", ["verified", "identifier", "code", "tenant_id"])
async def test_update_rejects_protected_fields(client_factory, overrides, tenant_headers, tenant_id, test_guest, field):
    async with client_factory(overrides) as client:
        response = await client.put(
            GUEST_URL.format(guest_id=test_guest.id),
            json={field: "x"},
            headers=tenant_headers(tenant_id),
        )

    assert response.status_code == 422


# Check-in


async def test_check_in_by_code(client_factory, overrides, tenant_headers, tenant_id, test_guest):
    async with client_factory(overrides) as client:
        first = await client.post(
            VERIFY_GUEST_URL,
            json={"token_kind": "code", "token": test_guest.code},
            headers=tenant_headers(tenant_id),
        )
        second = await client.post(
            VERIFY_GUEST_URL,
            json={"token_kind": "code", "token": test_guest.code},
            headers=tenant_headers(tenant_id),
        )

    assert first.status_code == 200
    assert first.json()["first_scan"] is True
    assert first.json()["message"] == "Verification successful"
    assert first.json()["guest"]["id"] == str(test_guest.id)
    assert second.status_code == 200
    assert second.json()["first_scan"] is False
    assert second.json()["message"] == "This guest has already been verified"


async def test_operator_check_in_by_identifier(client_factory, overrides, operator_headers, foreign_guest):
    async with client_factory(overrides) as client:
        response = await client.post(
            VERIFY_GUEST_URL,
            json={"token_kind": "identifier", "token": foreign_guest.identifier},
            headers=operator_headers,
        )

    assert response.status_code == 200
    assert response.json()["guest"]["verified"] is True


async def test_operator_check_in_by_code_needs_tenant(client_factory, overrides, operator_headers, test_guest):
    async with client_factory(overrides) as client:
        response = await client.post(
            VERIFY_GUEST_URL,
            json={"token_kind": "code", "token": test_guest.code},
            headers=operator_headers,
        )

    assert response.status_code == 422


async def test_check_in_unknown_token(client_factory, overrides, tenant_headers, tenant_id):
    async with client_factory(overrides) as client:
        response = await client.post(
            VERIFY_GUEST_URL,
            json={"token_kind": "code", "token": "9999"},
            headers=tenant_headers(tenant_id),
        )

    assert response.status_code == 404
    assert response.json()["error"] == "guest_not_found"


async def test_check_in_needs_token_kind(client_factory, overrides, tenant_headers, tenant_id, test_guest):
    async with client_factory(overrides) as client:
        response = await client.post(
            VERIFY_GUEST_URL, json={"token": test_guest.code}, headers=tenant_headers(tenant_id)
        )

    assert response.status_code == 422


# Public RSVP


async def test_get_rsvp_info(client_factory, overrides, test_guest):
    async with client_factory(overrides) as client:
        response = await client.get(RSVP_URL.format(identifier=test_guest.identifier))

    assert response.status_code == 200
    data = response.json()
    assert data["tenant_name"] == "Anna & Ben"
    assert data["event_title"] == "Wedding Invitation"
    assert data["guest"]["name"] == "John Doe"
    assert data["guest"]["code"] == test_guest.code
    assert "phone_number" not in data["guest"]
    assert "notes" not in data["guest"]


async def test_get_rsvp_info_unknown(client_factory, overrides):
    async with client_factory(overrides) as client:
        response = await client.get(RSVP_URL.format(identifier="0" * 32))

    assert response.status_code == 404
    assert response.json()["detail"] == "Invalid or expired RSVP link"


async def test_submit_rsvp(client_factory, overrides, store, test_guest):
    write_model = InMemoryRSVPWriteModel(store)
    overrides[get_rsvp_write_model] = lambda: write_model

    async with client_factory(overrides) as client:
        response = await client.put(
            RSVP_URL.format(identifier=test_guest.identifier),
            json={
                "attending": True,
                "companion": {"name": "Eve", "attending": True},
                "meal_preference": "Vegetarian",
            },
        )

    assert response.status_code == 200
    data = response.json()
    assert data["rsvp_confirmed"] is True
    assert data["meal_preference"] == "Vegetarian"
    assert data["companion"]["name"] == "Eve"
    assert write_model.submissions[0].companion.name == "Eve"


async def test_submit_rsvp_companion_not_allowed(client_factory, overrides, store, foreign_guest):
    overrides[get_rsvp_write_model] = lambda: InMemoryRSVPWriteModel(store)

    async with client_factory(overrides) as client:
        response = await client.put(
            RSVP_URL.format(identifier=foreign_guest.identifier),
            json={"attending": True, "companion": {"name": "Eve"}},
        )

    assert response.status_code == 422
    assert response.json()["error"] == "invalid_input"


async def test_submit_rsvp_unknown_identifier(client_factory, overrides, store):
    overrides[get_rsvp_write_model] = lambda: InMemoryRSVPWriteModel(store)

    async with client_factory(overrides) as client:
        response = await client.put(RSVP_URL.format(identifier="0" * 32), json={"attending": False})

    assert response.status_code == 404
