from guestlist.tenants.urls import TENANTS_URL


async def test_tenant_email_must_be_valid(client, operator_headers):
    response = await client.post(
        TENANTS_URL, json={"name": "Anna & Ben", "email": "not-an-email"}, headers=operator_headers
    )

    assert response.status_code == 422
