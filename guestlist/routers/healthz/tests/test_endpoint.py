from guestlist.routers.healthz.router import database_is_reachable


async def test_health_check(client):
    """The health check reports a reachable test database."""
    response = await client.get("/healthz/")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "ok"
    assert data["version"] == "0.1.0"


async def test_health_check_without_database(client_factory):
    async with client_factory({database_is_reachable: lambda: False}) as client:
        response = await client.get("/healthz/")

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"
    assert response.json()["database"] == "unavailable"


async def test_root_endpoint(client):
    """Test the root endpoint returns welcome message."""
    response = await client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Welcome to the Guest List API"
