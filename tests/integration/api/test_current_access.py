import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_allowlisted_superadmin_without_membership(client: AsyncClient, seed, auth_headers):
    ids = await seed("superadmin")

    response = await client.get("/me", headers=auth_headers(ids["superadmin"]))

    assert response.status_code == 200
    data = response.json()
    assert data["identity"]["email"] == "root@portal.com"
    assert data["access"] == {"role": "superadmin", "tenant_id": None}
    assert data["membership"] is None


@pytest.mark.asyncio
async def test_stored_viewer_resolves_to_partner(client: AsyncClient, seed, auth_headers):
    ids = await seed("partner_acme")

    response = await client.get("/me", headers=auth_headers(ids["partner_acme"]))

    data = response.json()
    assert data["access"] == {"role": "partner", "tenant_id": "tenant-acme"}
    assert data["membership"]["role"] == "viewer"


@pytest.mark.asyncio
async def test_missing_membership_is_unknown_not_error(client: AsyncClient, seed, auth_headers):
    ids = await seed("no_membership")

    response = await client.get("/me", headers=auth_headers(ids["no_membership"]))

    assert response.status_code == 200
    assert response.json()["access"]["role"] == "unknown"


@pytest.mark.asyncio
async def test_disabled_membership_is_unknown(client: AsyncClient, seed, auth_headers):
    ids = await seed("disabled_partner")

    response = await client.get("/me", headers=auth_headers(ids["disabled_partner"]))

    data = response.json()
    assert data["access"] == {"role": "unknown", "tenant_id": None}
    assert data["membership"]["disabled"] is True


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient, seed):
    await seed()

    response = await client.get("/me")

    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
