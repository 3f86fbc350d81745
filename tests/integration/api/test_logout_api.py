import pytest
from httpx import AsyncClient

PASSWORD = "SecurePass123!"
LOGGED_OUT = {"message": "Logged out successfully"}


async def _login(client: AsyncClient, username: str = "supervisor") -> dict:
    response = await client.post("/auth/login", json={"username": username, "password": PASSWORD})
    assert response.status_code == 200
    return response.json()


@pytest.mark.asyncio
async def test_logout_is_idempotent(client: AsyncClient):
    """
    Given a valid session
    When I log out twice with the same refresh token
    Then both calls return 200 with the same body
    And the refresh token no longer works
    """
    session = await _login(client)

    first = await client.post("/auth/logout", json={"refresh_token": session["refresh_token"]})
    second = await client.post("/auth/logout", json={"refresh_token": session["refresh_token"]})

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json() == second.json() == LOGGED_OUT

    refresh = await client.post("/auth/refresh", json={"refresh_token": session["refresh_token"]})
    assert refresh.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"refresh_token": "garbage"}, {}, None])
async def test_logout_never_reveals_token_validity(client: AsyncClient, body):
    response = await client.post("/auth/logout", json=body)

    assert response.status_code == 200
    assert response.json() == LOGGED_OUT


@pytest.mark.asyncio
async def test_logout_clears_cookie(client: AsyncClient):
    session = await _login(client)
    client.cookies.clear()
    client.cookies.set("refresh_token", session["refresh_token"])

    response = await client.post("/auth/logout")

    assert response.status_code == 200
    set_cookie = response.headers["set-cookie"].lower()
    assert set_cookie.startswith("refresh_token=")
    assert "max-age=0" in set_cookie

    refresh = await client.post("/auth/refresh", json={"refresh_token": session["refresh_token"]})
    assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_logout_other_session_keeps_current(client: AsyncClient):
    laptop = await _login(client)
    phone = await _login(client)

    await client.post("/auth/logout", json={"refresh_token": phone["refresh_token"]})

    response = await client.post("/auth/refresh", json={"refresh_token": laptop["refresh_token"]})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_logout_all_devices(client: AsyncClient, identities):
    sessions = [await _login(client) for _ in range(3)]
    headers = {"Authorization": f"Bearer {sessions[-1]['access_token']}"}

    listed = await client.get("/auth/sessions", headers=headers)
    assert listed.status_code == 200
    assert len(listed.json()["sessions"]) == 3
    assert sessions[0]["refresh_token"] not in listed.text

    response = await client.post("/auth/logout-all", headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["revoked_count"] == 3
    assert data["domain"] == "PENGELOLA"
    assert data["identity_id"] == str(identities["supervisor"][1])

    for session in sessions:
        refresh = await client.post("/auth/refresh", json={"refresh_token": session["refresh_token"]})
        assert refresh.status_code == 401

    listed = await client.get("/auth/sessions", headers=headers)
    assert listed.json()["sessions"] == []


@pytest.mark.asyncio
async def test_logout_all_requires_access_token(client: AsyncClient):
    response = await client.post("/auth/logout-all")

    assert response.status_code in (401, 403)
    assert response.json()["error"]["code"] in ("AUTHENTICATION_FAILED", "FORBIDDEN")
