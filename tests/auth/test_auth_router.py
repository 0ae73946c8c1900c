import pytest
from jose import jwt

from shared.auth.config import get_auth_settings


@pytest.mark.asyncio
async def test_health(async_client) -> None:
    response = await async_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "ustbian"}
    assert "X-Request-ID" in response.headers


@pytest.mark.asyncio
async def test_register_login_and_me(async_client, register) -> None:
    alice = await register("alice", "Alice Liddell")

    login = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "ALICE@ustb.edu.cn", "password": "password123"},
    )
    assert login.status_code == 200
    data = login.json()
    assert data["token_type"] == "bearer"

    settings = get_auth_settings()
    claims = jwt.decode(
        data["access_token"],
        settings.secret,
        algorithms=[settings.algorithm],
        audience=settings.audience,
        issuer=settings.issuer,
    )
    assert claims["sub"] == str(alice.id)

    me = await async_client.get("/api/v1/auth/me", headers=alice.headers)
    body = me.json()
    assert body["username"] == "alice"
    assert body["display_name"] == "Alice Liddell"
    assert "password_hash" not in body


@pytest.mark.asyncio
async def test_duplicate_registration_conflicts(async_client, register) -> None:
    await register("alice")
    again = await async_client.post(
        "/api/v1/auth/register",
        json={
            "email": "alice@ustb.edu.cn",
            "username": "alice_two",
            "display_name": "Alice",
            "password": "password123",
        },
    )
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "conflict"


@pytest.mark.asyncio
async def test_wrong_password_is_generic_401(async_client, register) -> None:
    await register("alice")
    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "alice@ustb.edu.cn", "password": "not-the-password"},
    )
    assert response.status_code == 401
    body = response.json()
    assert body["detail"] == "Invalid email or password."
    assert body["request_id"] == response.headers["X-Request-ID"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"email": "not-an-email", "username": "valid_name", "display_name": "V", "password": "password123"},
        {"email": "a@ustb.edu.cn", "username": "no spaces", "display_name": "V", "password": "password123"},
        {"email": "a@ustb.edu.cn", "username": "ab", "display_name": "V", "password": "password123"},
        {"email": "a@ustb.edu.cn", "username": "valid_name", "display_name": "", "password": "password123"},
        {"email": "a@ustb.edu.cn", "username": "valid_name", "display_name": "V", "password": "short"},
    ],
)
async def test_register_validation(async_client, payload) -> None:
    response = await async_client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_protected_routes_need_a_token(async_client) -> None:
    assert (await async_client.get("/api/v1/auth/me")).status_code == 401
    bad = await async_client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"})
    assert bad.status_code == 401
    assert bad.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_profile_routes(async_client, register) -> None:
    alice = await register("alice", "Alice Liddell")
    await register("bob", "Bob Builder")

    patched = await async_client.patch(
        "/api/v1/users/me", json={"bio": "Mining eng. '26"}, headers=alice.headers
    )
    assert patched.status_code == 200
    assert patched.json()["bio"] == "Mining eng. '26"

    profile = await async_client.get(f"/api/v1/users/{alice.id}")
    assert profile.status_code == 200
    assert profile.json()["bio"] == "Mining eng. '26"
    assert "email" not in profile.json()

    too_long = await async_client.patch("/api/v1/users/me", json={"bio": "x" * 161}, headers=alice.headers)
    assert too_long.status_code == 422

    search = await async_client.get("/api/v1/users/search", params={"q": "build"})
    assert [u["username"] for u in search.json()["items"]] == ["bob"]
    assert (await async_client.get("/api/v1/users/search")).json()["items"] == []
