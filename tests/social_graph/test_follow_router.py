import pytest


@pytest.mark.asyncio
async def test_follow_flow(async_client, register) -> None:
    alice = await register("alice")
    bob = await register("bob")
    url = f"/api/v1/users/{bob.id}/follow"

    followed = await async_client.post(url, headers=alice.headers)
    assert followed.status_code == 201
    assert (await async_client.post(url, headers=alice.headers)).status_code == 409
    assert (await async_client.get(url, headers=alice.headers)).json() == {"following": True}

    followers = await async_client.get(f"{url}/followers")
    assert [u["username"] for u in followers.json()["items"]] == ["alice"]
    following = await async_client.get(f"/api/v1/users/{alice.id}/follow/following")
    assert [u["username"] for u in following.json()["items"]] == ["bob"]

    for _ in range(2):
        assert (await async_client.delete(url, headers=alice.headers)).json()["success"] is True
    assert (await async_client.get(f"{url}/followers")).json()["items"] == []


@pytest.mark.asyncio
async def test_self_follow_conflicts(async_client, register) -> None:
    alice = await register("alice")
    response = await async_client.post(f"/api/v1/users/{alice.id}/follow", headers=alice.headers)
    assert response.status_code == 409
    assert response.json()["detail"] == "You cannot follow yourself."


@pytest.mark.asyncio
async def test_follow_unknown_user_is_404(async_client, register) -> None:
    alice = await register("alice")
    response = await async_client.post(
        "/api/v1/users/00000000-0000-0000-0000-000000000000/follow", headers=alice.headers
    )
    assert response.status_code == 404
