import pytest


async def _notifications(async_client, account):
    response = await async_client.get("/api/v1/notifications", headers=account.headers)
    return response.json()["items"]


@pytest.mark.asyncio
async def test_mention_like_comment_then_delete(async_client, register, broadcaster) -> None:
    alice = await register("alice", "Alice Liddell")
    bob = await register("bob", "Bob Builder")
    carol = await register("carol", "Carol Chen")

    created = await async_client.post(
        "/api/v1/posts", json={"content": "Check this out #demo @bob"}, headers=alice.headers
    )
    post_id = created.json()["post_id"]

    [mention] = await _notifications(async_client, bob)
    assert mention["type"] == "mention"
    assert mention["metadata"] == {"postId": post_id}

    await async_client.post(f"/api/v1/posts/{post_id}/likes", headers=carol.headers)
    await async_client.post(
        f"/api/v1/posts/{post_id}/comments", json={"content": "so cool"}, headers=bob.headers
    )

    alice_notes = await _notifications(async_client, alice)
    likes = [n for n in alice_notes if n["type"] == "like"]
    assert len(likes) == 1
    assert "Carol Chen" in likes[0]["message"]
    assert [n["type"] for n in alice_notes].count("comment") == 1

    deleted = await async_client.delete(f"/api/v1/posts/{post_id}", headers=alice.headers)
    assert deleted.status_code == 200

    assert await _notifications(async_client, bob) == []
    assert await _notifications(async_client, alice) == []
    assert len(broadcaster.named(f"notification.deleted.{bob.id}")) == 1
    assert len(broadcaster.named(f"notification.deleted.{alice.id}")) == 2

    demo = await async_client.get("/api/v1/posts/hashtag/demo")
    assert demo.json()["items"] == []
