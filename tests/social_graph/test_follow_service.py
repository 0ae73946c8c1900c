from uuid import uuid4

import pytest

from ustbian.exceptions import AlreadyFollowing, CannotFollowSelf, UserNotFound
from ustbian.models.enums import NotificationType
from ustbian.notifications import service as notifications_service
from ustbian.social_graph import service


@pytest.mark.asyncio
async def test_follow_self_always_conflicts(db_session, broadcaster, make_user) -> None:
    alice = await make_user("alice")
    with pytest.raises(CannotFollowSelf):
        await service.follow(db_session, broadcaster, alice.id, alice.id)
    ghost = uuid4()
    with pytest.raises(CannotFollowSelf):
        await service.follow(db_session, broadcaster, ghost, ghost)


@pytest.mark.asyncio
async def test_follow_unknown_user(db_session, broadcaster, make_user) -> None:
    alice = await make_user("alice")
    with pytest.raises(UserNotFound):
        await service.follow(db_session, broadcaster, alice.id, uuid4())


@pytest.mark.asyncio
async def test_follow_notifies_and_rejects_duplicates(db_session, broadcaster, make_user) -> None:
    alice = await make_user("alice", "Alice A")
    bob = await make_user("bob")

    await service.follow(db_session, broadcaster, alice.id, bob.id)
    assert await service.is_following(db_session, alice.id, bob.id) is True
    assert await service.is_following(db_session, bob.id, alice.id) is False

    [note] = await notifications_service.get_for_user(bob.id, db_session)
    assert note.type is NotificationType.FOLLOW
    assert note.context == {"followerId": str(alice.id)}
    assert note.message == "Alice A started following you"

    with pytest.raises(AlreadyFollowing):
        await service.follow(db_session, broadcaster, alice.id, bob.id)


@pytest.mark.asyncio
async def test_unfollow_is_idempotent(db_session, broadcaster, make_user) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    await service.follow(db_session, broadcaster, alice.id, bob.id)

    assert await service.unfollow(db_session, alice.id, bob.id) is True
    assert await service.unfollow(db_session, alice.id, bob.id) is False
    assert await service.is_following(db_session, alice.id, bob.id) is False


@pytest.mark.asyncio
async def test_followers_and_following(db_session, broadcaster, make_user) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    carol = await make_user("carol")
    await service.follow(db_session, broadcaster, alice.id, carol.id)
    await service.follow(db_session, broadcaster, bob.id, carol.id)
    await service.follow(db_session, broadcaster, carol.id, alice.id)

    followers = await service.get_followers(db_session, carol.id)
    assert {u.username for u in followers} == {"alice", "bob"}
    following = await service.get_following(db_session, carol.id)
    assert [u.username for u in following] == ["alice"]
    assert await service.get_following(db_session, bob.id) == [carol]
