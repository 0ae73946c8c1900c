from uuid import uuid4

import pytest

from ustbian.interactions import service
from ustbian.interactions.exceptions import AlreadySavedError, PostUnavailableError
from ustbian.posts import service as posts_service
from ustbian.posts.schemas import CreatePostRequest


async def _post(db_session, broadcaster, author, content="bookmark me"):
    return await posts_service.create(author.id, CreatePostRequest(content=content), db_session, broadcaster)


@pytest.mark.asyncio
async def test_save_and_unsave(db_session, broadcaster, make_user) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    post = await _post(db_session, broadcaster, alice)
    broadcaster.events.clear()

    await service.save(bob.id, post.post_id, db_session)
    assert await service.check_saved(bob.id, post.post_id, db_session) is True
    # Bookmarks are private: nothing is pushed
    assert broadcaster.events == []

    assert await service.unsave(bob.id, post.post_id, db_session) is True
    assert await service.check_saved(bob.id, post.post_id, db_session) is False
    assert await service.unsave(bob.id, post.post_id, db_session) is False


@pytest.mark.asyncio
async def test_duplicate_save_conflicts(db_session, broadcaster, make_user) -> None:
    alice = await make_user("alice")
    post = await _post(db_session, broadcaster, alice)
    await service.save(alice.id, post.post_id, db_session)
    with pytest.raises(AlreadySavedError):
        await service.save(alice.id, post.post_id, db_session)


@pytest.mark.asyncio
async def test_save_missing_post_conflicts(db_session, make_user) -> None:
    alice = await make_user("alice")
    with pytest.raises(PostUnavailableError):
        await service.save(alice.id, uuid4(), db_session)


@pytest.mark.asyncio
async def test_saved_lists(db_session, broadcaster, make_user) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    first = await _post(db_session, broadcaster, alice, "one")
    second = await _post(db_session, broadcaster, alice, "two")
    unsaved = await _post(db_session, broadcaster, alice, "three")
    await service.save(bob.id, first.post_id, db_session)
    await service.save(bob.id, second.post_id, db_session)

    saved = await service.get_saved_posts_for_user(bob.id, db_session)
    assert [p.post_id for p in saved] == [second.post_id, first.post_id]

    ids = await service.get_saved_post_ids_for_posts(
        bob.id, [first.post_id, unsaved.post_id], db_session
    )
    assert ids == [first.post_id]
    assert await service.get_saved_posts_for_user(alice.id, db_session) == []
