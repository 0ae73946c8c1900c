import asyncio
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from shared.database.postgres import get_session
from ustbian.database import get_db
from ustbian.interactions import service as interactions_service
from ustbian.main import create_app
from ustbian.models.user import User
from ustbian.posts import service as posts_service
from ustbian.posts.schemas import CreatePostRequest
from ustbian.realtime.broadcaster import Broadcaster


class StalledSocket:
    """Accepts, then never finishes a send."""

    def __init__(self) -> None:
        self.never = asyncio.Event()

    async def accept(self) -> None:
        pass

    async def send_json(self, message: dict) -> None:
        await self.never.wait()


class FakeSocket:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.accepted = False
        self.sent: list[dict] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


@pytest.mark.asyncio
async def test_broadcast_reaches_every_connection() -> None:
    broadcaster = Broadcaster()
    first, second = FakeSocket(), FakeSocket()
    await broadcaster.connect(first)
    await broadcaster.connect(second)
    post_id, user_id = uuid4(), uuid4()

    await broadcaster.emit_like_added(post_id, user_id)
    await broadcaster.drain()

    expected = {"event": "post.like.added", "data": {"postId": str(post_id), "userId": str(user_id)}}
    assert first.accepted and second.accepted
    assert first.sent == [expected]
    assert second.sent == [expected]


@pytest.mark.asyncio
async def test_failed_send_drops_connection_without_raising() -> None:
    broadcaster = Broadcaster()
    healthy, broken = FakeSocket(), FakeSocket(fail=True)
    await broadcaster.connect(healthy)
    await broadcaster.connect(broken)

    await broadcaster.emit_comment_deleted(uuid4(), uuid4())
    await broadcaster.drain()

    assert broadcaster.connection_count == 1
    assert len(healthy.sent) == 1


@pytest.mark.asyncio
async def test_broadcast_with_no_clients_is_a_noop() -> None:
    await Broadcaster().emit_notification(uuid4(), {"message": "nobody listening"})


@pytest.mark.asyncio
async def test_event_names() -> None:
    broadcaster = Broadcaster()
    socket = FakeSocket()
    await broadcaster.connect(socket)
    post_id, recipient_id, comment_id, notification_id = uuid4(), uuid4(), uuid4(), uuid4()

    await broadcaster.emit_like_removed(post_id, recipient_id)
    await broadcaster.emit_comment_added(post_id, {"comment_id": str(comment_id)})
    await broadcaster.emit_comment_deleted(post_id, comment_id)
    await broadcaster.emit_notification(recipient_id, {"notification_id": str(notification_id)})
    await broadcaster.emit_notification_deleted(recipient_id, notification_id)
    await broadcaster.drain()

    assert [m["event"] for m in socket.sent] == [
        "post.like.removed",
        f"comment.added.{post_id}",
        f"comment.deleted.{post_id}",
        f"notification.{recipient_id}",
        f"notification.deleted.{recipient_id}",
    ]
    assert socket.sent[2]["data"] == {"commentId": str(comment_id)}
    assert socket.sent[4]["data"] == {"notificationId": str(notification_id)}


def test_websocket_endpoint_receives_broadcasts() -> None:
    app = create_app()
    post_id, user_id = uuid4(), uuid4()
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as ws:
            ws.send_text("ping")
            assert ws.receive_text() == "pong"
            assert app.state.broadcaster.connection_count == 1

            client.portal.call(app.state.broadcaster.emit_like_added, post_id, user_id)
            assert ws.receive_json() == {
                "event": "post.like.added",
                "data": {"postId": str(post_id), "userId": str(user_id)},
            }


@pytest.mark.asyncio
async def test_stalled_client_is_dropped_after_send_timeout() -> None:
    broadcaster = Broadcaster(send_timeout=0.05)
    healthy, stalled = FakeSocket(), StalledSocket()
    await broadcaster.connect(healthy)
    await broadcaster.connect(stalled)

    await asyncio.wait_for(broadcaster.emit_like_added(uuid4(), uuid4()), timeout=0.5)
    await asyncio.wait_for(broadcaster.drain(), timeout=2)

    assert len(healthy.sent) == 1
    assert broadcaster.connection_count == 1


@pytest.mark.asyncio
async def test_stalled_client_does_not_block_a_like(db_session, make_user) -> None:
    alice = await make_user("alice")
    carol = await make_user("carol")
    broadcaster = Broadcaster(send_timeout=0.05)
    post = await posts_service.create(
        alice.id, CreatePostRequest(content="hello"), db_session, broadcaster
    )
    await broadcaster.connect(StalledSocket())

    await asyncio.wait_for(
        interactions_service.like(carol.id, post.post_id, db_session, broadcaster), timeout=2
    )

    await broadcaster.drain()
    assert broadcaster.connection_count == 0


@pytest.mark.asyncio
async def test_request_events_wait_for_commit(session_factory) -> None:
    broadcaster = Broadcaster()
    socket = FakeSocket()
    await broadcaster.connect(socket)

    async with session_factory() as session:
        scoped = broadcaster.bind(session)
        await scoped.emit_like_added(uuid4(), uuid4())
        await broadcaster.drain()
        assert socket.sent == []
        assert scoped.pending_count == 1

        await session.commit()
        await broadcaster.drain()

    assert [m["event"] for m in socket.sent] == ["post.like.added"]
    assert scoped.pending_count == 0


@pytest.mark.asyncio
async def test_request_events_dropped_on_rollback(session_factory) -> None:
    broadcaster = Broadcaster()
    socket = FakeSocket()
    await broadcaster.connect(socket)

    async with session_factory() as session:
        scoped = broadcaster.bind(session)
        await session.execute(select(User))
        await scoped.emit_comment_deleted(uuid4(), uuid4())
        await session.rollback()
        await broadcaster.drain()

    assert socket.sent == []
    assert scoped.pending_count == 0


@pytest.mark.asyncio
async def test_like_request_pushes_after_commit_despite_stalled_client(session_factory) -> None:
    app = create_app()

    async def _get_db():
        async for session in get_session(session_factory):
            yield session

    app.dependency_overrides[get_db] = _get_db
    live = app.state.broadcaster
    live.send_timeout = 0.05
    listener = FakeSocket()
    await live.connect(listener)
    await live.connect(StalledSocket())

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        reg = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "alice@ustb.edu.cn",
                "username": "alice",
                "display_name": "Alice",
                "password": "password123",
            },
        )
        headers = {"Authorization": f"Bearer {reg.json()['access_token']}"}
        post_id = (
            await client.post("/api/v1/posts", json={"content": "hi"}, headers=headers)
        ).json()["post_id"]

        liked = await asyncio.wait_for(
            client.post(f"/api/v1/posts/{post_id}/likes", headers=headers), timeout=2
        )
        assert liked.status_code == 201

    await live.drain()
    assert [m["event"] for m in listener.sent] == ["post.like.added"]
    assert live.connection_count == 1
