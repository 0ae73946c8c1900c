"""In-process realtime gateway.

Every connected client receives every event as ``{"event": name, "data": payload}``
and filters client-side (by post id, or by its own user id for notification
channels). Delivery is at-most-once: there is no backlog, and a client that is
disconnected simply misses events until its next full fetch.

Emitting never waits on sockets. ``publish`` schedules a delivery task that
writes to all clients concurrently, each send bounded by ``send_timeout``.
Inside a request, services get a ``TransactionalBroadcaster`` that holds events
until the database session commits and drops them on rollback.
"""

import asyncio
import logging
from typing import Any
from uuid import UUID

from fastapi import WebSocket
from sqlalchemy import event as sa_event
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

SEND_TIMEOUT_SECONDS = 5.0


class Broadcaster:
    def __init__(self, send_timeout: float = SEND_TIMEOUT_SECONDS) -> None:
        self.send_timeout = send_timeout
        self._connections: set[WebSocket] = set()
        self._deliveries: set[asyncio.Task] = set()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.add(websocket)
        logger.debug("Realtime client connected (%d open)", len(self._connections))

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)

    def bind(self, session: AsyncSession) -> "TransactionalBroadcaster":
        return TransactionalBroadcaster(self, session)

    def publish(self, event: str, data: Any) -> None:
        """Schedule delivery of one event to all clients and return immediately."""
        if not self._connections:
            return
        task = asyncio.get_running_loop().create_task(
            self._deliver({"event": event, "data": data})
        )
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)

    async def broadcast(self, event: str, data: Any) -> None:
        self.publish(event, data)

    async def drain(self) -> None:
        """Wait until every scheduled delivery has finished."""
        while self._deliveries:
            await asyncio.gather(*self._deliveries, return_exceptions=True)

    async def _deliver(self, message: dict[str, Any]) -> None:
        targets = list(self._connections)
        results = await asyncio.gather(
            *(asyncio.wait_for(ws.send_json(message), self.send_timeout) for ws in targets),
            return_exceptions=True,
        )
        for websocket, result in zip(targets, results):
            if isinstance(result, Exception):
                logger.warning(
                    "Dropping realtime client after failed send of %s: %r",
                    message["event"],
                    result,
                )
                self.disconnect(websocket)

    # ── Likes ─────────────────────────────────────────────────────────────────

    async def emit_like_added(self, post_id: UUID, user_id: UUID) -> None:
        await self.broadcast("post.like.added", {"postId": str(post_id), "userId": str(user_id)})

    async def emit_like_removed(self, post_id: UUID, user_id: UUID) -> None:
        await self.broadcast("post.like.removed", {"postId": str(post_id), "userId": str(user_id)})

    # ── Comments ──────────────────────────────────────────────────────────────

    async def emit_comment_added(self, post_id: UUID, comment: dict[str, Any]) -> None:
        await self.broadcast(f"comment.added.{post_id}", comment)

    async def emit_comment_deleted(self, post_id: UUID, comment_id: UUID) -> None:
        await self.broadcast(f"comment.deleted.{post_id}", {"commentId": str(comment_id)})

    # ── Notifications ─────────────────────────────────────────────────────────

    async def emit_notification(self, recipient_id: UUID, notification: dict[str, Any]) -> None:
        await self.broadcast(f"notification.{recipient_id}", notification)

    async def emit_notification_deleted(self, recipient_id: UUID, notification_id: UUID) -> None:
        await self.broadcast(
            f"notification.deleted.{recipient_id}",
            {"notificationId": str(notification_id)},
        )


class TransactionalBroadcaster(Broadcaster):
    """Request-scoped emitter: events reach clients only after ``session`` commits."""

    def __init__(self, target: Broadcaster, session: AsyncSession) -> None:
        super().__init__(target.send_timeout)
        self._target = target
        self._pending: list[tuple[str, Any]] = []
        sa_event.listen(session.sync_session, "after_commit", self._release)
        sa_event.listen(session.sync_session, "after_soft_rollback", self._discard)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def broadcast(self, event: str, data: Any) -> None:
        self._pending.append((event, data))

    def _release(self, session) -> None:
        pending, self._pending = self._pending, []
        for event, data in pending:
            self._target.publish(event, data)

    def _discard(self, session, previous_transaction) -> None:
        if self._pending:
            logger.debug("Discarding %d realtime event(s) after rollback", len(self._pending))
        self._pending = []
