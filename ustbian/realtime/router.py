"""Realtime router: the single WebSocket endpoint clients subscribe on."""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket) -> None:
    broadcaster = websocket.app.state.broadcaster
    await broadcaster.connect(websocket)
    try:
        while True:
            # Clients only listen; a text "ping" is answered so they can probe liveness.
            message = await websocket.receive_text()
            if message == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect as exc:
        logger.debug("Realtime client disconnected (code=%s)", exc.code)
    finally:
        broadcaster.disconnect(websocket)
