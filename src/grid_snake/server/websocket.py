"""WebSocket handler streaming session state and accepting input."""

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from grid_snake.server.session_manager import SessionManager
from grid_snake.session import GameSession, RenderableState

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


def _encode(state: RenderableState) -> str:
    return json.dumps(state.to_dict(), separators=(",", ":"))


def _handle_message(session: GameSession, raw: str) -> None:
    """Apply one client message; anything malformed is ignored."""
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return
    if not isinstance(msg, dict):
        return

    action = msg.get("action")
    if action == "start":
        session.start()
    elif action == "restart":
        session.restart()

    direction = msg.get("direction")
    if isinstance(direction, str):
        session.dispatch_direction(direction)


async def _pump(websocket: WebSocket, queue: asyncio.Queue[str]) -> None:
    while True:
        payload = await queue.get()
        if websocket.client_state != WebSocketState.CONNECTED:
            return
        await websocket.send_text(payload)


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Player WebSocket: send directions, receive state after every change."""
    manager = _get_manager(websocket)
    try:
        entry = manager.get(session_id)
    except KeyError:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    session = entry.session
    queue: asyncio.Queue[str] = asyncio.Queue()
    unsubscribe = session.subscribe(lambda state: queue.put_nowait(_encode(state)))
    logger.info("Client connected to session %s.", session_id)

    # Send the current snapshot so the client can render immediately.
    queue.put_nowait(_encode(session.snapshot()))
    sender = asyncio.create_task(_pump(websocket, queue))

    try:
        while True:
            raw = await websocket.receive_text()
            _handle_message(session, raw)
    except WebSocketDisconnect:
        logger.info("Client disconnected from session %s.", session_id)
    finally:
        unsubscribe()
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)
