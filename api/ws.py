"""WebSocket endpoint for real-time scene notifications."""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, FastAPI, WebSocket, WebSocketDisconnect

import config

router = APIRouter()

# Connected clients
connections: list[WebSocket] = []


async def broadcast(message: dict[str, Any]) -> None:
    """Send a message to all connected WebSocket clients.

    Args:
        message: The JSON-serializable message to send.
    """
    disconnected = []
    for i, ws in enumerate(connections):
        try:
            await ws.send_json(message)
        except (WebSocketDisconnect, RuntimeError):
            disconnected.append(i)
    # Clean up disconnected clients
    for i in reversed(disconnected):
        connections.pop(i)


async def flush_notifications(app: FastAPI) -> int:
    """Broadcast every buffered scene notification.

    Returns:
        Number of notifications sent.
    """
    pending = app.state.listener.drain()
    for notification in pending:
        await broadcast({"type": "scene", **notification.model_dump(mode="json")})
    return len(pending)


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """WebSocket feed of entity and scene-transition notifications.

    On connect the client gets the current roster positions, then every
    notification as the arena changes.
    """
    await websocket.accept()
    connections.append(websocket)

    arena = websocket.app.state.arena
    try:
        await websocket.send_json({
            "type": "connected",
            "arena": arena.name,
            "status": arena.status.value,
            "positions": {cid: list(e.position) for cid, e in arena.roster.items()},
        })

        # Listen for client messages and flush notifications between them
        while True:
            try:
                await asyncio.wait_for(websocket.receive_text(), timeout=config.WS_FLUSH_INTERVAL)
            except asyncio.TimeoutError:
                await flush_notifications(websocket.app)
            except WebSocketDisconnect:
                break
    finally:
        if websocket in connections:
            connections.remove(websocket)
