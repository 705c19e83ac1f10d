"""Realtime chat WebSocket endpoint."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket

from frenzy_stage.api.v1.dependencies import HubDep
from frenzy_stage.core.errors import MalformedEventError
from frenzy_stage.core.settings import settings
from frenzy_stage.services.connection import EVENT_ERROR
from frenzy_stage.services.transport import WebSocketConnection

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def decode_frame(raw: str) -> tuple[str, Any]:
    """Split a ``{"event": ..., "data": ...}`` frame into its parts.

    Raises:
        MalformedEventError: If the frame is not JSON or has no event name
    """
    try:
        frame = json.loads(raw)
    except ValueError as exc:
        raise MalformedEventError() from exc

    if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
        raise MalformedEventError()
    return frame["event"], frame.get("data")


@router.websocket("/ws")
async def chat_socket(
    websocket: WebSocket,
    hub: HubDep,
    address: str | None = None,
    username: str | None = None,
) -> None:
    """Attach a client to the chat hub for the lifetime of the socket.

    ``address`` and ``username`` query parameters, when both are present,
    authenticate the connection immediately.
    """
    await websocket.accept()
    connection = WebSocketConnection(websocket, max_queue=settings.outbound_queue_size)
    await connection.start()

    credentials = {"address": address, "username": username} if address and username else None
    handler = hub.attach(connection, credentials)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            raw = message.get("text")
            if raw is None and message.get("bytes") is not None:
                raw = message["bytes"].decode("utf-8", errors="replace")
            if raw is None:
                continue

            try:
                event, data = decode_frame(raw)
            except MalformedEventError as exc:
                connection.send(EVENT_ERROR, exc.to_payload())
                continue

            handler.handle_event(event, data)
    finally:
        handler.disconnect()
        await connection.close()
