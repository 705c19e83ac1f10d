"""Connection handles used by the chat core.

The core only ever calls :meth:`Connection.send`, which must not block: a
slow or dead client may lose events but never delays delivery to others.
:class:`WebSocketConnection` satisfies this by queueing events and draining
the queue from a dedicated writer task.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any, Protocol

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect, WebSocketState

logger = logging.getLogger(__name__)

_CONNECTION_IDS = itertools.count(1)


def next_connection_id() -> str:
    """Return a process-unique connection identifier."""
    return f"conn-{next(_CONNECTION_IDS)}"


class Connection(Protocol):
    """Anything the chat core can deliver events to."""

    connection_id: str

    def send(self, event: str, data: Any) -> bool:
        """Queue ``event`` for delivery; return False if it was dropped."""
        ...


class WebSocketConnection:
    """Fire-and-forget event sink backed by a FastAPI WebSocket."""

    def __init__(self, websocket: WebSocket, max_queue: int = 256) -> None:
        self.connection_id = next_connection_id()
        self.websocket = websocket
        self._queue: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue(maxsize=max_queue)
        self._task: asyncio.Task[None] | None = None
        self.dropped = 0

    def send(self, event: str, data: Any) -> bool:
        if self._task is None or self._task.done():
            self.dropped += 1
            return False
        try:
            self._queue.put_nowait({"event": event, "data": data})
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Outbound queue full for %s; dropping %s event", self.connection_id, event
            )
            return False
        return True

    async def start(self) -> None:
        """Start the writer task."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._writer())

    async def close(self) -> None:
        """Flush queued events and stop the writer task."""
        if self._task is None:
            return
        if not self._task.done():
            try:
                self._queue.put_nowait(None)
            except asyncio.QueueFull:
                self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _writer(self) -> None:
        while True:
            frame = await self._queue.get()
            if frame is None:
                return
            if self.websocket.client_state != WebSocketState.CONNECTED:
                return
            try:
                await self.websocket.send_json(frame)
            except (RuntimeError, OSError, WebSocketDisconnect) as exc:
                logger.info("Delivery to %s failed: %s", self.connection_id, exc)
                return
