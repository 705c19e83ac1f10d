"""Bounded in-memory chat history."""

from __future__ import annotations

import time
import uuid
from collections import deque
from collections.abc import Callable

from frenzy_stage.schemas.chat import ChatMessage, ReplyQuote
from frenzy_stage.services.validation import sanitize_message


def _now_ms() -> int:
    return int(time.time() * 1000)


class MessageStore:
    """Append-only log that keeps the most recent ``max_history`` messages.

    Older messages fall off the head once the cap is exceeded and cannot be
    recovered.
    """

    def __init__(
        self,
        max_history: int = 1000,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.max_history = max_history
        self._clock = clock
        self._messages: deque[ChatMessage] = deque(maxlen=max_history)

    def append(
        self,
        address: str,
        username: str,
        message: str,
        reply_to: ReplyQuote | None = None,
    ) -> ChatMessage:
        """Store a new message and return it with its id and timestamp assigned."""
        stored = ChatMessage(
            id=str(uuid.uuid4()),
            address=address,
            username=username,
            message=sanitize_message(message),
            timestamp=self._clock(),
            reply_to=reply_to,
        )
        self._messages.append(stored)
        return stored

    def tail(self, n: int) -> list[ChatMessage]:
        """Return the most recent ``n`` messages, oldest first."""
        if n <= 0:
            return []
        if n >= len(self._messages):
            return list(self._messages)
        return list(self._messages)[-n:]

    def __len__(self) -> int:
        return len(self._messages)
