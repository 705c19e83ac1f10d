"""Chat protocol state machine and broadcast hub.

:class:`ChatHub` owns the shared chat state (session registry, message store
and rate limiter) and the set of attached connections. Every attached
connection gets a :class:`ConnectionHandler` that walks it through
``UNAUTHENTICATED -> AUTHENTICATED -> CLOSED``.

All handler operations are synchronous. They run on the event loop without
awaiting between a check and the mutation it guards, so registration and
rate-limit accounting cannot interleave between connections.
"""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from frenzy_stage.core.errors import (
    ChatError,
    InvalidAddressError,
    InvalidMessageError,
    InvalidUsernameError,
    NotAuthenticatedError,
    RateLimitExceededError,
)
from frenzy_stage.core.settings import settings
from frenzy_stage.schemas.chat import (
    AuthenticateRequest,
    ChatMessage,
    Identity,
    OnlineUserStats,
    ReplyQuote,
    SendMessageRequest,
    dump_event,
)
from frenzy_stage.services.message_store import MessageStore
from frenzy_stage.services.rate_limit import RateLimiter
from frenzy_stage.services.sessions import SessionRegistry
from frenzy_stage.services.transport import Connection
from frenzy_stage.services.validation import (
    is_valid_address,
    is_valid_username,
    sanitize_message,
)

logger = logging.getLogger(__name__)

# Outbound event names
EVENT_ERROR = "error"
EVENT_CHAT_HISTORY = "chatHistory"
EVENT_ONLINE_USERS = "onlineUsers"
EVENT_USER_JOINED = "userJoined"
EVENT_USER_LEFT = "userLeft"
EVENT_MESSAGE = "message"
EVENT_INVENTORY_UPDATE = "inventoryUpdate"

# Inbound event names
EVENT_AUTHENTICATE = "authenticate"
EVENT_SEND_MESSAGE = "sendMessage"


class ConnectionState(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    CLOSED = "closed"


def _now_ms() -> int:
    return int(time.time() * 1000)


class ConnectionHandler:
    """Drives one connection through authentication, messaging and disconnect.

    Errors never escape the public methods: protocol errors become an
    ``error`` event on this connection and unexpected failures are logged.
    """

    def __init__(self, hub: ChatHub, connection: Connection) -> None:
        self.hub = hub
        self.connection = connection
        self.state = ConnectionState.UNAUTHENTICATED
        self.identity: Identity | None = None

    @property
    def connection_id(self) -> str:
        return self.connection.connection_id

    def handle_event(self, event: str, data: Any) -> None:
        """Dispatch an inbound event from the transport."""
        if self.state is ConnectionState.CLOSED:
            return
        if event == EVENT_AUTHENTICATE:
            self.authenticate(data)
        elif event == EVENT_SEND_MESSAGE:
            self.send_message(data)
        else:
            logger.debug("Ignoring unknown event %r from %s", event, self.connection_id)

    def authenticate(self, data: Any) -> None:
        """Validate credentials and register this connection's identity.

        This is the only way into the AUTHENTICATED state, whether the
        credentials arrived with the connection or in a later event. Once
        authenticated, further calls are ignored.
        """
        if self.state is not ConnectionState.UNAUTHENTICATED:
            logger.debug("Ignoring repeated authenticate from %s", self.connection_id)
            return
        try:
            self._authenticate(data)
        except ChatError as exc:
            self._send_error(exc)
        except Exception:
            logger.exception("Authentication error on %s", self.connection_id)
            self._send_error(ChatError("Authentication failed"))

    def send_message(self, data: Any) -> None:
        """Rate-limit, store and broadcast a chat message from this connection."""
        try:
            self._send_message(data)
        except ChatError as exc:
            self._send_error(exc)
        except Exception:
            logger.exception("Send message error on %s", self.connection_id)
            self._send_error(ChatError("Failed to send message"))

    def disconnect(self) -> None:
        """Tear down after the transport has closed. Safe to call more than once."""
        if self.state is ConnectionState.CLOSED:
            return
        identity = self.hub.registry.unregister(self.connection)
        self.state = ConnectionState.CLOSED
        self.identity = None
        self.hub.detach(self.connection)

        if identity is None:
            logger.info("Client disconnected: %s", self.connection_id)
            return

        self.hub.broadcast(EVENT_USER_LEFT, identity.address, exclude=self.connection)
        logger.info("User disconnected: %s (%s)", identity.username, identity.address)

    def _authenticate(self, data: Any) -> None:
        request = _parse(AuthenticateRequest, data)

        if not is_valid_address(request.address):
            raise InvalidAddressError()
        if not is_valid_username(request.username):
            raise InvalidUsernameError()

        identity = Identity(
            address=request.address,
            username=request.username.strip(),
            is_online=True,
            joined_at=self.hub.clock(),
        )
        self.hub.registry.register(identity, self.connection)
        self.identity = identity
        self.state = ConnectionState.AUTHENTICATED

        history = self.hub.store.tail(self.hub.history_replay)
        self.connection.send(EVENT_CHAT_HISTORY, [dump_event(m) for m in history])
        self.connection.send(
            EVENT_ONLINE_USERS,
            [dump_event(user) for user in self.hub.registry.list_active()],
        )
        self.hub.broadcast(EVENT_USER_JOINED, dump_event(identity), exclude=self.connection)

        logger.info("User authenticated: %s (%s)", identity.username, identity.address)

    def _send_message(self, data: Any) -> None:
        identity = self.identity
        if self.state is not ConnectionState.AUTHENTICATED or identity is None:
            raise NotAuthenticatedError()

        request = _parse(SendMessageRequest, data)
        text = request.message
        if not isinstance(text, str) or not text.strip():
            raise InvalidMessageError()

        if not self.hub.limiter.check(identity.address):
            raise RateLimitExceededError()

        reply_to = build_reply_quote(request.reply_to)
        message = self.hub.store.append(
            identity.address,
            identity.username,
            text,
            reply_to=reply_to,
        )
        self.hub.broadcast(EVENT_MESSAGE, dump_event(message))

        if reply_to is not None:
            logger.info("Message from %s (replying to %s)", identity.username, reply_to.username)
        else:
            logger.info("Message from %s", identity.username)

    def _send_error(self, error: ChatError) -> None:
        self.connection.send(EVENT_ERROR, error.to_payload())


def build_reply_quote(raw: Any) -> ReplyQuote | None:
    """Turn a client-supplied quote into a sanitized :class:`ReplyQuote`.

    A quote missing any of ``id``, ``username`` or ``message`` (or carrying a
    non-string or blank one) is treated as no reply at all.
    """
    if not raw:
        return None
    if not isinstance(raw, Mapping):
        logger.debug("Discarding malformed reply quote of type %s", type(raw).__name__)
        return None

    fields = (raw.get("id"), raw.get("username"), raw.get("message"))
    if not all(isinstance(value, str) and value for value in fields):
        logger.debug("Discarding reply quote with missing fields")
        return None

    quote_id, username, message = fields
    message = sanitize_message(message)
    if not message:
        logger.debug("Discarding reply quote with blank message")
        return None
    return ReplyQuote(id=quote_id, username=username, message=message)


def _parse(model: type[BaseModel], data: Any) -> Any:
    if not isinstance(data, Mapping):
        data = {}
    try:
        return model.model_validate(dict(data))
    except ValidationError:
        return model()


class ChatHub:
    """Owns shared chat state and fans events out to attached connections."""

    def __init__(
        self,
        registry: SessionRegistry | None = None,
        store: MessageStore | None = None,
        limiter: RateLimiter | None = None,
        history_replay: int | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        # Compare against None: empty components are falsy through __len__.
        if registry is None:
            registry = SessionRegistry()
        if store is None:
            store = MessageStore(max_history=settings.max_messages_history)
        if limiter is None:
            limiter = RateLimiter(
                window_seconds=settings.rate_limit_window_seconds,
                max_messages=settings.max_messages_per_window,
            )
        self.registry = registry
        self.store = store
        self.limiter = limiter
        self.history_replay = (
            history_replay if history_replay is not None else settings.chat_history_replay
        )
        self.clock = clock
        self._connections: dict[str, Connection] = {}

    def attach(
        self,
        connection: Connection,
        credentials: Mapping[str, Any] | None = None,
    ) -> ConnectionHandler:
        """Start tracking ``connection`` and return its protocol handler.

        If both an address and a username were supplied with the connection,
        authentication runs immediately through the same entry point as the
        explicit ``authenticate`` event.
        """
        self._connections[connection.connection_id] = connection
        handler = ConnectionHandler(self, connection)
        logger.info("New client connected: %s", connection.connection_id)

        if credentials and credentials.get("address") and credentials.get("username"):
            handler.authenticate(credentials)
        return handler

    def detach(self, connection: Connection) -> None:
        self._connections.pop(connection.connection_id, None)

    def broadcast(
        self,
        event: str,
        data: Any,
        exclude: Connection | None = None,
    ) -> int:
        """Deliver ``event`` to every attached connection except ``exclude``.

        Each delivery is independent; a failing recipient is logged and
        skipped.

        Returns:
            Number of connections the event was queued for.
        """
        excluded_id = exclude.connection_id if exclude is not None else None
        delivered = 0
        for connection_id, connection in list(self._connections.items()):
            if connection_id == excluded_id:
                continue
            try:
                if connection.send(event, data):
                    delivered += 1
            except Exception:
                logger.exception("Broadcast of %s to %s failed", event, connection_id)
        return delivered

    def send_to_address(self, address: str, event: str, data: Any) -> bool:
        """Push ``event`` to the connection registered for ``address``, if online."""
        connection = self.registry.connection_for(address)
        if connection is None:
            return False
        try:
            return connection.send(event, data)
        except Exception:
            logger.exception("Delivery of %s to %s failed", event, address)
            return False

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def online_user_stats(self) -> list[OnlineUserStats]:
        return [
            OnlineUserStats(username=identity.username, joined_at=identity.joined_at)
            for identity in self.registry.list_active()
        ]

    def recent_messages(self, n: int) -> list[ChatMessage]:
        return self.store.tail(n)


class _ChatHubSingleton:
    """Singleton wrapper for the process-wide ChatHub."""

    _instance: ChatHub | None = None

    @classmethod
    def get_instance(cls) -> ChatHub:
        """Get or create the singleton ChatHub instance."""
        if cls._instance is None:
            cls._instance = ChatHub()
        return cls._instance


def get_chat_hub() -> ChatHub:
    """Return the process-wide chat hub."""
    return _ChatHubSingleton.get_instance()
