"""Errors raised by the chat core.

Each error carries a stable ``code`` and a user-facing ``message``. They are
caught at the connection boundary and turned into ``error`` events for the
originating client; none of them ever closes a connection.
"""

from __future__ import annotations


class ChatError(RuntimeError):
    """Base exception for recoverable chat protocol failures."""

    code = "chat_error"
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict[str, str]:
        """Return the body of the ``error`` event sent to the client."""
        return {"message": self.message, "code": self.code}


class InvalidAddressError(ChatError):
    code = "invalid_address"
    default_message = "Invalid wallet address"


class InvalidUsernameError(ChatError):
    code = "invalid_username"
    default_message = "Invalid username. Must be 3-20 characters, alphanumeric only."


class DuplicateSessionError(ChatError):
    """Raised when an address already holds an active session."""

    code = "duplicate_session"
    default_message = "Address already connected from another session"


class NotAuthenticatedError(ChatError):
    code = "not_authenticated"
    default_message = "Not authenticated"


class InvalidMessageError(ChatError):
    code = "invalid_message"
    default_message = "Invalid message"


class RateLimitExceededError(ChatError):
    code = "rate_limit_exceeded"
    default_message = "Rate limit exceeded. Please slow down."


class MalformedEventError(ChatError):
    """Raised for frames that are not ``{"event": str, "data": ...}`` JSON objects."""

    code = "malformed_event"
    default_message = "Malformed event"
