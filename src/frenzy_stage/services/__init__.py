# src/frenzy_stage/services/__init__.py
"""Business logic services for the Frenzy application."""

from .connection import ChatHub, ConnectionHandler, ConnectionState
from .inventory import InventoryService
from .message_store import MessageStore
from .rate_limit import RateLimiter, RateLimitSweeper
from .sessions import SessionRegistry

__all__ = [
    "ChatHub",
    "ConnectionHandler",
    "ConnectionState",
    "InventoryService",
    "MessageStore",
    "RateLimiter",
    "RateLimitSweeper",
    "SessionRegistry",
]
