# src/frenzy_stage/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .chat import router as chat_router
from .inventory import router as inventory_router
from .system import router as system_router

__all__ = [
    "chat_router",
    "inventory_router",
    "system_router",
]
