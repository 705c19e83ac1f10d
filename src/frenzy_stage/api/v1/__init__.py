# src/frenzy_stage/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import chat_router, inventory_router, system_router

__all__ = [
    "chat_router",
    "inventory_router",
    "system_router",
]
