# src/frenzy_stage/models/__init__.py
"""SQLAlchemy models for the Frenzy application."""

from .inventory import InventoryItem, PlayerInventory

__all__ = [
    "InventoryItem",
    "PlayerInventory",
]
