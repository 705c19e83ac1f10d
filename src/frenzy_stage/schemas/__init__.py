# src/frenzy_stage/schemas/__init__.py
"""
Pydantic schemas for chat events and API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .chat import ChatMessage, Identity, ReplyQuote
from .inventory import (
    BuyBaitRequest,
    BuyRodRequest,
    CatchRequest,
    CatchResult,
    InventoryResponse,
    Item,
    SellRequest,
    ShopResult,
)

__all__ = [
    "ChatMessage", "Identity", "ReplyQuote",
    "BuyBaitRequest", "BuyRodRequest",
    "CatchRequest", "CatchResult",
    "InventoryResponse", "Item",
    "SellRequest", "ShopResult",
]
