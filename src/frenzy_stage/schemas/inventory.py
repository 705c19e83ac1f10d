# src/frenzy_stage/schemas/inventory.py
"""Fishing inventory and shop Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """Catalogue entry for something that can be caught and sold."""

    id: str
    name: str
    type: str = Field(..., description="common, rare, epic or legendary")
    value: int = Field(..., description="Sale price per unit")
    description: str


class ItemStack(BaseModel):
    item: Item
    quantity: int


class InventoryResponse(BaseModel):
    """A player's full inventory as returned by the API and pushed over chat."""

    items: dict[str, ItemStack] = Field(default_factory=dict)
    bait: int
    fishing_rods: int = Field(..., alias="fishingRods")
    money: int

    model_config = ConfigDict(populate_by_name=True)


class CatchRequest(BaseModel):
    address: str = Field(..., description="Wallet address of the player fishing")


class CatchResult(BaseModel):
    success: bool
    rod_broken: bool = Field(False, alias="rodBroken")
    item: Item | None = None
    message: str

    model_config = ConfigDict(populate_by_name=True)


class SellRequest(BaseModel):
    address: str
    item_id: str = Field(..., alias="itemId")
    quantity: int = Field(..., ge=1)

    model_config = ConfigDict(populate_by_name=True)


class BuyBaitRequest(BaseModel):
    address: str
    quantity: int = Field(..., ge=1)


class BuyRodRequest(BaseModel):
    address: str


class ShopResult(BaseModel):
    """Outcome of a shop transaction.

    ``money`` is the amount credited (sales) or spent (purchases).
    """

    success: bool
    message: str | None = None
    money: int | None = None
    bait: int | None = None
    rods: int | None = None
