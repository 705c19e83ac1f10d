"""Fishing and shop endpoints.

Handlers are ``async`` so they run on the event loop alongside the chat hub;
inventory pushes are queued onto chat connections from that same loop.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from frenzy_stage.api.v1.dependencies import (
    InventoryServiceDep,
    SessionDep,
    require_valid_address,
)
from frenzy_stage.schemas.inventory import (
    BuyBaitRequest,
    BuyRodRequest,
    CatchRequest,
    CatchResult,
    InventoryResponse,
    SellRequest,
    ShopResult,
)

router = APIRouter(tags=["inventory"])

AddressDep = Annotated[str, Depends(require_valid_address)]


@router.get("/inventory/{address}", response_model=InventoryResponse)
async def get_inventory(
    address: AddressDep,
    db: SessionDep,
    service: InventoryServiceDep,
) -> InventoryResponse:
    """Return the player's inventory, creating a starter kit on first visit."""
    return service.get_inventory(db, address)


@router.post("/fishing/catch", response_model=CatchResult, response_model_exclude_none=True)
async def catch_fish(
    request: CatchRequest,
    db: SessionDep,
    service: InventoryServiceDep,
) -> CatchResult:
    """Spend one bait and roll for a catch."""
    address = require_valid_address(request.address)
    return service.catch(db, address)


@router.post("/shop/sell", response_model=ShopResult, response_model_exclude_none=True)
async def sell_items(
    request: SellRequest,
    db: SessionDep,
    service: InventoryServiceDep,
) -> ShopResult:
    """Sell caught items for money."""
    address = require_valid_address(request.address)
    return service.sell(db, address, request.item_id, request.quantity)


@router.post("/shop/buy-bait", response_model=ShopResult, response_model_exclude_none=True)
async def buy_bait(
    request: BuyBaitRequest,
    db: SessionDep,
    service: InventoryServiceDep,
) -> ShopResult:
    address = require_valid_address(request.address)
    return service.buy_bait(db, address, request.quantity)


@router.post("/shop/buy-rod", response_model=ShopResult, response_model_exclude_none=True)
async def buy_rod(
    request: BuyRodRequest,
    db: SessionDep,
    service: InventoryServiceDep,
) -> ShopResult:
    address = require_valid_address(request.address)
    return service.buy_rod(db, address)
