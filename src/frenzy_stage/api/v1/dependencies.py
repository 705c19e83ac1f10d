"""Shared API dependencies."""

from __future__ import annotations

import random
from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from frenzy_stage.db.session import get_db
from frenzy_stage.services.connection import ChatHub, get_chat_hub
from frenzy_stage.services.inventory import InventoryService
from frenzy_stage.services.validation import is_valid_address

_FISHING_RNG = random.Random()


def get_chat_hub_dep() -> ChatHub:
    """Return the process-wide chat hub."""
    return get_chat_hub()


def get_fishing_rng() -> random.Random:
    """Return the random source used for fishing draws."""
    return _FISHING_RNG


# Type aliases for common dependencies
SessionDep = Annotated[Session, Depends(get_db)]
HubDep = Annotated[ChatHub, Depends(get_chat_hub_dep)]
RngDep = Annotated[random.Random, Depends(get_fishing_rng)]


def get_inventory_service(hub: HubDep, rng: RngDep) -> InventoryService:
    """Build an inventory service wired to the chat hub for live updates."""
    return InventoryService(hub=hub, rng=rng)


InventoryServiceDep = Annotated[InventoryService, Depends(get_inventory_service)]


def require_valid_address(address: str) -> str:
    """Return ``address`` unchanged or reject the request with HTTP 400.

    Raises:
        HTTPException: If the address is not ``0x`` plus 40 hex digits
    """
    if not is_valid_address(address):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid address",
        )
    return address
