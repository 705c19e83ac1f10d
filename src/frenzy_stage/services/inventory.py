"""Fishing game inventory and shop services.

Every mutating operation commits and then, if the player currently holds a
chat session, pushes the new inventory to that connection as an
``inventoryUpdate`` event.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Final

from sqlalchemy.orm import Session

from frenzy_stage.core.settings import settings
from frenzy_stage.models import InventoryItem, PlayerInventory
from frenzy_stage.schemas.chat import dump_event
from frenzy_stage.schemas.inventory import (
    CatchResult,
    InventoryResponse,
    Item,
    ItemStack,
    ShopResult,
)
from frenzy_stage.services.connection import EVENT_INVENTORY_UPDATE, ChatHub

logger = logging.getLogger(__name__)

# Cumulative draw thresholds for a single cast
NOTHING_THRESHOLD: Final[float] = 0.10
COMMON_THRESHOLD: Final[float] = 0.70
RARE_THRESHOLD: Final[float] = 0.90

COMMON_FISH: Final = Item(
    id="common-fish",
    name="Common Fish",
    type="common",
    value=10,
    description="A regular fish from the volcanic pool",
)
RARE_FISH: Final = (
    Item(
        id="silver-fish",
        name="Silver Fish",
        type="rare",
        value=50,
        description="A shiny silver fish from the depths",
    ),
    Item(
        id="gold-fish",
        name="Gold Fish",
        type="rare",
        value=100,
        description="A shiny gold fish from the depths",
    ),
)
EPIC_FISH: Final = (
    Item(
        id="diamond-fish",
        name="Diamond Fish",
        type="epic",
        value=500,
        description="An extremely rare diamond fish!",
    ),
    Item(
        id="mythril-fish",
        name="Mythril Fish",
        type="legendary",
        value=1000,
        description="An extremely rare mythril fish!",
    ),
)


@dataclass(frozen=True)
class Catch:
    """What a single cast produced, before it is applied to an inventory."""

    item: Item | None
    rod_broken: bool


def roll_catch(rng: random.Random, rod_break_chance: float | None = None) -> Catch:
    """Draw the outcome of one cast."""
    if rod_break_chance is None:
        rod_break_chance = settings.rod_break_chance
    draw = rng.random()
    rod_broken = rng.random() < rod_break_chance

    if draw < NOTHING_THRESHOLD:
        item = None
    elif draw < COMMON_THRESHOLD:
        item = COMMON_FISH
    elif draw < RARE_THRESHOLD:
        item = rng.choice(RARE_FISH)
    else:
        item = rng.choice(EPIC_FISH)
    return Catch(item=item, rod_broken=rod_broken)


def describe_catch(catch: Catch) -> str:
    """Return the player-facing message for a cast."""
    item = catch.item
    if item is None:
        return "Your fishing rod broke!" if catch.rod_broken else "You didn't catch anything..."
    if item.type == "common":
        if catch.rod_broken:
            return "You caught a fish but your rod broke!"
        return f"You caught a {item.name}!"

    suffix = " But your rod broke!" if catch.rod_broken else ""
    if item.type == "rare":
        return f"Amazing! You caught a {item.name}!{suffix}"
    return f"INCREDIBLE! You caught a {item.name}!{suffix}"


def serialize_inventory(inventory: PlayerInventory) -> InventoryResponse:
    """Convert an inventory row and its item stacks into the API shape."""
    items = {
        row.item_id: ItemStack(
            item=Item(
                id=row.item_id,
                name=row.name,
                type=row.item_type,
                value=row.value,
                description=row.description,
            ),
            quantity=row.quantity,
        )
        for row in inventory.items
    }
    return InventoryResponse(
        items=items,
        bait=inventory.bait,
        fishing_rods=inventory.fishing_rods,
        money=inventory.money,
    )


class InventoryService:
    """Inventory reads and shop transactions for wallet addresses."""

    def __init__(self, hub: ChatHub | None = None, rng: random.Random | None = None) -> None:
        self.hub = hub
        self.rng = rng or random.Random()

    def get_or_create(self, db: Session, address: str) -> PlayerInventory:
        """Return the address's inventory, creating a starter one on first use."""
        inventory = db.get(PlayerInventory, address)
        if inventory is None:
            inventory = PlayerInventory(
                address=address,
                bait=settings.starting_bait,
                fishing_rods=settings.starting_fishing_rods,
                money=settings.starting_money,
            )
            db.add(inventory)
            db.commit()
            db.refresh(inventory)
            logger.info("Initialized inventory for %s", address)
        return inventory

    def get_inventory(self, db: Session, address: str) -> InventoryResponse:
        return serialize_inventory(self.get_or_create(db, address))

    def catch(self, db: Session, address: str) -> CatchResult:
        """Spend one bait on a cast and add whatever was caught."""
        inventory = self.get_or_create(db, address)
        if inventory.bait <= 0:
            return CatchResult(success=False, message="No bait available")

        inventory.bait -= 1
        catch = roll_catch(self.rng)
        if catch.rod_broken:
            inventory.fishing_rods = max(0, inventory.fishing_rods - 1)
        if catch.item is not None:
            self._add_item(db, inventory, catch.item)

        db.commit()
        self._push_update(inventory)

        return CatchResult(
            success=catch.item is not None,
            rod_broken=catch.rod_broken,
            item=catch.item,
            message=describe_catch(catch),
        )

    def sell(self, db: Session, address: str, item_id: str, quantity: int) -> ShopResult:
        """Sell ``quantity`` of ``item_id`` at the value recorded on the stack."""
        inventory = self.get_or_create(db, address)
        stack = db.get(InventoryItem, (address, item_id))
        if stack is None or stack.quantity < quantity:
            return ShopResult(success=False, message="Not enough items")

        total_value = stack.value * quantity
        stack.quantity -= quantity
        if stack.quantity <= 0:
            inventory.items.remove(stack)
        inventory.money += total_value

        db.commit()
        self._push_update(inventory)
        return ShopResult(success=True, money=total_value)

    def buy_bait(self, db: Session, address: str, quantity: int) -> ShopResult:
        inventory = self.get_or_create(db, address)
        total_cost = settings.bait_price * quantity
        if inventory.money < total_cost:
            return ShopResult(success=False, message="Not enough money")

        inventory.money -= total_cost
        inventory.bait += quantity

        db.commit()
        self._push_update(inventory)
        return ShopResult(success=True, bait=quantity, money=total_cost)

    def buy_rod(self, db: Session, address: str) -> ShopResult:
        inventory = self.get_or_create(db, address)
        if inventory.money < settings.rod_price:
            return ShopResult(success=False, message="Not enough money")

        inventory.money -= settings.rod_price
        inventory.fishing_rods += 1

        db.commit()
        self._push_update(inventory)
        return ShopResult(success=True, rods=1, money=settings.rod_price)

    def _add_item(self, db: Session, inventory: PlayerInventory, item: Item) -> None:
        stack = db.get(InventoryItem, (inventory.address, item.id))
        if stack is None:
            stack = InventoryItem(
                item_id=item.id,
                name=item.name,
                item_type=item.type,
                value=item.value,
                description=item.description,
                quantity=0,
            )
            inventory.items.append(stack)
        stack.quantity += 1

    def _push_update(self, inventory: PlayerInventory) -> None:
        if self.hub is None or not self.hub.registry.is_connected(inventory.address):
            return
        payload = dump_event(serialize_inventory(inventory))
        self.hub.send_to_address(inventory.address, EVENT_INVENTORY_UPDATE, payload)
