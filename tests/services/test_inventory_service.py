"""Tests for the fishing inventory service."""

from frenzy_stage.models import InventoryItem, PlayerInventory
from frenzy_stage.services.connection import ChatHub
from frenzy_stage.services.inventory import (
    COMMON_FISH,
    EPIC_FISH,
    RARE_FISH,
    Catch,
    InventoryService,
    describe_catch,
    roll_catch,
)

ALICE = "0x" + "a1" * 20


def test_roll_catch_tiers(fishing_rng) -> None:
    # Each cast draws the tier first, then the rod-break roll.
    fishing_rng.draws = [0.05, 0.99, 0.5, 0.99, 0.8, 0.99, 0.95, 0.01]

    assert roll_catch(fishing_rng) == Catch(item=None, rod_broken=False)
    assert roll_catch(fishing_rng) == Catch(item=COMMON_FISH, rod_broken=False)
    assert roll_catch(fishing_rng) == Catch(item=RARE_FISH[0], rod_broken=False)
    assert roll_catch(fishing_rng) == Catch(item=EPIC_FISH[0], rod_broken=True)


def test_describe_catch_messages() -> None:
    assert describe_catch(Catch(None, False)) == "You didn't catch anything..."
    assert describe_catch(Catch(None, True)) == "Your fishing rod broke!"
    assert describe_catch(Catch(COMMON_FISH, False)) == "You caught a Common Fish!"
    assert describe_catch(Catch(COMMON_FISH, True)) == "You caught a fish but your rod broke!"
    assert describe_catch(Catch(RARE_FISH[1], False)) == "Amazing! You caught a Gold Fish!"
    assert (
        describe_catch(Catch(EPIC_FISH[1], True))
        == "INCREDIBLE! You caught a Mythril Fish! But your rod broke!"
    )


def test_new_player_gets_starter_inventory(db_session) -> None:
    service = InventoryService()
    inventory = service.get_inventory(db_session, ALICE)

    assert inventory.bait == 10
    assert inventory.fishing_rods == 1
    assert inventory.money == 1000
    assert inventory.items == {}
    assert db_session.get(PlayerInventory, ALICE) is not None


def test_catch_consumes_bait_and_stacks_items(db_session, fishing_rng) -> None:
    service = InventoryService(rng=fishing_rng)
    fishing_rng.draws = [0.5, 0.99, 0.5, 0.99]

    first = service.catch(db_session, ALICE)
    second = service.catch(db_session, ALICE)

    assert first.success and second.success
    assert first.item == COMMON_FISH
    inventory = service.get_inventory(db_session, ALICE)
    assert inventory.bait == 8
    assert inventory.items["common-fish"].quantity == 2


def test_rod_break_never_goes_negative(db_session, fishing_rng) -> None:
    service = InventoryService(rng=fishing_rng)
    fishing_rng.draws = [0.05, 0.0, 0.05, 0.0]

    broken = service.catch(db_session, ALICE)
    service.catch(db_session, ALICE)

    assert broken.success is False
    assert broken.rod_broken is True
    assert broken.message == "Your fishing rod broke!"
    assert service.get_inventory(db_session, ALICE).fishing_rods == 0


def test_catch_without_bait(db_session, fishing_rng) -> None:
    service = InventoryService(rng=fishing_rng)
    service.get_or_create(db_session, ALICE).bait = 0
    db_session.commit()

    result = service.catch(db_session, ALICE)

    assert result.success is False
    assert result.message == "No bait available"


def test_sell_credits_money_and_removes_empty_stacks(db_session, fishing_rng) -> None:
    service = InventoryService(rng=fishing_rng)
    fishing_rng.draws = [0.5, 0.99]
    service.catch(db_session, ALICE)

    assert service.sell(db_session, ALICE, "common-fish", 2).success is False

    result = service.sell(db_session, ALICE, "common-fish", 1)

    assert result.success is True
    assert result.money == 10
    assert db_session.get(InventoryItem, (ALICE, "common-fish")) is None
    assert service.get_inventory(db_session, ALICE).money == 1010


def test_buy_bait_and_rod(db_session) -> None:
    service = InventoryService()

    bait = service.buy_bait(db_session, ALICE, 4)
    rod = service.buy_rod(db_session, ALICE)

    assert (bait.success, bait.bait, bait.money) == (True, 4, 20)
    assert (rod.success, rod.rods, rod.money) == (True, 1, 100)
    inventory = service.get_inventory(db_session, ALICE)
    assert inventory.bait == 14
    assert inventory.fishing_rods == 2
    assert inventory.money == 880


def test_purchases_need_enough_money(db_session) -> None:
    service = InventoryService()
    service.get_or_create(db_session, ALICE).money = 50
    db_session.commit()

    assert service.buy_rod(db_session, ALICE).message == "Not enough money"
    assert service.buy_bait(db_session, ALICE, 11).message == "Not enough money"
    assert service.get_inventory(db_session, ALICE).money == 50


def test_updates_are_pushed_to_connected_players(db_session, make_connection) -> None:
    hub = ChatHub()
    conn = make_connection()
    hub.attach(conn).authenticate({"address": ALICE, "username": "alice"})
    service = InventoryService(hub=hub)

    service.buy_bait(db_session, ALICE, 1)
    service.buy_bait(db_session, "0x" + "b2" * 20, 1)

    (update,) = conn.of("inventoryUpdate")
    assert update["bait"] == 11
    assert update["fishingRods"] == 1
    assert update["money"] == 995


def test_committed_purchase_in_one_test(db_session) -> None:
    InventoryService().buy_rod(db_session, ALICE)
    assert db_session.get(PlayerInventory, ALICE).fishing_rods == 2


def test_next_test_starts_with_empty_tables(db_session) -> None:
    # Runs after the test above; its committed rows must be gone.
    assert db_session.get(PlayerInventory, ALICE) is None
    assert db_session.query(InventoryItem).count() == 0
