"""Tests for the session registry."""

import pytest

from frenzy_stage.core.errors import DuplicateSessionError
from frenzy_stage.schemas.chat import Identity
from frenzy_stage.services.sessions import SessionRegistry

ALICE = "0x" + "a1" * 20


def _identity(address: str = ALICE, username: str = "alice") -> Identity:
    return Identity(address=address, username=username, joined_at=1)


def test_register_and_lookup(make_connection) -> None:
    registry = SessionRegistry()
    conn = make_connection()
    session = registry.register(_identity(), conn)

    assert session.connection is conn
    assert registry.is_connected(ALICE)
    assert registry.connection_for(ALICE) is conn
    assert registry.identity_for(conn) == _identity()
    assert len(registry) == 1


def test_second_session_for_same_address_is_rejected(make_connection) -> None:
    registry = SessionRegistry()
    first = make_connection()
    registry.register(_identity(), first)

    with pytest.raises(DuplicateSessionError):
        registry.register(_identity(username="mallory"), make_connection())

    assert registry.connection_for(ALICE) is first
    assert len(registry) == 1


def test_same_connection_cannot_carry_two_identities(make_connection) -> None:
    registry = SessionRegistry()
    conn = make_connection()
    registry.register(_identity(), conn)

    with pytest.raises(DuplicateSessionError):
        registry.register(_identity(address="0x" + "b2" * 20), conn)
    assert len(registry) == 1


def test_address_match_is_case_sensitive(make_connection) -> None:
    registry = SessionRegistry()
    registry.register(_identity(address="0x" + "ab" * 20), make_connection())
    registry.register(_identity(address="0x" + "AB" * 20), make_connection())
    assert len(registry) == 2


def test_unregister_removes_both_directions(make_connection) -> None:
    registry = SessionRegistry()
    conn = make_connection()
    registry.register(_identity(), conn)

    identity = registry.unregister(conn)

    assert identity == _identity()
    assert not registry.is_connected(ALICE)
    assert registry.connection_for(ALICE) is None
    assert registry.identity_for(conn) is None
    # The address is free again.
    registry.register(_identity(), make_connection())


def test_unregister_unknown_connection_is_a_noop(make_connection) -> None:
    registry = SessionRegistry()
    registry.register(_identity(), make_connection())

    assert registry.unregister(make_connection()) is None
    assert len(registry) == 1


def test_list_active_is_a_snapshot(make_connection) -> None:
    registry = SessionRegistry()
    conn = make_connection()
    registry.register(_identity(), conn)

    active = registry.list_active()
    registry.unregister(conn)

    assert [identity.address for identity in active] == [ALICE]
    assert registry.list_active() == []
