"""Registry of authenticated chat sessions.

An address may hold at most one live connection, and a connection may carry
at most one identity. Both directions are stored and always updated together.
The registry tracks connections but never opens or closes them.
"""

from __future__ import annotations

from dataclasses import dataclass

from frenzy_stage.core.errors import DuplicateSessionError
from frenzy_stage.schemas.chat import Identity
from frenzy_stage.services.transport import Connection


@dataclass(frozen=True)
class Session:
    """Binding between an identity and the connection it authenticated on."""

    identity: Identity
    connection: Connection


class SessionRegistry:
    """Maps addresses to sessions and connections back to addresses.

    Addresses are compared as exact strings, so two spellings of the same
    address that differ only in hex-digit case count as separate identities.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._addresses: dict[str, str] = {}

    def register(self, identity: Identity, connection: Connection) -> Session:
        """Bind ``identity`` to ``connection``.

        Raises:
            DuplicateSessionError: If the address already has an active session
                or the connection is already bound to an identity.
        """
        if identity.address in self._sessions:
            raise DuplicateSessionError()
        if connection.connection_id in self._addresses:
            raise DuplicateSessionError("Connection is already authenticated")

        session = Session(identity=identity, connection=connection)
        self._sessions[identity.address] = session
        self._addresses[connection.connection_id] = identity.address
        return session

    def unregister(self, connection: Connection) -> Identity | None:
        """Drop the session bound to ``connection``, if any, and return its identity."""
        address = self._addresses.pop(connection.connection_id, None)
        if address is None:
            return None
        session = self._sessions.pop(address)
        return session.identity

    def identity_for(self, connection: Connection) -> Identity | None:
        address = self._addresses.get(connection.connection_id)
        if address is None:
            return None
        return self._sessions[address].identity

    def connection_for(self, address: str) -> Connection | None:
        """Return the live connection registered for ``address``, if any."""
        session = self._sessions.get(address)
        return session.connection if session else None

    def is_connected(self, address: str) -> bool:
        return address in self._sessions

    def list_active(self) -> list[Identity]:
        """Return a snapshot of every registered identity."""
        return [session.identity for session in self._sessions.values()]

    def __len__(self) -> int:
        return len(self._sessions)
