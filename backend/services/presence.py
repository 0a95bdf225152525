from __future__ import annotations

from collections import defaultdict

from models import SessionIdentity


class PresenceRegistry:
    """Maps a live connection ID to the identity it joined with, indexed by room."""

    def __init__(self) -> None:
        self._identities: dict[str, SessionIdentity] = {}
        self._rooms: dict[str, set[str]] = defaultdict(set)

    def register(self, connection_id: str, identity: SessionIdentity) -> None:
        # Rejoin overwrites the previous identity.
        self._unindex(connection_id)
        self._identities[connection_id] = identity
        self._rooms[identity.room_id].add(connection_id)

    def lookup(self, connection_id: str) -> SessionIdentity | None:
        return self._identities.get(connection_id)

    def remove(self, connection_id: str) -> SessionIdentity | None:
        self._unindex(connection_id)
        return self._identities.pop(connection_id, None)

    def members_of(self, room_id: str) -> set[str]:
        return set(self._rooms.get(room_id, ()))

    def _unindex(self, connection_id: str) -> None:
        prior = self._identities.get(connection_id)
        if prior is None:
            return
        members = self._rooms.get(prior.room_id)
        if members is not None:
            members.discard(connection_id)
            if not members:
                self._rooms.pop(prior.room_id, None)
