"""In-memory, per-room message history. Keyed by room ID."""

from __future__ import annotations

import itertools
from collections.abc import Iterator

from models import Message


class MessageStore:
    """
    Append-only ordered log of messages for each room.

    Rooms are created on first use and live for the lifetime of the process.
    Callers that need appends and reads to line up with broadcasts (the relay)
    hold the room's lock around both.
    """

    def __init__(self) -> None:
        self._rooms: dict[str, list[Message]] = {}
        self._sequences: dict[str, Iterator[int]] = {}

    def ensure_room(self, room_id: str) -> None:
        if room_id not in self._rooms:
            self._rooms[room_id] = []
            self._sequences[room_id] = itertools.count(1)

    def next_message_id(self, room_id: str) -> str:
        self.ensure_room(room_id)
        return str(next(self._sequences[room_id]))

    def append(self, room_id: str, message: Message) -> None:
        self.ensure_room(room_id)
        self._rooms[room_id].append(message)

    def history(self, room_id: str) -> tuple[Message, ...]:
        """Snapshot of everything appended so far; empty for an unknown room."""
        return tuple(self._rooms.get(room_id, ()))

    def rooms(self) -> list[str]:
        return list(self._rooms)
