from __future__ import annotations

import asyncio
import logging
import secrets
from collections import defaultdict
from typing import Any

from models import (
    SYSTEM_SENDER,
    DiceRollResult,
    Message,
    MessageKind,
    Role,
    SessionIdentity,
)
from services.message_store import MessageStore
from services.presence import PresenceRegistry
from services.roll_formatter import format_roll

logger = logging.getLogger(__name__)

Frame = dict[str, Any]


class SessionRelay:
    """
    Live room relay between a master and players.

    Each connection gets an outbox (an unbounded asyncio.Queue of frames) that
    the transport drains. Frames are:
      {"event": "previousMessages", "data": [message, ...]}  joiner only
      {"event": "message", "data": message}                  whole room

    Every append to a room and the broadcast that follows it run under that
    room's lock, so all members see the same interleaving and a joiner's
    history snapshot never misses an already-broadcast message. Rooms do not
    share locks.

    Events from clients never raise: bad input and unjoined senders are dropped.
    """

    def __init__(
        self,
        store: MessageStore | None = None,
        presence: PresenceRegistry | None = None,
    ) -> None:
        self._store = store or MessageStore()
        self._presence = presence or PresenceRegistry()
        self._room_locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._outboxes: dict[str, asyncio.Queue[Frame]] = {}

    @property
    def store(self) -> MessageStore:
        return self._store

    @property
    def presence(self) -> PresenceRegistry:
        return self._presence

    def connect(self) -> tuple[str, asyncio.Queue[Frame]]:
        connection_id = secrets.token_urlsafe(12)
        outbox: asyncio.Queue[Frame] = asyncio.Queue()
        self._outboxes[connection_id] = outbox
        logger.info("[session_relay] Connection opened: %s", connection_id)
        return connection_id, outbox

    def is_open(self, connection_id: str) -> bool:
        return connection_id in self._outboxes

    async def join(
        self,
        connection_id: str,
        display_name: str,
        room_id: str,
        role: Role = Role.PLAYER,
    ) -> None:
        outbox = self._outboxes.get(connection_id)
        if outbox is None:
            logger.debug("[session_relay] join from closed connection %s dropped", connection_id)
            return
        if not display_name or not room_id:
            logger.warning(
                "[session_relay] Degenerate join accepted: connection=%s name=%r room=%r",
                connection_id,
                display_name,
                room_id,
            )

        identity = SessionIdentity(display_name=display_name, room_id=room_id, role=role)
        async with self._room_locks[room_id]:
            self._presence.register(connection_id, identity)
            self._store.ensure_room(room_id)
            history = self._store.history(room_id)
            outbox.put_nowait(
                {"event": "previousMessages", "data": [m.to_payload() for m in history]}
            )
            self._emit(room_id, SYSTEM_SENDER, f"{display_name} entered the room", MessageKind.SYSTEM)
        logger.info(
            "[session_relay] %s joined room=%r as %s (history=%d)",
            display_name,
            room_id,
            role.value,
            len(history),
        )

    async def send_message(
        self,
        connection_id: str,
        content: str,
        kind: MessageKind = MessageKind.CHAT,
    ) -> Message | None:
        identity = self._presence.lookup(connection_id)
        if identity is None:
            logger.debug("[session_relay] sendMessage from unjoined connection %s dropped", connection_id)
            return None
        if kind is MessageKind.SYSTEM:
            # System notices are server-generated only.
            kind = MessageKind.CHAT
        async with self._room_locks[identity.room_id]:
            return self._emit(identity.room_id, identity.display_name, content, kind)

    async def send_roll(self, connection_id: str, roll: DiceRollResult) -> Message | None:
        identity = self._presence.lookup(connection_id)
        if identity is None:
            logger.debug("[session_relay] sendRoll from unjoined connection %s dropped", connection_id)
            return None
        if not roll.results:
            logger.debug("[session_relay] sendRoll with no results from %s dropped", connection_id)
            return None
        content = format_roll(roll)
        async with self._room_locks[identity.room_id]:
            return self._emit(identity.room_id, identity.display_name, content, MessageKind.ROLL)

    async def disconnect(self, connection_id: str) -> None:
        self._outboxes.pop(connection_id, None)
        identity = self._presence.lookup(connection_id)
        if identity is None:
            self._presence.remove(connection_id)
            logger.info("[session_relay] Connection closed before join: %s", connection_id)
            return
        async with self._room_locks[identity.room_id]:
            self._presence.remove(connection_id)
            self._emit(
                identity.room_id,
                SYSTEM_SENDER,
                f"{identity.display_name} left the room",
                MessageKind.SYSTEM,
            )
        logger.info("[session_relay] %s left room=%r", identity.display_name, identity.room_id)

    def history(self, room_id: str) -> tuple[Message, ...]:
        return self._store.history(room_id)

    def _emit(self, room_id: str, sender: str, content: str, kind: MessageKind) -> Message:
        """Append and broadcast. Caller holds the room lock."""
        message = Message(
            id=self._store.next_message_id(room_id),
            sender=sender,
            content=content,
            kind=kind,
        )
        self._store.append(room_id, message)
        frame: Frame = {"event": "message", "data": message.to_payload()}
        for cid in self._presence.members_of(room_id):
            outbox = self._outboxes.get(cid)
            if outbox is not None:
                outbox.put_nowait(frame)
        return message


# Singleton relay used by the websocket and room routes.
session_relay = SessionRelay()
