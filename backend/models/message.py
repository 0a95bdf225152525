from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

SYSTEM_SENDER = "System"


class Role(str, Enum):
    MASTER = "master"
    PLAYER = "player"


class MessageKind(str, Enum):
    CHAT = "message"
    ROLL = "roll"
    SYSTEM = "system"


@dataclass(frozen=True)
class SessionIdentity:
    display_name: str
    room_id: str
    role: Role = Role.PLAYER


@dataclass(frozen=True)
class Message:
    id: str                      # per-room sequence, unique within the room
    sender: str
    content: str
    kind: MessageKind = MessageKind.CHAT
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_payload(self) -> dict[str, Any]:
        """Wire shape sent to websocket clients."""
        return {
            "id": self.id,
            "sender": self.sender,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "type": self.kind.value,
        }


@dataclass
class DiceRollResult:
    die_size: int
    results: list[int]
    modifier: int = 0
    total: int = 0               # trusted as supplied by the client
    description: str | None = None
