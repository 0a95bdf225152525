from .message import (
    SYSTEM_SENDER,
    DiceRollResult,
    Message,
    MessageKind,
    Role,
    SessionIdentity,
)

__all__ = [
    "DiceRollResult",
    "Message",
    "MessageKind",
    "Role",
    "SessionIdentity",
    "SYSTEM_SENDER",
]
