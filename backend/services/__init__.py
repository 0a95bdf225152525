from .message_store import MessageStore
from .presence import PresenceRegistry
from .roll_formatter import format_roll
from .session_relay import SessionRelay, session_relay

__all__ = ["MessageStore", "PresenceRegistry", "SessionRelay", "format_roll", "session_relay"]
