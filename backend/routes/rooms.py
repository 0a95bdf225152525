"""Read-only room history API."""

import logging

from fastapi import APIRouter

from app.schemas import MessageOut
from services.session_relay import session_relay

router = APIRouter(tags=["rooms"])
logger = logging.getLogger(__name__)


@router.get("/rooms/{room_id}/messages", response_model=list[MessageOut])
async def get_room_messages(room_id: str) -> list[MessageOut]:
    """Full history of a room in append order. Unknown rooms have no history."""
    history = session_relay.history(room_id)
    logger.debug("[rooms] GET /api/rooms/%s/messages -> %d messages", room_id, len(history))
    return [MessageOut(**m.to_payload()) for m in history]
