from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from app.schemas import ClientFrame, JoinPayload, SendMessagePayload, SendRollPayload
from services.session_relay import SessionRelay, session_relay

router = APIRouter(tags=["session"])
logger = logging.getLogger(__name__)


async def _pump_outbox(websocket: WebSocket, outbox: asyncio.Queue[dict[str, Any]]) -> None:
    while True:
        frame = await outbox.get()
        await websocket.send_json(frame)


async def _receive_frame(websocket: WebSocket, connection_id: str) -> str | None:
    """Next text frame; binary frames are decoded as UTF-8. None means drop it."""
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000))
    if message.get("text") is not None:
        return message["text"]
    if message.get("bytes") is not None:
        try:
            return message["bytes"].decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("[session_ws] Undecodable binary frame from %s dropped", connection_id)
    return None


async def _dispatch(relay: SessionRelay, connection_id: str, raw: str) -> None:
    """Route one client frame to the relay. Anything malformed is dropped."""
    try:
        frame = ClientFrame.model_validate(json.loads(raw))
        if frame.event == "join":
            join = JoinPayload.model_validate(frame.data)
            await relay.join(connection_id, join.display_name, join.room_id, join.role)
        elif frame.event == "sendMessage":
            msg = SendMessagePayload.model_validate(frame.data)
            await relay.send_message(connection_id, msg.content, msg.kind)
        elif frame.event in ("sendRoll", "diceRoll"):
            roll = SendRollPayload.model_validate(frame.data)
            await relay.send_roll(connection_id, roll.to_roll())
        else:
            logger.debug("[session_ws] Unknown event %r from %s dropped", frame.event, connection_id)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.debug("[session_ws] Malformed frame from %s dropped: %s", connection_id, e)


@router.websocket("/ws/session")
async def ws_session(websocket: WebSocket) -> None:
    """
    Live session channel: one connection per client.

    Client frames:  {"event": "join" | "sendMessage" | "sendRoll", "data": {...}}
    Server frames:  {"event": "previousMessages" | "message", "data": ...}
    """
    relay = session_relay
    await websocket.accept()
    connection_id, outbox = relay.connect()
    pump_task = asyncio.create_task(_pump_outbox(websocket, outbox))
    try:
        while True:
            raw = await _receive_frame(websocket, connection_id)
            if raw is not None:
                await _dispatch(relay, connection_id, raw)
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.warning("[session_ws] Connection %s failed: %s", connection_id, e)
    finally:
        await relay.disconnect(connection_id)
        pump_task.cancel()
        try:
            await pump_task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.warning("[session_ws] Outbox pump for %s stopped: %s", connection_id, e)
