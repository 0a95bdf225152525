"""Websocket and HTTP payload schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models import DiceRollResult, MessageKind, Role


class ClientFrame(BaseModel):
    event: str
    data: dict[str, Any] = Field(default_factory=dict)


class JoinPayload(BaseModel):
    """
    join event. Empty names and rooms are accepted; unknown roles become player.

    Older clients send `username` and `isMaster` instead of `displayName` and `role`.
    """

    model_config = ConfigDict(populate_by_name=True)

    display_name: str = Field(default="", alias="displayName")
    room_id: str = Field(default="", alias="roomId")
    role: Role = Role.PLAYER

    @model_validator(mode="before")
    @classmethod
    def _legacy_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "displayName" not in data and "username" in data:
            data["displayName"] = data["username"]
        if "role" not in data and "isMaster" in data:
            is_master = data["isMaster"]
            if isinstance(is_master, str):
                is_master = is_master.strip().lower() == "true"
            data["role"] = Role.MASTER if is_master is True else Role.PLAYER
        return data

    @field_validator("display_name", "room_id", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("role", mode="before")
    @classmethod
    def _coerce_role(cls, value: Any) -> Role:
        try:
            return Role(value)
        except ValueError:
            return Role.PLAYER


class SendMessagePayload(BaseModel):
    content: str = ""
    kind: MessageKind = Field(default=MessageKind.CHAT, alias="type")

    @field_validator("content", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, value: Any) -> MessageKind:
        try:
            return MessageKind(value)
        except ValueError:
            return MessageKind.CHAT


class SendRollPayload(BaseModel):
    """
    sendRoll event.

    Accepts the flat shape {dieSize, results, modifier, total, description} and
    the nested {roll: {type, results, modifier, total, description}} shape where
    `type` is the die size.
    """

    die_size: int = Field(alias="dieSize", gt=0)
    results: list[int] = Field(min_length=1)
    modifier: int = 0
    total: int
    description: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_nested(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("roll"), dict):
            roll = dict(data["roll"])
            if "dieSize" not in roll and "type" in roll:
                roll["dieSize"] = roll["type"]
            return roll
        return data

    def to_roll(self) -> DiceRollResult:
        return DiceRollResult(
            die_size=self.die_size,
            results=list(self.results),
            modifier=self.modifier,
            total=self.total,
            description=self.description or None,
        )


class MessageOut(BaseModel):
    id: str
    sender: str
    content: str
    timestamp: str
    type: MessageKind


class GenerateImageRequest(BaseModel):
    prompt: str | None = None
