from __future__ import annotations

import asyncio
from typing import Any

import pytest

from models import DiceRollResult, MessageKind, Role
from services.session_relay import SessionRelay


def _drain(q: asyncio.Queue[dict[str, Any]]) -> list[dict[str, Any]]:
    frames = []
    while not q.empty():
        frames.append(q.get_nowait())
    return frames


def _contents(frames: list[dict[str, Any]]) -> list[str]:
    return [f["data"]["content"] for f in frames if f["event"] == "message"]


@pytest.mark.asyncio
async def test_end_to_end_master_and_player() -> None:
    relay = SessionRelay()
    a, qa = relay.connect()
    b, qb = relay.connect()

    await relay.join(a, "GM", "table-1", Role.MASTER)
    frames_a = _drain(qa)
    assert frames_a[0] == {"event": "previousMessages", "data": []}
    assert _contents(frames_a) == ["GM entered the room"]
    assert _drain(qb) == []

    await relay.join(b, "Rin", "table-1", Role.PLAYER)
    frames_b = _drain(qb)
    assert frames_b[0]["event"] == "previousMessages"
    assert [m["content"] for m in frames_b[0]["data"]] == ["GM entered the room"]
    assert _contents(frames_b) == ["Rin entered the room"]
    assert _contents(_drain(qa)) == ["Rin entered the room"]

    await relay.send_message(b, "Hello")
    for q in (qa, qb):
        (frame,) = _drain(q)
        assert frame["event"] == "message"
        assert frame["data"]["sender"] == "Rin"
        assert frame["data"]["content"] == "Hello"
        assert frame["data"]["type"] == "message"

    await relay.disconnect(b)
    leave = _drain(qa)
    assert _contents(leave) == ["Rin left the room"]
    assert leave[0]["data"]["type"] == "system"
    assert _drain(qb) == []

    history = relay.history("table-1")
    assert [m.content for m in history] == [
        "GM entered the room",
        "Rin entered the room",
        "Hello",
        "Rin left the room",
    ]
    assert [m.kind for m in history] == [
        MessageKind.SYSTEM,
        MessageKind.SYSTEM,
        MessageKind.CHAT,
        MessageKind.SYSTEM,
    ]
    assert len({m.id for m in history}) == 4


@pytest.mark.asyncio
async def test_unjoined_sender_produces_nothing() -> None:
    relay = SessionRelay()
    a, qa = relay.connect()
    b, qb = relay.connect()
    await relay.join(a, "GM", "table-1", Role.MASTER)
    _drain(qa)

    assert await relay.send_message(b, "sneaky") is None
    assert await relay.send_roll(b, DiceRollResult(die_size=20, results=[20], total=20)) is None

    assert _drain(qa) == []
    assert _drain(qb) == []
    assert len(relay.history("table-1")) == 1


@pytest.mark.asyncio
async def test_disconnect_before_join_is_noop() -> None:
    relay = SessionRelay()
    a, _ = relay.connect()
    await relay.disconnect(a)

    assert relay.store.rooms() == []
    assert not relay.is_open(a)


@pytest.mark.asyncio
async def test_disconnect_twice_only_announces_once() -> None:
    relay = SessionRelay()
    a, qa = relay.connect()
    b, _ = relay.connect()
    await relay.join(a, "GM", "table-1", Role.MASTER)
    await relay.join(b, "Rin", "table-1")
    _drain(qa)

    await relay.disconnect(b)
    await relay.disconnect(b)

    assert _contents(_drain(qa)) == ["Rin left the room"]


@pytest.mark.asyncio
async def test_send_roll_formats_and_broadcasts() -> None:
    relay = SessionRelay()
    a, qa = relay.connect()
    await relay.join(a, "Rin", "table-1")
    _drain(qa)

    message = await relay.send_roll(
        a, DiceRollResult(die_size=6, results=[3], modifier=-2, total=1, description="save")
    )

    assert message is not None
    assert message.kind is MessageKind.ROLL
    (frame,) = _drain(qa)
    assert frame["data"]["content"] == "1d6: 3 - 2 = 1 (save)"
    assert frame["data"]["type"] == "roll"
    assert frame["data"]["sender"] == "Rin"


@pytest.mark.asyncio
async def test_send_roll_without_results_is_dropped() -> None:
    relay = SessionRelay()
    a, qa = relay.connect()
    await relay.join(a, "Rin", "table-1")
    _drain(qa)

    assert await relay.send_roll(a, DiceRollResult(die_size=6, results=[], total=0)) is None
    assert _drain(qa) == []


@pytest.mark.asyncio
async def test_client_cannot_send_system_messages() -> None:
    relay = SessionRelay()
    a, qa = relay.connect()
    await relay.join(a, "Rin", "table-1")
    _drain(qa)

    message = await relay.send_message(a, "the GM left", MessageKind.SYSTEM)

    assert message is not None
    assert message.kind is MessageKind.CHAT
    assert message.sender == "Rin"


@pytest.mark.asyncio
async def test_rooms_are_isolated() -> None:
    relay = SessionRelay()
    a, qa = relay.connect()
    b, qb = relay.connect()
    await relay.join(a, "GM", "table-1", Role.MASTER)
    await relay.join(b, "Kai", "table-2")
    _drain(qa)
    _drain(qb)

    await relay.send_message(a, "only table one")

    assert _contents(_drain(qa)) == ["only table one"]
    assert _drain(qb) == []
    assert [m.content for m in relay.history("table-2")] == ["Kai entered the room"]


@pytest.mark.asyncio
async def test_rejoin_moves_connection_to_new_room() -> None:
    relay = SessionRelay()
    a, qa = relay.connect()
    await relay.join(a, "Rin", "table-1")
    await relay.join(a, "Rin", "table-2")
    _drain(qa)

    await relay.send_message(a, "hi")

    assert [m.content for m in relay.history("table-2")] == ["Rin entered the room", "hi"]
    assert [m.content for m in relay.history("table-1")] == ["Rin entered the room"]
    assert relay.presence.members_of("table-1") == set()


@pytest.mark.asyncio
async def test_degenerate_join_is_accepted() -> None:
    relay = SessionRelay()
    a, qa = relay.connect()

    await relay.join(a, "", "", Role.PLAYER)

    frames = _drain(qa)
    assert frames[0] == {"event": "previousMessages", "data": []}
    assert _contents(frames) == [" entered the room"]


@pytest.mark.asyncio
async def test_join_after_close_is_dropped() -> None:
    relay = SessionRelay()
    a, _ = relay.connect()
    await relay.disconnect(a)

    await relay.join(a, "Ghost", "table-1")

    assert relay.history("table-1") == ()
    assert relay.presence.lookup(a) is None


@pytest.mark.asyncio
async def test_concurrent_senders_share_one_interleaving() -> None:
    relay = SessionRelay()
    connections = [relay.connect() for _ in range(5)]
    for i, (cid, _) in enumerate(connections):
        await relay.join(cid, f"p{i}", "table-1")
    for _, q in connections:
        _drain(q)

    await asyncio.gather(
        *(relay.send_message(cid, f"{cid}-{n}") for n in range(10) for cid, _ in connections)
    )

    history = [m.content for m in relay.history("table-1")][5:]
    assert len(history) == 50
    for _, q in connections:
        assert _contents(_drain(q)) == history


@pytest.mark.asyncio
async def test_join_snapshot_contains_every_broadcast_message() -> None:
    relay = SessionRelay()
    a, qa = relay.connect()
    await relay.join(a, "GM", "table-1", Role.MASTER)
    for n in range(3):
        await relay.send_message(a, f"note {n}")
    broadcast = [f["data"]["id"] for f in _drain(qa) if f["event"] == "message"]

    b, qb = relay.connect()
    await relay.join(b, "Rin", "table-1")

    snapshot = _drain(qb)[0]["data"]
    assert [m["id"] for m in snapshot] == broadcast
