"""Tests for the turn adapter."""

import asyncio

import pytest

from contoso_cafe.core.adapter import CafeAdapter, turn_label
from contoso_cafe.core.turn_context import TurnContext
from contoso_cafe.prompts import cafe
from tests.helpers import make_activity


@pytest.mark.asyncio
async def test_returns_sent_activities_addressed_to_sender() -> None:
    adapter = CafeAdapter()

    async def logic(turn: TurnContext) -> None:
        await turn.send_activity("hi there")

    inbound = make_activity(id="in-1", text="hi")
    replies = await adapter.process_activity(inbound, logic)

    assert len(replies) == 1
    assert replies[0].reply_to_id == "in-1"
    assert replies[0].recipient.id == "user-1"
    assert replies[0].from_property.id == "bot-1"
    assert replies[0].conversation.id == "conv-1"


@pytest.mark.asyncio
async def test_error_becomes_trace_and_apology() -> None:
    adapter = CafeAdapter()

    async def logic(turn: TurnContext) -> None:
        await turn.send_activity("partial")
        raise ValueError("bad state")

    replies = await adapter.process_activity(make_activity(text="hi"), logic)

    assert [r.type for r in replies] == ["message", "trace", "message"]
    assert replies[1].label == "TurnError"
    assert replies[1].value == "bad state"
    assert replies[2].text == cafe.TURN_ERROR_TEXT


@pytest.mark.asyncio
async def test_turns_of_one_conversation_are_serialized() -> None:
    adapter = CafeAdapter()
    active = 0
    peak = 0

    async def logic(turn: TurnContext) -> None:
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1

    await asyncio.gather(
        *(adapter.process_activity(make_activity(text=str(i)), logic) for i in range(3))
    )

    assert peak == 1


@pytest.mark.asyncio
async def test_different_conversations_run_concurrently() -> None:
    adapter = CafeAdapter()
    active = 0
    peak = 0

    async def logic(turn: TurnContext) -> None:
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1

    await asyncio.gather(
        *(
            adapter.process_activity(make_activity(conversation_id=f"c{i}", text="x"), logic)
            for i in range(3)
        )
    )

    assert peak == 3


@pytest.mark.parametrize(
    ("activity_type", "label"),
    [
        ("message", "message"),
        ("conversationUpdate", "conversationUpdate"),
        ("junk0", "other"),
        ("", "other"),
        (None, "other"),
    ],
)
def test_turn_label(activity_type: str | None, label: str) -> None:
    assert turn_label(activity_type) == label
