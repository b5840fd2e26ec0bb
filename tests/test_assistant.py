import asyncio

import pytest

from cascade.assistant import (
    WELCOME_MESSAGE,
    Assistant,
    AssistantState,
    canned_response,
)


def test_starts_with_welcome_message():
    assistant = Assistant(delay=0)
    assert len(assistant.messages) == 1
    assert assistant.messages[0].content == WELCOME_MESSAGE
    assert not assistant.messages[0].is_user
    assert assistant.state is AssistantState.IDLE


def test_canned_response_lowercases_input():
    assert canned_response("Budget TIPS") == "Here's what I found about budget tips..."


def test_submit_appends_user_message_immediately():
    assistant = Assistant(delay=0)
    msg = assistant.submit("How much did I spend?")
    assert msg is not None and msg.is_user
    assert assistant.messages[-1] is msg
    assert assistant.is_typing


@pytest.mark.asyncio
async def test_send_appends_one_user_and_one_reply():
    assistant = Assistant(delay=0)
    reply = await assistant.send("Saving Tips")

    messages = assistant.messages
    assert len(messages) == 3
    assert messages[1].is_user and messages[1].content == "Saving Tips"
    assert not reply.is_user
    assert "saving tips" in reply.content
    assert assistant.state is AssistantState.IDLE


@pytest.mark.asyncio
async def test_blank_message_appends_nothing():
    assistant = Assistant(delay=0)
    for text in ("", "   ", "\n\t"):
        assert await assistant.send(text) is None
    assert len(assistant.messages) == 1
    assert assistant.state is AssistantState.IDLE


@pytest.mark.asyncio
async def test_reply_waits_for_delay():
    assistant = Assistant(delay=0.05)
    task = asyncio.create_task(assistant.send("Spending Trends"))
    await asyncio.sleep(0)

    assert len(assistant.messages) == 2
    assert assistant.is_typing

    await task
    assert len(assistant.messages) == 3
    assert not assistant.is_typing


@pytest.mark.asyncio
async def test_second_send_while_waiting_is_rejected():
    assistant = Assistant(delay=0.05)
    first = asyncio.create_task(assistant.send("one"))
    await asyncio.sleep(0)

    assert not assistant.can_send("two")
    assert await assistant.send("two") is None
    await first

    contents = [m.content for m in assistant.messages]
    assert contents[1:] == ["one", canned_response("one")]
    assert assistant.can_send("two")


@pytest.mark.asyncio
async def test_respond_without_pending_does_nothing():
    assistant = Assistant(delay=0)
    assert await assistant.respond() is None
    assert len(assistant.messages) == 1


def test_suggestions_are_kept():
    assistant = Assistant(suggestions=["💡 Saving Tips"])
    assert assistant.suggestions == ("💡 Saving Tips",)


@pytest.mark.asyncio
async def test_overlapping_respond_answers_once():
    assistant = Assistant(delay=0.01)
    assistant.submit("Hi")

    first, second = await asyncio.gather(assistant.respond(), assistant.respond())

    assert first.content == canned_response("Hi")
    assert second is None
    assert [m.content for m in assistant.messages[1:]] == ["Hi", canned_response("Hi")]
    assert assistant.state is AssistantState.IDLE


@pytest.mark.asyncio
async def test_stays_typing_until_reply_lands():
    assistant = Assistant(delay=0.05)
    assistant.submit("Budget Analysis")
    task = asyncio.create_task(assistant.respond())
    await asyncio.sleep(0)

    assert assistant.is_typing
    assert assistant.submit("again") is None
    await task
    assert not assistant.is_typing
