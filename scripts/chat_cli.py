#!/usr/bin/env python3
"""Interactive CLI to chat with the bot in-process.

Simulates a channel without running the HTTP server: type messages and
see every activity the bot sends back, including typing indicators,
delays and traces.
"""

import asyncio
import uuid

from contoso_cafe.config import get_settings
from contoso_cafe.core.activity import (
    Activity,
    ActivityTypes,
    ChannelAccount,
    ConversationAccount,
)
from contoso_cafe.core.runtime import BotRuntime, build_runtime
from contoso_cafe.core.turn_context import TurnContext

USER = ChannelAccount(id="user", name="You")
BOT = ChannelAccount(id="bot", name="Contoso Cafe")


def new_conversation() -> ConversationAccount:
    return ConversationAccount(id=f"cli-{uuid.uuid4().hex[:8]}")


def make_activity(conversation: ConversationAccount, **fields) -> Activity:
    return Activity(
        channel_id="cli",
        conversation=conversation,
        from_property=USER,
        recipient=BOT,
        **fields,
    )


def print_replies(replies: list[Activity]) -> None:
    for reply in replies:
        if reply.type == ActivityTypes.TYPING.value:
            print("   ✍️  (typing)")
        elif reply.type == ActivityTypes.DELAY.value:
            print(f"   ⏳ (delay {reply.value} ms)")
        elif reply.type == ActivityTypes.TRACE.value:
            print(f"   🔎 trace {reply.name}: {reply.value}")
        else:
            print(f"🤖 Bot: {reply.text}")
            if reply.suggested_actions:
                choices = " | ".join(action.title for action in reply.suggested_actions.actions)
                print(f"       [{choices}]")


async def print_state(runtime: BotRuntime, conversation: ConversationAccount) -> None:
    """Print the stored conversation state."""
    key = runtime.conversation_state.storage_key(
        TurnContext(make_activity(conversation, type=ActivityTypes.MESSAGE.value))
    )
    items = await runtime.storage.read([key])
    print(f"\n  📊 {key}: {items.get(key, {})}\n")


async def start(runtime: BotRuntime, conversation: ConversationAccount) -> None:
    update = make_activity(
        conversation,
        type=ActivityTypes.CONVERSATION_UPDATE.value,
        members_added=[BOT, USER],
    )
    print_replies(await runtime.process(update))


async def main():
    settings = get_settings()
    runtime = build_runtime(settings)

    print("=" * 60)
    print("☕  Contoso Cafe Bot - Test CLI")
    print("=" * 60)
    print("\nCommands: /state (show state), /reset (new conversation), /quit (exit)\n")

    conversation = new_conversation()
    await start(runtime, conversation)

    try:
        while True:
            user_input = input("\n👤 You: ").strip()

            if user_input.lower() == "/quit":
                print("\n👋 Goodbye!")
                break

            if user_input.lower() == "/state":
                await print_state(runtime, conversation)
                continue

            if user_input.lower() == "/reset":
                conversation = new_conversation()
                print("\n🔄 New conversation started!")
                await start(runtime, conversation)
                continue

            message = make_activity(
                conversation,
                type=ActivityTypes.MESSAGE.value,
                id=uuid.uuid4().hex,
                text=user_input,
            )
            print_replies(await runtime.process(message))

    finally:
        await runtime.close()


if __name__ == "__main__":
    asyncio.run(main())
