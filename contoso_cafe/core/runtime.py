"""Assemble the adapter, bot and services from settings."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from contoso_cafe.config import Settings, get_settings
from contoso_cafe.core.activity import Activity
from contoso_cafe.core.adapter import CafeAdapter
from contoso_cafe.core.bot import ContosoCafeBot
from contoso_cafe.core.echo_bot import EchoBot
from contoso_cafe.core.reservation_dialog import ReservationDialog, ReservationPolicy
from contoso_cafe.core.state import ConversationState, MemoryStorage, Storage
from contoso_cafe.core.turn_context import TurnContext
from contoso_cafe.logging_config import get_logger
from contoso_cafe.prompts.recognition import RecognitionPromptBuilder
from contoso_cafe.services.qna.protocol import QnAService
from contoso_cafe.services.qna.qna_maker import QnAMakerService
from contoso_cafe.services.recognizer.keyword import KeywordRecognizer
from contoso_cafe.services.recognizer.llm import LlmRecognizer
from contoso_cafe.services.recognizer.protocol import Recognizer

logger: Any = get_logger(__name__)


class Bot(Protocol):
    async def on_turn(self, turn: TurnContext) -> None: ...


@dataclass
class BotRuntime:
    """Everything needed to serve turns."""

    settings: Settings
    adapter: CafeAdapter
    bot: Bot
    conversation_state: ConversationState
    recognizer: Recognizer | None = None
    qna: QnAService | None = None

    @property
    def storage(self) -> Storage:
        return self.conversation_state.storage

    async def process(self, activity: Activity) -> list[Activity]:
        return await self.adapter.process_activity(activity, self.bot.on_turn)

    async def close(self) -> None:
        if self.recognizer is not None:
            await self.recognizer.close()
        if self.qna is not None:
            await self.qna.close()


def build_storage(settings: Settings) -> Storage:
    if settings.storage_backend == "sql":
        from contoso_cafe.db.storage import SqlStorage

        return SqlStorage()
    return MemoryStorage()


def build_recognizer(settings: Settings) -> Recognizer:
    """Keyword matching by default; Groq when ``RECOGNIZER=llm``.

    Raises:
        ConfigurationError: If the LLM recognizer is selected without an API key
    """
    if settings.recognizer == "llm":
        from contoso_cafe.services.llm.groq import GroqService

        return LlmRecognizer(
            GroqService(settings),
            RecognitionPromptBuilder(settings.bot_name, settings.locations),
        )
    return KeywordRecognizer()


def build_runtime(
    settings: Settings | None = None,
    *,
    storage: Storage | None = None,
    recognizer: Recognizer | None = None,
    qna: QnAService | None = None,
    clock: Callable[[], datetime] | None = None,
) -> BotRuntime:
    """Build the runtime for ``settings.bot_kind``.

    Explicit collaborators override the ones the settings would create.
    """
    settings = settings or get_settings()
    conversation_state = ConversationState(storage or build_storage(settings))
    adapter = CafeAdapter()

    if settings.bot_kind == "echo":
        logger.info("Serving the echo bot")
        return BotRuntime(
            settings=settings,
            adapter=adapter,
            bot=EchoBot(conversation_state),
            conversation_state=conversation_state,
        )

    recognizer = recognizer or build_recognizer(settings)
    if qna is None and settings.qna_enabled:
        qna = QnAMakerService.from_settings(settings)

    dialog = ReservationDialog(ReservationPolicy.from_settings(settings), clock=clock)
    bot = ContosoCafeBot(conversation_state, dialog, recognizer=recognizer, qna=qna)
    logger.info(
        f"Serving the cafe bot (recognizer={settings.recognizer}, "
        f"qna={'on' if qna else 'off'}, storage={settings.storage_backend})"
    )

    return BotRuntime(
        settings=settings,
        adapter=adapter,
        bot=bot,
        conversation_state=conversation_state,
        recognizer=recognizer,
        qna=qna,
    )
