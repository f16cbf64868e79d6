"""Prompt for LLM intent and entity recognition.

The model classifies a single user message and pulls out any reservation
details it mentions. Date/time phrases are returned verbatim; resolving
them to a slot is done locally against the booking window.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

RECOGNITION_SYSTEM_PROMPT = """You classify messages sent to the {bot_name}, a chat assistant for a chain of cafes.

Output ONLY valid JSON with these fields:
{{
  "intent": "RESERVATION" | "HELP" | "WHO_ARE_YOU" | "NONE",
  "score": 0.0 to 1.0,
  "locations": [string],
  "date_times": [string],
  "party_sizes": [number],
  "names": [string]
}}

## Intents
- RESERVATION: the user wants to book a table ("can I get a table for 4 in Seattle?")
- HELP: the user asks what the bot can do
- WHO_ARE_YOU: the user asks who or what the bot is
- NONE: anything else, including questions about the cafe itself

## Entities
- locations: cafe locations mentioned. Known locations: {locations}
- date_times: date and time phrases exactly as written ("tomorrow evening", "friday at 7pm")
- party_sizes: number of guests as integers ("four of us" = 4)
- names: the name the reservation should be under, only when explicitly given

## Rules
1. Only extract EXPLICITLY stated information
2. Use empty lists for entities that are not mentioned
3. Do not resolve relative dates; copy the phrase
4. Current date/time for reference: {now}"""


class RecognitionPromptBuilder:
    """Build messages for the recognition call."""

    def __init__(self, bot_name: str, locations: Sequence[str]) -> None:
        self._bot_name = bot_name
        self._locations = list(locations)

    def build(self, text: str, now: datetime) -> list[dict]:
        """Build messages for one user utterance.

        Args:
            text: The user's message
            now: Current local time, so the model can read relative phrases

        Returns:
            List of message dicts for the LLM API
        """
        system_prompt = RECOGNITION_SYSTEM_PROMPT.format(
            bot_name=self._bot_name,
            locations=", ".join(self._locations),
            now=now.strftime("%A, %B %d, %Y at %I:%M %p"),
        )
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": f"Message: {text}\n\nOutput JSON only."},
        ]
