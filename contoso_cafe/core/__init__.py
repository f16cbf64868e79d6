"""Core bot components.

- CafeAdapter: runs turns, one at a time per conversation
- ReservationDialog: the table reservation steps
- EchoBot: reference bot
- ConversationState: keyed state with property accessors

The cafe bot itself lives in ``contoso_cafe.core.bot``; it depends on the
recognizer and knowledge-base services, which in turn import from here.
"""

from contoso_cafe.core.activity import Activity, ActivityTypes
from contoso_cafe.core.adapter import CafeAdapter
from contoso_cafe.core.echo_bot import EchoBot
from contoso_cafe.core.exceptions import ConfigurationError, StorageError
from contoso_cafe.core.reservation_dialog import ReservationDialog, ReservationPolicy
from contoso_cafe.core.state import ConversationState, MemoryStorage, Storage
from contoso_cafe.core.turn_context import TurnContext

__all__ = [
    # Activities and turns
    "Activity",
    "ActivityTypes",
    "TurnContext",
    "CafeAdapter",
    # Bots
    "EchoBot",
    "ReservationDialog",
    "ReservationPolicy",
    # State
    "ConversationState",
    "MemoryStorage",
    "Storage",
    # Errors
    "ConfigurationError",
    "StorageError",
]
