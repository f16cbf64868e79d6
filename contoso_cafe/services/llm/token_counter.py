"""Rough token estimate for request budgeting.

Groq returns real usage after the call; this only sizes the request
against the local rate limiter beforehand.
"""

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Estimate tokens at ~4 characters each, plus a 10% margin."""
    if not text:
        return 0
    return int(len(text) / CHARS_PER_TOKEN * 1.1) + 1


def estimate_messages_tokens(messages: list[dict]) -> int:
    return sum(estimate_tokens(message.get("content", "")) for message in messages)
