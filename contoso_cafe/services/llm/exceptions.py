"""Errors raised by the Groq client.

The recognizer treats every ``LLMServiceError`` the same way (fall back to
keyword matching); the subclasses exist for logging and metrics.
"""


class LLMServiceError(Exception):
    """The completion could not be obtained or used."""


class LLMRateLimitError(LLMServiceError):
    """Refused by Groq (HTTP 429) or by the local token bucket."""

    def __init__(self, message: str, retry_after: float = 60.0):
        super().__init__(message)
        self.retry_after = retry_after


class LLMConnectionError(LLMServiceError):
    """Groq could not be reached."""


class LLMAuthenticationError(LLMServiceError):
    """The configured GROQ_API_KEY was rejected."""


class LLMResponseError(LLMServiceError):
    """The model answered with something other than a JSON object."""
