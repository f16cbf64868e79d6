"""Custom exceptions for bot construction and state handling."""


class ConfigurationError(Exception):
    """Raised when the bot is built with missing or invalid collaborators."""

    pass


class StorageError(Exception):
    """Raised when conversation state cannot be read or written."""

    pass
