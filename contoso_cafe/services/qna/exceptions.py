"""Custom exceptions for the knowledge-base service."""


class QnAServiceError(Exception):
    """Raised when the knowledge base cannot be queried."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
