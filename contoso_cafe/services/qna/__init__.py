"""Knowledge-base Q&A service."""

from contoso_cafe.services.qna.exceptions import QnAServiceError
from contoso_cafe.services.qna.protocol import QnAService, QueryResult
from contoso_cafe.services.qna.qna_maker import QnAMakerService

__all__ = [
    "QnAService",
    "QueryResult",
    "QnAMakerService",
    "QnAServiceError",
]
