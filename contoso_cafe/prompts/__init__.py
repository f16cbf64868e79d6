"""Reply templates and LLM prompt builders."""

from contoso_cafe.prompts.recognition import RecognitionPromptBuilder

__all__ = [
    "RecognitionPromptBuilder",
]
