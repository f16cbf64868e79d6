"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
See .env.example for the available variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
    )

    # ==========================================================================
    # Bot
    # ==========================================================================
    bot_kind: Literal["cafe", "echo"] = Field(
        default="cafe",
        description="Which bot to serve on /api/messages",
    )
    bot_name: str = Field(default="Contoso Cafe", description="Display name of the bot")

    # ==========================================================================
    # Reservation Rules
    # ==========================================================================
    locations: list[str] = Field(
        default_factory=lambda: ["Bellevue", "Redmond", "Renton", "Seattle"],
        description="Cafe locations that take reservations (canonical casing)",
    )
    booking_reference: str = Field(
        default="#K89HG38SZ",
        description="Reference number sent with every booking confirmation",
    )
    booking_delay_ms: int = Field(
        default=3000,
        description="Delay activity sent before the booking confirmation",
    )
    booking_window_days: int = Field(
        default=14, description="Reservations are taken this many days ahead"
    )
    evening_start_hour: int = Field(default=16, ge=0, le=23)
    evening_end_hour: int = Field(default=20, ge=0, le=23)
    min_party_size: int = Field(default=1, ge=1)
    max_party_size: int = Field(default=12, ge=1)
    timezone: str = Field(
        default="America/Los_Angeles",
        description="Timezone used to resolve relative dates like 'tomorrow'",
    )

    # ==========================================================================
    # State Storage
    # ==========================================================================
    storage_backend: Literal["memory", "sql"] = Field(
        default="memory",
        description="Where conversation state is kept",
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/contoso_cafe.db",
        description="SQLAlchemy async database URL (sql storage backend)",
    )

    # ==========================================================================
    # Intent Recognition (Groq)
    # ==========================================================================
    recognizer: Literal["keyword", "llm"] = Field(
        default="keyword",
        description="Fixed-phrase matching or LLM intent/entity extraction",
    )
    groq_api_key: SecretStr | None = Field(default=None, description="Groq API key for LLM")
    groq_model: str = Field(default="llama-3.3-70b-versatile")

    # ==========================================================================
    # Knowledge Base (QnA Maker)
    # ==========================================================================
    qna_host: str | None = Field(
        default=None,
        description="QnA Maker host, e.g. https://contoso-qna.azurewebsites.net/qnamaker",
    )
    qna_endpoint_key: SecretStr | None = Field(default=None)
    qna_knowledgebase_id: str | None = Field(default=None)
    qna_score_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    qna_top: int = Field(default=1, ge=1)
    qna_timeout_seconds: float = Field(default=10.0)

    # ==========================================================================
    # Application
    # ==========================================================================
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Deployment environment"
    )

    # ==========================================================================
    # Derived Properties
    # ==========================================================================
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def qna_enabled(self) -> bool:
        """QnA is used only when every endpoint setting is present."""
        return bool(self.qna_host and self.qna_endpoint_key and self.qna_knowledgebase_id)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Use dependency injection in FastAPI:
        settings: Settings = Depends(get_settings)
    """
    return Settings()
