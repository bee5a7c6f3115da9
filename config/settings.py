from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    gemini_api_key: str = Field(description="API key for the Gemini generateContent endpoint")
    gemini_model: str = Field(
        default="gemini-2.5-flash-preview-09-2025",
        description="Gemini model identifier used for reorder analysis",
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Generative Language REST API",
    )
    max_attempts: int = Field(
        default=5,
        ge=1,
        description="Total attempts per analysis request, including the first",
    )
    retry_base_delay_s: float = Field(
        default=1.0,
        gt=0,
        description="Base delay in seconds for rate-limit backoff",
    )
    request_timeout_s: float = Field(
        default=30.0,
        gt=0,
        description="Deadline in seconds for a single request attempt",
    )
    app_id: str = Field(
        default="default-app-id",
        description="Application identifier used in the collection path",
    )
    user_id: str = Field(
        default="local-user",
        description="Opaque user identifier that scopes the inventory collection",
    )
    restaurant_name: str = Field(
        default="Amen Bar and Restaurant",
        description="Restaurant name used in the analyst persona",
    )
    currency: str = Field(
        default="ETB",
        description="Currency code shown in front of monetary amounts",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    db_path: str = Field(
        default="data/restock.db",
        description="Path to the SQLite database file",
    )

    @property
    def base_dir(self) -> Path:
        """Return the project root directory."""
        return Path(__file__).resolve().parent.parent

    @property
    def abs_db_path(self) -> Path:
        """Return the absolute path to the database file."""
        path = Path(self.db_path)
        if path.is_absolute() or self.db_path == ":memory:":
            return path
        return self.base_dir / path

    @property
    def gemini_endpoint(self) -> str:
        """Return the full generateContent URL for the configured model."""
        return f"{self.gemini_base_url.rstrip('/')}/models/{self.gemini_model}:generateContent"
