"""Configuration management for the literature-review assistant."""

from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _sanitize_secret(value: str) -> str:
    """Remove BOM characters and whitespace from secrets.

    Keys pasted from browsers or secret managers may carry a BOM that breaks
    HTTP headers.
    """
    if not value:
        return value
    return value.lstrip("\ufeff").strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Google AI API
    google_api_key: str = ""

    @field_validator("google_api_key", mode="after")
    @classmethod
    def sanitize_secrets(cls, value: str) -> str:
        """Remove BOM and whitespace from secret values."""
        return _sanitize_secret(value)

    # Model settings
    llm_model: str = "gemini-2.5-flash"
    extraction_temperature: float = 0.2
    llm_requests_per_minute: int | None = 0

    # Retrieval segmentation (paragraph-aware)
    segment_chunk_size: int = 1000
    segment_overlap: int = 100

    # Extraction segmentation (fixed window)
    extraction_chunk_size: int = 12000
    extraction_chunk_overlap: int = 500

    # Retrieval
    retrieval_top_k: int = 8
    retrieval_context_chars: int = 8000

    # Storage
    data_dir: Path = Path("./data")

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: Path | None = None

    @model_validator(mode="after")
    def check_chunk_windows(self) -> "Settings":
        """Reject window settings that would never advance."""
        if self.extraction_chunk_size <= 0:
            raise ValueError("extraction_chunk_size must be positive")
        if not 0 <= self.extraction_chunk_overlap < self.extraction_chunk_size:
            raise ValueError("extraction_chunk_overlap must be in [0, extraction_chunk_size)")
        if self.segment_chunk_size <= 0:
            raise ValueError("segment_chunk_size must be positive")
        return self

    @property
    def cards_file(self) -> Path:
        """JSON file holding the persisted evidence cards."""
        return self.data_dir / "cards.json"

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


def resolve_credential() -> str | None:
    """Read the Gemini API key fresh from the environment.

    Called once per model request so a rotated key is picked up without
    restarting the process.
    """
    return Settings().google_api_key or None


# Global settings instance
settings = Settings()
