"""Application configuration loaded from environment variables."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Centralised settings — no hardcoded values anywhere else."""

    # Database
    database_url: str = Field("sqlite+aiosqlite:///./labelscan.db")

    # OCR
    ocr_backend: Literal["google_vision", "tesseract"] = Field("google_vision")
    google_vision_api_key: str = Field("")
    google_vision_url: str = Field("https://vision.googleapis.com/v1/images:annotate")
    ocr_timeout_seconds: int = Field(30)
    tesseract_lang: str = Field("eng")

    # Google AI: only used when the LLM classifier is switched on
    google_api_key: str = Field("")
    gemma_model: str = Field("gemini-2.5-flash")
    gemma_fallback_model: str = Field("gemma-3-12b-it")
    use_llm_classifier: bool = Field(False)
    llm_batch_size: int = Field(20, ge=1)
    llm_cache_ttl_seconds: int = Field(3600)

    # Knowledge base: optional JSON file merged over the built-in seed
    knowledge_base_path: Optional[str] = Field(None)

    # Storage
    scan_history_limit: int = Field(50, ge=1)
    profile_key: str = Field("default")

    # Security
    allowed_origins: str = Field("http://localhost:3000,http://localhost:8081")

    # App
    app_env: str = Field("development")
    log_level: str = Field("INFO")

    # Derived
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list."""
        return [o.strip() for o in self.allowed_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


settings = get_settings()
