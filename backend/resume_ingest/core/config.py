# resume_ingest/core/config.py
from __future__ import annotations
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

# Resolve the .env alongside the backend package root (adjust if your layout differs)
ENV_PATH = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=str(ENV_PATH), case_sensitive=True, extra="ignore")

    # --- App info ---
    APP_NAME: str = Field(default="Resume Ingest API")
    LOG_LEVEL: str = Field(default="INFO")

    # --- LLM provider ---
    LLM_PROVIDER: str = Field(default="openai", description="'openai' or 'ollama'")
    OPENAI_API_KEY: str | None = Field(default=None, description="API key for OpenAI services; extraction is pattern-only without it")
    OPENAI_MODEL: str = Field(default="gpt-4o-mini", description="Model used for structured resume extraction")
    OLLAMA_BASE_URL: str | None = Field(default=None, description="Base URL of local Ollama server")
    LLM_CHAT_MODEL: str | None = Field(default=None, description="Ollama model used for structured extraction")

    # --- Resume extraction ---
    USE_LLM_EXTRACTION: bool = True
    LLM_TIMEOUT_S: int = Field(default=60, ge=1)
    LLM_MAX_INPUT_CHARS: int = Field(default=12000, ge=500, description="Document text is truncated to this length before the LLM call")
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024, ge=1)
    EDUCATION_PLACEHOLDER: bool = Field(
        default=True,
        description="Emit a placeholder education entry when the pattern engine finds none",
    )
    PARSE_CONFIDENCE: float = Field(default=0.8, ge=0.0, le=1.0)


settings = Settings()
