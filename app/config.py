"""
Application Settings

Loaded once from the environment (and a project-level .env file).
"""
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent

load_dotenv(PROJECT_ROOT / ".env")


class Settings(BaseSettings):
    """Runtime configuration for the CardioMetAge service."""

    model_config = SettingsConfigDict(extra="ignore")

    app_version: str = "1.0.0"

    # ── Gemini ──────────────────────────────────────────────────────────
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    gemini_model: str = "gemini-3-flash-preview"
    gemini_temperature: float = 0.5
    gemini_max_output_tokens: int = 2048
    gemini_timeout_seconds: int = 30

    # ── Logging ─────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_file: Optional[str] = None
    # JSON in the environment, e.g. LOG_MODULE_LEVELS='{"app.core.llm": "DEBUG"}'
    log_module_levels: Dict[str, str] = Field(default_factory=lambda: {
        "httpx": "WARNING",
        "httpcore": "WARNING",
        "langchain_google_genai": "WARNING",
    })


settings = Settings()
