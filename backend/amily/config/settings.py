"""
Configuration Settings.
"""

import logging
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def _read_key_file(directory: Optional[str], filename: str) -> Optional[str]:
    """Read an API key from a plain-text file inside directory, if present."""
    if not directory:
        return None
    path = Path(directory) / filename
    try:
        if path.exists():
            content = path.read_text(encoding="utf-8").strip()
            return content or None
    except OSError as e:
        logger.warning(f"Could not read key file {filename}: {e}")
    return None


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Amily Companion"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # Frontend
    static_dir: str = "./public"

    # Storage
    local_storage_path: str = "./data"

    # Speech synthesis (ElevenLabs)
    elevenlabs_api_key: Optional[str] = None
    elevenlabs_voice_id: str = "21m00Tcm4TlvDq8ikWAM"
    elevenlabs_model: str = "eleven_turbo_v2_5"
    elevenlabs_base_url: str = "https://api.elevenlabs.io/v1"

    # Generative text (Gemini)
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "google_gemini_api_key"),
    )
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Datastore (Supabase)
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    # Care circle notifications (n8n)
    n8n_webhook_url: Optional[str] = None

    # Outbound HTTP
    http_timeout: float = 30.0

    # Optional directory holding one key per file
    key_files_dir: Optional[str] = None

    # CORS
    cors_origins: list[str] = ["*"]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/amily.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # Log all API requests/responses
    log_llm_calls: bool = True  # Log all LLM calls with token usage

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @model_validator(mode="after")
    def _fill_keys_from_files(self) -> "Settings":
        """Environment wins; key files only fill what is still missing."""
        if not self.key_files_dir:
            return self

        if not self.elevenlabs_api_key:
            self.elevenlabs_api_key = _read_key_file(self.key_files_dir, "ElevenLabs.txt")
        if not self.gemini_api_key:
            self.gemini_api_key = _read_key_file(self.key_files_dir, "FeatherlessAI.txt")
        if not self.n8n_webhook_url:
            self.n8n_webhook_url = _read_key_file(self.key_files_dir, "n8ns.txt")

        supabase = _read_key_file(self.key_files_dir, "supabase.txt")
        if supabase:
            lines = [line.strip() for line in supabase.splitlines() if line.strip()]
            if not self.supabase_url and lines:
                self.supabase_url = lines[0]
            if not self.supabase_key and len(lines) > 1:
                self.supabase_key = lines[1]

        return self

    @property
    def has_external_keys(self) -> bool:
        """True when at least one external collaborator is configured."""
        return any([
            self.elevenlabs_api_key,
            self.gemini_api_key,
            self.supabase_url and self.supabase_key,
            self.n8n_webhook_url,
        ])


settings = Settings()
