"""Distill configuration, loaded from the environment or a .env file."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # --- Completion API (OpenAI-compatible) ----------------------------
    completion_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_api_key: str = ""
    fallback_api_key: str = ""  # shared public key, used when no primary key is set
    default_model: str = "google/gemini-2.5-flash"
    fallback_model: str = "google/gemma-3-4b-it"  # used after a rate-limit failure
    site_url: str = "https://distill.app"  # sent as HTTP-Referer
    app_name: str = "Distill"  # sent as X-Title
    max_tokens: int = 1000
    completion_timeout: float = 30.0

    # --- Retry policy ---------------------------------------------------
    max_retries: int = 1
    retry_backoff_seconds: float = 1.0
    retry_exponential: bool = False

    # --- Content proxy ---------------------------------------------------
    content_proxy_url: str = "https://r.jina.ai/"
    fetch_timeout: float = 15.0
    max_content_chars: int = 15_000

    # --- Pipeline thresholds ---------------------------------------------
    min_content_chars: int = 100
    min_summary_chars: int = 10

    # --- Server ---------------------------------------------------------
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"
    allowed_origins: str = "*"  # comma-separated origins
    block_script_clients: bool = False  # reject curl / python-requests / empty user agents

    @property
    def api_key(self) -> str:
        return self.openrouter_api_key or self.fallback_api_key


settings = Settings()
